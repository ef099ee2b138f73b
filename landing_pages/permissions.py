"""
Custom permissions for landing pages.
"""
from rest_framework import permissions


class CanManageSessionPreview(permissions.BasePermission):
    """
    Beginners may look at a stored session preview but cannot create or clear one.
    """
    message = 'Beginners cannot manage landing page previews.'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return not getattr(request.user, 'is_beginner', False)
