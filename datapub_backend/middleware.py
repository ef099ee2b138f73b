"""
Custom middleware for datapub_backend.
"""
from django.middleware.common import CommonMiddleware


class APICommonMiddleware(CommonMiddleware):
    """
    Custom CommonMiddleware that disables APPEND_SLASH for API and landing page routes.
    Curator endpoints and persistent identifier URLs are addressed without a trailing slash;
    redirecting them would break PUT/DELETE requests and advertised DOI targets.
    """
    NO_SLASH_PREFIXES = ('/api/', '/resources/', '/datasets/', '/draft-', '/10.')

    def should_redirect_with_slash(self, request):
        if request.path.startswith(self.NO_SLASH_PREFIXES):
            return False
        return super().should_redirect_with_slash(request)
