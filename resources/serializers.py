"""
Serializers for Resource model.
"""
from rest_framework import serializers
from .models import Resource


class ResourceSerializer(serializers.ModelSerializer):
    """Public representation of a resource, embedded in rendered landing pages."""

    class Meta:
        model = Resource
        fields = (
            'id', 'doi', 'title', 'description', 'resource_type',
            'publisher', 'publication_year', 'version', 'language',
        )
        read_only_fields = fields
