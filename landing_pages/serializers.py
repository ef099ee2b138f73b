"""
Serializers for LandingPage model.
"""
from django.conf import settings
from rest_framework import serializers

from .models import LandingPage


class LandingPageSerializer(serializers.ModelSerializer):
    """Curator view of a landing page, including its preview token."""
    resource_id = serializers.IntegerField(read_only=True)
    preview_url = serializers.CharField(read_only=True)
    public_url = serializers.CharField(read_only=True)

    class Meta:
        model = LandingPage
        fields = (
            'id', 'resource_id', 'template', 'ftp_url', 'status', 'published_at',
            'doi_prefix', 'slug', 'view_count', 'preview_token', 'preview_url', 'public_url',
            'created_at', 'updated_at',
        )
        read_only_fields = fields


class PublicLandingPageSerializer(serializers.ModelSerializer):
    """Landing page data embedded in the rendered public page. No token, no counters."""
    public_url = serializers.CharField(read_only=True)

    class Meta:
        model = LandingPage
        fields = ('id', 'template', 'ftp_url', 'status', 'published_at', 'doi_prefix', 'slug', 'public_url')
        read_only_fields = fields


class LandingPageInputSerializer(serializers.Serializer):
    """Create/update/preview request body."""
    template = serializers.ChoiceField(choices=settings.LANDING_PAGE_TEMPLATES)
    ftp_url = serializers.URLField(max_length=2048, required=False, allow_null=True, allow_blank=True)
    status = serializers.ChoiceField(choices=LandingPage.STATUS_CHOICES, required=False)

    def validate_ftp_url(self, value):
        """Empty strings clear the download URL."""
        return value or None
