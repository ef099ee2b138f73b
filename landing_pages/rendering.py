"""
Build the public landing page payload (resource data + landing page data).

The payload is what gets cached, so it must not contain per-request or
per-view values such as the preview flag or the view counter.
"""
from resources.serializers import ResourceSerializer

from .serializers import PublicLandingPageSerializer


def component_name(template):
    return f"LandingPages/{template}"


def build_page_payload(landing_page):
    return {
        'component': component_name(landing_page.template),
        'resource': dict(ResourceSerializer(landing_page.resource).data),
        'landing_page': dict(PublicLandingPageSerializer(landing_page).data),
    }


def build_response(payload, is_preview):
    return {**payload, 'is_preview': is_preview}
