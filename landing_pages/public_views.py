"""
Public landing page resolution.

GET /{doiPrefix}/{slug}[?preview=token]
GET /draft-{resourceId}/{slug}[?preview=token]
GET /datasets/{resourceId}  → 301 to the current public URL
"""
from django.http import HttpResponsePermanentRedirect
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .access import check_access
from .cache import landing_page_cache
from .exceptions import LandingPageNotFound
from .rendering import build_page_payload, build_response
from .resolver import resolve_by_doi, resolve_draft, resolve_legacy
from .services import increment_view_count


def _render(request, landing_page):
    if landing_page is None:
        raise LandingPageNotFound()

    decision = check_access(landing_page, request.query_params.get('preview'))
    if decision.cacheable:
        payload = landing_page_cache.get_or_render(landing_page, build_page_payload)
        increment_view_count(landing_page)
    else:
        payload = build_page_payload(landing_page)
    return Response(build_response(payload, decision.is_preview))


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def show_by_doi(request, doi_prefix, slug):
    return _render(request, resolve_by_doi(doi_prefix, slug))


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def show_draft(request, resource_id, slug):
    return _render(request, resolve_draft(int(resource_id), slug))


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def legacy_redirect(request, resource_id):
    landing_page = resolve_legacy(int(resource_id))
    if landing_page is None:
        raise LandingPageNotFound()
    return HttpResponsePermanentRedirect(landing_page.public_url)
