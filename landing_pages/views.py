"""
Curator API for landing pages.

/resources/{id}/landing-page           GET, POST, PUT, DELETE
/resources/{id}/landing-page/preview   GET, POST, DELETE (session preview)
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from datacite.sync import sync_if_registered
from resources.models import Resource

from .exceptions import LandingPageNotFound
from .models import LandingPage
from .permissions import CanManageSessionPreview
from .rendering import build_page_payload, build_response
from .serializers import LandingPageInputSerializer, LandingPageSerializer
from .services import (
    create_landing_page,
    delete_landing_page,
    update_landing_page,
    validate_template_for_resource,
)
from .slugs import generate_slug

logger = logging.getLogger(__name__)

SESSION_PREVIEW_KEY = 'landing_page_preview.{resource_id}'


def _get_landing_page(resource):
    landing_page = LandingPage.objects.filter(resource=resource).select_related('resource').first()
    if landing_page is None:
        raise LandingPageNotFound()
    return landing_page


def _sync(resource, user):
    result = sync_if_registered(resource, user=user)
    if result.attempted and not result.success:
        logger.warning("Landing page saved but DataCite sync failed for resource %s: %s", resource.pk, result.error_message)
    return result.to_dict()


@api_view(['GET', 'POST', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def landing_page_detail(request, resource_id):
    """
    GET    /resources/{id}/landing-page  - Landing page configuration.
    POST   /resources/{id}/landing-page  - Create (201, 409 if one exists).
    PUT    /resources/{id}/landing-page  - Update (422 cannot_unpublish).
    DELETE /resources/{id}/landing-page  - Delete a draft (422 cannot_delete_published).
    """
    resource = get_object_or_404(Resource, pk=resource_id)

    if request.method == 'POST':
        return _create(request, resource)
    if request.method == 'PUT':
        return _update(request, resource)
    if request.method == 'DELETE':
        return _delete(request, resource)

    landing_page = _get_landing_page(resource)
    return Response({'landing_page': LandingPageSerializer(landing_page).data})


def _create(request, resource):
    serializer = LandingPageInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    landing_page = create_landing_page(
        resource,
        template=data['template'],
        ftp_url=data.get('ftp_url'),
        status=data.get('status', LandingPage.STATUS_DRAFT),
    )
    return Response({
        'message': 'Landing page created successfully',
        'landing_page': LandingPageSerializer(landing_page).data,
        'datacite_sync': _sync(resource, request.user),
    }, status=status.HTTP_201_CREATED)


def _update(request, resource):
    landing_page = _get_landing_page(resource)
    serializer = LandingPageInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    changes = {'template': data['template'], 'status': data.get('status')}
    if 'ftp_url' in data:
        changes['ftp_url'] = data['ftp_url']
    landing_page = update_landing_page(landing_page, **changes)

    return Response({
        'message': 'Landing page updated successfully',
        'landing_page': LandingPageSerializer(landing_page).data,
        'datacite_sync': _sync(landing_page.resource, request.user),
    })


def _delete(request, resource):
    landing_page = _get_landing_page(resource)
    delete_landing_page(landing_page)
    return Response({'message': 'Landing page deleted successfully'})


@api_view(['GET', 'POST', 'DELETE'])
@permission_classes([IsAuthenticated, CanManageSessionPreview])
def landing_page_preview(request, resource_id):
    """
    Session preview: an unsaved landing page configuration kept in the curator's
    session, independent of the persisted preview token.

    POST   - store {template, ftp_url}; 201 {"preview_url": ...}
    GET    - render the resource with the stored configuration
    DELETE - forget the stored configuration
    """
    resource = get_object_or_404(Resource, pk=resource_id)
    session_key = SESSION_PREVIEW_KEY.format(resource_id=resource.pk)

    if request.method == 'POST':
        serializer = LandingPageInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        template = serializer.validated_data['template']
        validate_template_for_resource(template, resource)
        request.session[session_key] = {
            'template': template,
            'ftp_url': serializer.validated_data.get('ftp_url'),
        }
        return Response(
            {'preview_url': f"/resources/{resource.pk}/landing-page/preview"},
            status=status.HTTP_201_CREATED,
        )

    if request.method == 'DELETE':
        request.session.pop(session_key, None)
        return Response(status=status.HTTP_204_NO_CONTENT)

    preview = request.session.get(session_key)
    if preview is None:
        raise LandingPageNotFound('No preview available for this resource')

    landing_page = LandingPage.objects.filter(resource=resource).first()
    if landing_page is None:
        landing_page = LandingPage(
            resource=resource,
            doi_prefix=resource.doi or None,
            slug=generate_slug(resource.title),
        )
    landing_page.template = preview['template']
    landing_page.ftp_url = preview['ftp_url']
    return Response(build_response(build_page_payload(landing_page), is_preview=True))
