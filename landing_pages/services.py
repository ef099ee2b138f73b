"""
Landing page lifecycle: create, update, delete, publish, view counting.

Every successful update or delete evicts the cached public page for the
resource after the write has been committed and before control returns to the
caller, so the next request cannot observe stale content.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import F

from .cache import landing_page_cache
from .exceptions import (
    CannotDeletePublished,
    CannotUnpublish,
    DuplicateLandingPage,
    InvalidTemplateForResourceType,
)
from .models import LandingPage
from .slugs import generate_slug

logger = logging.getLogger(__name__)

_UNSET = object()


def validate_template_for_resource(template, resource):
    """The IGSN template only makes sense for physical samples."""
    if template == LandingPage.TEMPLATE_IGSN and not resource.is_physical_object:
        raise InvalidTemplateForResourceType()


def _refresh_identity(landing_page):
    """
    Re-derive the slug from the current title and capture the DOI the first
    time the resource has one. A captured doi_prefix is never changed.
    """
    resource = landing_page.resource
    landing_page.slug = generate_slug(resource.title)
    if not landing_page.doi_prefix and resource.doi:
        landing_page.doi_prefix = resource.doi


def create_landing_page(resource, *, template, ftp_url=None, status=LandingPage.STATUS_DRAFT):
    """Create the landing page for ``resource``; it starts as draft unless created published."""
    if LandingPage.objects.filter(resource=resource).exists():
        raise DuplicateLandingPage()
    validate_template_for_resource(template, resource)

    landing_page = LandingPage(resource=resource, template=template, ftp_url=ftp_url or None)
    _refresh_identity(landing_page)
    if status == LandingPage.STATUS_PUBLISHED:
        landing_page.publish()

    try:
        with transaction.atomic():
            landing_page.save()
    except IntegrityError:
        # Lost a race with a concurrent create for the same resource
        if LandingPage.objects.filter(resource=resource).exists():
            raise DuplicateLandingPage()
        raise

    logger.info(
        "Landing page %s created for resource %s (status=%s, url=%s)",
        landing_page.pk, resource.pk, landing_page.status, landing_page.public_path,
    )
    return landing_page


def update_landing_page(landing_page, *, template, ftp_url=_UNSET, status=None):
    """
    Apply a curator edit. ``status=None`` keeps the current status and an omitted
    ``ftp_url`` keeps the current download URL.
    """
    if status == LandingPage.STATUS_DRAFT and landing_page.is_published:
        raise CannotUnpublish()
    validate_template_for_resource(template, landing_page.resource)

    was_published = landing_page.is_published
    landing_page.template = template
    if ftp_url is not _UNSET:
        landing_page.ftp_url = ftp_url or None
    if status == LandingPage.STATUS_PUBLISHED:
        landing_page.publish()
    _refresh_identity(landing_page)

    with transaction.atomic():
        landing_page.save()
    landing_page_cache.invalidate(landing_page.resource_id)

    if landing_page.is_published and not was_published:
        logger.info(
            "Landing page %s published for resource %s at %s",
            landing_page.pk, landing_page.resource_id, landing_page.public_path,
        )
    else:
        logger.info("Landing page %s updated for resource %s", landing_page.pk, landing_page.resource_id)
    return landing_page


def delete_landing_page(landing_page):
    """Delete a draft landing page. Published pages are permanent."""
    if landing_page.is_published:
        raise CannotDeletePublished()

    resource_id = landing_page.resource_id
    page_id = landing_page.pk
    with transaction.atomic():
        landing_page.delete()
    landing_page_cache.invalidate(resource_id)

    logger.info("Landing page %s deleted for resource %s", page_id, resource_id)


def increment_view_count(landing_page):
    """Count one public view. Done in the database so concurrent views are not lost."""
    LandingPage.objects.filter(pk=landing_page.pk).update(view_count=F('view_count') + 1)
