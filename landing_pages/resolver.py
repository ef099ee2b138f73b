"""
Map public request paths to landing pages.

Lookups are exact; uniqueness of (doi_prefix, slug) and of the owning resource
is enforced by the database, so there is never more than one candidate.
"""
from .models import LandingPage


def resolve_by_doi(doi_prefix, slug):
    """``/{doiPrefix}/{slug}``"""
    return LandingPage.objects.select_related('resource').for_doi(doi_prefix, slug).first()


def resolve_draft(resource_id, slug):
    """``/draft-{resourceId}/{slug}``; only pages that have no DOI yet."""
    return LandingPage.objects.select_related('resource').for_draft(resource_id, slug).first()


def resolve_legacy(resource_id):
    """``/datasets/{resourceId}``; the caller redirects to the page's current public_url."""
    return LandingPage.objects.filter(resource_id=resource_id).first()
