"""
URL routing for public landing pages.
Included at the site root, after every other route: the DOI pattern matches
any path that starts with a DOI prefix ("10.").
"""
from django.urls import re_path

from .public_views import legacy_redirect, show_by_doi, show_draft

urlpatterns = [
    re_path(r'^datasets/(?P<resource_id>\d+)/?$', legacy_redirect, name='landing-page-legacy'),
    re_path(r'^draft-(?P<resource_id>\d+)/(?P<slug>[A-Za-z0-9_-]+)/?$', show_draft, name='landing-page-draft'),
    re_path(r'^(?P<doi_prefix>10\.[^/]+/.+)/(?P<slug>[A-Za-z0-9_-]+)/?$', show_by_doi, name='landing-page-public'),
]
