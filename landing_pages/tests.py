"""
Tests for landing pages: lifecycle, public resolution, caching and previews.
"""
from unittest.mock import patch

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import IntegrityError, transaction
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from datacite.client import DataCiteHTTPError
from resources.models import Resource

from .cache import cache_key, landing_page_cache
from .exceptions import CannotDeletePublished, CannotUnpublish
from .models import LandingPage
from .rendering import build_page_payload
from .services import create_landing_page, delete_landing_page, update_landing_page
from .slugs import generate_slug, transliterate

User = get_user_model()

DOI = '10.5880/GFZ.1.2024.001'
TITLE = 'Global Seismic Catalogue'
SLUG = 'global-seismic-catalogue'


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def datacite_client():
    """No test talks to DataCite; registered resources get a stub client."""
    with patch('datacite.sync.DataCiteClient.from_settings') as from_settings:
        yield from_settings.return_value


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user():
    def _create_user(email="curator@example.com", password="testpass123", role=User.ROLE_CURATOR):
        return User.objects.create_user(
            email=email,
            username=email,
            password=password,
            role=role,
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.fixture
def create_resource():
    def _create_resource(title=TITLE, doi=None, resource_type='Dataset'):
        return Resource.objects.create(title=title, doi=doi, resource_type=resource_type, publication_year=2024)
    return _create_resource


@pytest.fixture
def create_page(create_resource):
    def _create_page(resource=None, status=LandingPage.STATUS_DRAFT, ftp_url=None, doi=None):
        if resource is None:
            resource = create_resource(doi=doi)
        return create_landing_page(resource, template='default_gfz', ftp_url=ftp_url, status=status)
    return _create_page


class TestSlugs:

    def test_generate_slug(self):
        assert generate_slug('Superconducting Gravimeter Data from Buchenbach') == \
            'superconducting-gravimeter-data-from-buchenbach'

    def test_transliterates_umlauts(self):
        assert transliterate('Göttingen Süd Straße') == 'Goettingen Sued Strasse'
        assert generate_slug('Messdaten Göttingen Süd') == 'messdaten-goettingen-sued'

    def test_strips_punctuation(self):
        assert generate_slug('GNSS: 1 Hz (raw) data, 2024!') == 'gnss-1-hz-raw-data-2024'

    def test_truncates_at_word_boundary(self):
        title = 'Long-term monitoring of seismic activity in the Eastern Alps region'
        assert generate_slug(title) == 'long-term-monitoring-of-seismic-activity'

    def test_fallback_for_empty_title(self):
        assert generate_slug('') == 'dataset'
        assert generate_slug('???') == 'dataset'


class TestPublicUrl:

    def test_public_url_with_doi(self, settings):
        settings.LANDING_PAGE_BASE_URL = 'https://dataservices.example.org'
        page = LandingPage(resource_id=7, doi_prefix='10.5880/X', slug='s')
        assert page.public_url == 'https://dataservices.example.org/10.5880/X/s'

    def test_public_url_for_draft_without_doi(self, settings):
        settings.LANDING_PAGE_BASE_URL = 'https://dataservices.example.org'
        page = LandingPage(resource_id=7, doi_prefix=None, slug='s')
        assert page.public_url == 'https://dataservices.example.org/draft-7/s'

    def test_preview_url_carries_token(self):
        page = LandingPage(resource_id=7, slug='s')
        assert len(page.preview_token) == 64
        assert page.preview_url.endswith(f'/draft-7/s?preview={page.preview_token}')


@pytest.mark.django_db
class TestLandingPageLifecycle:

    def test_draft_has_no_published_at(self, create_page):
        page = create_page()
        assert page.status == 'draft'
        assert page.published_at is None

    def test_publish_sets_published_at(self, create_page):
        page = create_page()
        update_landing_page(page, template='default_gfz', status='published')
        page.refresh_from_db()
        assert page.status == 'published'
        assert page.published_at is not None

    def test_database_rejects_published_without_timestamp(self, create_page):
        page = create_page(status='published')
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                LandingPage.objects.filter(pk=page.pk).update(published_at=None)

    def test_cannot_unpublish(self, create_page):
        page = create_page(status='published')
        with pytest.raises(CannotUnpublish):
            update_landing_page(page, template='default_gfz', status='draft')
        page.refresh_from_db()
        assert page.status == 'published'

    def test_model_save_refuses_unpublish(self, create_page):
        page = create_page(status='published')
        page = LandingPage.objects.get(pk=page.pk)
        page.status = 'draft'
        page.published_at = None
        with pytest.raises(CannotUnpublish):
            page.save()

    def test_cannot_delete_published(self, create_page):
        page = create_page(status='published')
        with pytest.raises(CannotDeletePublished):
            page.delete()
        assert LandingPage.objects.filter(pk=page.pk).exists()

    def test_doi_prefix_is_captured_once(self, create_page):
        page = create_page(doi=DOI)
        assert page.doi_prefix == DOI

        resource = page.resource
        resource.doi = '10.5880/GFZ.9.9999.999'
        resource.title = 'Revised Seismic Catalogue'
        resource.save()
        update_landing_page(page, template='default_gfz')
        page.refresh_from_db()
        assert page.doi_prefix == DOI
        assert page.slug == 'revised-seismic-catalogue'

    def test_update_evicts_cache(self, create_page):
        page = create_page(status='published')
        landing_page_cache.set(page.resource_id, {'stale': True})
        update_landing_page(page, template='default_gfz', ftp_url='https://ftp.example.org/new')
        assert cache.get(cache_key(page.resource_id)) is None

    def test_draft_update_evicts_cache(self, create_page):
        page = create_page()
        landing_page_cache.set(page.resource_id, {'stale': True})
        update_landing_page(page, template='default_gfz', ftp_url='https://ftp.example.org/new')
        assert cache.get(cache_key(page.resource_id)) is None

    def test_delete_evicts_cache(self, create_page):
        page = create_page()
        resource_id = page.resource_id
        landing_page_cache.set(resource_id, {'stale': True})
        delete_landing_page(page)
        assert cache.get(cache_key(resource_id)) is None

    def test_resource_save_evicts_cache(self, create_page):
        page = create_page(status='published')
        landing_page_cache.set(page.resource_id, {'stale': True})
        resource = page.resource
        resource.description = 'Corrected abstract'
        resource.save()
        assert cache.get(cache_key(page.resource_id)) is None


@pytest.mark.django_db
class TestCuratorAPI:

    def url(self, resource):
        return f'/resources/{resource.pk}/landing-page'

    def test_create_landing_page(self, authenticated_client, create_resource):
        client, user = authenticated_client
        resource = create_resource()

        response = client.post(self.url(resource), {'template': 'default_gfz'}, format='json')
        assert response.status_code == 201
        assert response.data['message'] == 'Landing page created successfully'
        landing_page = response.data['landing_page']
        assert landing_page['status'] == 'draft'
        assert landing_page['published_at'] is None
        assert landing_page['slug'] == SLUG
        assert len(landing_page['preview_token']) == 64
        assert landing_page['public_url'].endswith(f'/draft-{resource.pk}/{SLUG}')
        assert response.data['datacite_sync']['attempted'] is False

    def test_create_for_registered_resource_syncs_datacite(self, authenticated_client, create_resource, datacite_client):
        client, user = authenticated_client
        resource = create_resource(doi=DOI)

        response = client.post(self.url(resource), {'template': 'default_gfz'}, format='json')
        assert response.status_code == 201
        assert response.data['landing_page']['doi_prefix'] == DOI
        assert response.data['landing_page']['public_url'].endswith(f'/{DOI}/{SLUG}')
        assert response.data['datacite_sync'] == {
            'attempted': True, 'success': True, 'error_message': None, 'doi': DOI,
        }
        datacite_client.update_metadata.assert_called_once()

    def test_create_duplicate_returns_409(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page(ftp_url='https://ftp.example.org/original')

        response = client.post(
            self.url(page.resource),
            {'template': 'default_gfz', 'ftp_url': 'https://ftp.example.org/other'},
            format='json'
        )
        assert response.status_code == 409
        assert response.data['error'] == 'duplicate_landing_page'
        page.refresh_from_db()
        assert page.ftp_url == 'https://ftp.example.org/original'
        assert LandingPage.objects.filter(resource=page.resource).count() == 1

    def test_create_rejects_unknown_template(self, authenticated_client, create_resource):
        client, user = authenticated_client
        resource = create_resource()
        response = client.post(self.url(resource), {'template': 'fancy'}, format='json')
        assert response.status_code == 422
        assert 'template' in response.data['errors']

    def test_create_rejects_invalid_ftp_url(self, authenticated_client, create_resource):
        client, user = authenticated_client
        resource = create_resource()
        response = client.post(self.url(resource), {'template': 'default_gfz', 'ftp_url': 'not a url'}, format='json')
        assert response.status_code == 422
        assert 'ftp_url' in response.data['errors']

    def test_igsn_template_requires_physical_object(self, authenticated_client, create_resource):
        client, user = authenticated_client
        dataset = create_resource()
        sample = create_resource(title='Drill Core Sample', resource_type='PhysicalObject')

        response = client.post(self.url(dataset), {'template': 'default_gfz_igsn'}, format='json')
        assert response.status_code == 422
        assert response.data['error'] == 'invalid_template_for_resource_type'

        response = client.post(self.url(sample), {'template': 'default_gfz_igsn'}, format='json')
        assert response.status_code == 201

    def test_create_for_missing_resource(self, authenticated_client):
        client, user = authenticated_client
        response = client.post('/resources/9999/landing-page', {'template': 'default_gfz'}, format='json')
        assert response.status_code == 404

    def test_get_landing_page(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page()
        response = client.get(self.url(page.resource))
        assert response.status_code == 200
        assert response.data['landing_page']['id'] == page.pk

    def test_get_missing_landing_page(self, authenticated_client, create_resource):
        client, user = authenticated_client
        response = client.get(self.url(create_resource()))
        assert response.status_code == 404
        assert response.data['error'] == 'landing_page_not_found'

    def test_publish_via_update(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page()
        response = client.put(self.url(page.resource), {'template': 'default_gfz', 'status': 'published'}, format='json')
        assert response.status_code == 200
        assert response.data['message'] == 'Landing page updated successfully'
        assert response.data['landing_page']['status'] == 'published'
        assert response.data['landing_page']['published_at'] is not None

    def test_update_cannot_unpublish(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page(status='published', ftp_url='https://ftp.example.org/a')
        published_at = page.published_at

        response = client.put(
            self.url(page.resource),
            {'template': 'default_gfz', 'status': 'draft', 'ftp_url': 'https://ftp.example.org/b'},
            format='json'
        )
        assert response.status_code == 422
        assert response.data['error'] == 'cannot_unpublish'
        page.refresh_from_db()
        assert page.status == 'published'
        assert page.published_at == published_at
        assert page.ftp_url == 'https://ftp.example.org/a'

    def test_update_without_status_keeps_status(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page(status='published')
        response = client.put(self.url(page.resource), {'template': 'default_gfz'}, format='json')
        assert response.status_code == 200
        assert response.data['landing_page']['status'] == 'published'

    def test_delete_draft(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page()
        response = client.delete(self.url(page.resource))
        assert response.status_code == 200
        assert not LandingPage.objects.filter(pk=page.pk).exists()

    def test_delete_published_is_refused(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page(status='published')
        response = client.delete(self.url(page.resource))
        assert response.status_code == 422
        assert response.data['error'] == 'cannot_delete_published'
        page.refresh_from_db()
        assert page.status == 'published'

    def test_requires_authentication(self, api_client, create_resource):
        response = api_client.post(self.url(create_resource()), {'template': 'default_gfz'}, format='json')
        assert response.status_code == 401

    def test_failed_datacite_sync_does_not_block_create(self, authenticated_client, create_resource, datacite_client):
        client, user = authenticated_client
        resource = create_resource(doi=DOI)
        datacite_client.update_metadata.side_effect = DataCiteHTTPError('DataCite returned HTTP 500', status_code=500)

        response = client.post(self.url(resource), {'template': 'default_gfz'}, format='json')
        assert response.status_code == 201
        assert response.data['datacite_sync']['attempted'] is True
        assert response.data['datacite_sync']['success'] is False
        assert 'temporarily unavailable' in response.data['datacite_sync']['error_message']
        assert LandingPage.objects.filter(resource=resource).exists()

    def test_failed_datacite_sync_does_not_block_update(self, authenticated_client, create_page, datacite_client):
        client, user = authenticated_client
        page = create_page(doi=DOI)
        datacite_client.update_metadata.side_effect = DataCiteHTTPError(
            'DataCite returned HTTP 401', status_code=401, response_json={},
        )

        response = client.put(
            self.url(page.resource),
            {'template': 'default_gfz', 'status': 'published', 'ftp_url': 'https://ftp.example.org/new'},
            format='json'
        )
        assert response.status_code == 200
        assert response.data['datacite_sync']['success'] is False
        assert 'authentication failed' in response.data['datacite_sync']['error_message']
        page.refresh_from_db()
        assert page.status == 'published'
        assert page.ftp_url == 'https://ftp.example.org/new'


@pytest.mark.django_db
class TestPublicResolution:

    def doi_path(self, page):
        return f'/{page.doi_prefix}/{page.slug}'

    def draft_path(self, page):
        return f'/draft-{page.resource_id}/{page.slug}'

    def test_published_page_is_rendered_and_cached(self, api_client, create_page):
        page = create_page(doi=DOI, status='published')

        response = api_client.get(self.doi_path(page))
        assert response.status_code == 200
        assert response.data['component'] == 'LandingPages/default_gfz'
        assert response.data['is_preview'] is False
        assert response.data['resource']['doi'] == DOI
        assert 'preview_token' not in response.data['landing_page']
        assert landing_page_cache.get(page.resource_id) is not None

    def test_cached_page_is_served_without_render(self, api_client, create_page):
        page = create_page(doi=DOI, status='published')

        with patch('landing_pages.public_views.build_page_payload', wraps=build_page_payload) as render:
            first = api_client.get(self.doi_path(page))
            second = api_client.get(self.doi_path(page))

        assert first.status_code == 200
        assert second.status_code == 200
        assert first.content == second.content
        assert render.call_count == 1

    def test_update_is_visible_on_next_request(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page(doi=DOI, status='published', ftp_url='https://ftp.example.org/old')

        response = client.get(self.doi_path(page))
        assert response.data['landing_page']['ftp_url'] == 'https://ftp.example.org/old'

        response = client.put(
            f'/resources/{page.resource_id}/landing-page',
            {'template': 'default_gfz', 'ftp_url': 'https://ftp.example.org/new'},
            format='json'
        )
        assert response.status_code == 200

        response = client.get(self.doi_path(page))
        assert response.data['landing_page']['ftp_url'] == 'https://ftp.example.org/new'

    def test_draft_requires_preview_token(self, api_client, create_page):
        page = create_page()

        response = api_client.get(self.draft_path(page))
        assert response.status_code == 404

        response = api_client.get(self.draft_path(page), {'preview': page.preview_token})
        assert response.status_code == 200
        assert response.data['is_preview'] is True

        response = api_client.get(self.draft_path(page), {'preview': 'garbage'})
        assert response.status_code == 403
        assert response.data['error'] == 'invalid_preview_token'

    def test_preview_is_never_cached(self, api_client, create_page):
        page = create_page(doi=DOI, status='published')
        response = api_client.get(self.doi_path(page), {'preview': page.preview_token})
        assert response.status_code == 200
        assert response.data['is_preview'] is True
        assert landing_page_cache.get(page.resource_id) is None

    def test_draft_path_is_gone_once_doi_is_assigned(self, api_client, create_page):
        page = create_page(doi=DOI)
        response = api_client.get(f'/draft-{page.resource_id}/{page.slug}', {'preview': page.preview_token})
        assert response.status_code == 404

        response = api_client.get(self.doi_path(page), {'preview': page.preview_token})
        assert response.status_code == 200

    def test_unknown_page(self, api_client, create_page):
        page = create_page(doi=DOI, status='published')
        response = api_client.get(f'/{DOI}/some-other-slug')
        assert response.status_code == 404
        response = api_client.get(f'/draft-{page.resource_id + 1}/{page.slug}')
        assert response.status_code == 404

    def test_legacy_url_redirects(self, api_client, create_page):
        page = create_page(doi=DOI, status='published')
        response = api_client.get(f'/datasets/{page.resource_id}')
        assert response.status_code == 301
        assert response['Location'] == page.public_url

    def test_legacy_url_follows_slug_change(self, api_client, create_page):
        page = create_page(status='published')
        resource = page.resource
        resource.title = 'Revised Seismic Catalogue'
        resource.save()
        update_landing_page(page, template='default_gfz')

        response = api_client.get(f'/datasets/{page.resource_id}')
        assert response.status_code == 301
        assert response['Location'] == page.public_url
        assert response['Location'].endswith(f'/draft-{page.resource_id}/revised-seismic-catalogue')

    def test_resource_edit_is_visible_on_next_request(self, api_client, create_page):
        page = create_page(doi=DOI, status='published')

        response = api_client.get(self.doi_path(page))
        assert response.data['resource']['description'] == ''
        assert landing_page_cache.get(page.resource_id) is not None

        resource = Resource.objects.get(pk=page.resource_id)
        resource.description = 'Corrected abstract'
        resource.save()

        response = api_client.get(self.doi_path(page))
        assert response.data['resource']['description'] == 'Corrected abstract'

    def test_legacy_url_without_landing_page(self, api_client, create_resource):
        resource = create_resource()
        response = api_client.get(f'/datasets/{resource.pk}')
        assert response.status_code == 404

    def test_view_count_for_public_renders(self, api_client, create_page):
        page = create_page(doi=DOI, status='published')
        api_client.get(self.doi_path(page))
        api_client.get(self.doi_path(page))
        page.refresh_from_db()
        assert page.view_count == 2

    def test_view_count_ignores_previews(self, api_client, create_page, create_resource):
        draft = create_page()
        published = create_page(resource=create_resource(title='Other Data', doi=DOI), status='published')

        with patch('landing_pages.public_views.increment_view_count') as increment:
            api_client.get(self.draft_path(draft), {'preview': draft.preview_token})
            api_client.get(self.doi_path(published), {'preview': published.preview_token})
            api_client.get(self.draft_path(draft))
        assert increment.call_count == 0


@pytest.mark.django_db
class TestSessionPreview:

    def url(self, resource):
        return f'/resources/{resource.pk}/landing-page/preview'

    def test_store_and_render_preview(self, authenticated_client, create_resource):
        client, user = authenticated_client
        resource = create_resource()

        response = client.post(
            self.url(resource),
            {'template': 'default_gfz', 'ftp_url': 'https://ftp.example.org/data'},
            format='json'
        )
        assert response.status_code == 201
        assert response.data['preview_url'] == self.url(resource)

        response = client.get(self.url(resource))
        assert response.status_code == 200
        assert response.data['is_preview'] is True
        assert response.data['component'] == 'LandingPages/default_gfz'
        assert response.data['landing_page']['ftp_url'] == 'https://ftp.example.org/data'
        assert not LandingPage.objects.filter(resource=resource).exists()

    def test_preview_does_not_touch_saved_page(self, authenticated_client, create_page):
        client, user = authenticated_client
        page = create_page(ftp_url='https://ftp.example.org/saved')

        client.post(self.url(page.resource), {'template': 'default_gfz', 'ftp_url': 'https://ftp.example.org/draft'}, format='json')
        response = client.get(self.url(page.resource))
        assert response.data['landing_page']['ftp_url'] == 'https://ftp.example.org/draft'
        page.refresh_from_db()
        assert page.ftp_url == 'https://ftp.example.org/saved'

    def test_clear_preview(self, authenticated_client, create_resource):
        client, user = authenticated_client
        resource = create_resource()
        client.post(self.url(resource), {'template': 'default_gfz'}, format='json')

        response = client.delete(self.url(resource))
        assert response.status_code == 204

        response = client.get(self.url(resource))
        assert response.status_code == 404

    def test_beginner_cannot_store_preview(self, api_client, create_user, create_resource):
        user = create_user(email='beginner@example.com', role=User.ROLE_BEGINNER)
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')

        response = api_client.post(self.url(create_resource()), {'template': 'default_gfz'}, format='json')
        assert response.status_code == 403

    def test_preview_rejects_igsn_for_dataset(self, authenticated_client, create_resource):
        client, user = authenticated_client
        response = client.post(self.url(create_resource()), {'template': 'default_gfz_igsn'}, format='json')
        assert response.status_code == 422
        assert response.data['error'] == 'invalid_template_for_resource_type'
