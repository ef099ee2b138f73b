"""
Tests for the DataCite client and landing page sync.
"""
from unittest.mock import MagicMock, Mock

import pytest
import requests
from django.contrib.auth import get_user_model

from landing_pages.services import create_landing_page
from resources.models import Resource

from .client import DataCiteClient, DataCiteHTTPError, is_test_mode
from .payload import build_update_payload
from .sync import (
    LANDING_PAGE_REQUIRED_MESSAGE,
    UNAVAILABLE_MESSAGE,
    UNEXPECTED_ERROR_MESSAGE,
    error_message_for,
    sync_if_registered,
)

User = get_user_model()

DOI = '10.5880/GFZ.1.2024.001'


def make_response(status_code, body=None):
    response = Mock(status_code=status_code, text='')
    if body is None:
        response.json.side_effect = ValueError('No JSON object could be decoded')
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session, headers={})


@pytest.fixture
def client(session):
    return DataCiteClient(
        endpoint='https://api.test.datacite.org/',
        username='GFZ.TEST',
        password='secret',
        session=session,
    )


@pytest.fixture
def registered_resource():
    resource = Resource.objects.create(
        title='Global Seismic Catalogue',
        doi=DOI,
        description='Hypocentres 1900-2023',
        publication_year=2024,
        version='1.0',
    )
    create_landing_page(resource, template='default_gfz', status='published')
    return resource


@pytest.mark.django_db
class TestSyncIfRegistered:

    def test_resource_without_doi_needs_no_sync(self, client, session):
        resource = Resource.objects.create(title='Unregistered Data')
        result = sync_if_registered(resource, client=client)
        assert result.attempted is False
        assert result.success is True
        session.put.assert_not_called()

    def test_registered_resource_without_landing_page(self, client, session):
        resource = Resource.objects.create(title='Registered Data', doi=DOI)
        result = sync_if_registered(resource, client=client)
        assert result.attempted is True
        assert result.success is False
        assert 'Landing page' in result.error_message
        assert result.error_message == LANDING_PAGE_REQUIRED_MESSAGE
        session.put.assert_not_called()

    def test_successful_update(self, client, session, registered_resource):
        session.put.return_value = make_response(200, {'data': {'id': DOI.lower(), 'type': 'dois'}})

        result = sync_if_registered(registered_resource, client=client)
        assert result.attempted is True
        assert result.success is True
        assert result.doi == DOI

        args, kwargs = session.put.call_args
        assert args[0] == 'https://api.test.datacite.org/dois/10.5880%2FGFZ.1.2024.001'
        attributes = kwargs['json']['data']['attributes']
        assert attributes['url'] == registered_resource.landing_page.public_url
        assert kwargs['timeout'] == 30

    def test_server_error_is_reported_as_unavailable(self, client, session, registered_resource):
        session.put.return_value = make_response(500, {'errors': []})
        result = sync_if_registered(registered_resource, client=client)
        assert result.success is False
        assert 'temporarily unavailable' in result.error_message

    def test_timeout_is_reported_as_unavailable(self, client, session, registered_resource):
        session.put.side_effect = requests.Timeout('read timed out')
        result = sync_if_registered(registered_resource, client=client)
        assert result.success is False
        assert result.error_message == UNAVAILABLE_MESSAGE

    def test_error_title_from_datacite_is_used(self, client, session, registered_resource):
        session.put.return_value = make_response(422, {'errors': [{'title': 'Url is not a valid URL'}]})
        result = sync_if_registered(registered_resource, client=client)
        assert result.error_message == 'Url is not a valid URL'

    def test_unexpected_error_never_raises(self, client, session, registered_resource):
        session.put.side_effect = RuntimeError('boom')
        result = sync_if_registered(registered_resource, client=client)
        assert result.attempted is True
        assert result.success is False
        assert 'boom' not in result.error_message
        assert result.error_message == UNEXPECTED_ERROR_MESSAGE

    def test_invalid_json_on_success_status(self, client, session, registered_resource):
        session.put.return_value = make_response(200)
        result = sync_if_registered(registered_resource, client=client)
        assert result.success is False
        assert 'invalid JSON' in result.error_message

    def test_result_to_dict(self, client, session, registered_resource):
        session.put.return_value = make_response(200, {'data': {}})
        assert sync_if_registered(registered_resource, client=client).to_dict() == {
            'attempted': True, 'success': True, 'error_message': None, 'doi': DOI,
        }


class TestErrorMessages:

    @pytest.mark.parametrize('status_code, fragment', [
        (401, 'authentication failed'),
        (403, 'Access denied'),
        (404, 'DOI not found'),
        (422, 'Invalid metadata'),
        (429, 'Too many requests'),
        (418, 'HTTP 418'),
        (503, 'temporarily unavailable'),
    ])
    def test_status_messages(self, client, session, status_code, fragment):
        session.put.return_value = make_response(status_code, {})
        with pytest.raises(DataCiteHTTPError) as excinfo:
            client.update_metadata(DOI, {'data': {}})
        assert fragment in error_message_for(excinfo.value)


class TestClientConfiguration:

    def test_client_sets_json_api_headers(self, client, session):
        assert session.headers['Content-Type'] == 'application/vnd.api+json'
        assert session.headers['Accept'] == 'application/vnd.api+json'
        assert session.auth.username == 'GFZ.TEST'

    def test_global_test_mode(self, settings):
        settings.DATACITE_TEST_MODE = True
        assert is_test_mode() is True

    def test_beginners_are_forced_into_test_mode(self, settings):
        settings.DATACITE_TEST_MODE = False
        assert is_test_mode(User(role=User.ROLE_BEGINNER)) is True
        assert is_test_mode(User(role=User.ROLE_CURATOR)) is False

    def test_from_settings_uses_production_endpoint(self, settings):
        settings.DATACITE_TEST_MODE = False
        client = DataCiteClient.from_settings(User(role=User.ROLE_CURATOR))
        assert client.endpoint == settings.DATACITE['production']['endpoint'].rstrip('/')
        assert client.test_mode is False

    def test_from_settings_for_beginner_uses_test_endpoint(self, settings):
        settings.DATACITE_TEST_MODE = False
        client = DataCiteClient.from_settings(User(role=User.ROLE_BEGINNER))
        assert client.endpoint == settings.DATACITE['test']['endpoint'].rstrip('/')
        assert client.test_mode is True


@pytest.mark.django_db
class TestPayload:

    def test_update_payload(self, registered_resource):
        landing_page = registered_resource.landing_page
        payload = build_update_payload(registered_resource, landing_page)

        assert payload['data']['type'] == 'dois'
        assert payload['data']['id'] == DOI
        attributes = payload['data']['attributes']
        assert attributes['titles'] == [{'title': 'Global Seismic Catalogue'}]
        assert attributes['url'] == landing_page.public_url
        assert attributes['publicationYear'] == 2024
        assert attributes['version'] == '1.0'
        assert attributes['descriptions'][0]['descriptionType'] == 'Abstract'
        assert attributes['event'] == 'publish'

    def test_publisher_falls_back_to_setting(self, settings, registered_resource):
        settings.DATACITE_PUBLISHER = 'GFZ Data Services'
        payload = build_update_payload(registered_resource, registered_resource.landing_page)
        assert payload['data']['attributes']['publisher'] == 'GFZ Data Services'
