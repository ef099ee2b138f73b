"""
Tests for project-level views and JSON error handling.
"""
import pytest
from rest_framework.test import APIClient


@pytest.fixture
def api_client():
    return APIClient()


class TestHealthCheck:

    def test_health_check(self, api_client):
        response = api_client.get('/api/v1/health/')
        assert response.status_code == 200
        assert response.json() == {'status': 'ok', 'service': 'datapub-backend'}


@pytest.mark.django_db
class TestErrorResponses:

    def test_unknown_path_returns_json_404(self, api_client):
        response = api_client.get('/no/such/page')
        assert response.status_code == 404
        assert response.json()['error'] == 'not_found'

    def test_api_errors_carry_a_code(self, api_client):
        response = api_client.get('/api/v1/auth/me/')
        assert response.status_code == 401
        assert response.json()['error'] == 'not_authenticated'
        assert 'message' in response.json()
