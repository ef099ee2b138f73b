"""
DataCite REST API client.

Talks JSON:API to the DataCite REST API with basic auth. Requests are bounded
by a timeout; connection errors and gateway failures are retried with a short
backoff, client errors (4xx) never are.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter
from requests.auth import HTTPBasicAuth
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

JSON_API_CONTENT_TYPE = 'application/vnd.api+json'
RETRY_STATUS_CODES = (502, 503, 504)


class DataCiteError(Exception):
    """Base exception for DataCite API errors."""

    def __init__(self, message, status_code=None, response_json=None):
        super().__init__(message)
        self.status_code = status_code
        self.response_json = response_json


class DataCiteHTTPError(DataCiteError):
    """DataCite answered with a 4xx/5xx status."""


class DataCiteConnectionError(DataCiteError):
    """DataCite could not be reached (timeout, DNS, refused connection)."""


def is_test_mode(user=None) -> bool:
    """
    Global test mode wins; otherwise beginners are still forced onto the test
    endpoint so that users in training never touch production DOIs.
    """
    if settings.DATACITE_TEST_MODE:
        return True
    if user is not None and user.is_authenticated and not user.can_register_production_doi():
        logger.info("Forcing DataCite test mode for beginner user %s", user.pk)
        return True
    return False


class DataCiteClient:
    """Client for the DataCite REST API v2."""

    def __init__(
        self,
        endpoint: str,
        username: str,
        password: str,
        timeout: int = 30,
        max_retries: int = 3,
        test_mode: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint.rstrip('/')
        self.timeout = timeout
        self.test_mode = test_mode

        if not username or not password:
            logger.error(
                "DataCite credentials missing (test_mode=%s, username_empty=%s, password_empty=%s)",
                test_mode, not username, not password,
            )

        if session is None:
            session = requests.Session()
            retry = Retry(
                total=max_retries,
                backoff_factor=0.1,
                status_forcelist=RETRY_STATUS_CODES,
                allowed_methods=frozenset({'GET', 'PUT'}),
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry)
            session.mount('https://', adapter)
            session.mount('http://', adapter)
        session.auth = HTTPBasicAuth(username, password)
        session.headers.update({
            'Content-Type': JSON_API_CONTENT_TYPE,
            'Accept': JSON_API_CONTENT_TYPE,
        })
        self.session = session

    @classmethod
    def from_settings(cls, user=None) -> 'DataCiteClient':
        test_mode = is_test_mode(user)
        config = settings.DATACITE['test' if test_mode else 'production']
        return cls(
            endpoint=config['endpoint'],
            username=config['username'],
            password=config['password'],
            timeout=settings.DATACITE_TIMEOUT,
            max_retries=settings.DATACITE_MAX_RETRIES,
            test_mode=test_mode,
        )

    def doi_url(self, doi: str) -> str:
        return f"{self.endpoint}/dois/{quote(doi, safe='')}"

    def update_metadata(self, doi: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        PUT the metadata of an existing DOI. Idempotent.

        Raises:
            DataCiteConnectionError: on timeouts and connection failures
            DataCiteHTTPError: when DataCite answers with an error status
            DataCiteError: when the answer is not valid JSON
        """
        url = self.doi_url(doi)
        try:
            response = self.session.put(url, json=payload, timeout=self.timeout)
        except requests.Timeout as exc:
            raise DataCiteConnectionError(f"DataCite request timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise DataCiteConnectionError(f"DataCite request failed: {exc}") from exc

        if response.status_code >= 400:
            raise DataCiteHTTPError(
                f"DataCite returned HTTP {response.status_code}",
                status_code=response.status_code,
                response_json=_safe_json(response),
            )

        data = _safe_json(response)
        if data is None:
            logger.error("DataCite response for %s is not valid JSON: %s", doi, response.text[:500])
            raise DataCiteError('Received invalid JSON response from DataCite API', status_code=response.status_code)
        return data


def _safe_json(response):
    try:
        return response.json()
    except ValueError:
        return None
