"""
Keep DataCite in step with local landing page changes.

Called after a landing page has been saved. A resource without a DOI needs no
sync; a registered resource gets its metadata (and landing page URL) pushed to
DataCite. Nothing in here raises: every failure becomes a
``DataCiteSyncResult.failed`` so the local change always stands.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Optional

from .client import DataCiteClient, DataCiteConnectionError, DataCiteError
from .payload import build_update_payload

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = 'DataCite sync failed due to an unexpected error. Please contact support.'
UNAVAILABLE_MESSAGE = 'DataCite service is temporarily unavailable. Please try again later.'
LANDING_PAGE_REQUIRED_MESSAGE = 'Landing page is required to update DataCite metadata.'

STATUS_MESSAGES = {
    401: 'DataCite authentication failed. Please contact support.',
    403: 'Access denied by DataCite. Please contact support.',
    404: 'DOI not found at DataCite. It may have been deleted.',
    422: 'Invalid metadata format. Please review your data.',
    429: 'Too many requests to DataCite. Please wait and try again.',
}


@dataclass(frozen=True)
class DataCiteSyncResult:
    attempted: bool
    success: bool
    error_message: Optional[str] = None
    doi: Optional[str] = None

    @classmethod
    def not_required(cls):
        return cls(attempted=False, success=True)

    @classmethod
    def succeeded(cls, doi):
        return cls(attempted=True, success=True, doi=doi)

    @classmethod
    def failed(cls, doi, error_message):
        return cls(attempted=True, success=False, error_message=error_message, doi=doi)

    def to_dict(self):
        return asdict(self)


def error_message_for(exc: DataCiteError) -> str:
    """Human readable message for a failed DataCite call."""
    if isinstance(exc, DataCiteConnectionError):
        return UNAVAILABLE_MESSAGE

    body = exc.response_json
    if isinstance(body, dict):
        errors = body.get('errors')
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            first = errors[0]
            message = first.get('title') or first.get('detail')
            if message:
                return message

    status_code = exc.status_code
    if status_code is None or status_code < 400:
        return str(exc)
    if status_code >= 500:
        return UNAVAILABLE_MESSAGE
    return STATUS_MESSAGES.get(status_code, f'DataCite API error (HTTP {status_code})')


def sync_if_registered(resource, user=None, client: Optional[DataCiteClient] = None) -> DataCiteSyncResult:
    """
    Push the resource's metadata to DataCite if it has a DOI.

    Returns not_required for unregistered resources, failed when the resource has
    a DOI but no landing page or when DataCite rejects the update, succeeded otherwise.
    """
    doi = resource.doi
    if not resource.is_registered:
        logger.debug("DataCite sync skipped: resource %s has no DOI", resource.pk)
        return DataCiteSyncResult.not_required()

    landing_page = getattr(resource, 'landing_page', None)
    if landing_page is None:
        logger.warning("DataCite sync skipped: resource %s has DOI %s but no landing page", resource.pk, doi)
        return DataCiteSyncResult.failed(doi, LANDING_PAGE_REQUIRED_MESSAGE)

    try:
        if client is None:
            client = DataCiteClient.from_settings(user)
        logger.info("Starting DataCite sync for resource %s (doi=%s, test_mode=%s)", resource.pk, doi, client.test_mode)
        client.update_metadata(doi, build_update_payload(resource, landing_page))
    except DataCiteError as exc:
        message = error_message_for(exc)
        logger.error(
            "DataCite sync failed for resource %s (doi=%s, status_code=%s): %s",
            resource.pk, doi, exc.status_code, message,
        )
        return DataCiteSyncResult.failed(doi, message)
    except Exception:
        logger.exception("DataCite sync failed unexpectedly for resource %s (doi=%s)", resource.pk, doi)
        return DataCiteSyncResult.failed(doi, UNEXPECTED_ERROR_MESSAGE)

    logger.info("DataCite sync completed for resource %s (doi=%s)", resource.pk, doi)
    return DataCiteSyncResult.succeeded(doi)
