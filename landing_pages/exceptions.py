"""
Landing page errors.

Each error has a stable ``default_code`` that the API returns as ``error`` so the
curation UI can tell business-rule violations apart from generic validation.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class LandingPageError(APIException):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = 'Landing page operation failed.'
    default_code = 'landing_page_error'


class DuplicateLandingPage(LandingPageError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Landing page already exists for this resource'
    default_code = 'duplicate_landing_page'


class CannotUnpublish(LandingPageError):
    default_detail = (
        'Cannot unpublish a published landing page. '
        'DOIs are persistent and must always resolve to a valid landing page.'
    )
    default_code = 'cannot_unpublish'


class CannotDeletePublished(LandingPageError):
    default_detail = (
        'Cannot delete a published landing page. '
        'DOIs are persistent and must always resolve to a valid landing page.'
    )
    default_code = 'cannot_delete_published'


class InvalidTemplateForResourceType(LandingPageError):
    default_detail = 'The IGSN template can only be used with Physical Object resources.'
    default_code = 'invalid_template_for_resource_type'


class LandingPageNotFound(LandingPageError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Landing page not found'
    default_code = 'landing_page_not_found'


class InvalidPreviewToken(LandingPageError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Invalid preview token'
    default_code = 'invalid_preview_token'
