"""
JSON exception handling for the REST API.

Business-rule violations carry a stable machine-readable ``error`` code next to
the human readable ``message`` so clients can branch on them, not only on the
HTTP status.
"""
import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    DRF EXCEPTION_HANDLER.

    - serializer validation errors → 422 {"message", "errors"}
    - APIException subclasses → their status with {"message", "error"}
    - anything else → generic 500 without internals
    """
    if isinstance(exc, exceptions.ValidationError):
        errors = exc.detail if isinstance(exc.detail, dict) else {'non_field_errors': exc.detail}
        return Response(
            {'message': 'The given data was invalid.', 'errors': errors},
            status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, Http404):
            code = 'not_found'
            message = 'Not found.'
        elif isinstance(exc, DjangoPermissionDenied):
            code = 'permission_denied'
            message = 'You do not have permission to perform this action.'
        else:
            codes = exc.get_codes() if isinstance(exc, exceptions.APIException) else None
            code = codes if isinstance(codes, str) else getattr(exc, 'default_code', 'error')
            message = str(exc.detail) if hasattr(exc, 'detail') else str(exc)
        response.data = {'message': message, 'error': code}
        return response

    view = context.get('view')
    logger.exception(
        "Unhandled error in %s", view.__class__.__name__ if view is not None else 'unknown view'
    )
    return Response(
        {'message': 'An unexpected error occurred.', 'error': 'server_error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
