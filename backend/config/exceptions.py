"""
Project-wide error handling for the REST API.

Every failure leaves the API as ``{"error": "<message>"}``; validation
failures also carry the per-field ``details``.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import (
    APIException, AuthenticationFailed, NotAuthenticated, ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    """Duplicate like, follow, membership or saved place."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Resource already exists.'
    default_code = 'conflict'


def _first_message(detail) -> str:
    """Pick a readable message out of a DRF error structure."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            message = _first_message(value)
            if field in ('non_field_errors', 'detail', 'error'):
                return message
            return f"{field}: {message}"
        return 'Invalid input'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid input'
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else 'unknown view'
        )
        return Response(
            {'error': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # Session auth has no WWW-Authenticate challenge, DRF would answer 403
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    if isinstance(exc, ValidationError):
        response.data = {
            'error': _first_message(response.data),
            'details': response.data,
        }
    else:
        response.data = {'error': _first_message(response.data)}

    return response
