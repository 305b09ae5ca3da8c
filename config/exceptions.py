"""
Project-wide DRF exception handler.

Every API error is rendered as::

    {"success": false, "status": "fail" | "error", "message": "...", "errors": {...}}

``fail`` marks client errors (4xx), ``error`` marks server errors (5xx).
A ``stack`` entry is included only when DEBUG is on.
"""

import logging
import traceback

from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull a human-readable sentence out of a DRF error detail."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception(
            "Unhandled error in %s", view.__class__.__name__ if view else 'unknown view'
        )
        body = {
            'success': False,
            'status': 'error',
            'message': 'Internal server error',
        }
        if settings.DEBUG:
            body['stack'] = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        message = getattr(exc, 'message', None) or 'Validation failed'
        errors = response.data
    else:
        message = _first_message(response.data)
        errors = None

    body = {
        'success': False,
        'status': 'fail' if response.status_code < 500 else 'error',
        'message': message,
    }
    if errors is not None:
        body['errors'] = errors
    if settings.DEBUG and response.status_code >= 500:
        body['stack'] = traceback.format_exception(type(exc), exc, exc.__traceback__)

    response.data = body
    return response
