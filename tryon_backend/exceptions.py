"""
DRF exception handler rendering every error in the API envelope:

    {"success": false, "message": "...", "error": "<code>"}
"""

import logging

from rest_framework import exceptions
from rest_framework.views import exception_handler

from .errors import ConflictError

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else 'Validation error'
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return 'Validation error'
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.error(
            "Unhandled error in %s: %s",
            view.__class__.__name__ if view else 'unknown view',
            exc,
            exc_info=exc,
        )
        return None

    if isinstance(exc, exceptions.APIException):
        codes = exc.get_codes()
        code = codes if isinstance(codes, str) else 'validation_error'
    else:
        code = 'error'

    payload = {
        'success': False,
        'message': _first_message(response.data.get('detail', response.data)
                                  if isinstance(response.data, dict) else response.data),
        'error': code,
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        payload['message'] = 'Validation error'
        payload['errors'] = response.data
    if isinstance(exc, ConflictError) and exc.resource_id is not None:
        payload['id'] = exc.resource_id

    response.data = payload
    return response
