"""
Project-wide REST framework exception handler.

Every error leaves the API in the same envelope::

    {"success": false, "error": "<message>", "details": {...}}

``details`` only appears for validation errors, where it carries the
per-field messages produced by the serializer.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


def _first_message(data):
    """Dig the first human readable message out of DRF error data."""
    if isinstance(data, dict):
        if 'detail' in data:
            return _first_message(data['detail'])
        for value in data.values():
            return _first_message(value)
        return ''
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else ''
    return str(data)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown'

    if response is None:
        logger.exception("Unhandled error in %s", view_name, exc_info=exc)
        set_rollback()
        return Response(
            {'success': False, 'error': 'Internal server error'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    payload = {'success': False, 'error': _first_message(response.data)}
    if isinstance(exc, ValidationError) and isinstance(response.data, dict):
        payload['details'] = response.data

    if response.status_code >= 500:
        logger.error("Server error in %s: %s", view_name, payload['error'])
    else:
        logger.info("Request rejected in %s (%s): %s", view_name, response.status_code, payload['error'])

    response.data = payload
    return response
