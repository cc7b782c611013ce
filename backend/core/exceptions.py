"""API error envelope: every error response carries a `message` string"""
import logging
from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger('backend.api')


def _first_error(detail, prefix=''):
    """Walk nested validation errors and return the first one as 'field: message'"""
    if isinstance(detail, dict):
        for field, value in detail.items():
            if str(field).isdigit():
                # Newer DRF keys many=True errors by item index
                nested = f"{prefix}[{field}]"
            else:
                label = field if field != 'non_field_errors' else ''
                nested = f"{prefix}.{label}" if prefix and label else (label or prefix)
            message = _first_error(value, nested)
            if message:
                return message
        return None
    if isinstance(detail, list):
        for index, value in enumerate(detail):
            # Lists of dicts come from many=True serializers, e.g. bill items
            nested = f"{prefix}[{index}]" if isinstance(value, dict) else prefix
            message = _first_error(value, nested)
            if message:
                return message
        return None
    return f"{prefix}: {detail}" if prefix else str(detail)


def api_exception_handler(exc, context):
    """
    Wrap DRF's handler so the client always gets {"message": ...}.

    Validation errors -> 400 with the per-field `errors` as well.
    IntegrityError (e.g. duplicate bill number) -> 400.
    Anything DRF does not know about -> 500 with the raw message.
    """
    # @api_view classes are named after the wrapped function
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else 'unknown'

    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", view_name, exc)
        return Response({'message': str(exc)}, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is None:
        logger.error("Unhandled error in %s: %s", view_name, exc, exc_info=True)
        return Response({'message': str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        errors = response.data
        message = _first_error(errors) or 'Invalid data'
        response.data = {'message': message, 'errors': errors}
        logger.info("Validation failed in %s: %s", view_name, message)
    else:
        detail = response.data.get('detail', response.data) if isinstance(response.data, dict) else response.data
        response.data = {'message': str(detail)}
    return response
