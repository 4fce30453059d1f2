# apps/api/exceptions.py
"""
REST framework exception handler.

Billing errors carry their own HTTP status and machine-readable code;
they are rendered as {"error": ..., "code": ...}. Restricted document
access additionally carries the client's payment summary. Everything
else goes through DRF's default handler.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.billing.exceptions import BillingError
from apps.documents.services import FileAccessRestricted

logger = logging.getLogger(__name__)


def portal_exception_handler(exc, context):
    if isinstance(exc, BillingError):
        body = {'error': exc.message, 'code': exc.code}
        if exc.details:
            body['details'] = exc.details
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}")
        return Response(body, status=exc.status_code)

    if isinstance(exc, FileAccessRestricted):
        body = {'error': str(exc), 'code': exc.code}
        body.update(exc.summary.as_dict())
        return Response(body, status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        return Response(
            {'error': '; '.join(exc.messages), 'code': 'invalid_argument'},
            status=status.HTTP_400_BAD_REQUEST,
        )

    return exception_handler(exc, context)
