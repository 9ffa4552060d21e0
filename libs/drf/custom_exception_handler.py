import logging

import sentry_sdk
from django.core.exceptions import ValidationError as DjangoValidationError
from drf_standardized_errors.handler import exception_handler as drf_exception_handler
from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


def exception_handler(exc, context):
    # Model-level clean() errors surface as regular 400 validation errors
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        exc = ValidationError(detail=detail)

    response = drf_exception_handler(exc, context)

    # If response is None --> raise the exception to let Sentry capture it
    if response is None:
        sentry_sdk.capture_exception(exc)
        raise exc

    if response.status_code >= 500:
        logger.error("Unhandled API error on %s: %s", context.get("view").__class__.__name__, exc)
        sentry_sdk.capture_exception(exc)

    return response
