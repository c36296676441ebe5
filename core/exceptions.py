# core/exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.http import Http404
import logging
import uuid

from core.logging_utils import err_tag, safe_user_hash

logger = logging.getLogger(__name__)


def _error_body(code, message, details, error_id):
    return {
        "error": True,
        "code": code,
        "message": message,
        "details": details,
        "error_id": error_id,
    }


def custom_exception_handler(exc, context):
    """
    Custom exception handler that returns consistent error format
    """
    response = exception_handler(exc, context)

    # Unique error ID for tracking
    error_id = str(uuid.uuid4())[:8]

    request = context.get("request")
    log_extra = {
        "error_id": error_id,
        "exc_type": exc.__class__.__name__,
        "method": getattr(request, "method", "unknown"),
        "path": getattr(request, "path", "unknown"),
        "user": safe_user_hash(getattr(request, "user", None)),
    }

    if response is not None:
        # Standard DRF exceptions
        response.data = _error_body(
            get_error_code(exc),
            get_error_message(response.data),
            format_error_details(response.data),
            error_id,
        )
        logger.warning(
            "API error",
            extra={**log_extra, "status": response.status_code},
        )
        return response

    if isinstance(exc, APIError):
        logger.warning(
            "Business rule error",
            extra={**log_extra, "status": exc.status_code, "err": err_tag(exc)},
        )
        return Response(
            _error_body(exc.code, exc.message, exc.details, error_id),
            status=exc.status_code,
        )

    if isinstance(exc, Http404):
        response = Response(
            _error_body(
                "RESOURCE_NOT_FOUND",
                "The requested resource was not found.",
                None,
                error_id,
            ),
            status=status.HTTP_404_NOT_FOUND,
        )
    elif isinstance(exc, ValidationError):
        response = Response(
            _error_body(
                "VALIDATION_ERROR",
                "Validation failed.",
                exc.message_dict if hasattr(exc, "message_dict") else exc.messages,
                error_id,
            ),
            status=status.HTTP_400_BAD_REQUEST,
        )
    else:
        response = Response(
            _error_body(
                "INTERNAL_SERVER_ERROR",
                "An internal server error occurred.",
                None,
                error_id,
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.error(
        "Unhandled exception",
        extra={**log_extra, "err": err_tag(exc)},
        exc_info=True,
    )
    return response


def get_error_code(exc):
    """
    Generate appropriate error code based on exception type
    """
    error_codes = {
        "ValidationError": "VALIDATION_ERROR",
        "PermissionDenied": "PERMISSION_DENIED",
        "NotAuthenticated": "AUTHENTICATION_REQUIRED",
        "AuthenticationFailed": "AUTHENTICATION_FAILED",
        "NotFound": "RESOURCE_NOT_FOUND",
        # DRF converts Django's Http404 before we see the response
        "Http404": "RESOURCE_NOT_FOUND",
        "MethodNotAllowed": "METHOD_NOT_ALLOWED",
        "ParseError": "PARSE_ERROR",
        "UnsupportedMediaType": "UNSUPPORTED_MEDIA_TYPE",
        "Throttled": "RATE_LIMIT_EXCEEDED",
    }

    return error_codes.get(exc.__class__.__name__, "UNKNOWN_ERROR")


def get_error_message(data):
    """
    Extract human-readable error message from DRF error data
    """
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        if "non_field_errors" in data:
            return (
                str(data["non_field_errors"][0])
                if data["non_field_errors"]
                else "Validation error"
            )
        # First error message of any field
        for value in data.values():
            if isinstance(value, list) and value:
                return str(value[0])
            if isinstance(value, str):
                return value
        return "Validation error"
    if isinstance(data, list) and data:
        return str(data[0])
    return str(data)


def format_error_details(data):
    """
    Format error details for consistent structure
    """
    if isinstance(data, dict):
        # 'detail' is already the message
        details = {k: v for k, v in data.items() if k != "detail"}
        return details if details else None
    if isinstance(data, list):
        return data
    return None


class APIError(Exception):
    """
    Custom API exception class for business logic errors
    """

    def __init__(
        self, message, code=None, status_code=status.HTTP_400_BAD_REQUEST, details=None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "API_ERROR"
        self.status_code = status_code
        self.details = details


class BreakdownInputError(APIError):
    """
    Input that passed field validation but cannot be broken down
    """

    def __init__(self, message, code=None, details=None):
        super().__init__(
            message=message,
            code=code or "BREAKDOWN_INPUT_ERROR",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )
