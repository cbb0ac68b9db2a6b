"""
Domain exceptions for the eLogbook service.

All exceptions follow the standard error format:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable description",
        "details": {}
    }
"""

from rest_framework import exceptions as drf_exceptions
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, code, message, details=None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DomainError):
    """Validation error - request body or parameters fail validation."""

    def __init__(self, message, details=None):
        super().__init__("VALIDATION_ERROR", message, details)


class UnauthenticatedError(DomainError):
    """No session, expired session, or the session user can no longer act."""

    def __init__(self, message, details=None):
        super().__init__("UNAUTHENTICATED", message, details)


class InvalidCredentialsError(DomainError):
    """Re-authentication password did not match the acting user's hash."""

    def __init__(self, message, details=None):
        super().__init__("INVALID_CREDENTIALS", message, details)


class InvalidStateError(DomainError):
    """Entity is not in the required state for the operation."""

    def __init__(self, message, details=None):
        super().__init__("INVALID_STATE", message, details)


class NotFoundError(DomainError):
    """Requested resource does not exist."""

    def __init__(self, message, details=None):
        super().__init__("NOT_FOUND", message, details)


class PermissionDeniedError(DomainError):
    """Authenticated user lacks required role, or dual control is violated."""

    def __init__(self, message, details=None):
        super().__init__("FORBIDDEN", message, details)


class ConflictError(DomainError):
    """Write collides with an existing unique record or a protected reference."""

    def __init__(self, message, details=None):
        super().__init__("CONFLICT", message, details)


STATUS_CODE_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_STATE": status.HTTP_409_CONFLICT,
    "CONFLICT": status.HTTP_409_CONFLICT,
}


def error_response(code, message, details=None, status_code=None):
    """Build a Response in the standard error envelope."""
    return Response(
        {
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            }
        },
        status=status_code or STATUS_CODE_MAP.get(code, status.HTTP_400_BAD_REQUEST),
    )


def _code_for_drf_exception(exc):
    if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        return "UNAUTHENTICATED"
    if isinstance(exc, drf_exceptions.PermissionDenied):
        return "FORBIDDEN"
    if isinstance(exc, drf_exceptions.NotFound):
        return "NOT_FOUND"
    if isinstance(exc, (drf_exceptions.ValidationError, drf_exceptions.ParseError)):
        return "VALIDATION_ERROR"
    if isinstance(exc, drf_exceptions.Throttled):
        return "THROTTLED"
    return "REQUEST_ERROR"


def domain_exception_handler(exc, context):
    """
    Custom exception handler for domain exceptions.

    Returns standard error format:
    {
        "error": {
            "code": "ERROR_CODE",
            "message": "Human-readable description",
            "details": {}
        }
    }
    """
    # Handle domain exceptions
    if isinstance(exc, DomainError):
        return error_response(exc.code, exc.message, exc.details)

    # Use default REST framework exception handler for other exceptions
    response = exception_handler(exc, context)

    if response is not None:
        code = _code_for_drf_exception(exc)
        if isinstance(response.data, dict) and "detail" in response.data:
            error_data = {
                "error": {
                    "code": code,
                    "message": str(response.data["detail"]),
                    "details": {},
                }
            }
        else:
            error_data = {
                "error": {
                    "code": code,
                    "message": "Request validation failed",
                    "details": response.data,
                }
            }

        response.data = error_data
        return response

    # Unhandled exceptions never expose internals
    logger.exception("Unhandled exception", exc_info=exc)
    return error_response(
        "INTERNAL_ERROR",
        "An internal error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
