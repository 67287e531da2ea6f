"""
common.exceptions
~~~~~~~~~~~~~~~~~
Application error taxonomy and the DRF exception handler that turns every
failure into the ``{code, success, message}`` response envelope.
"""
import structlog
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response

from common.responses import error_response

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base application error.  Subclass to define domain-specific errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "error"
    default_detail: str = "An error occurred."

    def __init__(self, detail: str | None = None, code: str | None = None) -> None:
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        super().__init__(self.detail)

    def __str__(self) -> str:
        return self.detail


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "validation_error"
    default_detail = "Validation failed."

    def __init__(
        self,
        detail: str | None = None,
        errors: list[dict[str, str]] | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(detail, code)
        self.errors = errors or []


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "unauthorized"
    default_detail = "Authentication credentials were not provided."


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "forbidden"
    default_detail = "You do not have permission to perform this action."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"
    default_detail = "The requested resource was not found."


class NotConfiguredError(NotFoundError):
    """No targeting rule produced a variant version for the request."""

    default_code = "not_configured"
    default_detail = "No variant is configured for this config and environment."


class NotImplementedAppError(AppError):
    status_code = status.HTTP_501_NOT_IMPLEMENTED
    default_code = "not_implemented"
    default_detail = "Not implemented yet."


# ---------------------------------------------------------------------------
# Serializer error flattening
# ---------------------------------------------------------------------------

def flatten_errors(detail, prefix: str = "") -> list[dict[str, str]]:
    """
    Flatten a nested DRF ``ValidationError.detail`` into a list of
    ``{"field": "a.b", "message": "..."}`` dicts.
    """
    if isinstance(detail, dict):
        errors = []
        for key, value in detail.items():
            if key == "non_field_errors":
                path = prefix
            else:
                path = f"{prefix}.{key}" if prefix else str(key)
            errors.extend(flatten_errors(value, path))
        return errors
    if isinstance(detail, list):
        errors = []
        for index, item in enumerate(detail):
            if isinstance(item, (dict, list)):
                errors.extend(flatten_errors(item, f"{prefix}.{index}" if prefix else str(index)))
            else:
                errors.extend(flatten_errors(item, prefix))
        return errors
    return [{"field": prefix, "message": str(detail)}]


def custom_exception_handler(exc: Exception, context: dict) -> Response:
    """
    Global DRF exception handler.

    AppError subclasses and the standard DRF/Django exceptions are mapped to
    the response envelope.  Anything else is logged with its traceback and
    answered with a generic 500 so the cause never reaches the client.
    """
    if isinstance(exc, ValidationError):
        logger.warning("validation_error", detail=exc.detail, errors=exc.errors)
        return error_response(exc.detail, exc.status_code, errors=exc.errors)

    if isinstance(exc, AppError):
        logger.warning(
            "app_error",
            code=exc.code,
            detail=exc.detail,
            status_code=exc.status_code,
        )
        return error_response(exc.detail, exc.status_code)

    if isinstance(exc, drf_exceptions.ValidationError):
        errors = flatten_errors(exc.detail)
        logger.warning("request_validation_error", errors=errors)
        return error_response("Invalid request.", status.HTTP_400_BAD_REQUEST, errors=errors)

    if isinstance(exc, Http404):
        return error_response(str(exc) or NotFoundError.default_detail, status.HTTP_404_NOT_FOUND)

    if isinstance(exc, drf_exceptions.APIException):
        logger.warning("drf_error", detail=str(exc.detail), status_code=exc.status_code)
        response = error_response(str(exc.detail), exc.status_code)
        auth_header = getattr(exc, "auth_header", None)
        if auth_header:
            response["WWW-Authenticate"] = auth_header
        return response

    view = context.get("view")
    logger.exception(
        "unhandled_exception",
        view=type(view).__name__ if view is not None else None,
        exc_info=exc,
    )
    return error_response("Internal server error.", status.HTTP_500_INTERNAL_SERVER_ERROR)
