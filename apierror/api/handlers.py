"""Global exception handlers that put every failure in the standard error envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from apierror.adapters.validation import adapt
from apierror.core.codec import encode_response
from apierror.core.codes import ErrorCode
from apierror.core.config import ErrorHandlingSettings
from apierror.core.config import get_error_handling_settings
from apierror.core.errors import ApiError
from apierror.core.errors import serialize_for_log

logger = logging.getLogger(__name__)

_CODE_BY_HTTP_STATUS = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.INVALID_ARGUMENT,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHENTICATED,
    status.HTTP_403_FORBIDDEN: ErrorCode.PERMISSION_DENIED,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_409_CONFLICT: ErrorCode.ALREADY_EXISTS,
    status.HTTP_429_TOO_MANY_REQUESTS: ErrorCode.TOO_MANY_REQUESTS,
    status.HTTP_503_SERVICE_UNAVAILABLE: ErrorCode.UNAVAILABLE,
}

# Statuses that must not carry a response body.
_BODYLESS_STATUSES = frozenset({status.HTTP_204_NO_CONTENT, status.HTTP_304_NOT_MODIFIED})


def error_code_for_http_status(status_code: int) -> ErrorCode:
    """Pick the closest error code for a bare HTTP status."""
    code = _CODE_BY_HTTP_STATUS.get(status_code)
    if code is not None:
        return code
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ErrorCode.INTERNAL
    return ErrorCode.UNKNOWN


def _log_error(request: Request, exc: BaseException, status_code: int, settings: ErrorHandlingSettings) -> None:
    is_client_error = status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
    if is_client_error and not settings.log_client_errors:
        return

    level = logging.WARNING if is_client_error else logging.ERROR
    logger.log(
        level,
        "%s %s failed with status=%s: %s",
        request.method,
        request.url.path,
        status_code,
        exc,
        extra={"err": serialize_for_log(exc, include_causes=settings.include_causes_in_logs)},
    )


async def api_error_handler(request: Request, exc: ApiError) -> Response:
    """Return explicit domain errors as-is."""
    response = encode_response(exc)
    _log_error(request, exc, response.status_code, get_error_handling_settings())
    return response


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """Turn FastAPI request validation failures into INVALID_ARGUMENT with field violations."""
    error = adapt(exc)
    response = encode_response(error)
    _log_error(request, error, response.status_code, get_error_handling_settings())
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Wrap bare HTTP exceptions while keeping their original status."""
    headers = getattr(exc, "headers", None)
    if exc.status_code in _BODYLESS_STATUSES:
        return Response(status_code=exc.status_code, headers=headers)

    message = exc.detail if isinstance(exc.detail, str) and exc.detail else "Request failed"
    error = ApiError(error_code_for_http_status(exc.status_code), message, cause=exc)
    response = encode_response(error, headers=headers)
    response.status_code = exc.status_code
    _log_error(request, error, exc.status_code, get_error_handling_settings())
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    """Hide unclassified failures behind UNKNOWN; details only go to the logs."""
    settings = get_error_handling_settings()
    error = ApiError(ErrorCode.UNKNOWN, settings.unknown_error_message, cause=exc)
    response = encode_response(error)
    _log_error(request, error, response.status_code, settings)
    return response


def register_error_handlers(app: FastAPI) -> None:
    """Attach the error-envelope handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
