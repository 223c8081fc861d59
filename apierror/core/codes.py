"""Closed error-code taxonomy and its HTTP status mapping."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType

from fastapi import status


class ErrorCode(str, Enum):
    """Canonical error codes shared by every service speaking the error contract."""

    # The client specified an invalid argument regardless of the state of the system.
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    # The system is not in a state required for the operation's execution,
    # e.g. the directory to be deleted is non-empty.
    FAILED_PRECONDITION = "FAILED_PRECONDITION"
    # The requested entity was not found.
    NOT_FOUND = "NOT_FOUND"
    # The entity that a client tried to create already exists.
    ALREADY_EXISTS = "ALREADY_EXISTS"
    # The caller does not have valid authentication credentials for the operation.
    UNAUTHENTICATED = "UNAUTHENTICATED"
    # The caller does not have permission to execute the specified operation.
    PERMISSION_DENIED = "PERMISSION_DENIED"
    # The caller has exhausted their rate limit or quota.
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    # Some part of the underlying system is broken.
    INTERNAL = "INTERNAL"
    # The application does not know how to handle the caught error.
    UNKNOWN = "UNKNOWN"
    # The service is currently unavailable. Can be retried with a backoff.
    UNAVAILABLE = "UNAVAILABLE"

    def __str__(self) -> str:
        return self.value

    @property
    def http_status(self) -> int:
        """HTTP status code used when this code travels over the wire."""
        return status_for(self)


HTTP_STATUS_BY_CODE = MappingProxyType(
    {
        ErrorCode.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
        ErrorCode.FAILED_PRECONDITION: status.HTTP_400_BAD_REQUEST,
        ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        ErrorCode.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
        ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
        ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
        ErrorCode.TOO_MANY_REQUESTS: status.HTTP_429_TOO_MANY_REQUESTS,
        ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    }
)

_missing = [code.value for code in ErrorCode if code not in HTTP_STATUS_BY_CODE]
if _missing:
    raise RuntimeError(f"Error codes without an HTTP status mapping: {', '.join(_missing)}")

RETRYABLE_CODES = frozenset({ErrorCode.UNAVAILABLE})


def coerce_code(code: ErrorCode | str) -> ErrorCode:
    """Return the enum member for a code or its wire token."""
    if isinstance(code, ErrorCode):
        return code
    try:
        return ErrorCode(code)
    except ValueError:
        raise ValueError(f"Unknown error code `{code}`") from None


def status_for(code: ErrorCode | str) -> int:
    """Return the HTTP status for an error code."""
    return HTTP_STATUS_BY_CODE[coerce_code(code)]


def is_retryable(code: ErrorCode | str) -> bool:
    """Whether callers may retry a request that failed with ``code``."""
    return coerce_code(code) in RETRYABLE_CODES
