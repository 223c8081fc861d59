"""Error-handling configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_UNKNOWN_ERROR_MESSAGE = "Unknown"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got `{raw}`")


@dataclass(frozen=True)
class ErrorHandlingSettings:
    """Runtime settings for the HTTP error boundary."""

    log_level: str
    unknown_error_message: str
    log_client_errors: bool
    include_causes_in_logs: bool

    def safe_for_logging(self) -> dict[str, str | bool]:
        """Return error-handling settings safe for logs."""
        return {
            "log_level": self.log_level,
            "unknown_error_message": self.unknown_error_message,
            "log_client_errors": self.log_client_errors,
            "include_causes_in_logs": self.include_causes_in_logs,
        }


@lru_cache(maxsize=1)
def get_error_handling_settings() -> ErrorHandlingSettings:
    """Load error-handling settings from the environment."""
    return ErrorHandlingSettings(
        log_level=os.getenv("APIERROR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        unknown_error_message=os.getenv("APIERROR_UNKNOWN_MESSAGE", DEFAULT_UNKNOWN_ERROR_MESSAGE),
        log_client_errors=_get_bool_env("APIERROR_LOG_CLIENT_ERRORS", True),
        include_causes_in_logs=_get_bool_env("APIERROR_LOG_CAUSES", True),
    )
