"""Adapt validation-engine failures into the standard BadRequest detail."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from functools import singledispatch
from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from apierror.core.codes import ErrorCode
from apierror.core.errors import ApiError
from apierror.schemas.error import BadRequest
from apierror.schemas.error import FieldViolation

VALIDATION_ERROR_MESSAGE = "Validation Error"
MESSAGE_SEPARATOR = "; "
DEFAULT_ISSUE_MESSAGE = "Invalid value"

# Leading location parts FastAPI adds to say where a request value came from.
_REQUEST_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


@dataclass
class FlattenedErrors:
    """Validation failure split into form-level and per-field messages.

    ``field_errors`` keeps the order in which the engine first reported each
    field.
    """

    form_errors: list[str] = field(default_factory=list)
    field_errors: dict[str, list[str]] = field(default_factory=dict)

    def add(self, path: str, message: str) -> None:
        if path:
            self.field_errors.setdefault(path, []).append(message)
        else:
            self.form_errors.append(message)


@singledispatch
def flatten_validation_error(failure: Any) -> FlattenedErrors:
    """Flatten an engine-native validation failure.

    Supported inputs are pydantic ``ValidationError``, FastAPI
    ``RequestValidationError`` and sequences of issue mappings carrying
    either a ``loc`` sequence or a JSON-pointer ``instancePath``.
    """
    raise TypeError(f"Unsupported validation failure: {type(failure).__name__}")


@flatten_validation_error.register
def _(failure: ValidationError) -> FlattenedErrors:
    return _flatten_issues(failure.errors(), strip_request_prefix=False)


@flatten_validation_error.register
def _(failure: RequestValidationError) -> FlattenedErrors:
    return _flatten_issues(failure.errors(), strip_request_prefix=True)


@flatten_validation_error.register(list)
@flatten_validation_error.register(tuple)
def _(failure: Sequence[Mapping[str, Any]]) -> FlattenedErrors:
    return _flatten_issues(failure, strip_request_prefix=False)


def adapt(failure: Any) -> ApiError:
    """Wrap a validation failure as an INVALID_ARGUMENT error with one BadRequest detail."""
    flat = flatten_validation_error(failure)

    message = VALIDATION_ERROR_MESSAGE
    if flat.form_errors:
        message += ": " + MESSAGE_SEPARATOR.join(flat.form_errors)

    violations = [
        FieldViolation(field=path, description=MESSAGE_SEPARATOR.join(messages))
        for path, messages in flat.field_errors.items()
    ]
    cause = failure if isinstance(failure, BaseException) else None
    return ApiError(
        ErrorCode.INVALID_ARGUMENT,
        message,
        [BadRequest(field_violations=violations)],
        cause=cause,
    )


def _flatten_issues(issues: Iterable[Mapping[str, Any]], *, strip_request_prefix: bool) -> FlattenedErrors:
    flat = FlattenedErrors()
    for issue in issues:
        if "loc" in issue:
            parts = list(issue["loc"])
            if strip_request_prefix and parts and parts[0] in _REQUEST_LOCATION_PREFIXES:
                parts = parts[1:]
        else:
            parts = _split_json_pointer(str(issue.get("instancePath", "")))
        message = issue.get("msg") or issue.get("message") or DEFAULT_ISSUE_MESSAGE
        flat.add(format_field_path(parts), str(message))
    return flat


def format_field_path(parts: Iterable[Any]) -> str:
    """Render location parts as ``emailAddresses[1].email``."""
    path = ""
    for part in parts:
        if isinstance(part, int) and not isinstance(part, bool):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path


def _split_json_pointer(pointer: str) -> list[str | int]:
    if not pointer:
        return []
    parts: list[str | int] = []
    for token in pointer.lstrip("/").split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        parts.append(int(token) if token.isdigit() else token)
    return parts
