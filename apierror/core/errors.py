"""The ApiError value and its log-oriented serialization."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from types import MappingProxyType
from typing import Any
from typing import Literal
from typing import Union
import json
import traceback

from pydantic import BaseModel

from apierror.core.codes import ErrorCode
from apierror.core.codes import coerce_code
from apierror.core.codes import status_for
from apierror.schemas.error import DETAIL_TYPE_KEY
from apierror.schemas.error import KNOWN_DETAIL_TYPES
from apierror.schemas.error import BadRequest
from apierror.schemas.error import ErrorInfo
from apierror.schemas.error import LocalizedMessage
from apierror.schemas.error import error_detail_adapter

DetailLike = Union[BaseModel, Mapping[str, Any]]

KNOWN_DETAIL_MODELS = (ErrorInfo, BadRequest, LocalizedMessage)


class ApiError(Exception):
    """Domain error carried across service boundaries.

    The value is immutable once built. Two errors are equal when their code,
    message and details match; ``cause`` and tracebacks stay local and never
    reach the wire.
    """

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        details: Sequence[DetailLike] | None = None,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self._code = coerce_code(code)
        self._message = message
        self._details = tuple(_normalize_detail(detail) for detail in details or ())
        self._cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> tuple[DetailLike, ...]:
        return self._details

    @property
    def cause(self) -> BaseException | None:
        return self._cause

    @property
    def status_code(self) -> int:
        return status_for(self._code)

    def to_display_string(self) -> str:
        return f"{type(self).__name__}[{self._code.value}]: {self._message}"

    def to_wire_json(self) -> dict[str, Any]:
        """Return the ``{"code", "message", "details"}`` wire object."""
        return {
            "code": self._code.value,
            "message": self._message,
            "details": [detail_to_wire(detail) for detail in self._details],
        }

    def to_log_dict(self, *, include_causes: bool = True) -> dict[str, Any]:
        return serialize_for_log(self, include_causes=include_causes)

    @staticmethod
    def serialize(error: ApiError, to: Literal["json", "log"] | None = None) -> Any:
        """Serialize for the wire (``json``), for logs (``log``), or as display text."""
        if to == "json":
            return error.to_wire_json()
        if to == "log":
            return error.to_log_dict()
        return error.to_display_string()

    def __str__(self) -> str:
        return self.to_display_string()

    def __repr__(self) -> str:
        details = [detail_to_wire(detail) for detail in self._details]
        return f"{type(self).__name__}(code={self._code.value!r}, message={self._message!r}, details={details!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return (self._code, self._message, self._details) == (other._code, other._message, other._details)

    def __hash__(self) -> int:
        wire_details = json.dumps([detail_to_wire(detail) for detail in self._details], sort_keys=True, default=repr)
        return hash((self._code, self._message, wire_details))

    def __reduce__(self) -> tuple[Any, ...]:
        details = [
            detail_to_wire(detail) if isinstance(detail, (Mapping, *KNOWN_DETAIL_MODELS)) else detail
            for detail in self._details
        ]
        return (_restore, (type(self), self._code, self._message, details))


class NotFoundError(ApiError):
    """Convenience error for missing resources."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: Sequence[DetailLike] | None = None,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(ErrorCode.NOT_FOUND, message, details, cause=cause)


def _restore(cls: type[ApiError], code: ErrorCode, message: str, details: list[DetailLike]) -> ApiError:
    error = cls.__new__(cls)
    ApiError.__init__(error, code, message, details)
    return error


def is_api_error(value: object) -> bool:
    """Whether ``value`` is a domain error that may be encoded for the wire."""
    return isinstance(value, ApiError)


def _normalize_detail(detail: DetailLike) -> DetailLike:
    if isinstance(detail, BaseModel):
        return detail
    if isinstance(detail, Mapping):
        if detail.get(DETAIL_TYPE_KEY) in KNOWN_DETAIL_TYPES:
            return error_detail_adapter.validate_python(dict(detail))
        # Unknown variants pass through untouched.
        return MappingProxyType(dict(detail))
    raise TypeError(f"Unsupported error detail type: {type(detail).__name__}")


def detail_to_wire(detail: DetailLike) -> dict[str, Any]:
    if isinstance(detail, BaseModel):
        return detail.model_dump(mode="json", by_alias=True)
    return dict(detail)


def serialize_for_log(exc: BaseException, *, include_causes: bool = True) -> dict[str, Any]:
    """Log-oriented view of an exception, including its stack and cause chain.

    This is the only serialization that carries stacks and causes; it must
    not be sent to clients.
    """
    return _serialize_for_log(exc, include_causes=include_causes, seen=set())


def _serialize_for_log(exc: BaseException, *, include_causes: bool, seen: set[int]) -> dict[str, Any]:
    seen.add(id(exc))
    payload: dict[str, Any] = {
        "type": type(exc).__name__,
        "message": _own_message(exc),
        "stack": _format_stack(exc),
    }
    if isinstance(exc, ApiError):
        payload["code"] = exc.code.value
        payload["details"] = [detail_to_wire(detail) for detail in exc.details]

    cause = _cause_of(exc)
    if include_causes and cause is not None and id(cause) not in seen:
        cause_payload = _serialize_for_log(cause, include_causes=include_causes, seen=seen)
        # "outer: inner: innermost", like the message of a chained error report.
        payload["message"] = f"{payload['message']}: {cause_payload['message']}"
        payload["cause"] = cause_payload
    return payload


def _own_message(exc: BaseException) -> str:
    return exc.message if isinstance(exc, ApiError) else str(exc)


def _cause_of(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


def _format_stack(exc: BaseException) -> str | None:
    if exc.__traceback__ is None:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__, chain=False))
