"""Wire codec: ApiError to JSON transport payloads and back."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
import json

from pydantic import ValidationError
from starlette.responses import Response

from apierror.core.codes import status_for
from apierror.core.errors import ApiError
from apierror.schemas.error import ApiErrorPayload

CONTENT_TYPE = "application/json; charset=utf-8"


class DecodeError(ValueError):
    """Base error raised when a transport body cannot become an ApiError."""


class MalformedBodyError(DecodeError):
    """Raised when the body is not valid UTF-8 JSON."""


class SchemaViolationError(DecodeError):
    """Raised when the body is JSON but does not match the error envelope."""


@dataclass(frozen=True)
class EncodedError:
    """Transport payload produced by :func:`encode`."""

    status_code: int
    content_type: str
    body: bytes


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of :func:`decode_result`; exactly one of the fields is set."""

    value: ApiError | None = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def dumps_wire_json(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def encode(error: ApiError) -> EncodedError:
    """Encode an error into status, content type and canonical JSON body."""
    return EncodedError(
        status_code=status_for(error.code),
        content_type=CONTENT_TYPE,
        body=dumps_wire_json(error.to_wire_json()),
    )


def encode_response(error: ApiError, *, headers: Mapping[str, str] | None = None) -> Response:
    """Build a Starlette response for an error, forcing the JSON content type."""
    encoded = encode(error)
    merged = {key: value for key, value in (headers or {}).items() if key.lower() != "content-type"}
    merged["content-type"] = encoded.content_type
    return Response(content=encoded.body, status_code=encoded.status_code, headers=merged)


def decode(body: bytes | bytearray | str) -> ApiError:
    """Decode a UTF-8 transport body into a freshly built ApiError.

    Raises :class:`MalformedBodyError` when the body is not JSON and
    :class:`SchemaViolationError` when it does not match the envelope. Any
    ``status`` carried inside the body is ignored.
    """
    try:
        text = bytes(body).decode("utf-8") if isinstance(body, (bytes, bytearray)) else body
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
        raise MalformedBodyError("Error body is not valid JSON") from exc

    try:
        payload = ApiErrorPayload.model_validate(raw)
    except ValidationError as exc:
        raise SchemaViolationError("Error body does not match the error schema") from exc

    return ApiError(payload.code, payload.message, payload.details)


def decode_result(body: bytes | bytearray | str) -> DecodeResult:
    """Non-raising variant of :func:`decode`."""
    try:
        return DecodeResult(value=decode(body))
    except DecodeError as exc:
        return DecodeResult(error=exc)
