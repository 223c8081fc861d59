"""Error detail payloads and the wire schema of the error envelope."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated
from typing import Literal
from typing import Union

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import StrictStr
from pydantic import TypeAdapter
from pydantic import field_serializer
from pydantic import field_validator

from apierror.core.codes import ErrorCode

ERROR_INFO = "ERROR_INFO"
BAD_REQUEST = "BAD_REQUEST"
LOCALIZED_MESSAGE = "LOCALIZED_MESSAGE"

DETAIL_TYPE_KEY = "@type"
KNOWN_DETAIL_TYPES = frozenset({ERROR_INFO, BAD_REQUEST, LOCALIZED_MESSAGE})


class _DetailModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ErrorInfo(_DetailModel):
    """Machine-readable cause of an error.

    ``reason`` is a terse UPPER_SNAKE_CASE identifier, unique within a domain
    of errors (``CPU_AVAILABILITY``, ``NO_STOCK``). ``metadata`` carries the
    dynamic context of the error; keys are lowerCamelCase by convention. Any
    value quoted in a localized message must also appear here.
    """

    type: Literal["ERROR_INFO"] = Field(default=ERROR_INFO, alias=DETAIL_TYPE_KEY)
    reason: StrictStr
    metadata: Mapping[StrictStr, StrictStr]

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("metadata")
    def _serialize_metadata(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)


class FieldViolation(BaseModel):
    """Single rejected request field.

    ``field`` is a path into the request body made of dot-separated names and
    bracketed indexes, e.g. ``emailAddresses[1].email``.
    """

    model_config = ConfigDict(frozen=True)

    field: StrictStr
    description: StrictStr


class BadRequest(_DetailModel):
    """Syntactic violations found in a client request."""

    type: Literal["BAD_REQUEST"] = Field(default=BAD_REQUEST, alias=DETAIL_TYPE_KEY)
    field_violations: tuple[FieldViolation, ...] = Field(alias="fieldViolations")


class LocalizedMessage(_DetailModel):
    """Error text already localized to a BCP-47 locale such as ``en-US``."""

    type: Literal["LOCALIZED_MESSAGE"] = Field(default=LOCALIZED_MESSAGE, alias=DETAIL_TYPE_KEY)
    locale: StrictStr
    message: StrictStr


ErrorDetail = Annotated[
    Union[ErrorInfo, BadRequest, LocalizedMessage],
    Field(discriminator="type"),
]

error_detail_adapter: TypeAdapter[ErrorDetail] = TypeAdapter(ErrorDetail)


class ApiErrorPayload(BaseModel):
    """Canonical wire envelope: ``{"code", "message", "details"}``."""

    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: StrictStr
    details: tuple[ErrorDetail, ...]


def new_error_info(reason: str, metadata: Mapping[str, str] | None = None) -> ErrorInfo:
    return ErrorInfo(reason=reason, metadata=dict(metadata or {}))


def new_bad_request(violations: Iterable[FieldViolation | Mapping[str, str]]) -> BadRequest:
    return BadRequest(field_violations=tuple(violations))


def new_localized_message(locale: str, message: str) -> LocalizedMessage:
    return LocalizedMessage(locale=locale, message=message)
