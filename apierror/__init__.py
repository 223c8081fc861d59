"""Standard API error model, wire codec, and validation adapters."""

from apierror.core.codec import CONTENT_TYPE
from apierror.core.codec import DecodeError
from apierror.core.codec import MalformedBodyError
from apierror.core.codec import SchemaViolationError
from apierror.core.codec import decode
from apierror.core.codec import decode_result
from apierror.core.codec import encode
from apierror.core.codec import encode_response
from apierror.core.codes import ErrorCode
from apierror.core.codes import status_for
from apierror.core.errors import ApiError
from apierror.core.errors import is_api_error
from apierror.schemas.error import BadRequest
from apierror.schemas.error import ErrorInfo
from apierror.schemas.error import FieldViolation
from apierror.schemas.error import LocalizedMessage

__all__ = [
    "CONTENT_TYPE",
    "ApiError",
    "BadRequest",
    "DecodeError",
    "ErrorCode",
    "ErrorInfo",
    "FieldViolation",
    "LocalizedMessage",
    "MalformedBodyError",
    "SchemaViolationError",
    "decode",
    "decode_result",
    "encode",
    "encode_response",
    "is_api_error",
    "status_for",
]
