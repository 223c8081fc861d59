"""Unit tests for encoding errors to transport payloads and decoding them back."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from apierror.core.codec import CONTENT_TYPE
from apierror.core.codec import DecodeError
from apierror.core.codec import MalformedBodyError
from apierror.core.codec import SchemaViolationError
from apierror.core.codec import decode
from apierror.core.codec import decode_result
from apierror.core.codec import encode
from apierror.core.codec import encode_response
from apierror.core.codes import ErrorCode
from apierror.core.errors import ApiError
from apierror.schemas.error import BadRequest
from apierror.schemas.error import FieldViolation
from apierror.schemas.error import new_bad_request
from apierror.schemas.error import new_error_info
from apierror.schemas.error import new_localized_message

BAD_REQUEST_SNAPSHOT = (
    '{"code":"INVALID_ARGUMENT","message":"invalid input parameters","details":[{"@type":"BAD_REQUEST",'
    '"fieldViolations":[{"field":"email","description":"must be a valid email address"},'
    '{"field":"password","description":"must be at least 8 characters long"}]}]}'
)


def _bad_request_error() -> ApiError:
    return ApiError(
        ErrorCode.INVALID_ARGUMENT,
        "invalid input parameters",
        [
            new_bad_request(
                [
                    FieldViolation(field="email", description="must be a valid email address"),
                    FieldViolation(field="password", description="must be at least 8 characters long"),
                ]
            )
        ],
    )


def test_internal_error_encodes_to_500_with_empty_details() -> None:
    encoded = encode(ApiError(ErrorCode.INTERNAL, "internal error"))

    assert encoded.status_code == 500
    assert "application/json" in encoded.content_type
    assert encoded.body == b'{"code":"INTERNAL","message":"internal error","details":[]}'


def test_error_info_encodes_with_discriminator_first() -> None:
    error = ApiError(
        ErrorCode.FAILED_PRECONDITION,
        "the project's api is disabled",
        [new_error_info("API_DISABLED", {"resource": "projects/123"})],
    )

    encoded = encode(error)

    assert encoded.status_code == 400
    assert encoded.body.decode("utf-8") == (
        '{"code":"FAILED_PRECONDITION","message":"the project\'s api is disabled","details":'
        '[{"@type":"ERROR_INFO","reason":"API_DISABLED","metadata":{"resource":"projects/123"}}]}'
    )


def test_bad_request_encodes_to_snapshot() -> None:
    encoded = encode(_bad_request_error())

    assert encoded.status_code == 400
    assert encoded.content_type == CONTENT_TYPE
    assert encoded.body.decode("utf-8") == BAD_REQUEST_SNAPSHOT


def test_body_is_utf8_without_ascii_escaping() -> None:
    error = ApiError(ErrorCode.NOT_FOUND, "introuvable", [new_localized_message("fr-FR", "Élément introuvable")])

    body = encode(error).body

    assert "Élément".encode("utf-8") in body


def test_decode_reproduces_field_violations_in_order() -> None:
    decoded = decode(BAD_REQUEST_SNAPSHOT.encode("utf-8"))

    assert decoded.code is ErrorCode.INVALID_ARGUMENT
    assert decoded.message == "invalid input parameters"
    assert len(decoded.details) == 1
    bad_request = decoded.details[0]
    assert isinstance(bad_request, BadRequest)
    assert [(item.field, item.description) for item in bad_request.field_violations] == [
        ("email", "must be a valid email address"),
        ("password", "must be at least 8 characters long"),
    ]


@pytest.mark.parametrize(
    "error",
    [
        ApiError(ErrorCode.INTERNAL, "internal error"),
        ApiError(ErrorCode.UNAVAILABLE, "", []),
        ApiError(
            ErrorCode.PERMISSION_DENIED,
            "denied",
            [
                new_error_info("IAM_PERMISSION_DENIED", {"permission": "users.create"}),
                new_localized_message("en-US", "You may not create users."),
                new_bad_request([]),
            ],
        ),
    ],
)
def test_round_trip_preserves_value(error: ApiError) -> None:
    decoded = decode(encode(error).body)

    assert decoded == error
    assert decoded is not error


def test_round_trip_of_bad_request() -> None:
    error = _bad_request_error()

    assert decode(encode(error).body) == error


def test_decode_accepts_text_bodies() -> None:
    assert decode('{"code":"NOT_FOUND","message":"gone","details":[]}') == ApiError(ErrorCode.NOT_FOUND, "gone")


DEEPLY_NESTED_BODY = b'{"code":"INTERNAL","message":"x","details":' + b"[" * 200000 + b"]" * 200000 + b"}"


@pytest.mark.parametrize(
    "body",
    [
        b"not json",
        b"",
        b"\xc3\x28",
        b'{"code":',
        '{"code":"INTERNAL","message":"x","details":[]}'.encode("utf-16"),
        '{"code":"INTERNAL","message":"x","details":[]}'.encode("utf-32"),
        DEEPLY_NESTED_BODY,
    ],
    ids=["text", "empty", "invalid-utf8", "truncated", "utf16", "utf32", "deeply-nested"],
)
def test_non_json_bodies_are_malformed(body: bytes) -> None:
    with pytest.raises(MalformedBodyError) as excinfo:
        decode(body)

    assert isinstance(excinfo.value, DecodeError)
    assert excinfo.value.__cause__ is not None


def test_decode_result_reports_deeply_nested_bodies_as_malformed() -> None:
    result = decode_result(DEEPLY_NESTED_BODY)

    assert not result.ok
    assert isinstance(result.error, MalformedBodyError)
    assert isinstance(result.error.__cause__, RecursionError)


@pytest.mark.parametrize(
    "payload",
    [
        {"code": "NOT_A_CODE", "message": "x", "details": []},
        {"code": "INTERNAL", "message": 5, "details": []},
        {"code": "INTERNAL", "message": "x"},
        {"code": "INTERNAL", "message": "x", "details": {}},
        {"code": "INTERNAL", "message": "x", "details": [{"@type": "RETRY_INFO", "retryDelay": "5s"}]},
        {"code": "INTERNAL", "message": "x", "details": [{"reason": "NO_TYPE", "metadata": {}}]},
        {"code": "INTERNAL", "message": "x", "details": [{"@type": "ERROR_INFO", "reason": "R"}]},
        {"code": "INTERNAL", "message": "x", "details": [{"@type": "BAD_REQUEST", "fieldViolations": [{"field": 1}]}]},
        {"code": "INTERNAL", "message": "x", "details": [{"@type": "LOCALIZED_MESSAGE", "locale": "en-US"}]},
        ["INTERNAL", "x", []],
    ],
)
def test_shape_mismatches_are_schema_violations(payload: object) -> None:
    with pytest.raises(SchemaViolationError) as excinfo:
        decode(json.dumps(payload).encode("utf-8"))

    assert isinstance(excinfo.value.__cause__, ValidationError)


def test_status_embedded_in_body_is_ignored() -> None:
    decoded = decode(b'{"code":"NOT_FOUND","message":"gone","details":[],"status":500}')

    assert decoded == ApiError(ErrorCode.NOT_FOUND, "gone")
    assert decoded.status_code == 404


def test_decode_result_reports_success_and_failure_without_raising() -> None:
    success = decode_result(b'{"code":"UNKNOWN","message":"Unknown","details":[]}')
    failure = decode_result(b'{"code":"NOT_A_CODE","message":"x","details":[]}')

    assert success.ok
    assert success.value == ApiError(ErrorCode.UNKNOWN, "Unknown")
    assert not failure.ok
    assert failure.value is None
    assert isinstance(failure.error, SchemaViolationError)


def test_encode_response_sets_status_content_type_and_keeps_headers() -> None:
    response = encode_response(
        ApiError(ErrorCode.TOO_MANY_REQUESTS, "slow down"),
        headers={"Retry-After": "30", "Content-Type": "text/plain"},
    )

    assert response.status_code == 429
    assert response.headers["content-type"] == CONTENT_TYPE
    assert response.headers["retry-after"] == "30"
    assert response.body == b'{"code":"TOO_MANY_REQUESTS","message":"slow down","details":[]}'
