"""Client-side helpers for reading error envelopes from HTTP responses."""

from __future__ import annotations

import requests

from apierror.core.codec import DecodeError
from apierror.core.codec import decode
from apierror.core.errors import ApiError


class ApiErrorResponseError(DecodeError):
    """Raised when a failed response does not carry a valid error envelope."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def decode_response(response: requests.Response) -> ApiError:
    """Decode the body of an already received response.

    Any response object exposing ``content`` works (``httpx.Response`` too).
    The transport status stays on the response; it is never read from the body.
    """
    return decode(response.content)


def raise_for_api_error(response: requests.Response) -> None:
    """Raise the decoded ApiError when ``response`` reports a failure status."""
    if response.status_code < 400:
        return

    try:
        error = decode_response(response)
    except DecodeError as exc:
        raise ApiErrorResponseError(
            f"Response with status {response.status_code} does not carry an error envelope",
            status_code=response.status_code,
        ) from exc
    raise error
