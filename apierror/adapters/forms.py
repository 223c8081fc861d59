"""Project errors onto the flattened form/field view used by UIs."""

from __future__ import annotations

from typing import Any

from apierror.adapters.validation import flatten_validation_error
from apierror.core.errors import ApiError
from apierror.schemas.error import BadRequest
from apierror.schemas.form import FormValidationError


def form_validation_error_from_api_error(error: ApiError) -> FormValidationError:
    """Show the error itself as a form error and every field violation under its field."""
    field_errors: dict[str, list[str]] = {}
    for detail in error.details:
        if isinstance(detail, BadRequest):
            for violation in detail.field_violations:
                field_errors[violation.field] = [violation.description]

    return FormValidationError([f"{error.code.value}: {error.message}"], field_errors)


def form_validation_error_from_validation_error(failure: Any) -> FormValidationError:
    flat = flatten_validation_error(failure)
    return FormValidationError(flat.form_errors, flat.field_errors)
