"""Adapters between validation engines, ApiError and the form view."""

from apierror.adapters.forms import form_validation_error_from_api_error
from apierror.adapters.forms import form_validation_error_from_validation_error
from apierror.adapters.validation import adapt
from apierror.adapters.validation import flatten_validation_error

__all__ = [
    "adapt",
    "flatten_validation_error",
    "form_validation_error_from_api_error",
    "form_validation_error_from_validation_error",
]
