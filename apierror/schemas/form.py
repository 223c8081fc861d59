"""Flattened form/field error view for UI consumption; never transported."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence


class FormValidationError(Exception):
    """Form-level messages plus per-field messages, ready to render next to inputs."""

    def __init__(self, form_errors: Sequence[str], field_errors: Mapping[str, Sequence[str]]) -> None:
        super().__init__("FormValidationError")
        self.form_errors = list(form_errors)
        self.field_errors = {field: list(errors) for field, errors in field_errors.items()}

    def joined_form_error(self, separator: str = "; ") -> str:
        return separator.join(self.form_errors)

    def joined_field_errors(self, separator: str = "; ") -> dict[str, str]:
        """Return one string per field, skipping fields without messages."""
        return {field: separator.join(errors) for field, errors in self.field_errors.items() if errors}

    def __str__(self) -> str:
        fields = "; ".join(f"{field}: {', '.join(errors)}" for field, errors in self.field_errors.items())
        return f"FormValidationError: {', '.join(self.form_errors)}; Fields: {fields}"
