"""
Error kinds raised by the SmartForm core.

Every error carries a stable `code` string; the HTTP layer uses it as the
`error` key of its failure envelope.
"""

from __future__ import annotations

from typing import Iterable, Optional


class SmartFormError(Exception):
    code = "smartform_error"


class AIServiceError(SmartFormError):
    """Raised when a generation-service call cannot produce a usable result."""

    code = "ai_service_error"


class MissingCredentialError(AIServiceError):
    code = "missing_credential"

    def __init__(self, env_names: Iterable[str]) -> None:
        self.env_names = tuple(env_names)
        names = " or ".join(self.env_names) or "an API key"
        super().__init__(f"API key is missing: set {names}")


class ServiceConfigError(AIServiceError):
    code = "service_config_error"


class EmptyResponseError(AIServiceError):
    code = "empty_response"

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"No response text from the generation service ({operation})")


class SchemaViolationError(AIServiceError):
    code = "schema_violation"

    def __init__(self, operation: str, detail: str, raw: Optional[str] = None) -> None:
        self.operation = operation
        self.detail = detail
        self.raw = raw
        super().__init__(f"Generation service returned malformed {operation} output: {detail}")


class TransportFailureError(AIServiceError):
    code = "transport_failure"


class FormError(SmartFormError):
    code = "form_error"


class FieldNotFoundError(FormError):
    code = "field_not_found"

    def __init__(self, field_id: str) -> None:
        self.field_id = field_id
        super().__init__(f"No field with id {field_id!r}")


class DuplicateFieldIdError(FormError):
    code = "duplicate_field_id"

    def __init__(self, field_id: str) -> None:
        self.field_id = field_id
        super().__init__(f"A field with id {field_id!r} already exists")


class SubmissionError(SmartFormError):
    code = "submission_error"


class UnknownFieldError(SubmissionError):
    code = "unknown_field"

    def __init__(self, field_ids: Iterable[str]) -> None:
        self.field_ids = sorted(field_ids)
        super().__init__(f"Values reference fields not in the form: {', '.join(self.field_ids)}")


class MissingRequiredValueError(SubmissionError):
    code = "missing_required_value"

    def __init__(self, labels: Iterable[str]) -> None:
        self.labels = list(labels)
        super().__init__(f"Required fields are empty: {', '.join(self.labels)}")
