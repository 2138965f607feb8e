"""
Pydantic models for form fields, submissions and AI analysis results.

These models are the single validating boundary for generation-service output.
"""

from smartform.schemas.analysis import AnalysisResult, EmailDraft
from smartform.schemas.form import FieldDefinition, FieldKind, FieldSpec, FieldUpdate, GeneratedField
from smartform.schemas.submission import SubmissionRecord, SubmissionValues

__all__ = [
    "AnalysisResult",
    "EmailDraft",
    "FieldDefinition",
    "FieldKind",
    "FieldSpec",
    "FieldUpdate",
    "GeneratedField",
    "SubmissionRecord",
    "SubmissionValues",
]
