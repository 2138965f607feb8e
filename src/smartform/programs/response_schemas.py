"""
JSON schemas of the structured generation outputs.

They are embedded in the output-field descriptions of the DSPy signatures
(`smartform.signatures.json_signatures`).

The schemas mirror the pydantic models in `smartform.schemas`; the models remain the
authority when decoding the reply.
"""

from __future__ import annotations

from typing import Any, Dict

from smartform.schemas.form import FieldKind

FIELD_KIND_VALUES = [k.value for k in FieldKind]

FORM_FIELDS_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "label": {"type": "string"},
            "kind": {"type": "string", "enum": FIELD_KIND_VALUES},
            "required": {"type": "boolean"},
            "options": {"type": "array", "items": {"type": "string"}},
            "placeholder": {"type": "string"},
        },
        "required": ["label", "kind", "required", "placeholder"],
    },
}

ANALYSIS_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "urgency": {"type": "string", "enum": ["Low", "Medium", "High"]},
        "category": {"type": "string"},
        "sentiment": {"type": "string", "enum": ["Positive", "Neutral", "Negative"]},
        "summary": {"type": "string"},
        "suggestedAction": {"type": "string"},
        "emailDraft": {
            "type": "object",
            "properties": {
                "subject": {"type": "string"},
                "body": {"type": "string"},
            },
            "required": ["subject", "body"],
        },
    },
    "required": ["urgency", "category", "sentiment", "summary", "suggestedAction", "emailDraft"],
}
