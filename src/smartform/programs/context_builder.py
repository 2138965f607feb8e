"""
Signature inputs for the generation tasks.

Each builder returns the keyword arguments of one program in
`smartform.programs.modules`; instructions live on the signatures.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence

from smartform.schemas.form import FieldDefinition, FieldKind

RECIPIENT_FROM_DATA = "Address it to the email given in the data."
RECIPIENT_GENERIC = "No email was given; keep the greeting generic."


def form_generation_inputs(description: str) -> Dict[str, Any]:
    return {
        "description": description.strip(),
        "allowed_kinds": [k.value for k in FieldKind],
    }


def submission_context_lines(values: Mapping[str, str], fields: Sequence[FieldDefinition]) -> str:
    return "\n".join(f"{f.label}: {values.get(f.id, '')}" for f in fields)


def recipient_hint(values: Mapping[str, str], fields: Sequence[FieldDefinition]) -> str:
    has_email = any(f.kind == FieldKind.EMAIL and values.get(f.id) for f in fields)
    return RECIPIENT_FROM_DATA if has_email else RECIPIENT_GENERIC


def analysis_inputs(values: Mapping[str, str], fields: Sequence[FieldDefinition]) -> Dict[str, Any]:
    return {
        "submission_data": submission_context_lines(values, fields),
        "recipient_hint": recipient_hint(values, fields),
    }


def integration_script_inputs(fields: Sequence[FieldDefinition], *, admin_email: str) -> Dict[str, Any]:
    return {
        "field_labels": [f.label for f in fields],
        "admin_email": admin_email,
    }
