"""
AI orchestration for the form builder.

Three DSPy programs run through the generation service:
- `generate_form_from_description`: pasted questions -> ordered field specs (JSON)
- `analyze_submission`: submitted values -> `AnalysisResult` (JSON)
- `generate_integration_script`: field list -> webhook script text (plain code)

Structured replies go through `decode_generated_fields` / `decode_analysis`, the only
place where untrusted service text becomes typed data.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from smartform.errors import AIServiceError, EmptyResponseError, MissingCredentialError, SchemaViolationError
from smartform.programs.context_builder import (
    analysis_inputs,
    form_generation_inputs,
    integration_script_inputs,
)
from smartform.providers.generation import GenerationService, GenerationTask
from smartform.schemas.analysis import AnalysisResult
from smartform.schemas.form import FieldDefinition, GeneratedField

logger = logging.getLogger(__name__)

SCRIPT_ERROR_PLACEHOLDER = "// Error generating script. Please check API Key."
DEFAULT_ADMIN_EMAIL = "admin@example.com"

FORM_FIELDS_TASK = GenerationTask(name="form_fields", module="FormFieldsModule", output_field="fields_json")
ANALYSIS_TASK = GenerationTask(
    name="submission_analysis", module="SubmissionAnalysisModule", output_field="analysis_json"
)
SCRIPT_TASK = GenerationTask(name="integration_script", module="IntegrationScriptModule", output_field="script")


def _strip_code_fences(s: str) -> str:
    if not s:
        return s
    t = str(s).strip()
    t = re.sub(r"^```[a-zA-Z]*\s*", "", t)
    t = re.sub(r"\s*```$", "", t)
    return t.strip()


def _load_json(text: Optional[str], operation: str) -> Any:
    if text is None or not str(text).strip():
        raise EmptyResponseError(operation)
    raw = _strip_code_fences(str(text))
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SchemaViolationError(operation, f"invalid JSON ({exc.msg})", raw=raw[:500]) from exc


def decode_generated_fields(text: Optional[str]) -> List[GeneratedField]:
    obj = _load_json(text, "form generation")
    if not isinstance(obj, list):
        raise SchemaViolationError("form generation", f"expected a JSON array, got {type(obj).__name__}")
    out: List[GeneratedField] = []
    for idx, item in enumerate(obj):
        try:
            out.append(GeneratedField.model_validate(item))
        except ValidationError as exc:
            raise SchemaViolationError("form generation", f"item {idx}: {exc.errors()}") from exc
    return out


def decode_analysis(text: Optional[str]) -> AnalysisResult:
    obj = _load_json(text, "submission analysis")
    if not isinstance(obj, dict):
        raise SchemaViolationError("submission analysis", f"expected a JSON object, got {type(obj).__name__}")
    try:
        return AnalysisResult.model_validate(obj)
    except ValidationError as exc:
        raise SchemaViolationError("submission analysis", str(exc.errors())) from exc


def _service_or_default(service: Optional[GenerationService]) -> GenerationService:
    return service if service is not None else GenerationService()


def generate_form_from_description(
    text: str, *, service: Optional[GenerationService] = None
) -> List[GeneratedField]:
    """
    Infer form fields from pasted questions or a description.

    The caller assigns ids (see `FormStore.replace_all`); order follows the reply.
    """
    if not text or not text.strip():
        raise ValueError("description must not be empty")
    svc = _service_or_default(service)
    reply = svc.run(FORM_FIELDS_TASK, **form_generation_inputs(text))
    fields = decode_generated_fields(reply)
    logger.info("form generation produced %d fields", len(fields))
    return fields


def analyze_submission(
    values: Mapping[str, str],
    fields: Sequence[FieldDefinition],
    *,
    service: Optional[GenerationService] = None,
) -> AnalysisResult:
    svc = _service_or_default(service)
    reply = svc.run(ANALYSIS_TASK, **analysis_inputs(values, fields))
    analysis = decode_analysis(reply)
    logger.info("submission analysis urgency=%s sentiment=%s", analysis.urgency, analysis.sentiment)
    return analysis


def generate_integration_script(
    fields: Sequence[FieldDefinition],
    *,
    service: Optional[GenerationService] = None,
    admin_email: Optional[str] = None,
) -> str:
    """
    Return webhook script text for the given fields.

    A missing credential still raises `MissingCredentialError`; any other service
    failure returns `SCRIPT_ERROR_PLACEHOLDER` so the integration view stays usable.
    """
    svc = _service_or_default(service)
    email = admin_email or os.getenv("SMARTFORM_ADMIN_EMAIL") or DEFAULT_ADMIN_EMAIL
    try:
        reply = svc.run(SCRIPT_TASK, **integration_script_inputs(fields, admin_email=email))
    except MissingCredentialError:
        raise
    except AIServiceError as exc:
        logger.warning("integration script generation failed: %s", exc)
        return SCRIPT_ERROR_PLACEHOLDER
    code = _strip_code_fences(reply or "")
    if not code:
        logger.warning("integration script generation returned no text")
        return SCRIPT_ERROR_PLACEHOLDER
    return code
