from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import anyio
from fastapi import APIRouter, Body, Request

from smartform.api.deps import get_service, get_state
from smartform.programs.orchestrator import analyze_submission, generate_form_from_description
from smartform.schemas.api_models import AddFieldRequest, ImportRequest, SubmitRequest
from smartform.schemas.form import FieldDefinition, FieldUpdate, default_field
from smartform.state.app_state import preview_field

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/form", tags=["form"])


def _fields_payload(request: Request) -> Dict[str, Any]:
    form = get_state(request).form
    return {
        "ok": True,
        "revision": form.revision,
        "fields": [f.model_dump(mode="json") for f in form.fields],
    }


@router.get("/fields")
async def list_fields(request: Request) -> Dict[str, Any]:
    return _fields_payload(request)


@router.post("/fields", status_code=201)
async def add_field(request: Request, body: Optional[AddFieldRequest] = Body(default=None)) -> Dict[str, Any]:
    field = default_field()
    if body is not None:
        overrides = body.model_dump(exclude_none=True)
        if overrides:
            field = FieldDefinition.model_validate({**field.model_dump(), **overrides})
    added = get_state(request).form.add(field)
    return {**_fields_payload(request), "field": added.model_dump(mode="json")}


@router.patch("/fields/{field_id}")
async def update_field(field_id: str, changes: FieldUpdate, request: Request) -> Dict[str, Any]:
    updated = get_state(request).form.update(field_id, changes)
    return {**_fields_payload(request), "field": updated.model_dump(mode="json")}


@router.delete("/fields/{field_id}")
async def remove_field(field_id: str, request: Request) -> Dict[str, Any]:
    get_state(request).form.remove(field_id)
    return _fields_payload(request)


@router.post("/import/open")
async def open_import_dialog(request: Request) -> Dict[str, Any]:
    get_state(request).import_dialog_open = True
    return {"ok": True, "importDialogOpen": True}


@router.post("/import/close")
async def close_import_dialog(request: Request) -> Dict[str, Any]:
    get_state(request).import_dialog_open = False
    return {"ok": True, "importDialogOpen": False}


@router.post("/import")
async def import_from_description(body: ImportRequest, request: Request) -> Dict[str, Any]:
    """
    AI import: infer fields from `description` and replace the whole form.

    The form is only touched after the generation call succeeds.
    """
    state = get_state(request)
    service = get_service(request)
    state.importing = True
    try:
        generated = await anyio.to_thread.run_sync(
            lambda: generate_form_from_description(body.description, service=service)
        )
    finally:
        state.importing = False

    state.form.replace_all(generated)
    state.import_dialog_open = False
    logger.info("form replaced by AI import fields=%d", len(generated))
    return _fields_payload(request)


@router.get("/preview")
async def preview(request: Request) -> Dict[str, Any]:
    fields = get_state(request).form.fields
    return {"ok": True, "fields": [preview_field(f) for f in fields]}


@router.post("/submit", status_code=201)
async def submit(body: SubmitRequest, request: Request) -> Dict[str, Any]:
    """
    Validate values, run the AI analysis, then append a processed record.

    On analysis failure the error envelope is returned and no record is stored.
    """
    state = get_state(request)
    service = get_service(request)
    fields = state.form.fields
    pipeline = state.pipeline
    values = pipeline.prepare(body.values, fields)

    state.submitting = True
    try:
        analysis = await anyio.to_thread.run_sync(
            lambda: analyze_submission(values, fields, service=service)
        )
    finally:
        state.submitting = False

    record = pipeline.commit(values, analysis)
    return {"ok": True, "record": record.model_dump(mode="json", by_alias=True)}
