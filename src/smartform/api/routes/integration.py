from __future__ import annotations

import logging
from typing import Any

import anyio
from fastapi import APIRouter, Request

from smartform.api.deps import error_response, get_service, get_state, new_request_id
from smartform.errors import MissingCredentialError
from smartform.programs.orchestrator import SCRIPT_ERROR_PLACEHOLDER, generate_integration_script

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/integration", tags=["integration"])


@router.get("/script")
async def integration_script(request: Request) -> Any:
    """
    Webhook script for the current fields.

    Never fails on generation errors: the placeholder comment is returned instead.
    If the form changes while the script is generated, the result is discarded (409).
    """
    state = get_state(request)
    labels = [f.label for f in state.form.fields]
    cached = state.cached_script()
    if cached is not None:
        return {"ok": True, "script": cached, "fieldLabels": labels, "cached": True}

    service = get_service(request)
    revision = state.form.revision
    fields = state.form.fields
    state.generating_script = True
    try:
        script = await anyio.to_thread.run_sync(lambda: generate_integration_script(fields, service=service))
    except MissingCredentialError as exc:
        logger.warning("integration script unavailable: %s", exc)
        script = SCRIPT_ERROR_PLACEHOLDER
    finally:
        state.generating_script = False

    if revision != state.form.revision:
        logger.info("integration script discarded: form changed during generation")
        return error_response(
            "stale_script",
            "The form changed while the script was generated; reload the integration view.",
            request_id=new_request_id("int"),
        )

    if script != SCRIPT_ERROR_PLACEHOLDER:
        state.store_script(revision, script)
    return {
        "ok": True,
        "script": script,
        "fieldLabels": [f.label for f in fields],
        "cached": False,
    }
