from __future__ import annotations

import time
import uuid
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)

from smartform.providers.generation import GenerationService
from smartform.state.app_state import AppState

# Error code -> HTTP status. Unknown codes map to 500.
ERROR_STATUS: Dict[str, int] = {
    "missing_credential": HTTP_500_INTERNAL_SERVER_ERROR,
    "service_config_error": HTTP_500_INTERNAL_SERVER_ERROR,
    "empty_response": HTTP_502_BAD_GATEWAY,
    "schema_violation": HTTP_502_BAD_GATEWAY,
    "transport_failure": HTTP_502_BAD_GATEWAY,
    "ai_service_error": HTTP_502_BAD_GATEWAY,
    "field_not_found": HTTP_404_NOT_FOUND,
    "duplicate_field_id": HTTP_422_UNPROCESSABLE_ENTITY,
    "unknown_field": HTTP_422_UNPROCESSABLE_ENTITY,
    "missing_required_value": HTTP_422_UNPROCESSABLE_ENTITY,
    "validation_error": HTTP_422_UNPROCESSABLE_ENTITY,
    "stale_script": HTTP_409_CONFLICT,
}


def get_state(request: Request) -> AppState:
    return request.app.state.smartform


def get_service(request: Request) -> Optional[GenerationService]:
    return getattr(request.app.state, "generation_service", None)


def new_request_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def error_response(code: str, message: str, *, request_id: str, details: Any = None) -> JSONResponse:
    content: Dict[str, Any] = {
        "ok": False,
        "error": code,
        "message": message,
        "requestId": request_id,
    }
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=ERROR_STATUS.get(code, HTTP_500_INTERNAL_SERVER_ERROR), content=content)
