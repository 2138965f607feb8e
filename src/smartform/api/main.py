from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder

from smartform import __version__
from smartform.errors import SmartFormError
from smartform.providers.generation import GenerationService
from smartform.state.app_state import AppState

from .deps import error_response, new_request_id
from .http_logging import install_http_logging
from .routes.form import router as form_router
from .routes.health import router as health_router
from .routes.integration import router as integration_router
from .routes.submissions import router as submissions_router
from .routes.view import router as view_router

logger = logging.getLogger(__name__)


def _repo_root() -> Path:
    # `src/smartform/api/main.py` -> `<repo>`
    return Path(__file__).resolve().parents[3]


def create_app(
    *,
    state: Optional[AppState] = None,
    generation_service: Optional[GenerationService] = None,
) -> FastAPI:
    # Load `.env` + `.env.local` when present (local dev convenience).
    load_dotenv(_repo_root() / ".env", override=False)
    load_dotenv(_repo_root() / ".env.local", override=False)

    api_v1_prefix = "/v1/api"

    app = FastAPI(title="smartform", version=__version__)
    app.state.smartform = state if state is not None else AppState()
    app.state.generation_service = generation_service

    @app.exception_handler(SmartFormError)
    async def _smartform_error_handler(request: Request, exc: SmartFormError) -> JSONResponse:
        request_id = new_request_id("err")
        logger.warning(
            "%s requestId=%s path=%s err=%s", exc.code, request_id, request.url.path, exc
        )
        return error_response(exc.code, str(exc), request_id=request_id)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        request_id = new_request_id("val")
        logger.info("validation_error requestId=%s path=%s errors=%s", request_id, request.url.path, exc.errors())
        return error_response(
            "validation_error",
            "Request body did not match expected schema.",
            request_id=request_id,
            details=jsonable_encoder(exc.errors()),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = new_request_id("err")
        logger.exception("internal_error requestId=%s path=%s", request_id, request.url.path)
        return error_response("internal_error", "Unhandled server error.", request_id=request_id)

    app.include_router(health_router)
    app.include_router(view_router, prefix=api_v1_prefix)
    app.include_router(form_router, prefix=api_v1_prefix)
    app.include_router(submissions_router, prefix=api_v1_prefix)
    app.include_router(integration_router, prefix=api_v1_prefix)

    install_http_logging(app)
    return app


app = create_app()
