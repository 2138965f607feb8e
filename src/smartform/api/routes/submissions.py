from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import Response

from smartform.api.deps import get_state
from smartform.state.app_state import AppTab
from smartform.state.submissions import sheet_csv

router = APIRouter(tags=["submissions"])


@router.get("/submissions")
async def list_submissions(request: Request) -> Dict[str, Any]:
    return {"ok": True, **get_state(request).render_view(AppTab.SUBMISSIONS)}


@router.get("/submissions.csv")
async def export_submissions_csv(request: Request) -> Response:
    state = get_state(request)
    body = sheet_csv(state.submissions.records, state.form.fields)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="submissions.csv"'},
    )
