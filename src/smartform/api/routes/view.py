from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

from smartform.api.deps import get_state
from smartform.state.app_state import AppTab

router = APIRouter(tags=["view"])


@router.get("/state")
async def state_summary(request: Request) -> Dict[str, Any]:
    return {"ok": True, **get_state(request).summary()}


@router.get("/view")
async def active_view(request: Request) -> Dict[str, Any]:
    """Payload of whichever view is active."""
    return {"ok": True, "view": get_state(request).render_view()}


@router.put("/view/{tab}")
async def select_view(tab: AppTab, request: Request) -> Dict[str, Any]:
    state = get_state(request)
    state.select_tab(tab)
    return {"ok": True, "view": state.render_view()}
