"""FastAPI router for view, status-view, selection and event endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from siteplan.core.types import Point
from siteplan.engine.events import InputEvent, UnknownEventError
from siteplan.engine.facade import SitePlanEngine

router = APIRouter()


class PointerRequest(BaseModel):
    x: float
    y: float


class WheelRequest(BaseModel):
    delta: float


class StatusViewRequest(BaseModel):
    on: bool


class SearchRequest(BaseModel):
    text: str = ""


def _engine(request: Request) -> SitePlanEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Site plan engine not available")
    return engine


def _view_payload(engine: SitePlanEngine) -> dict[str, Any]:
    state = engine.view.state
    return {
        "pan": state.pan.model_dump(),
        "zoom": state.zoom,
        "view_mode": state.view_mode.value,
        "north_up": state.north_up,
        "rotation_mode": state.rotation_mode.value,
        "dragging": engine.view.dragging,
        "transform": engine.get_screen_transform().to_dict(),
    }


def _selection_payload(engine: SitePlanEngine) -> dict[str, Any]:
    parcel = engine.selected_parcel()
    search = engine.interaction.search_text
    return {
        "selected": engine.interaction.selected,
        "parcel": parcel.model_dump() if parcel else None,
        "search": search,
        "matches": engine.interaction.matching_ids(engine.registry.ids) if search else [],
    }


# --- View ---


@router.get("/api/view")
async def get_view(request: Request) -> dict[str, Any]:
    return _view_payload(_engine(request))


@router.post("/api/view/drag/begin")
async def begin_drag(body: PointerRequest, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.view.begin_drag(Point(x=body.x, y=body.y))
    return _view_payload(engine)


@router.post("/api/view/drag/move")
async def continue_drag(body: PointerRequest, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.view.continue_drag(Point(x=body.x, y=body.y))
    return _view_payload(engine)


@router.post("/api/view/drag/end")
async def end_drag(request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.view.end_drag()
    return _view_payload(engine)


@router.post("/api/view/wheel")
async def wheel(body: WheelRequest, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.view.wheel(body.delta)
    return _view_payload(engine)


@router.post("/api/view/north-up")
async def toggle_north_up(request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.view.toggle_north_up()
    return _view_payload(engine)


@router.post("/api/view/mode")
async def toggle_view_mode(request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.view.toggle_view_mode()
    return _view_payload(engine)


@router.post("/api/view/reset")
async def reset_view(request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.view.reset()
    return _view_payload(engine)


# --- Status view ---


@router.get("/api/status-view")
async def get_status_view(request: Request) -> dict[str, Any]:
    engine = _engine(request)
    return {
        "on": engine.sequencer.status_view,
        "running": engine.sequencer.is_running,
        "pending": engine.sequencer.pending,
        "displayed": {str(n): s.value for n, s in engine.sequencer.snapshot().items()},
    }


@router.post("/api/status-view")
async def set_status_view(body: StatusViewRequest, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    started = engine.set_status_view(body.on)
    return {"on": engine.sequencer.status_view, "started": started}


# --- Selection and search ---


@router.get("/api/selection")
async def get_selection(request: Request) -> dict[str, Any]:
    return _selection_payload(_engine(request))


@router.post("/api/selection/{number}")
async def select_parcel(number: int, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    if not engine.select(number):
        raise HTTPException(status_code=404, detail=f"Parcel {number} not found")
    return _selection_payload(engine)


@router.delete("/api/selection")
async def clear_selection(request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.interaction.clear_selection()
    return _selection_payload(engine)


@router.post("/api/search")
async def set_search(body: SearchRequest, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.interaction.set_search(body.text)
    return _selection_payload(engine)


# --- Generic event dispatch ---


@router.post("/api/events")
async def dispatch_event(event: InputEvent, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    try:
        result = engine.dispatch(event)
    except UnknownEventError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"kind": event.kind, "result": result}
