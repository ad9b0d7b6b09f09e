"""FastAPI router for parcel, layout and scene endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request

from siteplan.engine.facade import SitePlanEngine

router = APIRouter()


def _engine(request: Request) -> SitePlanEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Site plan engine not available")
    return engine


@router.get("/api/parcels")
async def list_parcels(request: Request, status: str | None = None) -> list[dict[str, Any]]:
    """List parcels, optionally filtered by true status."""
    engine = _engine(request)
    parcels = engine.registry.get_all()
    if status:
        parcels = [p for p in parcels if p.status.value == status]
    return [p.model_dump() for p in parcels]


@router.get("/api/parcels/{number}")
async def get_parcel(number: int, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    parcel = engine.get_parcel(number)
    if parcel is None:
        raise HTTPException(status_code=404, detail=f"Parcel {number} not found")
    return parcel.model_dump()


@router.get("/api/parcels/{number}/cell")
async def get_parcel_cell(number: int, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    cell = engine.get_cell(number)
    if cell is None:
        raise HTTPException(status_code=404, detail=f"Parcel {number} not found")
    return cell.model_dump()


@router.get("/api/layout")
async def get_layout(request: Request) -> dict[str, Any]:
    """Sectors, canvas size and the bounding box of every cell."""
    engine = _engine(request)
    width, height = engine.canvas_size
    return {
        "canvas": {"width": width, "height": height},
        "bounds": engine.layout.bounds().model_dump(),
        "sectors": [s.model_dump() for s in engine.layout.sectors],
    }


@router.get("/api/scene")
async def get_scene(request: Request) -> dict[str, Any]:
    """Every parcel's draw state plus the current screen transform."""
    engine = _engine(request)
    return {
        "status_view": engine.sequencer.status_view,
        "transform": engine.get_screen_transform().to_dict(),
        "parcels": [v.model_dump() for v in engine.scene()],
    }


@router.get("/api/pick")
async def pick_parcel(x: float, y: float, request: Request) -> dict[str, Any]:
    """Resolve a screen point to the parcel under it."""
    engine = _engine(request)
    return {"parcel": engine.pick(x, y)}
