"""FastAPI application exposing the site-plan engine.

The presentation surface reads parcel geometry, the screen transform and
per-parcel draw state from here and posts gestures, clicks, search input
and the status toggle back.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from siteplan.core.config import Settings
from siteplan.engine.facade import SitePlanEngine
from siteplan.web.parcel_router import router as parcel_router
from siteplan.web.view_router import router as view_router

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    parcels: int
    version: str = "0.1.0"


def create_app(
    settings: Settings | None = None,
    engine: SitePlanEngine | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with an engine driven by a manual scheduler.

    Args:
        settings: Application settings. Defaults to Settings().
        engine: Optional pre-built engine. Defaults to one built from
            ``settings`` with an asyncio scheduler.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = engine.settings if engine is not None else Settings()

    if engine is None:
        engine = SitePlanEngine.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down; cancelling status sweep")
        engine.close()

    app = FastAPI(
        title="Site Plan Map",
        description="Interactive site-plan layout and view engine",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.engine = engine

    app.include_router(parcel_router)
    app.include_router(view_router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service="siteplan",
            parcels=len(engine.registry),
        )

    return app


def main() -> None:
    """Run the service with uvicorn, logging at ``Settings.log_level``."""
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
