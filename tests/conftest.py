"""Shared test fixtures and helpers."""

from __future__ import annotations

from siteplan.animation.scheduler import ManualScheduler
from siteplan.core.config import Settings
from siteplan.engine.facade import SitePlanEngine


STAGGER_MS = 14.0


def build_engine(scheduler: ManualScheduler | None = None) -> tuple[SitePlanEngine, ManualScheduler]:
    """Build a default-plan engine driven by a manual scheduler.

    Returns the engine together with its scheduler so tests can advance
    virtual time.
    """
    scheduler = scheduler or ManualScheduler()
    engine = SitePlanEngine.from_settings(Settings(), scheduler=scheduler)
    return engine, scheduler
