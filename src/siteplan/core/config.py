"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ViewConfig(BaseSettings):
    """Pan/zoom/tilt configuration."""

    model_config = {"env_prefix": "SITEPLAN_VIEW_"}

    zoom_min: float = 0.3
    zoom_max: float = 5.0
    zoom_in_ratio: float = 1.1
    zoom_out_ratio: float = 0.91
    viewport_width: float = 1280.0
    viewport_height: float = 800.0


class AnimationConfig(BaseSettings):
    """Status reveal/conceal sweep configuration."""

    model_config = {"env_prefix": "SITEPLAN_ANIMATION_"}

    stagger_ms: float = 14.0


class LayoutConfig(BaseSettings):
    """Parcel registry and site layout configuration."""

    model_config = {"env_prefix": "SITEPLAN_LAYOUT_"}

    site_plan_path: str | None = None


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "SITEPLAN_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8080

    view: ViewConfig = Field(default_factory=ViewConfig)
    animation: AnimationConfig = Field(default_factory=AnimationConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
