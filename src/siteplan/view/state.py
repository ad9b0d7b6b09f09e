"""View state and the gesture-to-transform state machine.

Gesture operations never raise. Zoom requests outside the configured
range are clamped and non-finite pointer positions or wheel deltas are
ignored.
"""

from __future__ import annotations

import logging
import math

from pydantic import BaseModel, Field

from siteplan.core.config import ViewConfig
from siteplan.core.types import Point, RotationMode, ViewMode
from siteplan.view.transform import ScreenTransform

logger = logging.getLogger(__name__)


class ViewState(BaseModel):
    """Pan, zoom and perspective mode of the map view."""

    pan: Point = Field(default_factory=Point)
    zoom: float = 1.0
    view_mode: ViewMode = ViewMode.TILTED
    north_up: bool = False

    @property
    def rotation_mode(self) -> RotationMode:
        if self.view_mode == ViewMode.FLAT:
            return RotationMode.FLAT
        return RotationMode.NORTH_UP_TILTED if self.north_up else RotationMode.TILTED


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


class ViewController:
    """Owns :class:`ViewState` and the active drag.

    The north-up flag is kept even in flat mode; it only changes the
    parameters of the tilted view, so switching back to tilted restores
    whichever orientation was last chosen.
    """

    def __init__(
        self,
        config: ViewConfig | None = None,
        site_center: Point | None = None,
    ) -> None:
        self._config = config or ViewConfig()
        if self._config.zoom_min > self._config.zoom_max:
            raise ValueError(
                f"zoom_min {self._config.zoom_min} exceeds zoom_max {self._config.zoom_max}"
            )
        self._site_center = site_center or Point()
        self._viewport_center = Point(
            x=self._config.viewport_width / 2,
            y=self._config.viewport_height / 2,
        )
        self.state = ViewState()
        self._anchor: Point | None = None

    @property
    def dragging(self) -> bool:
        return self._anchor is not None

    @property
    def zoom_range(self) -> tuple[float, float]:
        return self._config.zoom_min, self._config.zoom_max

    def _clamp_zoom(self, zoom: float) -> float:
        return min(self._config.zoom_max, max(self._config.zoom_min, zoom))

    # --- Drag ---

    def begin_drag(self, pointer: Point) -> None:
        """Start a drag; the pan does not change until the pointer moves."""
        if not _finite(pointer.x, pointer.y):
            logger.warning("Ignoring drag start at non-finite position %s", pointer)
            return
        self._anchor = pointer - self.state.pan

    def continue_drag(self, pointer: Point) -> None:
        if self._anchor is None or not _finite(pointer.x, pointer.y):
            return
        self.state.pan = pointer - self._anchor

    def end_drag(self) -> None:
        self._anchor = None

    def pointer_leave(self) -> None:
        """Pointer left the map surface; never leave a drag stuck on."""
        self.end_drag()

    def lost_capture(self) -> None:
        self.end_drag()

    # --- Zoom ---

    def wheel(self, delta: float) -> float:
        """Apply one wheel tick and return the new zoom.

        A positive delta (scrolling down) zooms out, anything else zooms in.
        """
        if not _finite(delta):
            logger.warning("Ignoring non-finite wheel delta %r", delta)
            return self.state.zoom
        ratio = self._config.zoom_out_ratio if delta > 0 else self._config.zoom_in_ratio
        self.state.zoom = self._clamp_zoom(self.state.zoom * ratio)
        logger.debug("Wheel %s -> zoom %.3f", delta, self.state.zoom)
        return self.state.zoom

    def set_zoom(self, zoom: float) -> float:
        if _finite(zoom):
            self.state.zoom = self._clamp_zoom(zoom)
        return self.state.zoom

    # --- Rotation ---

    def toggle_north_up(self) -> bool:
        self.state.north_up = not self.state.north_up
        logger.debug("North-up %s", "on" if self.state.north_up else "off")
        return self.state.north_up

    def set_flat(self) -> None:
        self.state.view_mode = ViewMode.FLAT

    def set_tilted(self) -> None:
        self.state.view_mode = ViewMode.TILTED

    def toggle_view_mode(self) -> ViewMode:
        if self.state.view_mode == ViewMode.FLAT:
            self.set_tilted()
        else:
            self.set_flat()
        return self.state.view_mode

    def reset(self) -> None:
        """Restore pan, zoom and orientation together."""
        self._anchor = None
        self.state.pan = Point()
        self.state.zoom = 1.0
        self.state.view_mode = ViewMode.TILTED
        self.state.north_up = False

    # --- Output ---

    def screen_transform(self) -> ScreenTransform:
        return ScreenTransform(
            pan=self.state.pan,
            zoom=self.state.zoom,
            rotation=self.state.rotation_mode,
            site_center=self._site_center,
            viewport_center=self._viewport_center,
        )
