"""Input events routed from the presentation surface into the engine."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

from siteplan.core.types import SitePlanError


class EventKind(StrEnum):
    POINTER_DOWN = "pointer_down"
    POINTER_MOVE = "pointer_move"
    POINTER_UP = "pointer_up"
    POINTER_LEAVE = "pointer_leave"
    LOST_CAPTURE = "lost_capture"
    WHEEL = "wheel"
    CLICK_PARCEL = "click_parcel"
    CLICK_BACKGROUND = "click_background"
    SEARCH_INPUT = "search_input"
    STATUS_TOGGLE = "status_toggle"
    NORTH_UP_TOGGLE = "north_up_toggle"
    VIEW_MODE_TOGGLE = "view_mode_toggle"
    RESET_VIEW = "reset_view"


class InputEvent(BaseModel):
    """A single UI event.

    Only the fields relevant to ``kind`` are read: pointer events use
    ``x``/``y``, ``wheel`` uses ``delta``, ``click_parcel`` uses
    ``parcel``, ``search_input`` uses ``text`` and ``status_toggle`` uses
    ``on`` (flipping the current state when omitted).
    """

    kind: str
    x: float = 0.0
    y: float = 0.0
    delta: float = 0.0
    parcel: int | None = None
    text: str = ""
    on: bool | None = None


class UnknownEventError(SitePlanError, ValueError):
    """The event kind has no handler."""
