"""Per-status colour themes and search/selection emphasis."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from siteplan.core.types import ParcelStatus


class ColorTheme(BaseModel):
    model_config = ConfigDict(frozen=True)

    fill: str
    stroke: str
    text: str


_NEUTRAL = ColorTheme(fill="#c8b89a", stroke="#9a8060", text="#333")
_AVAILABLE = ColorTheme(fill="#4a9fd4", stroke="#2980b9", text="#fff")
_BUILDER = ColorTheme(fill="#d4a017", stroke="#b8860b", text="#fff")

# Status view off: sold parcels blend in with the neutral baseline.
PALETTE_OFF: dict[ParcelStatus, ColorTheme] = {
    ParcelStatus.AVAILABLE: _AVAILABLE,
    ParcelStatus.SOLD: _NEUTRAL,
    ParcelStatus.BUILDER: _BUILDER,
    ParcelStatus.NEUTRAL: _NEUTRAL,
}

PALETTE_ON: dict[ParcelStatus, ColorTheme] = {
    ParcelStatus.AVAILABLE: _AVAILABLE,
    ParcelStatus.SOLD: ColorTheme(fill="#e05252", stroke="#c0392b", text="#fff"),
    ParcelStatus.BUILDER: _BUILDER,
    ParcelStatus.NEUTRAL: _NEUTRAL,
}

SELECTED_STROKE = "#ffffff"
MATCH_STROKE = "#ffffffcc"
DIMMED_OPACITY = 0.12


class Emphasis(BaseModel):
    """How strongly a parcel is drawn."""

    fill_opacity: float = 1.0
    stroke: str
    stroke_width: float = 0.6
    stroke_dasharray: str = "none"
    show_label: bool = True


def theme_for(status: ParcelStatus, status_view: bool) -> ColorTheme:
    palette = PALETTE_ON if status_view else PALETTE_OFF
    return palette[status]


def emphasis_for(theme: ColorTheme, selected: bool, matched: bool, dimmed: bool) -> Emphasis:
    if selected:
        stroke = SELECTED_STROKE
    elif matched:
        stroke = MATCH_STROKE
    else:
        stroke = theme.stroke
    return Emphasis(
        fill_opacity=DIMMED_OPACITY if dimmed else 1.0,
        stroke=stroke,
        stroke_width=2.0 if selected else 0.6,
        stroke_dasharray="4,2" if selected else "none",
        show_label=not dimmed,
    )
