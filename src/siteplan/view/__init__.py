"""View transform stack: pan, zoom and perspective over the site plan."""

from siteplan.view.state import ViewController, ViewState
from siteplan.view.transform import NORTH_UP_TILTED, TILTED, PerspectiveParams, ScreenTransform

__all__ = [
    "NORTH_UP_TILTED",
    "PerspectiveParams",
    "ScreenTransform",
    "TILTED",
    "ViewController",
    "ViewState",
]
