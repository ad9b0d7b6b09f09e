"""Core type definitions shared across all site-plan modules."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ParcelStatus(StrEnum):
    """Sales status of a parcel.

    ``NEUTRAL`` is never a true status; it is the baseline colour the
    status sweep animates from and back to.
    """

    AVAILABLE = "available"
    SOLD = "sold"
    BUILDER = "builder"
    NEUTRAL = "neutral"


class Facing(StrEnum):
    """Cardinal direction a parcel's frontage faces."""

    NORTH = "North"
    SOUTH = "South"
    EAST = "East"
    WEST = "West"


class ViewMode(StrEnum):
    """2D plan or 3D perspective view."""

    FLAT = "flat"
    TILTED = "tilted"


class RotationMode(StrEnum):
    """Effective perspective/rotation applied to site content."""

    FLAT = "flat"
    TILTED = "tilted"
    NORTH_UP_TILTED = "north_up_tilted"


class Point(BaseModel):
    """A 2D point or offset."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point) -> Point:
        return Point(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(x=self.x - other.x, y=self.y - other.y)


class Cell(BaseModel):
    """Rectangular placement of a parcel in site coordinate space."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def intersects(self, other: Cell) -> bool:
        """True if the interiors overlap. Shared edges do not count."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.right and self.y <= y <= self.bottom


class SitePlanError(Exception):
    """Base class for site-plan errors."""


class SitePlanConfigError(SitePlanError, ValueError):
    """A site-plan override file could not be parsed or is inconsistent."""
