"""Layout data models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from siteplan.core.types import Cell


class Axis(StrEnum):
    """Direction a sector steps along from its origin."""

    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Sector(BaseModel):
    """A named run of parcels laid out from a fixed origin.

    Parcel ``k`` of the run sits ``k * (extent + gap)`` from the origin
    along ``axis``, where ``extent`` is the cell height for a vertical run
    and the cell width for a horizontal one.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    parcels: tuple[int, ...]
    x: float
    y: float
    cell_width: float = Field(gt=0)
    cell_height: float = Field(gt=0)
    gap: float = Field(default=3.0, ge=0)
    axis: Axis = Axis.VERTICAL

    @property
    def stride(self) -> float:
        extent = self.cell_height if self.axis == Axis.VERTICAL else self.cell_width
        return extent + self.gap

    def cell_at(self, index: int) -> Cell:
        offset = index * self.stride
        if self.axis == Axis.VERTICAL:
            return Cell(x=self.x, y=self.y + offset, width=self.cell_width, height=self.cell_height)
        return Cell(x=self.x + offset, y=self.y, width=self.cell_width, height=self.cell_height)

    def cells(self) -> list[tuple[int, Cell]]:
        return [(number, self.cell_at(i)) for i, number in enumerate(self.parcels)]


class SitePlan(BaseModel):
    """Everything needed to build the registry and the layout."""

    parcel_count: int = Field(gt=0)
    available: tuple[int, ...] = ()
    builder: tuple[int, ...] = ()
    sectors: tuple[Sector, ...]
    canvas_width: float = 660.0
    canvas_height: float = 720.0
