"""Parcel data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from siteplan.core.types import Facing, ParcelStatus


class Parcel(BaseModel):
    """A parcel of land on the site plan.

    Parcels are immutable once the registry is built; only the displayed
    status tracked by the animation sequencer ever changes.
    """

    model_config = ConfigDict(frozen=True)

    number: int = Field(gt=0)
    status: ParcelStatus = ParcelStatus.SOLD
    area_sq_m: float = Field(ge=0)
    area_sq_yd: float = Field(ge=0)
    width_m: float = Field(gt=0)
    length_m: float = Field(gt=0)
    facing: Facing

    @property
    def label(self) -> str:
        return str(self.number)
