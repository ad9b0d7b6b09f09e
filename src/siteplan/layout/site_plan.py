"""Default site plan and YAML override loading.

The default plan has four columns of parcels (A to D) split by a
horizontal road into a top and a bottom half. Columns B and C are each
two sub-columns wide; their left sub-column counts down from the road
side while the right one counts up.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from siteplan.core.types import SitePlanConfigError
from siteplan.layout.models import Sector, SitePlan
from siteplan.registry.store import DEFAULT_AVAILABLE, DEFAULT_BUILDER, DEFAULT_PARCEL_COUNT

# Column widths, cell height and gap between cells
WIDE = 64
NARROW = 53
CELL_HEIGHT = 28
GAP = 3

# Column x origins
X_A = 54
X_B1 = 138
X_B2 = X_B1 + NARROW + GAP
X_C1 = 306
X_C2 = X_C1 + NARROW + GAP
X_D = 474

# Top and bottom half y origins
Y_TOP = 62
Y_BOTTOM = 408


def _run(first: int, last: int) -> tuple[int, ...]:
    step = 1 if last >= first else -1
    return tuple(range(first, last + step, step))


def _sector(name: str, parcels: tuple[int, ...], x: float, y: float, width: float) -> Sector:
    return Sector(
        name=name,
        parcels=parcels,
        x=x,
        y=y,
        cell_width=width,
        cell_height=CELL_HEIGHT,
        gap=GAP,
    )


DEFAULT_SECTORS: tuple[Sector, ...] = (
    _sector("A top", _run(1, 10), X_A, Y_TOP, WIDE),
    _sector("A bottom", _run(11, 20), X_A, Y_BOTTOM, WIDE),
    _sector("B top left", _run(39, 29), X_B1, Y_TOP, NARROW),
    _sector("B top right", _run(40, 50), X_B2, Y_TOP, NARROW),
    _sector("B bottom left", _run(28, 21), X_B1, Y_BOTTOM, NARROW),
    _sector("B bottom right", _run(51, 58), X_B2, Y_BOTTOM, NARROW),
    _sector("C top left", _run(75, 67), X_C1, Y_TOP, NARROW),
    _sector("C top right", _run(76, 84), X_C2, Y_TOP, NARROW),
    _sector("C bottom left", _run(66, 59), X_C1, Y_BOTTOM, NARROW),
    _sector("C bottom right", _run(85, 92), X_C2, Y_BOTTOM, NARROW),
    _sector("D top", _run(109, 100), X_D, Y_TOP, WIDE),
    _sector("D bottom", _run(99, 93), X_D, Y_BOTTOM, WIDE),
)

DEFAULT_SITE_PLAN = SitePlan(
    parcel_count=DEFAULT_PARCEL_COUNT,
    available=DEFAULT_AVAILABLE,
    builder=DEFAULT_BUILDER,
    sectors=DEFAULT_SECTORS,
)


def load_site_plan(path: str | Path | None) -> SitePlan:
    """Load a site plan from YAML, falling back to the default plan.

    Keys missing from the file keep their default values, so a file that
    only lists ``available`` re-colours the default plan without touching
    its geometry.

    Raises:
        SitePlanConfigError: If the file is missing, is not a mapping, or
            does not describe a valid plan.
    """
    if path is None:
        return DEFAULT_SITE_PLAN

    path = Path(path)
    if not path.exists():
        raise SitePlanConfigError(f"Site plan file not found: {path}")

    with open(path) as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise SitePlanConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise SitePlanConfigError(f"Site plan {path} must be a mapping")

    merged = DEFAULT_SITE_PLAN.model_dump()
    merged.update(data)
    try:
        return SitePlan.model_validate(merged)
    except ValidationError as exc:
        raise SitePlanConfigError(f"Invalid site plan {path}: {exc}") from exc
