"""Layout resolver: parcel number to site-space cell.

The resolver is built once from a set of sectors and checked against the
registry. After construction every lookup is a dictionary read.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from itertools import combinations

from siteplan.core.types import Cell, SitePlanError
from siteplan.layout.models import Sector
from siteplan.registry.store import ParcelRegistry

logger = logging.getLogger(__name__)


class LayoutError(SitePlanError):
    """The sectors do not partition the registry into disjoint cells."""


class LayoutResolver:
    """Precomputed parcel-number to cell table.

    Use :meth:`build` to construct one; it validates that the sectors
    assign every registered parcel exactly once and that no two cells
    overlap.
    """

    def __init__(
        self,
        cells: dict[int, Cell],
        sector_index: dict[int, str],
        sectors: tuple[Sector, ...],
    ) -> None:
        self._cells = cells
        self._sector_index = sector_index
        self._sectors = sectors

    @classmethod
    def build(cls, sectors: Iterable[Sector], registry: ParcelRegistry) -> LayoutResolver:
        """Lay out every sector and validate the result.

        Raises:
            LayoutError: If a parcel is assigned twice, is unknown to the
                registry, is missing from every sector, or if any two
                cells intersect.
        """
        sectors = tuple(sectors)
        cells: dict[int, Cell] = {}
        sector_index: dict[int, str] = {}

        for sector in sectors:
            for number, cell in sector.cells():
                if number in cells:
                    raise LayoutError(
                        f"Parcel {number} assigned to both {sector_index[number]!r} "
                        f"and {sector.name!r}"
                    )
                if number not in registry:
                    raise LayoutError(f"Sector {sector.name!r} lists unknown parcel {number}")
                cells[number] = cell
                sector_index[number] = sector.name

        missing = [n for n in registry.ids if n not in cells]
        if missing:
            raise LayoutError(f"Parcels missing from every sector: {missing}")

        # Sorting by x lets the sweep stop early once cells no longer reach.
        ordered = sorted(cells.items(), key=lambda item: item[1].x)
        for i, (a, cell_a) in enumerate(ordered):
            for b, cell_b in ordered[i + 1:]:
                if cell_b.x >= cell_a.right:
                    break
                if cell_a.intersects(cell_b):
                    raise LayoutError(f"Cells for parcels {a} and {b} overlap")

        logger.info("Built layout: %d parcels in %d sectors", len(cells), len(sectors))
        return cls(cells, sector_index, sectors)

    def resolve(self, number: int) -> Cell | None:
        return self._cells.get(number)

    def cells(self) -> dict[int, Cell]:
        """Return a copy of the full number-to-cell table."""
        return dict(self._cells)

    def sector_of(self, number: int) -> str | None:
        return self._sector_index.get(number)

    @property
    def sectors(self) -> tuple[Sector, ...]:
        return self._sectors

    def bounds(self) -> Cell:
        """Smallest rectangle covering every cell."""
        left = min(c.x for c in self._cells.values())
        top = min(c.y for c in self._cells.values())
        right = max(c.right for c in self._cells.values())
        bottom = max(c.bottom for c in self._cells.values())
        return Cell(x=left, y=top, width=right - left, height=bottom - top)

    def hit_test(self, x: float, y: float) -> int | None:
        """Return the parcel whose cell contains the site-space point."""
        for number, cell in self._cells.items():
            if cell.contains(x, y):
                return number
        return None

    def overlapping_pairs(self) -> list[tuple[int, int]]:
        """Every pair of parcels whose cells intersect. Empty for a valid layout."""
        return [
            (a, b)
            for (a, cell_a), (b, cell_b) in combinations(sorted(self._cells.items()), 2)
            if cell_a.intersects(cell_b)
        ]
