"""Immutable parcel registry built from a deterministic generation rule."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from siteplan.core.types import Facing, ParcelStatus
from siteplan.registry.models import Parcel

logger = logging.getLogger(__name__)

DEFAULT_PARCEL_COUNT = 109

DEFAULT_AVAILABLE: tuple[int, ...] = (
    1, 2, 3, 4, 6, 75, 76, 77, 78,
    *range(93, 110),
)
DEFAULT_BUILDER: tuple[int, ...] = (5, 25, 26, 27, 28, 29, 30, 39, 40, 51, 52)

_FACINGS = (Facing.NORTH, Facing.SOUTH, Facing.EAST, Facing.WEST)


def generate_parcel(number: int, status: ParcelStatus = ParcelStatus.SOLD) -> Parcel:
    """Build the parcel for ``number`` using the fixed dimension rule."""
    return Parcel(
        number=number,
        status=status,
        area_sq_m=round(80 + (number % 7) * 11, 2),
        area_sq_yd=round(96 + (number % 7) * 13, 2),
        width_m=round(4.5 + (number % 3) * 0.5, 2),
        length_m=round(16 + (number % 5), 2),
        facing=_FACINGS[number % 4],
    )


class ParcelRegistry:
    """Read-only table of parcels, ordered by number.

    Every parcel starts as ``sold``; the ``available`` and ``builder``
    exception lists are applied on top, builder last. Numbers in the
    exception lists that fall outside ``1..count`` are ignored.
    """

    def __init__(
        self,
        count: int = DEFAULT_PARCEL_COUNT,
        available: Iterable[int] = DEFAULT_AVAILABLE,
        builder: Iterable[int] = DEFAULT_BUILDER,
    ) -> None:
        if count < 1:
            raise ValueError(f"Parcel count must be positive, got {count}")

        statuses = {n: ParcelStatus.SOLD for n in range(1, count + 1)}
        for overrides, status in (
            (available, ParcelStatus.AVAILABLE),
            (builder, ParcelStatus.BUILDER),
        ):
            for n in overrides:
                if n in statuses:
                    statuses[n] = status
                else:
                    logger.warning("Ignoring %s override for unknown parcel %d", status, n)

        self._parcels: dict[int, Parcel] = {
            n: generate_parcel(n, statuses[n]) for n in range(1, count + 1)
        }
        self._ordered: tuple[Parcel, ...] = tuple(self._parcels.values())

    def get_all(self) -> list[Parcel]:
        """Return every parcel in ascending number order."""
        return list(self._ordered)

    def get_by_id(self, number: int) -> Parcel | None:
        return self._parcels.get(number)

    @property
    def ids(self) -> list[int]:
        return [p.number for p in self._ordered]

    def count_by_status(self) -> dict[ParcelStatus, int]:
        counts: dict[ParcelStatus, int] = {}
        for parcel in self._ordered:
            counts[parcel.status] = counts.get(parcel.status, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, number: object) -> bool:
        return number in self._parcels

    def __iter__(self) -> Iterator[Parcel]:
        return iter(self._ordered)
