"""Staggered status reveal/conceal sweep over every parcel.

Each run schedules one timed update per parcel, in ascending parcel
order, ``index * stagger`` milliseconds after the run starts. A run is
tagged with a generation number; starting a new run bumps the generation
and cancels every timer of the previous one before anything new is
scheduled, and a timer that still fires checks its generation first and
does nothing if it is stale.
"""

from __future__ import annotations

import logging
from functools import partial

from siteplan.animation.scheduler import Scheduler, TimerHandle
from siteplan.core.config import AnimationConfig
from siteplan.core.types import ParcelStatus
from siteplan.registry.store import ParcelRegistry

logger = logging.getLogger(__name__)


class StatusSequencer:
    """Owns the displayed status of every parcel."""

    def __init__(
        self,
        registry: ParcelRegistry,
        scheduler: Scheduler,
        config: AnimationConfig | None = None,
    ) -> None:
        self._registry = registry
        self._scheduler = scheduler
        self._config = config or AnimationConfig()
        self._displayed: dict[int, ParcelStatus] = {
            p.number: ParcelStatus.NEUTRAL for p in registry
        }
        self._generation = 0
        self._handles: list[TimerHandle] = []
        self._remaining = 0
        self.status_view = False

    @property
    def stagger_ms(self) -> float:
        return self._config.stagger_ms

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_running(self) -> bool:
        return self._remaining > 0

    @property
    def pending(self) -> int:
        return self._remaining

    def displayed_status(self, number: int) -> ParcelStatus | None:
        return self._displayed.get(number)

    def snapshot(self) -> dict[int, ParcelStatus]:
        return dict(self._displayed)

    def reveal(self) -> None:
        """Reset every parcel to neutral, then sweep each to its true status."""
        for number in self._displayed:
            self._displayed[number] = ParcelStatus.NEUTRAL
        self._start(reveal=True)

    def conceal(self) -> None:
        """Sweep every parcel back to neutral."""
        self._start(reveal=False)

    def set_status_view(self, on: bool) -> bool:
        """Switch the status view; does nothing if it is already in that state.

        Returns:
            True if a new sweep was started.
        """
        if on == self.status_view:
            return False
        if on:
            self.reveal()
        else:
            self.conceal()
        return True

    def toggle(self) -> bool:
        self.set_status_view(not self.status_view)
        return self.status_view

    def close(self) -> None:
        """Cancel any sweep in flight. Displayed statuses stay as they are."""
        self._cancel()

    def _cancel(self) -> None:
        self._generation += 1
        for handle in self._handles:
            handle.cancel()
        if self._remaining:
            logger.debug("Cancelled %d pending status updates", self._remaining)
        self._handles = []
        self._remaining = 0

    def _start(self, reveal: bool) -> None:
        self._cancel()
        self.status_view = reveal
        generation = self._generation
        stagger = self._config.stagger_ms

        for index, parcel in enumerate(self._registry):
            target = parcel.status if reveal else ParcelStatus.NEUTRAL
            handle = self._scheduler.call_later(
                index * stagger,
                partial(self._apply, generation, parcel.number, target),
            )
            self._handles.append(handle)
        self._remaining = len(self._handles)

        logger.info(
            "Started %s sweep (generation %d, %d parcels, %.0f ms stagger)",
            "reveal" if reveal else "conceal",
            generation,
            self._remaining,
            stagger,
        )

    def _apply(self, generation: int, number: int, status: ParcelStatus) -> None:
        if generation != self._generation:
            return
        self._displayed[number] = status
        self._remaining -= 1
        if self._remaining == 0:
            self._handles = []
            logger.debug("Sweep generation %d complete", generation)
