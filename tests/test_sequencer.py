"""Tests for the status sweep sequencer and its schedulers."""

from __future__ import annotations

import asyncio

import pytest

from siteplan.animation.scheduler import AsyncioScheduler, ManualCall, ManualScheduler
from siteplan.animation.sequencer import StatusSequencer
from siteplan.core.config import AnimationConfig
from siteplan.core.types import ParcelStatus
from siteplan.registry.store import ParcelRegistry

STAGGER = 14.0
NEUTRAL = ParcelStatus.NEUTRAL


class CancelIgnoringScheduler(ManualScheduler):
    """A scheduler whose handles cannot be cancelled, so stale timers still fire."""

    def call_later(self, delay_ms, callback) -> ManualCall:
        call = super().call_later(delay_ms, callback)
        call.cancel = lambda: None
        return call


@pytest.fixture
def registry():
    return ParcelRegistry()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sequencer(registry, scheduler):
    return StatusSequencer(registry, scheduler, AnimationConfig(stagger_ms=STAGGER))


def _true_statuses(registry: ParcelRegistry) -> dict[int, ParcelStatus]:
    return {p.number: p.status for p in registry}


def _showing_true(sequencer: StatusSequencer, registry: ParcelRegistry) -> set[int]:
    snapshot = sequencer.snapshot()
    return {p.number for p in registry if snapshot[p.number] == p.status}


class TestManualScheduler:
    def test_fires_in_due_order(self):
        scheduler = ManualScheduler()
        fired: list[str] = []
        scheduler.call_later(20, lambda: fired.append("b"))
        scheduler.call_later(10, lambda: fired.append("a"))
        scheduler.call_later(20, lambda: fired.append("c"))
        assert scheduler.advance(15) == 1
        assert scheduler.now == 15
        scheduler.run_all()
        assert fired == ["a", "b", "c"]

    def test_cancelled_calls_do_not_fire(self):
        scheduler = ManualScheduler()
        fired: list[int] = []
        handle = scheduler.call_later(5, lambda: fired.append(1))
        handle.cancel()
        assert scheduler.pending == 0
        assert scheduler.run_all() == 0
        assert fired == []

    def test_cancelled_calls_are_compacted(self):
        scheduler = ManualScheduler()
        handles = [scheduler.call_later(10 * i, lambda: None) for i in range(10)]
        for handle in handles[:6]:
            handle.cancel()
        assert scheduler.pending == 4
        assert scheduler.queued == 4
        assert scheduler.run_all() == 4

    def test_cancel_after_firing_is_harmless(self):
        scheduler = ManualScheduler()
        fired = scheduler.call_later(1, lambda: None)
        scheduler.call_later(5, lambda: None)
        scheduler.advance(2)
        fired.cancel()
        assert scheduler.pending == 1
        assert scheduler.queued == 1

    def test_delay_relative_to_now(self):
        scheduler = ManualScheduler()
        scheduler.advance(100)
        fired: list[float] = []
        scheduler.call_later(10, lambda: fired.append(scheduler.now))
        scheduler.run_all()
        assert fired == [110]


class TestInitialState:
    def test_all_neutral(self, sequencer, registry):
        assert set(sequencer.snapshot()) == set(registry.ids)
        assert set(sequencer.snapshot().values()) == {NEUTRAL}
        assert sequencer.status_view is False
        assert not sequencer.is_running

    def test_unknown_parcel(self, sequencer):
        assert sequencer.displayed_status(999) is None


class TestReveal:
    def test_nothing_changes_before_time_passes(self, sequencer, scheduler):
        sequencer.reveal()
        assert sequencer.displayed_status(1) == NEUTRAL
        assert sequencer.pending == 109
        assert scheduler.pending == 109

    def test_first_parcel_fires_immediately(self, sequencer, scheduler):
        sequencer.reveal()
        scheduler.advance(0)
        assert sequencer.displayed_status(1) == ParcelStatus.AVAILABLE
        assert sequencer.displayed_status(2) == NEUTRAL

    def test_end_to_end_sweep(self, sequencer, scheduler, registry):
        sequencer.reveal()

        scheduler.advance(5 * STAGGER + 1)
        assert sequencer.displayed_status(5) == ParcelStatus.BUILDER
        assert sequencer.displayed_status(109) == NEUTRAL

        scheduler.advance(109 * STAGGER + 1 - scheduler.now)
        assert sequencer.snapshot() == _true_statuses(registry)
        assert not sequencer.is_running
        assert scheduler.pending == 0

    def test_sweep_is_in_ascending_order(self, sequencer, scheduler, registry):
        sequencer.reveal()
        order: list[int] = []
        seen: set[int] = set()
        while scheduler.pending:
            scheduler.advance(STAGGER)
            for number in sorted(_showing_true(sequencer, registry) - seen):
                order.append(number)
                seen.add(number)
        assert order == registry.ids

    def test_reveal_resets_to_neutral(self, sequencer, scheduler):
        sequencer.reveal()
        scheduler.run_all()
        sequencer.reveal()
        assert set(sequencer.snapshot().values()) == {NEUTRAL}

    def test_reveal_twice_ends_on_true_status(self, sequencer, scheduler, registry):
        sequencer.reveal()
        scheduler.advance(300)
        sequencer.reveal()
        scheduler.run_all()
        assert sequencer.snapshot() == _true_statuses(registry)


class TestConceal:
    def test_conceal_after_full_reveal(self, sequencer, scheduler):
        sequencer.reveal()
        scheduler.run_all()
        sequencer.conceal()
        assert sequencer.status_view is False
        scheduler.advance(10 * STAGGER - 1)
        assert sequencer.displayed_status(10) == NEUTRAL
        assert sequencer.displayed_status(11) != NEUTRAL
        scheduler.run_all()
        assert set(sequencer.snapshot().values()) == {NEUTRAL}


class TestCancellation:
    def test_conceal_mid_reveal_ends_neutral(self, sequencer, scheduler, registry):
        sequencer.reveal()
        scheduler.advance(500)
        assert _showing_true(sequencer, registry)

        sequencer.conceal()
        assert scheduler.pending == 109

        previous = _showing_true(sequencer, registry)
        while scheduler.pending:
            scheduler.advance(STAGGER / 2)
            current = _showing_true(sequencer, registry)
            assert current <= previous
            previous = current

        assert set(sequencer.snapshot().values()) == {NEUTRAL}

    def test_stale_timers_cannot_mutate(self, registry):
        scheduler = CancelIgnoringScheduler()
        sequencer = StatusSequencer(registry, scheduler, AnimationConfig(stagger_ms=STAGGER))
        sequencer.reveal()
        sequencer.conceal()
        scheduler.run_all()
        assert set(sequencer.snapshot().values()) == {NEUTRAL}

    def test_rapid_toggling(self, sequencer, scheduler, registry):
        for _ in range(5):
            sequencer.toggle()
            scheduler.advance(STAGGER / 3)
        assert sequencer.status_view is True
        scheduler.run_all()
        assert sequencer.snapshot() == _true_statuses(registry)

    def test_toggling_without_advancing_keeps_queue_bounded(self, sequencer, scheduler):
        for _ in range(20):
            sequencer.toggle()
        assert scheduler.pending == 109
        assert scheduler.queued <= 2 * 109

    def test_close_leaves_no_timers(self, sequencer, scheduler):
        sequencer.reveal()
        scheduler.advance(100)
        frozen = sequencer.snapshot()
        sequencer.close()
        assert scheduler.pending == 0
        assert not sequencer.is_running
        scheduler.run_all()
        assert sequencer.snapshot() == frozen

    def test_generation_advances(self, sequencer):
        start = sequencer.generation
        sequencer.reveal()
        sequencer.conceal()
        assert sequencer.generation > start + 1


class TestStatusView:
    def test_set_status_view_same_value_is_noop(self, sequencer):
        assert sequencer.set_status_view(False) is False
        assert sequencer.set_status_view(True) is True
        assert sequencer.set_status_view(True) is False

    def test_toggle(self, sequencer):
        assert sequencer.toggle() is True
        assert sequencer.toggle() is False


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_reveal_completes_on_event_loop(self):
        registry = ParcelRegistry(count=5, available=[1], builder=[2])
        sequencer = StatusSequencer(
            registry, AsyncioScheduler(), AnimationConfig(stagger_ms=1)
        )
        sequencer.reveal()
        await asyncio.sleep(0.1)
        assert sequencer.snapshot() == _true_statuses(registry)
        assert not sequencer.is_running

    @pytest.mark.asyncio
    async def test_conceal_cancels_reveal_on_event_loop(self):
        registry = ParcelRegistry(count=5, available=[1], builder=[2])
        sequencer = StatusSequencer(
            registry, AsyncioScheduler(), AnimationConfig(stagger_ms=5)
        )
        sequencer.reveal()
        await asyncio.sleep(0.007)
        sequencer.conceal()
        await asyncio.sleep(0.1)
        assert set(sequencer.snapshot().values()) == {NEUTRAL}

    @pytest.mark.asyncio
    async def test_close_cancels_loop_timers(self):
        registry = ParcelRegistry(count=5)
        sequencer = StatusSequencer(
            registry, AsyncioScheduler(), AnimationConfig(stagger_ms=50)
        )
        sequencer.reveal()
        sequencer.close()
        await asyncio.sleep(0.3)
        assert set(sequencer.snapshot().values()) == {NEUTRAL}
