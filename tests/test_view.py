"""Tests for the view controller gesture state machine."""

from __future__ import annotations

import math

import pytest

from siteplan.core.config import ViewConfig
from siteplan.core.types import Point, RotationMode, ViewMode
from siteplan.view.state import ViewController


@pytest.fixture
def view():
    return ViewController(site_center=Point(x=330, y=360))


class TestDrag:
    def test_begin_drag_does_not_move(self, view):
        view.begin_drag(Point(x=100, y=100))
        assert view.state.pan == Point()
        assert view.dragging

    def test_continue_drag_moves_pan(self, view):
        view.begin_drag(Point(x=100, y=100))
        view.continue_drag(Point(x=150, y=130))
        assert view.state.pan == Point(x=50, y=30)

    def test_drag_is_relative_to_existing_pan(self, view):
        view.begin_drag(Point(x=100, y=100))
        view.continue_drag(Point(x=150, y=130))
        view.end_drag()

        pan_before = view.state.pan
        p0, p1 = Point(x=10, y=10), Point(x=20, y=20)
        view.begin_drag(p0)
        view.continue_drag(p1)
        assert view.state.pan == p1 - (p0 - pan_before)
        assert view.state.pan == Point(x=60, y=40)

    def test_last_move_wins(self, view):
        view.begin_drag(Point(x=0, y=0))
        view.continue_drag(Point(x=5, y=5))
        view.continue_drag(Point(x=-3, y=8))
        assert view.state.pan == Point(x=-3, y=8)

    def test_continue_without_drag_is_noop(self, view):
        view.continue_drag(Point(x=999, y=999))
        assert view.state.pan == Point()

    def test_continue_after_end_is_noop(self, view):
        view.begin_drag(Point(x=0, y=0))
        view.continue_drag(Point(x=10, y=10))
        view.end_drag()
        view.continue_drag(Point(x=50, y=50))
        assert view.state.pan == Point(x=10, y=10)
        assert not view.dragging

    def test_end_drag_is_idempotent(self, view):
        view.end_drag()
        view.end_drag()
        assert not view.dragging

    @pytest.mark.parametrize("release", ["pointer_leave", "lost_capture", "end_drag"])
    def test_release_paths_clear_drag(self, view, release):
        view.begin_drag(Point(x=0, y=0))
        getattr(view, release)()
        view.continue_drag(Point(x=10, y=10))
        assert view.state.pan == Point()

    def test_non_finite_pointer_ignored(self, view):
        view.begin_drag(Point(x=math.nan, y=0))
        assert not view.dragging
        view.begin_drag(Point(x=0, y=0))
        view.continue_drag(Point(x=math.inf, y=1))
        assert view.state.pan == Point()


class TestZoom:
    def test_zoom_in_is_multiplicative(self, view):
        assert view.wheel(-1) == pytest.approx(1.1)
        assert view.wheel(-1) == pytest.approx(1.21)

    def test_zoom_out(self, view):
        assert view.wheel(120) == pytest.approx(0.91)

    def test_zero_delta_zooms_in(self, view):
        assert view.wheel(0) == pytest.approx(1.1)

    def test_zoom_clamped_at_max(self, view):
        for _ in range(100):
            view.wheel(-1)
            assert 0.3 <= view.state.zoom <= 5.0
        assert view.state.zoom == 5.0

    def test_zoom_clamped_at_min(self, view):
        for _ in range(100):
            view.wheel(1)
            assert 0.3 <= view.state.zoom <= 5.0
        assert view.state.zoom == 0.3

    def test_mixed_sequence_stays_in_range(self, view):
        for i in range(300):
            view.wheel(1 if (i // 37) % 2 else -1)
            assert 0.3 <= view.state.zoom <= 5.0

    def test_non_finite_delta_ignored(self, view):
        assert view.wheel(math.nan) == 1.0

    def test_set_zoom_clamps(self, view):
        assert view.set_zoom(50) == 5.0
        assert view.set_zoom(0) == 0.3

    def test_custom_range(self):
        view = ViewController(config=ViewConfig(zoom_min=0.5, zoom_max=2.0))
        for _ in range(20):
            view.wheel(-1)
        assert view.state.zoom == 2.0
        assert view.zoom_range == (0.5, 2.0)

    def test_inverted_range_rejected(self):
        with pytest.raises(ValueError):
            ViewController(config=ViewConfig(zoom_min=3.0, zoom_max=1.0))


class TestRotation:
    def test_default_is_tilted(self, view):
        assert view.state.view_mode == ViewMode.TILTED
        assert view.state.rotation_mode == RotationMode.TILTED

    def test_toggle_north_up(self, view):
        assert view.toggle_north_up() is True
        assert view.state.rotation_mode == RotationMode.NORTH_UP_TILTED
        assert view.toggle_north_up() is False
        assert view.state.rotation_mode == RotationMode.TILTED

    def test_toggle_north_up_keeps_pan_and_zoom(self, view):
        view.begin_drag(Point(x=0, y=0))
        view.continue_drag(Point(x=12, y=-4))
        view.end_drag()
        view.wheel(-1)
        view.toggle_north_up()
        assert view.state.pan == Point(x=12, y=-4)
        assert view.state.zoom == pytest.approx(1.1)

    def test_flat_overrides_north_up(self, view):
        view.toggle_north_up()
        view.set_flat()
        assert view.state.rotation_mode == RotationMode.FLAT
        view.set_tilted()
        assert view.state.rotation_mode == RotationMode.NORTH_UP_TILTED

    def test_toggle_view_mode(self, view):
        assert view.toggle_view_mode() == ViewMode.FLAT
        assert view.toggle_view_mode() == ViewMode.TILTED


class TestReset:
    def test_reset_restores_defaults(self, view):
        view.begin_drag(Point(x=0, y=0))
        view.continue_drag(Point(x=40, y=40))
        for _ in range(5):
            view.wheel(-1)
        view.toggle_north_up()
        view.set_flat()

        view.reset()

        assert view.state.pan == Point()
        assert view.state.zoom == 1.0
        assert view.state.rotation_mode == RotationMode.TILTED
        assert not view.state.north_up

    def test_reset_keeps_the_same_state_object(self, view):
        handle = view.state
        view.begin_drag(Point(x=10, y=10))
        view.continue_drag(Point(x=60, y=90))
        view.wheel(-1)
        view.toggle_north_up()

        view.reset()

        assert handle is view.state
        assert handle.pan == Point()
        assert handle.zoom == 1.0
        assert handle.view_mode == ViewMode.TILTED
        assert not handle.north_up
        view.wheel(-1)
        assert handle.zoom == pytest.approx(1.1)

    def test_reset_ends_drag(self, view):
        view.begin_drag(Point(x=0, y=0))
        view.reset()
        view.continue_drag(Point(x=30, y=30))
        assert view.state.pan == Point()
