"""Site-plan engine: the single entry point for the presentation surface.

The engine owns the registry, the layout, and the three mutable state
holders (view, animation, interaction). The presentation surface reads
geometry, transform, colours and emphasis through it and feeds user input
back through :meth:`SitePlanEngine.dispatch`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

from siteplan.animation.scheduler import AsyncioScheduler, Scheduler
from siteplan.animation.sequencer import StatusSequencer
from siteplan.core.config import Settings
from siteplan.core.types import Cell, ParcelStatus, Point
from siteplan.engine.events import EventKind, InputEvent, UnknownEventError
from siteplan.engine.palette import ColorTheme, Emphasis, emphasis_for, theme_for
from siteplan.interaction.filter import SelectionFilter
from siteplan.layout.resolver import LayoutResolver
from siteplan.layout.site_plan import load_site_plan
from siteplan.registry.models import Parcel
from siteplan.registry.store import ParcelRegistry
from siteplan.view.state import ViewController
from siteplan.view.transform import ScreenTransform

logger = logging.getLogger(__name__)


class ParcelDetail(BaseModel):
    """Dimension and area labels drawn around the selected parcel."""

    length_label: str
    width_label: str
    area_label: str


class ParcelView(BaseModel):
    """Everything needed to draw one parcel."""

    number: int
    label: str
    sector: str
    status: ParcelStatus
    displayed_status: ParcelStatus
    cell: Cell
    theme: ColorTheme
    emphasis: Emphasis
    selected: bool
    matched: bool
    dimmed: bool
    detail: ParcelDetail | None = None


def _format_measure(value: float) -> str:
    return f"{value:g}"


class SitePlanEngine:
    """Composes the registry, layout, view, sequencer and selection filter."""

    def __init__(
        self,
        registry: ParcelRegistry,
        layout: LayoutResolver,
        scheduler: Scheduler,
        settings: Settings | None = None,
        canvas_size: tuple[float, float] = (660.0, 720.0),
    ) -> None:
        self.settings = settings or Settings()
        self.registry = registry
        self.layout = layout
        self.canvas_size = canvas_size
        self.view = ViewController(
            config=self.settings.view,
            site_center=Point(x=canvas_size[0] / 2, y=canvas_size[1] / 2),
        )
        self.sequencer = StatusSequencer(registry, scheduler, config=self.settings.animation)
        self.interaction = SelectionFilter()

        self._handlers: dict[EventKind, Callable[[InputEvent], Any]] = {
            EventKind.POINTER_DOWN: lambda e: self.view.begin_drag(Point(x=e.x, y=e.y)),
            EventKind.POINTER_MOVE: lambda e: self.view.continue_drag(Point(x=e.x, y=e.y)),
            EventKind.POINTER_UP: lambda e: self.view.end_drag(),
            EventKind.POINTER_LEAVE: lambda e: self.view.pointer_leave(),
            EventKind.LOST_CAPTURE: lambda e: self.view.lost_capture(),
            EventKind.WHEEL: lambda e: self.view.wheel(e.delta),
            EventKind.CLICK_PARCEL: self._on_click_parcel,
            EventKind.CLICK_BACKGROUND: lambda e: self.interaction.clear_selection(),
            EventKind.SEARCH_INPUT: lambda e: self.interaction.set_search(e.text),
            EventKind.STATUS_TOGGLE: self._on_status_toggle,
            EventKind.NORTH_UP_TOGGLE: lambda e: self.view.toggle_north_up(),
            EventKind.VIEW_MODE_TOGGLE: lambda e: self.view.toggle_view_mode(),
            EventKind.RESET_VIEW: lambda e: self.view.reset(),
        }

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        scheduler: Scheduler | None = None,
    ) -> SitePlanEngine:
        """Build an engine from settings and the configured site plan.

        Raises:
            SitePlanConfigError: If the site plan override file is invalid.
            LayoutError: If the plan's sectors do not partition the parcels.
        """
        settings = settings or Settings()
        plan = load_site_plan(settings.layout.site_plan_path)

        registry = ParcelRegistry(
            count=plan.parcel_count,
            available=plan.available,
            builder=plan.builder,
        )
        layout = LayoutResolver.build(plan.sectors, registry)
        logger.info("Site plan engine ready with %d parcels", len(registry))
        return cls(
            registry=registry,
            layout=layout,
            scheduler=scheduler or AsyncioScheduler(),
            settings=settings,
            canvas_size=(plan.canvas_width, plan.canvas_height),
        )

    # --- Read API for the presentation surface ---

    def get_parcel(self, number: int) -> Parcel | None:
        return self.registry.get_by_id(number)

    def get_cell(self, number: int) -> Cell | None:
        return self.layout.resolve(number)

    def get_screen_transform(self) -> ScreenTransform:
        return self.view.screen_transform()

    def get_displayed_status(self, number: int) -> ParcelStatus | None:
        return self.sequencer.displayed_status(number)

    def is_selected(self, number: int) -> bool:
        return self.interaction.is_selected(number)

    def is_dimmed(self, number: int) -> bool:
        return self.interaction.is_dimmed(number)

    def matches_search(self, number: int) -> bool:
        return self.interaction.matches(number)

    def selected_parcel(self) -> Parcel | None:
        selected = self.interaction.selected
        return self.registry.get_by_id(selected) if selected is not None else None

    def parcel_view(self, number: int) -> ParcelView | None:
        parcel = self.registry.get_by_id(number)
        cell = self.layout.resolve(number)
        if parcel is None or cell is None:
            return None

        displayed = self.sequencer.displayed_status(number) or ParcelStatus.NEUTRAL
        theme = theme_for(displayed, self.sequencer.status_view)
        selected = self.interaction.is_selected(number)
        matched = self.interaction.matches(number)
        dimmed = self.interaction.is_dimmed(number)

        detail = None
        if selected:
            detail = ParcelDetail(
                length_label=f"{_format_measure(parcel.length_m)}m",
                width_label=f"{_format_measure(parcel.width_m)}m",
                area_label=(
                    f"{_format_measure(parcel.area_sq_m)}m² · "
                    f"{_format_measure(parcel.area_sq_yd)}yd²"
                ),
            )

        return ParcelView(
            number=number,
            label=parcel.label,
            sector=self.layout.sector_of(number) or "",
            status=parcel.status,
            displayed_status=displayed,
            cell=cell,
            theme=theme,
            emphasis=emphasis_for(theme, selected=selected, matched=matched, dimmed=dimmed),
            selected=selected,
            matched=matched,
            dimmed=dimmed,
            detail=detail,
        )

    def scene(self) -> list[ParcelView]:
        views = (self.parcel_view(p.number) for p in self.registry)
        return [v for v in views if v is not None]

    def pick(self, screen_x: float, screen_y: float) -> int | None:
        """Return the parcel under a screen point, if any."""
        site = self.get_screen_transform().invert(screen_x, screen_y)
        if site is None:
            return None
        return self.layout.hit_test(site.x, site.y)

    # --- Intents ---

    def select(self, number: int) -> bool:
        """Toggle selection of a parcel. Unknown parcels are ignored.

        Returns:
            False if ``number`` is not a registered parcel.
        """
        if number not in self.registry:
            logger.warning("Ignoring selection of unknown parcel %s", number)
            return False
        self.interaction.select(number)
        return True

    def set_status_view(self, on: bool) -> bool:
        return self.sequencer.set_status_view(on)

    def dispatch(self, event: InputEvent) -> Any:
        """Route one input event to its named operation.

        Raises:
            UnknownEventError: If ``event.kind`` has no handler.
        """
        try:
            kind = EventKind(event.kind)
        except ValueError:
            raise UnknownEventError(f"Unknown event kind: {event.kind!r}") from None
        logger.debug("Dispatching %s", kind)
        return self._handlers[kind](event)

    @property
    def handled_kinds(self) -> frozenset[EventKind]:
        return frozenset(self._handlers)

    def close(self) -> None:
        """Cancel any status sweep still in flight."""
        self.sequencer.close()

    def _on_click_parcel(self, event: InputEvent) -> bool:
        if event.parcel is None:
            return False
        return self.select(event.parcel)

    def _on_status_toggle(self, event: InputEvent) -> bool:
        on = (not self.sequencer.status_view) if event.on is None else event.on
        self.sequencer.set_status_view(on)
        return self.sequencer.status_view
