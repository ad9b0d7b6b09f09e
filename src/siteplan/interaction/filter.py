"""Single selection and the numeric search filter."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class InteractionState(BaseModel):
    """Selected parcel and active search text."""

    selected: int | None = None
    search_text: str = ""


class SelectionFilter:
    """Owns :class:`InteractionState`.

    Selection is a toggle: selecting the selected parcel again clears it.
    Search matches a parcel when its decimal number contains the search
    text; with an empty search nothing matches and nothing is dimmed.
    """

    def __init__(self) -> None:
        self.state = InteractionState()

    @property
    def selected(self) -> int | None:
        return self.state.selected

    @property
    def search_text(self) -> str:
        return self.state.search_text

    def select(self, number: int) -> int | None:
        """Toggle selection of ``number`` and return the new selection."""
        if self.state.selected == number:
            self.state.selected = None
        else:
            self.state.selected = number
        logger.debug("Selection is now %s", self.state.selected)
        return self.state.selected

    def clear_selection(self) -> None:
        self.state.selected = None

    def set_search(self, text: str | None) -> str:
        """Replace the search text; it is kept verbatim, whitespace included."""
        self.state.search_text = text or ""
        return self.state.search_text

    def is_selected(self, number: int) -> bool:
        return self.state.selected is not None and self.state.selected == number

    def matches(self, number: int) -> bool:
        text = self.state.search_text
        return bool(text) and text in str(number)

    def is_dimmed(self, number: int) -> bool:
        return bool(self.state.search_text) and not self.matches(number)

    def matching_ids(self, numbers: Iterable[int]) -> list[int]:
        return [n for n in numbers if self.matches(n)]
