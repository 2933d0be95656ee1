"""Page-change policy -- finalize when an event arrives on another page."""

from __future__ import annotations

from core.models.events import FinalizationModes, FinalizationTriggers


class PageChangePolicy:
    """Stay open for as long as events keep arriving on the same page."""

    @property
    def name(self) -> str:
        return FinalizationModes.PAGE_CHANGE

    def should_finalize(self, trigger: str) -> bool:
        return trigger == FinalizationTriggers.PAGE_CHANGE
