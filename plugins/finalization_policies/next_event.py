"""Next-event policy -- finalize when any other event is registered."""

from __future__ import annotations

from core.models.events import FinalizationModes, FinalizationTriggers


class NextEventPolicy:
    """Finalize the last registered event when the next one arrives.

    This is the default mode. Page and component are ignored.
    """

    @property
    def name(self) -> str:
        return FinalizationModes.NEXT_EVENT

    def should_finalize(self, trigger: str) -> bool:
        return trigger == FinalizationTriggers.NEXT_EVENT
