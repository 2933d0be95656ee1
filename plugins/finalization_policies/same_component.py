"""Same-component policy -- finalize on the next event for the same
component, or on any page change."""

from __future__ import annotations

from core.models.events import FinalizationModes, FinalizationTriggers


class NextEventSameComponentPolicy:
    """Finalize when the same (page, component) sees another event.

    A page change also finalizes the event, whatever component the new
    event targets.
    """

    _TRIGGERS = frozenset({
        FinalizationTriggers.SAME_COMPONENT,
        FinalizationTriggers.PAGE_CHANGE,
    })

    @property
    def name(self) -> str:
        return FinalizationModes.NEXT_EVENT_SAME_COMPONENT

    def should_finalize(self, trigger: str) -> bool:
        return trigger in self._TRIGGERS
