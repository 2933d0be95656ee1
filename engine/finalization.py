"""FinalizationEngine -- decides which open events a new event closes.

For every newly registered event the engine runs three sweeps, in this
order:

1. Cross-page: on every other page, finalize open events whose policy
   finalizes on a page change.
2. Same component: at the new event's (page, component), finalize open
   events whose policy finalizes on the next event for that component.
3. Next event: if the last registered event's policy finalizes on any
   next event, finalize it.

An event removed by one sweep is invisible to the sweeps after it.
The order is fixed here; policies only say which triggers apply.
"""

from __future__ import annotations

import logging

from core.models.events import FinalizationTriggers, UIEvent
from core.registry import PolicyRegistry
from engine.delivery import DeliveryQueue
from engine.store import EventStore

logger = logging.getLogger(__name__)


class FinalizationEngine:
    """Closes open events in response to newly registered ones."""

    def __init__(
        self,
        store: EventStore,
        queue: DeliveryQueue,
        registry: PolicyRegistry,
    ) -> None:
        self._store = store
        self._queue = queue
        self._registry = registry

    def evaluate(self, event: UIEvent) -> list[UIEvent]:
        """Run the three sweeps with `event` as the cause.

        Returns the events finalized by this call, in finalization order.
        """
        finalized: list[UIEvent] = []

        # 1. Page change
        for _page, _component, open_events in self._store.open_events_excluding_page(event.page):
            finalized.extend(
                self._finalize_matching(open_events, event, FinalizationTriggers.PAGE_CHANGE)
            )

        # 2. Same page and component
        finalized.extend(self._finalize_matching(
            self._store.open_events_for(event.page, event.component),
            event,
            FinalizationTriggers.SAME_COMPONENT,
        ))

        # 3. Any next event
        last = self._store.last_event
        if (
            last is not None
            and not last.finalized
            and self._triggers(last, FinalizationTriggers.NEXT_EVENT)
        ):
            self.finalize(last, event)
            finalized.append(last)

        if finalized:
            logger.debug(
                "Event %s finalized %d open event(s): %s",
                event.event_id,
                len(finalized),
                [e.event_id for e in finalized],
            )
        return finalized

    def finalize(self, event: UIEvent, cause: UIEvent) -> None:
        """Close `event`, citing `cause` for its next page and component.

        The transition happens once; finalizing a finalized event is a no-op.
        """
        if event.finalized:
            logger.debug("Event %s already finalized, skipping", event.event_id)
            return

        self._store.remove(event)

        event.next_page = cause.page
        event.next_component = cause.component
        event.finalized = True
        if event.duration is None:
            event.duration = cause.time - event.time

        self._queue.append(event)

    def _finalize_matching(
        self, candidates: list[UIEvent], cause: UIEvent, trigger: str,
    ) -> list[UIEvent]:
        closed = []
        for candidate in candidates:
            if candidate.finalized or not self._triggers(candidate, trigger):
                continue
            self.finalize(candidate, cause)
            closed.append(candidate)
        return closed

    def _triggers(self, event: UIEvent, trigger: str) -> bool:
        return self._registry.get(event.finalization_mode).should_finalize(trigger)
