"""EventStore -- holds every open event and the last-event pointers.

Open events are indexed twice: a flat map keyed by event_id, and a
hierarchy of page -> component -> open events in registration order.
Answers questions like "what is still open on the Home screen's
scroll component?" without scanning every event.
"""

from __future__ import annotations

import logging

from core.models.events import UIEvent

logger = logging.getLogger(__name__)


class _ComponentSlot:
    """Open events and last registered event for one (page, component)."""

    __slots__ = ("open_events", "last_event")

    def __init__(self) -> None:
        # event_id -> event; dict keeps insertion order and removes in O(1)
        self.open_events: dict[int, UIEvent] = {}
        self.last_event: UIEvent | None = None


class EventStore:
    """Authoritative holder of open events and lifecycle pointers.

    Usage:
        store = EventStore()
        event.event_id = store.allocate_event_id()
        store.commit(event)
        store.open_events_for("feed", "feed_card")  # [event]
        store.remove(event)
    """

    def __init__(self) -> None:
        self._event_count = 0
        self._open: dict[int, UIEvent] = {}
        self._pages: dict[str, dict[str | None, _ComponentSlot]] = {}
        self._last_event: UIEvent | None = None

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def allocate_event_id(self) -> int:
        """Return the next event_id (0, 1, 2, ...)."""
        event_id = self._event_count
        self._event_count += 1
        return event_id

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def commit(self, event: UIEvent) -> None:
        """Store a newly registered event and point the last-event refs at it.

        Events that are already finalized (immediate mode) only move the
        pointers; they never enter the open indices.
        """
        if event.event_id is None:
            raise ValueError("Cannot commit an event without an event_id")

        slot = self._slot(event.page, event.component, create=True)
        if not event.finalized:
            self._open[event.event_id] = event
            slot.open_events[event.event_id] = event

        slot.last_event = event
        self._last_event = event
        logger.debug(
            "Committed event %d (%s/%s, open=%s)",
            event.event_id, event.page, event.component, not event.finalized,
        )

    def remove(self, event: UIEvent) -> None:
        """Drop an event from the flat index and its (page, component) list."""
        self._open.pop(event.event_id, None)
        slot = self._slot(event.page, event.component)
        if slot is not None:
            slot.open_events.pop(event.event_id, None)

    def clear(self) -> None:
        """Forget every event. Ids keep counting from where they were."""
        self._open.clear()
        self._pages.clear()
        self._last_event = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def open_events_for(self, page: str, component: str | None) -> list[UIEvent]:
        """Open events for one (page, component), oldest first."""
        slot = self._slot(page, component)
        if slot is None:
            return []
        return list(slot.open_events.values())

    def open_events_excluding_page(
        self, page: str,
    ) -> list[tuple[str, str | None, list[UIEvent]]]:
        """(page, component, open events) for every known page but `page`.

        Returns snapshots, so callers may remove events while iterating.
        """
        return [
            (other_page, component, list(slot.open_events.values()))
            for other_page, components in self._pages.items()
            if other_page != page
            for component, slot in components.items()
        ]

    def is_open(self, event: UIEvent) -> bool:
        return event.event_id in self._open

    def unfinalized_events(self) -> dict[int, UIEvent]:
        """Copy of the flat open index."""
        return dict(self._open)

    @property
    def last_event(self) -> UIEvent | None:
        """Most recently registered event, finalized or not."""
        return self._last_event

    def last_event_for(self, page: str, component: str | None) -> UIEvent | None:
        """Most recently registered event for one (page, component)."""
        slot = self._slot(page, component)
        return slot.last_event if slot is not None else None

    @property
    def last_page(self) -> str | None:
        return self._last_event.page if self._last_event else None

    @property
    def last_component(self) -> str | None:
        return self._last_event.component if self._last_event else None

    def pages(self) -> list[str]:
        """Every page that has seen at least one event."""
        return list(self._pages.keys())

    def __len__(self) -> int:
        return len(self._open)

    def __contains__(self, event: object) -> bool:
        return isinstance(event, UIEvent) and self.is_open(event)

    def _slot(
        self, page: str, component: str | None, create: bool = False,
    ) -> _ComponentSlot | None:
        components = self._pages.get(page)
        if components is None:
            if not create:
                return None
            components = self._pages[page] = {}
        slot = components.get(component)
        if slot is None and create:
            slot = components[component] = _ComponentSlot()
        return slot
