"""DeliveryQueue -- buffers finalized events until they are flushed to observers.

Finalized events are appended as they close. flush() hands the whole
backlog to every registered callback and starts a fresh one.
"""

from __future__ import annotations

import logging

from core.models.events import UIEvent
from core.protocols import FinalizedEventsCallback

logger = logging.getLogger(__name__)


class DeliveryQueue:
    """Append-only buffer of finalized events with batch observers.

    Usage:
        queue = DeliveryQueue()
        queue.subscribe(lambda batch: print(len(batch)))
        queue.append(event)
        queue.flush()  # -> [event]; observers called with the same list
    """

    def __init__(self) -> None:
        self._pending: list[UIEvent] = []
        self._subscribers: list[FinalizedEventsCallback] = []

    def append(self, event: UIEvent) -> None:
        """Queue a finalized event for the next flush."""
        self._pending.append(event)

    def subscribe(self, callback: FinalizedEventsCallback) -> None:
        """Register a callback invoked with every flushed batch."""
        self._subscribers.append(callback)
        logger.debug("Subscribed to finalized events: %s", callback)

    def unsubscribe(self, callback: FinalizedEventsCallback) -> None:
        """Remove a previously registered callback."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def flush(self) -> list[UIEvent]:
        """Hand the backlog to every subscriber, then clear it.

        Each subscriber receives the same list, which is also returned.
        A subscriber that raises is logged and the rest still run;
        the batch is not redelivered.
        """
        batch, self._pending = self._pending, []
        if not batch:
            return batch

        logger.debug(
            "Flushing %d finalized event(s) to %d subscriber(s)",
            len(batch),
            len(self._subscribers),
        )
        for callback in list(self._subscribers):
            self._safe_invoke(callback, batch)
        return batch

    def pending(self) -> list[UIEvent]:
        """Copy of the events waiting for the next flush."""
        return list(self._pending)

    def clear(self) -> None:
        """Drop the backlog without delivering it."""
        self._pending = []

    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def __len__(self) -> int:
        return len(self._pending)

    def _safe_invoke(self, callback: FinalizedEventsCallback, batch: list[UIEvent]) -> None:
        """Invoke a callback, catching and logging any exceptions."""
        try:
            callback(batch)
        except Exception:
            logger.exception(
                "Error in finalized events callback %s (%d events)",
                callback,
                len(batch),
            )
