"""ComponentMetrics -- the public entrypoint of the tracker.

Collects UI events that carry
  * UI context: the page and component they happened on
  * temporal context: what happened before (previous_page) and after
    (next_page) each event, and how long it lasted (duration)

Usage:
    metrics = ComponentMetrics({"valid_props": ["user_id"]})
    metrics.register_finalized_events_callback(lambda events: print(events))
    await metrics.run()

    metrics.register_event({
        "user_id": 44,
        "interaction_meaning": "read",
        "interaction_gesture": "view",
        "page": "feed",
        "component": "feed_card",
    })

The event above lasts until any other event is registered. Pass
options={"finalization_mode": ...} to change that:
    "immediate"                  finalize at registration
    "next_event"                 finalize on any other event (default)
    "page_change"                finalize on a page change
    "next_event_same_component"  finalize on an event for the same
                                 component, or on a page change
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from core.clock import Clock
from core.config import MetricsConfig, build_metrics_config
from core.models.events import EventOptions, UIEvent
from core.protocols import FinalizedEventsCallback
from core.registry import PolicyRegistry
from engine.delivery import DeliveryQueue
from engine.finalization import FinalizationEngine
from engine.registrar import EventRegistrar
from engine.store import EventStore
from plugins.finalization_policies import build_default_registry
from scheduler.runner import FlushScheduler

logger = logging.getLogger(__name__)


class ComponentMetrics:
    """UI event tracker: registration, finalization and periodic delivery.

    Raises ConfigurationError at construction if `config` lacks
    `valid_props` or is otherwise invalid.
    """

    def __init__(
        self,
        config: MetricsConfig | Mapping[str, Any],
        clock: Clock | None = None,
        registry: PolicyRegistry | None = None,
    ) -> None:
        self._config = build_metrics_config(config)
        self._clock = clock or Clock.system()
        self._registry = registry or build_default_registry()

        self._store = EventStore()
        self._queue = DeliveryQueue()
        self._engine = FinalizationEngine(self._store, self._queue, self._registry)
        self._registrar = EventRegistrar(
            store=self._store,
            engine=self._engine,
            registry=self._registry,
            clock=self._clock,
            allowed_props=self._config.allowed_props,
        )
        self._scheduler = FlushScheduler(
            self.flush, interval=self._config.flush_interval_seconds,
        )

    @property
    def config(self) -> MetricsConfig:
        return self._config

    @property
    def valid_props(self) -> list[str]:
        return list(self._config.valid_props)

    @property
    def store(self) -> EventStore:
        return self._store

    @property
    def is_running(self) -> bool:
        return self._scheduler.is_running

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def register_finalized_events_callback(self, callback: FinalizedEventsCallback) -> None:
        """Register a callback invoked with each flushed batch of finalized events."""
        self._queue.subscribe(callback)

    def register_event(
        self,
        event: Mapping[str, Any] | UIEvent,
        options: Mapping[str, Any] | EventOptions | None = None,
    ) -> UIEvent:
        """Register an event with optional options; returns the stored event.

        Raises ValidationError if the event or its options are rejected.
        """
        return self._registrar.register_event(event, options)

    def flush(self) -> list[UIEvent]:
        """Deliver every finalized event to the callbacks now."""
        batch = self._queue.flush()
        if batch:
            logger.info("Flushed %d finalized event(s)", len(batch))
        return batch

    def get_finalized_events(self) -> list[UIEvent]:
        """Finalized events awaiting the next flush (a copy)."""
        return self._queue.pending()

    def get_unfinalized_events(self) -> dict[int, UIEvent]:
        """Open events keyed by event_id (a copy)."""
        return self._store.unfinalized_events()

    async def run(self) -> None:
        """Start flushing finalized events every `flush_interval`."""
        await self._scheduler.start()

    async def stop(self) -> None:
        """Stop periodic flushing and deliver what is already finalized.

        Events still open are not finalized and will never be delivered.
        """
        await self._scheduler.stop()
        self.flush()

    def close(self) -> None:
        """Drop all open and undelivered events.

        The tracker stays usable; new events keep the id sequence going.
        """
        dropped_open = len(self._store)
        dropped_finalized = len(self._queue)
        self._store.clear()
        self._queue.clear()
        if dropped_open or dropped_finalized:
            logger.info(
                "Closed tracker, dropped %d open and %d undelivered event(s)",
                dropped_open, dropped_finalized,
            )
