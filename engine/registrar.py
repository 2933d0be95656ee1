"""EventRegistrar -- turns a raw event into a registered, indexed UIEvent.

One register_event() call validates the event, stamps it with an id,
a timestamp and its predecessor, finalizes it on the spot if its mode
asks for that, lets the FinalizationEngine close whatever it causes to
close, and finally commits it to the EventStore.

Validation runs before any state changes. A rejected event leaves the
store, the id counter and the delivery queue exactly as they were.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core.clock import Clock
from core.errors import ValidationError
from core.models.events import EventOptions, FinalizationModes, FinalizationTriggers, UIEvent
from core.registry import PolicyRegistry
from engine.finalization import FinalizationEngine
from engine.store import EventStore

logger = logging.getLogger(__name__)


class EventRegistrar:
    """Validates, augments and registers events."""

    def __init__(
        self,
        store: EventStore,
        engine: FinalizationEngine,
        registry: PolicyRegistry,
        clock: Clock,
        allowed_props: frozenset[str],
    ) -> None:
        self._store = store
        self._engine = engine
        self._registry = registry
        self._clock = clock
        self._allowed_props = allowed_props

    def register_event(
        self,
        raw_event: Mapping[str, Any] | UIEvent,
        options: Mapping[str, Any] | EventOptions | None = None,
    ) -> UIEvent:
        """Register an event and return the stored UIEvent.

        Raises ValidationError for an unknown property, an unknown
        finalization mode, or a property of the wrong type.
        """
        mode = self._resolve_mode(options)
        event = self._build_event(raw_event, mode)

        self._augment(event)

        if self._registry.get(mode).should_finalize(FinalizationTriggers.REGISTERED):
            self._engine.finalize(event, UIEvent.empty_cause(self._clock.now()))

        # Runs for self-finalized events too: they can still close others
        self._engine.evaluate(event)
        self._store.commit(event)

        logger.debug(
            "Registered event %d: %s/%s (mode=%s)",
            event.event_id, event.page, event.component, mode,
        )
        return event

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _resolve_mode(self, options: Mapping[str, Any] | EventOptions | None) -> str:
        if options is None:
            return FinalizationModes.DEFAULT
        if not isinstance(options, EventOptions):
            try:
                options = EventOptions(**options)
            except (PydanticValidationError, TypeError) as exc:
                logger.error("Invalid event options: %s", options)
                raise ValidationError(f"Invalid event options: {exc}") from exc

        mode = options.finalization_mode or FinalizationModes.DEFAULT
        if not self._registry.has(mode):
            logger.error("Event has invalid finalization mode: %r", mode)
            raise ValidationError(f"Invalid finalization mode {mode!r}")
        return mode

    def _build_event(self, raw_event: Mapping[str, Any] | UIEvent, mode: str) -> UIEvent:
        if isinstance(raw_event, UIEvent):
            raw_event = raw_event.model_dump(exclude_unset=True)
        elif not isinstance(raw_event, Mapping):
            raise ValidationError(f"Event must be a mapping, got {type(raw_event).__name__}")

        for key in raw_event:
            if key not in self._allowed_props:
                logger.error("Event has invalid property %r: %s", key, raw_event)
                raise ValidationError(f"Event has invalid property: {key}")

        try:
            return UIEvent(**raw_event, finalization_mode=mode)
        except PydanticValidationError as exc:
            logger.error("Event failed validation: %s", raw_event)
            raise ValidationError(f"Invalid event: {exc}") from exc

    # ------------------------------------------------------------------
    # Augmentation
    # ------------------------------------------------------------------

    def _augment(self, event: UIEvent) -> None:
        """Assign id and timestamp, and link the previous event."""
        event.event_id = self._store.allocate_event_id()
        event.time = self._clock.now()

        last = self._store.last_event
        if last is not None:
            event.previous_event_id = last.event_id
            event.previous_page = last.page
            event.previous_component = last.component
