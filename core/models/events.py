"""Event model -- a single UI interaction tied to a page and a component."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


# -- Finalization mode constants --

class FinalizationModes:
    """Well-known finalization mode names."""

    IMMEDIATE = "immediate"
    NEXT_EVENT = "next_event"
    PAGE_CHANGE = "page_change"
    NEXT_EVENT_SAME_COMPONENT = "next_event_same_component"

    DEFAULT = NEXT_EVENT
    ALL = (IMMEDIATE, NEXT_EVENT, PAGE_CHANGE, NEXT_EVENT_SAME_COMPONENT)


class FinalizationTriggers:
    """Situations in which an open event may be finalized.

    The engine asks each event's policy about these in a fixed order.
    """

    # The event itself is being registered
    REGISTERED = "registered"
    # A new event arrived on a different page
    PAGE_CHANGE = "page_change"
    # A new event arrived on the same page and component
    SAME_COMPONENT = "same_component"
    # A new event arrived and this was the last registered event
    NEXT_EVENT = "next_event"


# Properties a caller may always set on an event
BUILTIN_PROPS = frozenset({
    "represented_object_type",
    "represented_object_id",
    "interaction_meaning",
    "interaction_gesture",
    "interaction_duration",
    "page",
    "component",
})

# Properties only the tracker may set
SYSTEM_PROPS = frozenset({
    "event_id",
    "time",
    "previous_event_id",
    "previous_page",
    "previous_component",
    "finalization_mode",
    "next_page",
    "next_component",
    "finalized",
})


class UIEvent(BaseModel):
    """A UI interaction event.

    Caller-supplied fields are set at creation. Registration assigns the
    identity, timestamp and predecessor fields; finalization assigns the
    ``next_*`` fields, ``duration`` and ``finalized`` exactly once.
    Whitelisted deployment properties are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    page: str
    component: str | None = None
    # Copied through unchanged; only the key is checked
    represented_object_type: Any = None
    represented_object_id: Any = None
    interaction_meaning: Any = None
    interaction_gesture: Any = None
    interaction_duration: Any = None

    # Registration
    event_id: int | None = None
    time: int | None = None  # epoch milliseconds
    finalization_mode: str = FinalizationModes.DEFAULT
    previous_event_id: int | None = None
    previous_page: str | None = None
    previous_component: str | None = None

    # Finalization
    next_page: str | None = None
    next_component: str | None = None
    duration: float | None = None  # milliseconds
    finalized: bool = False

    @classmethod
    def empty_cause(cls, time: int) -> UIEvent:
        """The synthetic cause that finalizes immediate-mode events."""
        return cls(page="", component="", event_id=-1, time=time)

    @property
    def key(self) -> tuple[str, str | None]:
        """The (page, component) pair this event is indexed under."""
        return (self.page, self.component)

    @property
    def extra_props(self) -> dict:
        """Deployment-specific properties carried by this event."""
        return dict(self.model_extra or {})


class EventOptions(BaseModel):
    """Per-event registration options."""

    model_config = ConfigDict(extra="forbid")

    finalization_mode: str | None = None
