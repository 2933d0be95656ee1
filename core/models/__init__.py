"""Pydantic data models shared across all components."""

from core.models.events import (
    BUILTIN_PROPS,
    SYSTEM_PROPS,
    EventOptions,
    FinalizationModes,
    FinalizationTriggers,
    UIEvent,
)

__all__ = [
    "BUILTIN_PROPS",
    "SYSTEM_PROPS",
    "EventOptions",
    "FinalizationModes",
    "FinalizationTriggers",
    "UIEvent",
]
