"""Immediate policy -- finalize an event the moment it is registered."""

from __future__ import annotations

from core.models.events import FinalizationModes, FinalizationTriggers


class ImmediatePolicy:
    """Finalize on registration, against an empty cause.

    Such events are never indexed as open, so no later trigger reaches them.
    """

    @property
    def name(self) -> str:
        return FinalizationModes.IMMEDIATE

    def should_finalize(self, trigger: str) -> bool:
        return trigger == FinalizationTriggers.REGISTERED
