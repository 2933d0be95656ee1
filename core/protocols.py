"""Core protocols -- the extension points of the tracker.

The engine imports these protocols. Plugins implement them.
The engine NEVER imports concrete implementations.

All protocols use Python's structural subtyping (typing.Protocol):
if your class has the right methods, it implements the protocol.
No inheritance required.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

from core.models.events import UIEvent


# ---------------------------------------------------------------------------
# 1. FinalizationPolicy -- decides when an open event is finalized
# ---------------------------------------------------------------------------

@runtime_checkable
class FinalizationPolicy(Protocol):
    """Decides which triggers finalize an event registered under it.

    The FinalizationEngine owns the order in which triggers are
    evaluated; a policy only answers whether a given trigger applies.
    One policy is registered per finalization mode name.
    """

    @property
    def name(self) -> str:
        """Finalization mode name, e.g. 'next_event', 'page_change'."""
        ...

    def should_finalize(self, trigger: str) -> bool:
        """Return True if `trigger` (a FinalizationTriggers value) closes the event.

        This is intentionally synchronous -- policies must be
        deterministic and fast. No I/O.
        """
        ...


# ---------------------------------------------------------------------------
# 2. FinalizedEventsCallback -- observer of finalized batches
# ---------------------------------------------------------------------------

# Receives the full batch on every flush. Every observer gets the same list
# object, so observers must not mutate it.
FinalizedEventsCallback = Callable[[list[UIEvent]], None]
