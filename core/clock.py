"""Clock -- the time source events are stamped with.

In system mode, now() is the real wall clock in epoch milliseconds.
In manual mode, time only moves when advanced, so durations are
deterministic (used by tests and replays).
"""

from __future__ import annotations

import time
from typing import Literal

from pydantic import BaseModel


class Clock(BaseModel):
    """Millisecond time source for event timestamps and durations."""

    mode: Literal["system", "manual"] = "system"
    manual_time: int = 0

    @classmethod
    def system(cls) -> Clock:
        """Create a clock that reads the real current time."""
        return cls(mode="system")

    @classmethod
    def manual(cls, start: int = 0) -> Clock:
        """Create a clock frozen at `start` until advanced."""
        return cls(mode="manual", manual_time=start)

    def now(self) -> int:
        """Current time in epoch milliseconds."""
        if self.mode == "manual":
            return self.manual_time
        return int(time.time() * 1000)

    def advance(self, milliseconds: int) -> None:
        """Move a manual clock forward (only valid in manual mode)."""
        if self.mode != "manual":
            raise RuntimeError("Cannot advance a system clock")
        if milliseconds < 0:
            raise ValueError("Cannot move a clock backwards")
        self.manual_time += milliseconds

    @property
    def is_manual(self) -> bool:
        return self.mode == "manual"
