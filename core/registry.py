"""Policy registry -- maps finalization mode names to FinalizationPolicy plugins.

At startup the tracker registers the built-in policies here. The registrar
validates requested modes against it and the engine looks up each open
event's policy by its mode.
"""

from __future__ import annotations

import logging

from core.protocols import FinalizationPolicy

logger = logging.getLogger(__name__)


class PolicyRegistry:
    """Central registry for finalization policies.

    Usage:
        registry = PolicyRegistry()
        registry.register(NextEventPolicy())
        registry.register(PageChangePolicy())

        policy = registry.get("page_change")
        registry.names()  # ["next_event", "page_change"]
    """

    def __init__(self) -> None:
        self._policies: dict[str, FinalizationPolicy] = {}

    def register(self, policy: FinalizationPolicy) -> None:
        """Register a policy under its `name`.

        Raises TypeError if the instance does not implement FinalizationPolicy.
        """
        if not isinstance(policy, FinalizationPolicy):
            raise TypeError(
                f"{policy!r} does not implement FinalizationPolicy "
                f"(needs a `name` property and `should_finalize()`)"
            )

        name = policy.name
        if name in self._policies:
            logger.warning("Overwriting existing finalization policy '%s'", name)

        self._policies[name] = policy
        logger.debug("Registered finalization policy: %s", name)

    def get(self, name: str) -> FinalizationPolicy:
        """Get the policy for a finalization mode.

        Raises KeyError if not found.
        """
        if name not in self._policies:
            raise KeyError(
                f"No finalization policy named '{name}'. "
                f"Available: {self.names()}"
            )
        return self._policies[name]

    def has(self, name: str) -> bool:
        """Check if a policy is registered."""
        return name in self._policies

    def names(self) -> list[str]:
        """List all registered mode names, in registration order."""
        return list(self._policies.keys())

    def __len__(self) -> int:
        return len(self._policies)
