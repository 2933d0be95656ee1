"""Built-in finalization policies -- implementations of the FinalizationPolicy protocol."""

from core.registry import PolicyRegistry
from plugins.finalization_policies.immediate import ImmediatePolicy
from plugins.finalization_policies.next_event import NextEventPolicy
from plugins.finalization_policies.page_change import PageChangePolicy
from plugins.finalization_policies.same_component import NextEventSameComponentPolicy


def build_default_registry() -> PolicyRegistry:
    """Return a registry holding the four built-in policies."""
    registry = PolicyRegistry()
    for policy in (
        ImmediatePolicy(),
        NextEventPolicy(),
        PageChangePolicy(),
        NextEventSameComponentPolicy(),
    ):
        registry.register(policy)
    return registry


__all__ = [
    "ImmediatePolicy",
    "NextEventPolicy",
    "PageChangePolicy",
    "NextEventSameComponentPolicy",
    "build_default_registry",
]
