import pytest

from core.models.events import FinalizationModes, FinalizationTriggers
from core.protocols import FinalizationPolicy
from core.registry import PolicyRegistry
from engine.metrics import ComponentMetrics


def test_default_registry_holds_the_four_modes(registry):
    assert sorted(registry.names()) == sorted(FinalizationModes.ALL)
    for name in registry.names():
        assert isinstance(registry.get(name), FinalizationPolicy)


@pytest.mark.parametrize("mode, triggers", [
    (FinalizationModes.IMMEDIATE, {FinalizationTriggers.REGISTERED}),
    (FinalizationModes.NEXT_EVENT, {FinalizationTriggers.NEXT_EVENT}),
    (FinalizationModes.PAGE_CHANGE, {FinalizationTriggers.PAGE_CHANGE}),
    (
        FinalizationModes.NEXT_EVENT_SAME_COMPONENT,
        {FinalizationTriggers.SAME_COMPONENT, FinalizationTriggers.PAGE_CHANGE},
    ),
])
def test_policy_triggers(registry, mode, triggers):
    policy = registry.get(mode)
    all_triggers = {
        FinalizationTriggers.REGISTERED,
        FinalizationTriggers.PAGE_CHANGE,
        FinalizationTriggers.SAME_COMPONENT,
        FinalizationTriggers.NEXT_EVENT,
    }
    assert {t for t in all_triggers if policy.should_finalize(t)} == triggers


def test_get_unknown_raises_key_error():
    with pytest.raises(KeyError, match="Available"):
        PolicyRegistry().get("next_event")


def test_register_rejects_non_policy():
    with pytest.raises(TypeError):
        PolicyRegistry().register(object())


class NeverPolicy:
    """Stays open until the tracker is closed."""

    @property
    def name(self):
        return "never"

    def should_finalize(self, trigger):
        return False


def test_custom_policy_plugs_into_tracker(registry):
    registry.register(NeverPolicy())
    metrics = ComponentMetrics({"valid_props": []}, registry=registry)

    sticky = metrics.register_event({"page": "home", "component": "player"}, {"finalization_mode": "never"})
    metrics.register_event({"page": "profile", "component": "player"})
    metrics.register_event({"page": "home", "component": "player"})

    assert not sticky.finalized
    assert sticky.event_id in metrics.get_unfinalized_events()
