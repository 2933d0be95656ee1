import pytest

from core.clock import Clock
from engine.delivery import DeliveryQueue
from engine.finalization import FinalizationEngine
from engine.metrics import ComponentMetrics
from engine.store import EventStore
from plugins.finalization_policies import build_default_registry


@pytest.fixture
def clock():
    return Clock.manual(start=1_700_000_000_000)


@pytest.fixture
def metrics(clock):
    return ComponentMetrics({"valid_props": ["user_id"]}, clock=clock)


@pytest.fixture
def registry():
    return build_default_registry()


@pytest.fixture
def store():
    return EventStore()


@pytest.fixture
def queue():
    return DeliveryQueue()


@pytest.fixture
def engine(store, queue, registry):
    return FinalizationEngine(store, queue, registry)


def make_event(**fields):
    """Raw event with the user_id every test deployment allows."""
    return {"user_id": 44, "interaction_meaning": "read", "interaction_gesture": "view", **fields}
