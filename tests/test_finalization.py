from core.models.events import FinalizationModes, UIEvent


def _open(store, page, component, mode=FinalizationModes.NEXT_EVENT, time=0):
    event = UIEvent(page=page, component=component, finalization_mode=mode, time=time)
    event.event_id = store.allocate_event_id()
    store.commit(event)
    return event


def _arrive(store, page, component, time=0):
    event = UIEvent(page=page, component=component, time=time)
    event.event_id = store.allocate_event_id()
    return event


def test_finalize_sets_linkage_and_duration(store, queue, engine):
    event = _open(store, "feed", "feed_card", time=1000)
    cause = _arrive(store, "profile", "avatar", time=1750)

    engine.finalize(event, cause)

    assert event.finalized
    assert event.next_page == "profile"
    assert event.next_component == "avatar"
    assert event.duration == 750
    assert event not in store
    assert queue.pending() == [event]


def test_finalize_keeps_supplied_duration(store, engine):
    event = _open(store, "feed", "feed_card", time=1000)
    event.duration = 42
    engine.finalize(event, _arrive(store, "feed", "other", time=5000))
    assert event.duration == 42


def test_finalize_twice_is_noop(store, queue, engine):
    event = _open(store, "feed", "feed_card")
    engine.finalize(event, _arrive(store, "home", "a"))
    engine.finalize(event, _arrive(store, "home", "b"))

    assert event.next_component == "a"
    assert len(queue) == 1


def test_cross_page_sweep_closes_page_scoped_modes(store, engine):
    page_change = _open(store, "home", "card", FinalizationModes.PAGE_CHANGE)
    same_component = _open(store, "home", "list", FinalizationModes.NEXT_EVENT_SAME_COMPONENT)

    closed = engine.evaluate(_arrive(store, "profile", "avatar"))

    assert closed == [page_change, same_component]
    assert len(store) == 0


def test_cross_page_sweep_ignores_component(store, engine):
    # A same-component event on another page closes whatever component arrives
    event = _open(store, "home", "card", FinalizationModes.NEXT_EVENT_SAME_COMPONENT)
    engine.evaluate(_arrive(store, "profile", "something_else"))
    assert event.finalized


def test_same_page_leaves_page_change_open(store, engine):
    event = _open(store, "home", "card", FinalizationModes.PAGE_CHANGE)
    assert engine.evaluate(_arrive(store, "home", "card")) == []
    assert event in store


def test_same_component_sweep(store, engine):
    target = _open(store, "feed", "feed_card", FinalizationModes.NEXT_EVENT_SAME_COMPONENT)
    sibling = _open(store, "feed", "profile_image", FinalizationModes.NEXT_EVENT_SAME_COMPONENT)
    page_scoped = _open(store, "feed", "feed_card", FinalizationModes.PAGE_CHANGE)

    closed = engine.evaluate(_arrive(store, "feed", "feed_card"))

    assert closed == [target]
    assert sibling in store
    assert page_scoped in store


def test_next_event_closes_last_registered_event(store, engine):
    earlier = _open(store, "feed", "a", FinalizationModes.PAGE_CHANGE)
    last = _open(store, "home", "b", FinalizationModes.NEXT_EVENT)

    closed = engine.evaluate(_arrive(store, "home", "c"))

    assert closed == [earlier, last]
    assert last.next_page == "home"
    assert last.next_component == "c"


def test_last_event_not_next_event_mode_stays_open(store, engine):
    last = _open(store, "feed", "a", FinalizationModes.PAGE_CHANGE)
    engine.evaluate(_arrive(store, "feed", "b"))
    assert last in store


def test_event_closed_by_sweep_is_not_closed_again(store, queue, engine, registry):
    # A last event matching both the cross-page sweep and the next-event check
    class Greedy:
        name = "greedy"

        def should_finalize(self, trigger):
            return True

    registry.register(Greedy())
    last = _open(store, "home", "card", "greedy")

    closed = engine.evaluate(_arrive(store, "profile", "avatar"))

    assert closed == [last]
    assert queue.pending() == [last]


def test_sweep_order_decides_which_events_close(store, engine):
    other_page = _open(store, "home", "card", FinalizationModes.PAGE_CHANGE)
    same_pair = _open(store, "feed", "feed_card", FinalizationModes.NEXT_EVENT_SAME_COMPONENT)
    last = _open(store, "feed", "button", FinalizationModes.NEXT_EVENT)

    closed = engine.evaluate(_arrive(store, "feed", "feed_card"))

    assert closed == [other_page, same_pair, last]
