import logging

from core.models.events import UIEvent


def _finalized(event_id: int) -> UIEvent:
    return UIEvent(page="feed", component="feed_card", event_id=event_id, finalized=True)


def test_flush_returns_and_clears_backlog(queue):
    first, second = _finalized(0), _finalized(1)
    queue.append(first)
    queue.append(second)

    assert queue.flush() == [first, second]
    assert len(queue) == 0
    assert queue.flush() == []


def test_subscribers_share_the_same_batch(queue):
    received = []
    queue.subscribe(received.append)
    queue.subscribe(received.append)
    queue.append(_finalized(0))

    batch = queue.flush()

    assert len(received) == 2
    assert received[0] is batch
    assert received[1] is batch


def test_empty_flush_does_not_call_subscribers(queue):
    calls = []
    queue.subscribe(calls.append)
    queue.flush()
    assert calls == []


def test_failing_subscriber_does_not_block_others(queue, caplog):
    received = []

    def broken(batch):
        raise RuntimeError("boom")

    queue.subscribe(broken)
    queue.subscribe(received.append)
    queue.append(_finalized(0))

    with caplog.at_level(logging.ERROR, logger="engine.delivery"):
        batch = queue.flush()

    assert received == [batch]
    assert "Error in finalized events callback" in caplog.text
    # Not redelivered
    assert queue.flush() == []


def test_unsubscribe(queue):
    received = []
    queue.subscribe(received.append)
    queue.unsubscribe(received.append)
    queue.unsubscribe(received.append)
    queue.append(_finalized(0))
    queue.flush()

    assert received == []
    assert queue.subscriber_count() == 0


def test_pending_is_a_copy(queue):
    queue.append(_finalized(0))
    pending = queue.pending()
    pending.clear()
    assert len(queue) == 1
