import logging
from enum import Enum, auto

from runtime.core.events import EventBus


class MockEvent(Enum):
    TEST_EVENT = auto()
    OTHER_EVENT = auto()


def test_event_bus_subscribe_publish(event_bus):
    received = []

    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT, data="test")

    assert len(received) == 1
    assert received[0].type == MockEvent.TEST_EVENT
    assert received[0]["data"] == "test"


def test_event_bus_unsubscribe(event_bus):
    received = []

    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.unsubscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert received == []
    assert not event_bus.has_subscribers(MockEvent.TEST_EVENT)


def test_event_priority(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("low"), priority=1, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("high"), priority=10, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("normal"), priority=5, weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["high", "normal", "low"]


def test_same_priority_keeps_registration_order(event_bus):
    order = []

    for name in ("first", "second", "third"):
        event_bus.subscribe(MockEvent.TEST_EVENT, lambda e, n=name: order.append(n), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["first", "second", "third"]


def test_event_consumption(event_bus):
    received = []

    def consumer(event):
        received.append("consumer")
        event.consume()

    def later_handler(event):
        received.append("later")

    event_bus.subscribe(MockEvent.TEST_EVENT, consumer, priority=10)
    event_bus.subscribe(MockEvent.TEST_EVENT, later_handler, priority=5)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert received == ["consumer"]


def test_one_shot_handler(event_bus):
    received = []
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: received.append(e), one_shot=True, weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1


def test_failing_handler_is_logged_and_others_still_run(event_bus, caplog):
    received = []

    def broken(event):
        raise ValueError("boom")

    event_bus.subscribe(MockEvent.TEST_EVENT, broken, priority=10, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: received.append("ok"), weak=False)

    with caplog.at_level(logging.ERROR, logger="runtime.core.events"):
        event_bus.publish(MockEvent.TEST_EVENT)

    assert received == ["ok"]
    assert "Error in handler" in caplog.text


def test_publish_during_dispatch_is_queued(event_bus):
    order = []

    def first(event):
        order.append("test:start")
        event_bus.publish(MockEvent.OTHER_EVENT)
        order.append("test:end")

    event_bus.subscribe(MockEvent.TEST_EVENT, first, weak=False)
    event_bus.subscribe(MockEvent.OTHER_EVENT, lambda e: order.append("other"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["test:start", "test:end", "other"]


def test_weak_handler_removed_after_collection():
    bus = EventBus()
    received = []

    class Listener:
        def on_event(self, event):
            received.append(event)

    listener = Listener()
    bus.subscribe(MockEvent.TEST_EVENT, listener.on_event)
    del listener

    bus.publish(MockEvent.TEST_EVENT)

    assert received == []
    assert not bus.has_subscribers(MockEvent.TEST_EVENT)
