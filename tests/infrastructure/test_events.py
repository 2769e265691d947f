from dataclasses import dataclass

from cbxdrive.events import AssetsMovedEvent, FolderDeletedEvent
from cbxdrive.events.bus import Event, EventBus


@dataclass(kw_only=True)
class SimpleEvent(Event):
    payload: str = ""


def test_subscribe_publish():
    bus = EventBus()
    received = []

    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="hello"))

    assert received == ["hello"]


def test_handlers_only_receive_their_type():
    bus = EventBus()
    moved = []
    bus.subscribe(AssetsMovedEvent, moved.append)

    bus.publish(FolderDeletedEvent(folder_id="a", removed_ids=("a",)))
    bus.publish(AssetsMovedEvent(asset_ids=(1, 2), target_folder_id="b"))

    assert [event.asset_ids for event in moved] == [(1, 2)]


def test_unsubscribe():
    bus = EventBus()
    received = []
    sub = bus.subscribe(SimpleEvent, received.append)

    bus.unsubscribe(sub)
    bus.publish(SimpleEvent(payload="ignored"))

    assert received == []
    assert bus.subscriber_count(SimpleEvent) == 0


def test_cancelled_subscription_is_skipped():
    bus = EventBus()
    received = []
    sub = bus.subscribe(SimpleEvent, received.append)

    sub.cancel()
    bus.publish(SimpleEvent(payload="ignored"))

    assert received == []


def test_failing_handler_does_not_block_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(SimpleEvent, broken)
    bus.subscribe(SimpleEvent, lambda event: received.append(event.payload))
    bus.publish(SimpleEvent(payload="still delivered"))

    assert received == ["still delivered"]


def test_events_carry_ids_and_timestamps():
    first = SimpleEvent(payload="a")
    second = SimpleEvent(payload="b")

    assert first.event_id != second.event_id
    assert first.timestamp is not None
