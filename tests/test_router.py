"""Tests for the deliver-or-notify routing decision."""

from __future__ import annotations

import pytest

from push_bridge.coalescer import NotificationCoalescer
from push_bridge.config import BridgeConfig
from push_bridge.foreground import ForegroundTracker
from push_bridge.message import Message
from push_bridge.router import Deliver, DeliveryRouter, Notify
from push_bridge.store import PayloadStore, StoreState


@pytest.fixture
def router(config: BridgeConfig) -> DeliveryRouter:
    return DeliveryRouter(ForegroundTracker(), PayloadStore(), NotificationCoalescer(config))


def test_foreground_delivers_and_leaves_store_empty(router: DeliveryRouter) -> None:
    router.tracker.set_foreground(True)
    message = Message.from_payload({"message": "A"})

    assert router.handle_incoming(message) == Deliver(message)
    assert router.store.state is StoreState.EMPTY


def test_foreground_does_not_touch_existing_batch(router: DeliveryRouter) -> None:
    router.handle_incoming(Message.from_payload({"message": "queued"}))
    before = router.store.peek()

    router.tracker.set_foreground(True)
    router.handle_incoming(Message.from_payload({"message": "live"}))

    assert router.store.peek() is before


def test_background_notifies_and_leaves_store_pending(router: DeliveryRouter) -> None:
    action = router.handle_incoming(Message.from_payload({"message": "A"}))

    assert isinstance(action, Notify)
    assert router.store.state is StoreState.PENDING
    assert action.params.tap_payload is router.store.peek()


def test_background_sequence_drains_as_one_batch(router: DeliveryRouter) -> None:
    """A then B in the background drain together, newest body shown."""

    router.handle_incoming(Message.from_payload({"message": "A"}))
    action = router.handle_incoming(Message.from_payload({"message": "B"}))

    batch = router.store.drain()
    assert batch.count == 2
    assert batch.payloads() == [{"message": "A"}, {"message": "B"}]
    assert action.params.body == "B"
    assert router.store.peek() is None


def test_redelivered_message_keeps_count(router: DeliveryRouter) -> None:
    for _ in range(3):
        router.handle_incoming(Message.from_payload({"message_id": "1", "message": "A"}))

    assert router.store.peek().count == 1
