"""Tests for inbound message normalisation and registration events."""

from __future__ import annotations

from datetime import datetime, timezone

from push_bridge.message import Message, Registered, RegistrationFailed, Unregistered


def test_missing_and_none_fields_default_to_empty_string() -> None:
    """Partial transport data never fails and reads back as empty strings."""

    message = Message.from_payload({"message": None, "count": 3})

    assert message.body == ""
    assert message.get("count") == "3"
    assert message.get("absent") == ""
    assert Message.from_payload(None).data == {}


def test_payload_is_copied_and_read_only() -> None:
    """Mutating the transport's dict afterwards does not change the message."""

    payload = {"message": "hi"}
    message = Message.from_payload(payload)
    payload["message"] = "changed"

    assert message.body == "hi"


def test_identity_prefers_transport_message_id() -> None:
    """Two deliveries with the same id share an identity despite other changes."""

    first = Message.from_payload({"message_id": "m-1", "message": "a"})
    second = Message.from_payload({"message_id": "m-1", "message": "b"})

    assert first.identity == second.identity == "message_id:m-1"


def test_identity_ignores_delivery_timestamp() -> None:
    """A redelivered payload without an id matches the original delivery."""

    early = Message.from_payload({"message": "a"}, datetime(2024, 1, 1, tzinfo=timezone.utc))
    late = Message.from_payload({"message": "a"}, datetime(2024, 1, 2, tzinfo=timezone.utc))
    other = Message.from_payload({"message": "b"})

    assert early.identity == late.identity
    assert early.identity != other.identity


def test_as_event_carries_foreground_flag() -> None:
    received = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    message = Message.from_payload({"message": "a"}, received)

    assert message.as_event(True) == {
        "event": "message",
        "foreground": True,
        "payload": {"message": "a"},
        "timestamp": "2024-05-01T12:00:00+00:00",
    }


def test_registration_events_outward_shape() -> None:
    assert Registered("abc").as_event() == {"type": "register", "data": {"regid": "abc"}}
    assert Unregistered("abc").as_event() == {"type": "unregister", "data": {"regid": "abc"}}
    assert RegistrationFailed("SERVICE_NOT_AVAILABLE").as_event() == {
        "type": "error",
        "data": {"reason": "SERVICE_NOT_AVAILABLE"},
    }
