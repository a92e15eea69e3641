"""Inbound push messages and registration lifecycle events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import hashlib
import json
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

BODY_KEY = "message"
ID_KEYS = ("message_id", "id")


def _normalize(payload: Optional[Mapping[Any, Any]]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for key, value in (payload or {}).items():
        if key is None:
            continue
        out[str(key)] = "" if value is None else str(value)
    return out


@dataclass(frozen=True)
class Message:
    data: Mapping[str, str]
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[Any, Any]], received_at: Optional[datetime] = None) -> "Message":
        data = MappingProxyType(_normalize(payload))
        if received_at is None:
            return cls(data=data)
        return cls(data=data, received_at=received_at)

    def get(self, key: str) -> str:
        return self.data.get(key, "")

    @property
    def body(self) -> str:
        return self.get(BODY_KEY)

    @property
    def transport_id(self) -> Optional[str]:
        for key in ID_KEYS:
            if self.get(key):
                return f"{key}:{self.get(key)}"
        return None

    @property
    def identity(self) -> str:
        if self.transport_id:
            return self.transport_id
        canonical = json.dumps(dict(self.data), sort_keys=True, separators=(",", ":"))
        return "sha1:" + hashlib.sha1(canonical.encode("utf-8")).hexdigest()

    def as_event(self, foreground: bool) -> Dict[str, Any]:
        return {
            "event": "message",
            "foreground": foreground,
            "payload": dict(self.data),
            "timestamp": self.received_at.isoformat(),
        }


@dataclass(frozen=True)
class Registered:
    registration_id: str

    def as_event(self) -> Dict[str, Any]:
        return {"type": "register", "data": {"regid": self.registration_id}}


@dataclass(frozen=True)
class Unregistered:
    registration_id: str

    def as_event(self) -> Dict[str, Any]:
        return {"type": "unregister", "data": {"regid": self.registration_id}}


@dataclass(frozen=True)
class RegistrationFailed:
    reason: str

    def as_event(self) -> Dict[str, Any]:
        return {"type": "error", "data": {"reason": self.reason}}


RegistrationEvent = Union[Registered, Unregistered, RegistrationFailed]
