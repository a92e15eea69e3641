"""Tests for the notification surfaces."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from push_bridge import surface as surface_module
from push_bridge.coalescer import NotificationCoalescer
from push_bridge.config import BridgeConfig
from push_bridge.message import Message
from push_bridge.surface import PlyerNotificationSurface


def _params(config: BridgeConfig):
    _, params = NotificationCoalescer(config).fold(None, Message.from_payload({"message": "A"}))
    return params


def test_plyer_surface_passes_render_params(monkeypatch: pytest.MonkeyPatch, config: BridgeConfig) -> None:
    calls: List[Dict[str, Any]] = []
    monkeypatch.setattr(surface_module.notification, "notify", lambda **kw: calls.append(kw))

    PlyerNotificationSurface(timeout=3).render(_params(config))

    assert calls == [{"title": "Inbox", "message": "A", "app_name": "Inbox", "timeout": 3}]


def test_plyer_render_failure_is_logged(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, config: BridgeConfig
) -> None:
    def broken(**_kw: Any) -> None:
        raise NotImplementedError("no backend")

    monkeypatch.setattr(surface_module.notification, "notify", broken)

    PlyerNotificationSurface().render(_params(config))

    assert "Rendering notification 519 failed" in caplog.text
