"""Shared fixtures for the push bridge tests."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from push_bridge.bridge import PushBridge
from push_bridge.config import BridgeConfig
from push_bridge.surface import RecordingSurface


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig(app_name="Inbox", default_message="New activity")


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def delivered() -> List[Dict[str, Any]]:
    return []


@pytest.fixture
def bridge(config: BridgeConfig, surface: RecordingSurface, delivered: List[Dict[str, Any]]) -> PushBridge:
    instance = PushBridge(config, surface=surface)
    instance.set_message_handler(delivered.append)
    return instance
