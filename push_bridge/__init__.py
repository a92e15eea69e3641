"""Client-side push delivery: deliver now, or coalesce behind one notification."""

from push_bridge.bridge import PushBridge
from push_bridge.config import BridgeConfig

__all__ = ["BridgeConfig", "PushBridge"]
