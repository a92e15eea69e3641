"""Kivy host application for the push bridge."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from kivy.app import App
from kivy.clock import mainthread
from kivy.properties import StringProperty
from kivy.uix.boxlayout import BoxLayout
from kivy.uix.label import Label

from push_bridge.bridge import PushBridge
from push_bridge.config import BridgeConfig, ConfigError

_LOGGER = logging.getLogger(__name__)


class MessagesView(BoxLayout):
    status_text = StringProperty("Waiting for messages")
    last_message = StringProperty("")


class PushBridgeApp(App):
    def __init__(self, bridge: Optional[PushBridge] = None, **kwargs):
        super().__init__(**kwargs)
        self.bridge = bridge or self._init_bridge()
        self.bridge.set_message_handler(self._on_push)
        self.bridge.subscribe_registration(self._on_registration)
        self.view: Optional[MessagesView] = None

    @staticmethod
    def _init_bridge() -> PushBridge:
        try:
            config = BridgeConfig.from_env()
        except ConfigError as exc:
            # open the app with defaults rather than refuse to start
            _LOGGER.warning("Configuration error, using defaults: %s", exc)
            config = BridgeConfig()
        return PushBridge(config)

    def build(self):
        self.title = self.bridge.config.app_name
        self.view = MessagesView(orientation="vertical")
        status = Label(text=self.view.status_text)
        last = Label(text=self.view.last_message)
        self.view.bind(status_text=status.setter("text"), last_message=last.setter("text"))
        self.view.add_widget(status)
        self.view.add_widget(last)
        return self.view

    def on_start(self):
        self.bridge.on_foreground_enter()

    def on_pause(self):
        self.bridge.on_foreground_exit()
        return True

    def on_resume(self):
        self.bridge.on_foreground_enter()

    def on_stop(self):
        self.bridge.on_foreground_exit()

    def receive_notification(self, payload: Dict[str, Any]) -> None:
        self.bridge.on_message(payload)

    @mainthread
    def _on_push(self, event: Dict[str, Any]) -> None:
        if not self.view:
            return
        origin = "live" if event.get("foreground") else "from notification"
        self.view.status_text = f"Message received ({origin})"
        self.view.last_message = json.dumps(event.get("payload", {}), sort_keys=True)

    @mainthread
    def _on_registration(self, event: Dict[str, Any]) -> None:
        if not self.view:
            return
        if event["type"] == "error":
            self.view.status_text = f"Push registration failed: {event['data'].get('reason', '')}"
        else:
            self.view.status_text = f"Push {event['type']}ed"


if __name__ == "__main__":
    PushBridgeApp().run()
