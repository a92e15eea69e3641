"""Process-wide push bridge wiring the transport, UI layer and OS surface.

One ``PushBridge`` exists per process. It owns the foreground tracker, the
pending batch store and the router, and exposes the callbacks each external
collaborator calls into:

* the vendor transport: ``on_message``, ``on_registered``, ``on_unregistered``
  and ``on_registration_error``;
* the UI layer: ``on_foreground_enter`` and ``on_foreground_exit``;
* the notification surface: ``on_notification_tapped``.

Messages reach the application through the handler set with
``set_message_handler``, one event dict per message.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from push_bridge.coalescer import NotificationCoalescer, RenderParams
from push_bridge.config import BridgeConfig
from push_bridge.foreground import ForegroundTracker
from push_bridge.message import Message, Registered, RegistrationFailed, Unregistered
from push_bridge.registration import RegistrationForwarder, RegistrationSink, ServerRegistrationSink
from push_bridge.router import Deliver, DeliveryRouter
from push_bridge.store import PayloadStore, PendingBatch
from push_bridge.surface import PlyerNotificationSurface

_LOGGER = logging.getLogger(__name__)

MessageHandler = Callable[[Dict[str, Any]], None]


class PushBridge:
    def __init__(self, config: Optional[BridgeConfig] = None, surface: Any = None):
        self.config = config or BridgeConfig.from_env()
        self.surface = surface or PlyerNotificationSurface(timeout=self.config.notify_timeout)
        self.tracker = ForegroundTracker()
        self.store = PayloadStore()
        self.coalescer = NotificationCoalescer(self.config)
        self.router = DeliveryRouter(self.tracker, self.store, self.coalescer)
        self.registration = RegistrationForwarder()
        self.on_message_handler: Optional[MessageHandler] = None
        if self.config.registration_url:
            self.registration.subscribe(ServerRegistrationSink(self.config.registration_url))

    def set_message_handler(self, handler: Optional[MessageHandler]) -> None:
        self.on_message_handler = handler
        if handler is not None and self.tracker.is_foreground():
            self._drain_to_app()

    def subscribe_registration(self, sink: RegistrationSink) -> None:
        self.registration.subscribe(sink)

    # vendor transport

    def on_message(self, payload: Optional[Mapping[Any, Any]]) -> None:
        message = Message.from_payload(payload)
        action = self.router.handle_incoming(message)
        if isinstance(action, Deliver):
            if self.on_message_handler is None:
                # nobody to hand it to yet; wait with the background batch
                self.store.update(lambda batch: self.coalescer.fold(batch, action.message))
                return
            self._deliver(action.message, foreground=True)
            return

        self._render(action.params)
        # the app may have come forward while this message was being folded
        if self.tracker.is_foreground():
            self._drain_to_app()

    def on_registered(self, registration_id: Optional[str]) -> None:
        self.registration.forward(Registered(registration_id or ""))

    def on_unregistered(self, registration_id: Optional[str]) -> None:
        self.registration.forward(Unregistered(registration_id or ""))

    def on_registration_error(self, reason: Optional[str]) -> None:
        self.registration.forward(RegistrationFailed(reason or ""))

    # UI layer

    def on_foreground_enter(self) -> None:
        self.tracker.set_foreground(True)
        self._drain_to_app()

    def on_foreground_exit(self) -> None:
        self.tracker.set_foreground(False)

    # notification surface

    def on_notification_tapped(self, tap_payload: Optional[PendingBatch] = None) -> int:
        """Hand every pending message to the application.

        The store is authoritative: ``tap_payload`` may be older than what is
        pending now, and a second tap on a stale notification delivers nothing.
        """
        return self._drain_to_app()

    def pending(self) -> Optional[PendingBatch]:
        return self.store.peek()

    def acknowledge(self) -> None:
        """Discard the pending batch after the app consumed it via ``pending``."""
        self.store.clear()
        self._cancel()
        self._refresh()

    def _drain_to_app(self) -> int:
        if self.on_message_handler is None:
            # leave the batch for whoever attaches a handler
            _LOGGER.debug("No message handler attached; keeping pending batch")
            return 0
        batch = self.store.drain()
        if batch is None:
            return 0
        self._cancel()
        self._refresh()
        for message in batch.messages:
            self._deliver(message, foreground=False)
        return batch.count

    def _deliver(self, message: Message, foreground: bool) -> None:
        handler = self.on_message_handler
        if handler is None:
            _LOGGER.warning("Dropping message %s: no message handler attached", message.identity)
            return
        try:
            handler(message.as_event(foreground))
        except Exception:
            _LOGGER.exception("Message handler failed for %s", message.identity)

    def _render(self, params: RenderParams) -> None:
        try:
            self.surface.render(params)
        except Exception:
            _LOGGER.exception("Notification surface failed to render")

    def _cancel(self) -> None:
        try:
            self.surface.cancel()
        except Exception:
            _LOGGER.exception("Notification surface failed to cancel")

    def _refresh(self) -> None:
        # a message folded between the drain and the cancel lost its notification
        batch = self.store.peek()
        if batch is not None:
            self._render(self.coalescer.render_params(batch))
