"""Deliver-now versus coalesce-and-notify decision for each inbound message."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Union

from push_bridge.coalescer import NotificationCoalescer, RenderParams
from push_bridge.foreground import ForegroundTracker
from push_bridge.message import Message
from push_bridge.store import PayloadStore

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deliver:
    message: Message


@dataclass(frozen=True)
class Notify:
    params: RenderParams


DeliveryAction = Union[Deliver, Notify]


class DeliveryRouter:
    """Routes messages using the tracker's current state.

    The router holds no state of its own. In the background it folds through
    ``PayloadStore.update`` so the read of the pending batch and the write of
    the folded one cannot interleave with a drain.
    """

    def __init__(self, tracker: ForegroundTracker, store: PayloadStore, coalescer: NotificationCoalescer):
        self.tracker = tracker
        self.store = store
        self.coalescer = coalescer

    def handle_incoming(self, message: Message) -> DeliveryAction:
        if self.tracker.is_foreground():
            _LOGGER.debug("Foreground delivery of %s", message.identity)
            return Deliver(message)

        params = self.store.update(lambda batch: self.coalescer.fold(batch, message))
        _LOGGER.debug(
            "Queued %s behind notification (%d pending)",
            message.identity,
            params.tap_payload.count,
        )
        return Notify(params)
