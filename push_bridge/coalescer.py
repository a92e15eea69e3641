"""Folds background messages into one visible notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from push_bridge.config import BridgeConfig
from push_bridge.message import Message
from push_bridge.store import PendingBatch

# a fixed id makes every render replace the previous notification
NOTIFICATION_ID = 519


@dataclass(frozen=True)
class RenderParams:
    title: str
    body: str
    tap_payload: PendingBatch
    when: datetime
    tag: str
    notification_id: int = NOTIFICATION_ID
    auto_cancel: bool = True


class NotificationCoalescer:
    def __init__(self, config: Optional[BridgeConfig] = None):
        self.config = config or BridgeConfig()

    def fold(self, batch: Optional[PendingBatch], message: Message) -> Tuple[PendingBatch, RenderParams]:
        """Merge ``message`` into ``batch`` and describe the notification to show.

        A message whose transport id is already folded leaves the batch as it is, so
        a vendor redelivery re-renders the same notification instead of growing
        the batch.
        """
        folded = PendingBatch.of(message) if batch is None else batch.with_message(message)
        return folded, self.render_params(folded)

    def render_params(self, batch: PendingBatch) -> RenderParams:
        return RenderParams(
            title=self.title_for(batch),
            body=self.body_for(batch),
            tap_payload=batch,
            when=batch.latest.received_at,
            tag=self.config.app_name,
        )

    def title_for(self, batch: PendingBatch) -> str:
        if batch.count == 1:
            return self.config.app_name
        return self.config.title_template.format(count=batch.count, app_name=self.config.app_name)

    def body_for(self, batch: PendingBatch) -> str:
        if self.config.show_message_in_notification_center and batch.latest.body:
            return batch.latest.body
        return self.config.default_message
