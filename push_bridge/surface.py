"""OS notification surfaces the bridge renders through."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from plyer import notification

from push_bridge.coalescer import RenderParams

_LOGGER = logging.getLogger(__name__)


class PlyerNotificationSurface:
    """Shows render requests as system notifications via plyer.

    Rendering is fire-and-forget: failures are logged, never raised into the
    bridge. plyer has no way to withdraw a shown notification, so ``cancel`` only
    records the request; ``auto_cancel`` covers the tap case on Android.
    """

    def __init__(self, timeout: int = 10):
        self.timeout = timeout

    def render(self, params: RenderParams) -> None:
        try:
            notification.notify(
                title=params.title,
                message=params.body,
                app_name=params.tag,
                timeout=self.timeout,
            )
        except Exception:
            _LOGGER.exception("Rendering notification %s failed", params.notification_id)

    def cancel(self) -> None:
        _LOGGER.debug("Notification cancel requested; plyer cannot withdraw notifications")


class RecordingSurface:
    """Keeps render requests in memory, for headless hosts and tests."""

    def __init__(self) -> None:
        self.rendered: List[RenderParams] = []
        self.cancelled = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[RenderParams]:
        with self._lock:
            return self.rendered[-1] if self.rendered else None

    def render(self, params: RenderParams) -> None:
        with self._lock:
            self.rendered.append(params)

    def cancel(self) -> None:
        with self._lock:
            self.cancelled += 1
