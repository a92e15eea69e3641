"""Tracks whether the application can take messages directly."""

from __future__ import annotations

import logging
import threading

_LOGGER = logging.getLogger(__name__)


class ForegroundTracker:
    # starts backgrounded until the UI layer says otherwise
    def __init__(self, foreground: bool = False):
        self._foreground = foreground
        self._lock = threading.Lock()

    def set_foreground(self, foreground: bool) -> None:
        with self._lock:
            changed = self._foreground != foreground
            self._foreground = foreground
        if changed:
            _LOGGER.debug("Application %s foreground", "entered" if foreground else "left")

    def is_foreground(self) -> bool:
        with self._lock:
            return self._foreground
