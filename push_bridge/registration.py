"""Registration lifecycle forwarding.

The vendor transport owns the registration handshake and its retries. This
module only relays what it reports to whoever needs the registration id,
usually the application's own server.
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from push_bridge.message import RegistrationEvent

_LOGGER = logging.getLogger(__name__)

RegistrationSink = Callable[[Dict[str, Any]], None]


class RegistrationError(Exception):
    """Raised when a registration event could not reach the server."""


class RegistrationForwarder:
    """Relays registration events to sinks on one background worker.

    The transport callback only enqueues, so a slow server POST never holds it
    up. A single worker keeps events in arrival order; each event goes to the
    sinks subscribed when it was forwarded.
    """

    def __init__(self) -> None:
        self._sinks: List[RegistrationSink] = []
        self._lock = threading.Lock()
        self._queue: "queue.Queue[Tuple[Dict[str, Any], List[RegistrationSink]]]" = queue.Queue()
        self._worker: Optional[threading.Thread] = None

    def subscribe(self, sink: RegistrationSink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def forward(self, event: RegistrationEvent) -> None:
        outward = event.as_event()
        _LOGGER.info("Registration event: %s", outward["type"])
        with self._lock:
            sinks = list(self._sinks)
            self._ensure_worker()
            self._queue.put((outward, sinks))

    def flush(self) -> None:
        """Block until every forwarded event has reached its sinks."""
        self._queue.join()

    def _ensure_worker(self) -> None:
        if self._worker is None or not self._worker.is_alive():
            self._worker = threading.Thread(target=self._run, name="registration-forwarder", daemon=True)
            self._worker.start()

    def _run(self) -> None:
        while True:
            outward, sinks = self._queue.get()
            try:
                self._dispatch(outward, sinks)
            finally:
                self._queue.task_done()

    @staticmethod
    def _dispatch(outward: Dict[str, Any], sinks: List[RegistrationSink]) -> None:
        for sink in sinks:
            try:
                sink(dict(outward))
            except RegistrationError as exc:
                _LOGGER.warning("Registration sink rejected %s event: %s", outward["type"], exc)
            except Exception:
                _LOGGER.exception("Registration sink failed for %s event", outward["type"])


class ServerRegistrationSink:
    """Posts registration events to the application server as JSON."""

    def __init__(self, url: Optional[str] = None, api_key: Optional[str] = None, timeout: int = 20):
        self.url = url or os.getenv("PUSH_REGISTRATION_URL", "")
        self.api_key = api_key or os.getenv("PUSH_REGISTRATION_KEY", "")
        self.timeout = timeout
        if not self.url:
            raise RegistrationError("PUSH_REGISTRATION_URL is required")

    def __call__(self, event: Dict[str, Any]) -> None:
        try:
            response = requests.post(self.url, json=event, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            raise RegistrationError(str(exc)) from exc
        if not response.ok:
            raise RegistrationError(f"{response.status_code}: {response.text}")

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"key={self.api_key}"
        return headers
