"""Single-slot holder for the pending notification batch.

Only one coalesced batch is ever pending. Every access to the slot goes through
one lock, so a drain triggered by a notification tap and a fold triggered by a
message arriving on another thread are strictly ordered: the message lands in
the drained batch or starts the next one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import threading
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from push_bridge.message import Message

T = TypeVar("T")


class StoreState(str, Enum):
    EMPTY = "empty"
    PENDING = "pending"


@dataclass(frozen=True)
class PendingBatch:
    """Ordered, de-duplicated messages waiting behind one notification."""

    messages: Tuple[Message, ...]

    def __post_init__(self) -> None:
        if not self.messages:
            raise ValueError("PendingBatch needs at least one message")

    @classmethod
    def of(cls, message: Message) -> "PendingBatch":
        return cls(messages=(message,))

    @property
    def count(self) -> int:
        return len(self.messages)

    @property
    def latest(self) -> Message:
        return self.messages[-1]

    @property
    def identities(self) -> Tuple[str, ...]:
        return tuple(m.identity for m in self.messages)

    def contains(self, message: Message) -> bool:
        # without a transport id two equal payloads are two distinct pushes
        if message.transport_id is None:
            return False
        return any(m.transport_id == message.transport_id for m in self.messages)

    def with_message(self, message: Message) -> "PendingBatch":
        if self.contains(message):
            return self
        return PendingBatch(messages=self.messages + (message,))

    def payloads(self) -> List[Dict[str, str]]:
        return [dict(m.data) for m in self.messages]


class PayloadStore:
    def __init__(self) -> None:
        self._batch: Optional[PendingBatch] = None
        self._lock = threading.Lock()

    @property
    def state(self) -> StoreState:
        with self._lock:
            return StoreState.EMPTY if self._batch is None else StoreState.PENDING

    def put(self, batch: PendingBatch) -> None:
        with self._lock:
            self._batch = batch

    def peek(self) -> Optional[PendingBatch]:
        with self._lock:
            return self._batch

    def drain(self) -> Optional[PendingBatch]:
        """Return the pending batch and empty the slot in one step."""
        with self._lock:
            batch, self._batch = self._batch, None
            return batch

    def clear(self) -> None:
        with self._lock:
            self._batch = None

    def update(self, fold: Callable[[Optional[PendingBatch]], Tuple[PendingBatch, T]]) -> T:
        """Replace the slot with ``fold(current)[0]`` atomically and return ``fold(current)[1]``.

        ``fold`` runs under the store lock and must not call back into the store.
        """
        with self._lock:
            batch, result = fold(self._batch)
            self._batch = batch
            return result
