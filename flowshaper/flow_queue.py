"""A rate-limited queue of packets belonging to one traffic flow."""

from __future__ import annotations

import sys
import threading
import time
from typing import Callable, TextIO

from .packet import Packet


class EmptyQueueError(RuntimeError):
    """Raised when a packet is taken from or looked at in an empty queue."""


class FlowQueue:
    """Holds packets for one flow and admits at most ``budget_limit`` of them
    in every ``period_ms`` milliseconds.

    ``clock`` returns a monotonic time in seconds.
    """

    def __init__(
        self,
        flow_priority: int = 0,
        period_ms: int = 1000,
        budget_limit: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.priority = flow_priority
        self.period_ms = period_ms
        self.budget_limit = budget_limit
        self.budget_remaining = budget_limit
        self._clock = clock
        self._last_reset = clock()
        self._queue: list[Packet] = []
        self._dropped: list[Packet] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def dropped_packets(self) -> tuple[Packet, ...]:
        """Packets recorded as dropped, oldest first."""
        with self._lock:
            return tuple(self._dropped)

    def enqueue(self, packet: Packet) -> bool:
        """Add a packet if the flow's budget allows it; return whether it was kept."""
        with self._lock:
            self.reset_budget_if_needed()
            if self.budget_remaining <= 0:
                print("[RATE LIMIT] FlowQueue over budget. Dropping packet.")
                return False
            self._queue.append(packet)
            self.budget_remaining -= 1
            return True

    def dequeue(self) -> Packet:
        """Remove and return the packet of highest priority, earliest first on ties."""
        with self._lock:
            if not self._queue:
                raise EmptyQueueError("Queue is empty")
            best = max(range(len(self._queue)), key=lambda i: self._queue[i].priority)
            return self._queue.pop(best)

    def peek(self) -> Packet:
        """Return the oldest packet without removing it."""
        with self._lock:
            if not self._queue:
                raise EmptyQueueError("Peek called on empty queue")
            return self._queue[0]

    def is_empty(self) -> bool:
        with self._lock:
            return not self._queue

    def can_process(self) -> bool:
        """True if the queue holds packets and its budget is not spent."""
        with self._lock:
            self.reset_budget_if_needed()
            return bool(self._queue) and self.budget_remaining > 0

    def reset_budget_if_needed(self) -> None:
        """Refill the budget once a whole period has passed since the last refill."""
        with self._lock:
            now = self._clock()
            elapsed_ms = int(round((now - self._last_reset) * 1000, 6))
            if elapsed_ms >= self.period_ms:
                self.budget_remaining = self.budget_limit
                self._last_reset = now

    def add_dropped_packet(self, packet: Packet) -> None:
        with self._lock:
            self._dropped.append(packet)

    def dropped_stats(self) -> str:
        """A one-line summary of the dropped packets."""
        with self._lock:
            return f"[DROP STATS] Dropped packets: {len(self._dropped)}"

    def print_dropped_stats(self, out: TextIO | None = None) -> None:
        print(self.dropped_stats(), file=out if out is not None else sys.stdout)