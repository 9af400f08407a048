"""Takes packets from the flow queues in priority order and reports them."""

from __future__ import annotations

import sys
import time
from datetime import datetime
from typing import TextIO

from .context import SharedContext
from .flow_queue import EmptyQueueError, FlowQueue
from .packet import Packet

SEPARATOR = "-------------------------------------------------------------------------------------------------------------"


def format_packet(packet: Packet, when: datetime) -> str:
    """The report printed for a processed packet."""
    stamp = when.strftime("%Y-%m-%d %H:%M:%S")
    return (
        f"{SEPARATOR}\n"
        f"[{stamp}] \tProcessing packet from {packet.src_ip}"
        f" [PROTO={packet.protocol}, PORT={packet.port}, PRIORITY={packet.priority}]: "
        f"{packet.data}"
    )


class PacketProcessor:
    """Serves the flow queue of highest priority that still has budget."""

    def __init__(self, context: SharedContext, out: TextIO | None = None) -> None:
        self._context = context
        self._out = out
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    def select_queue(self) -> FlowQueue | None:
        """The non-empty queue of highest flow priority that may be served.

        Among queues of equal priority the first one listed wins.
        """
        selected = None
        max_priority = -1
        for queue in self._context.all_queues:
            if not queue.is_empty() and queue.priority > max_priority and queue.can_process():
                selected = queue
                max_priority = queue.priority
        return selected

    def process_next(self, timeout: float | None = None) -> Packet | None:
        """Wait for a packet, process it and return it.

        Returns None if nothing arrived within ``timeout`` seconds or no
        queue may be served right now.
        """
        cond = self._context.packet_available
        with cond:
            if not cond.wait_for(self._context.has_packets, timeout):
                return None
            queue = self.select_queue()
            if queue is None:
                return None
            try:
                packet = queue.dequeue()
            except EmptyQueueError as exc:
                print(f"[WARN] {exc}", file=sys.stderr)
                return None
        out = self._out if self._out is not None else sys.stdout
        print(format_packet(packet, datetime.now()), file=out, flush=True)
        return packet

    def process_packets(self) -> None:
        """Process packets until stopped."""
        while self._running:
            if self.process_next(timeout=0.2) is None and self._running:
                # Packets may be waiting on a spent budget; avoid spinning hard.
                time.sleep(0.01)

    def stop(self) -> None:
        self._running = False
        with self._context.packet_available:
            self._context.packet_available.notify_all()