"""The set of flow queues shared by the receiver and the processor."""

from __future__ import annotations

import threading
import time
from typing import Callable

from .flow_queue import FlowQueue
from .packet import Packet

_PERIOD_MS = 5000


class SharedContext:
    """Flow queues for each traffic class, with a condition signalling new packets."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        # network health
        self.icmp_arp_queue = FlowQueue(3, _PERIOD_MS, 3, clock)
        # custom telemetry
        self.udp_400_queue = FlowQueue(2, _PERIOD_MS, 5, clock)
        # web traffic and logging
        self.tcp_80_queue = FlowQueue(2, _PERIOD_MS, 2, clock)
        # secure communication and updates
        self.tcp_443_queue = FlowQueue(2, _PERIOD_MS, 2, clock)
        # other UDP
        self.udp_queue = FlowQueue(1, _PERIOD_MS, 2, clock)
        # unknown traffic
        self.default_queue = FlowQueue(0, _PERIOD_MS, 2, clock)

        self.all_queues: list[FlowQueue] = [
            self.icmp_arp_queue,
            self.udp_400_queue,
            self.tcp_80_queue,
            self.tcp_443_queue,
            self.udp_queue,
            self.default_queue,
        ]
        self.lock = threading.Lock()
        self.packet_available = threading.Condition(self.lock)

    def queue_for(self, protocol: str, port: int) -> FlowQueue:
        """The flow queue that traffic of this protocol and port belongs in."""
        if protocol in ("ICMP", "ARP"):
            return self.icmp_arp_queue
        if protocol == "UDP":
            return self.udp_400_queue if port == 400 else self.udp_queue
        if protocol == "TCP" and port == 80:
            return self.tcp_80_queue
        if protocol == "TCP" and port == 443:
            return self.tcp_443_queue
        return self.default_queue

    def dispatch(self, packet: Packet) -> bool:
        """Route a packet to its queue and wake a waiting processor.

        Returns whether the queue accepted the packet.
        """
        with self.packet_available:
            accepted = self.queue_for(packet.protocol, packet.port).enqueue(packet)
            self.packet_available.notify()
        return accepted

    def has_packets(self) -> bool:
        return any(not queue.is_empty() for queue in self.all_queues)