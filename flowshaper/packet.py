"""The packet record passed between the receiver, the queues and the processor."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Packet:
    """A parsed packet.

    ``priority`` runs from 0 (low) through 1 (medium) and 2 (medium-high)
    to 3 (high). ``timestamp`` records when the packet was received.
    """

    src_ip: str = ""
    protocol: str = ""
    port: int = 0
    data: str = ""
    priority: int = 0
    timestamp: datetime = field(default_factory=datetime.now, compare=False)