"""Receives UDP datagrams, parses them into packets and routes them to flow queues."""

from __future__ import annotations

import re
import socket
import threading

from .context import SharedContext
from .packet import Packet

DEFAULT_PORT = 9999
_BUFFER_SIZE = 2048
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_FIELDS = {"SRC=": "src_ip", "PROTO=": "protocol", "PORT=": "port", "DATA=": "data"}


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"invalid port value: {text!r}")
    return int(match.group(1))


def assign_priority(protocol: str, port: int) -> int:
    """Packet priority for a protocol and port: 3 is highest, 0 lowest."""
    if protocol in ("ICMP", "ARP"):
        return 3
    if protocol == "UDP" and port == 400:
        return 2
    if protocol == "TCP" and port in (80, 443):
        return 1
    return 0


def parse_packet(raw: str) -> Packet:
    """Parse ``SRC=..|PROTO=..|PORT=..|DATA=..`` text into a prioritised packet.

    Fields may come in any order; unknown fields are ignored and a later
    field overrides an earlier one. A PORT value without a leading integer
    raises ValueError.
    """
    values: dict[str, object] = {}
    for token in raw.split("|"):
        for prefix, name in _FIELDS.items():
            if token.startswith(prefix):
                value = token[len(prefix):]
                values[name] = _leading_int(value) if name == "port" else value
                break
    packet = Packet(**values)
    packet.priority = assign_priority(packet.protocol, packet.port)
    return packet


class PacketReceiver:
    """Listens on a UDP socket and dispatches each datagram into a shared context."""

    def __init__(
        self,
        context: SharedContext,
        host: str = "0.0.0.0",
        port: int = DEFAULT_PORT,
    ) -> None:
        self._context = context
        self._running = True
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._sock.bind((host, port))
        except OSError:
            self._sock.close()
            raise
        # Wake periodically so that stop() takes effect.
        self._sock.settimeout(0.2)
        self._closed = False

    @property
    def address(self) -> tuple[str, int]:
        """The address the socket is bound to."""
        return self._sock.getsockname()

    @property
    def running(self) -> bool:
        return self._running

    def __enter__(self) -> PacketReceiver:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def handle_datagram(self, payload: bytes) -> Packet:
        """Parse one datagram and route it to its flow queue."""
        text = payload[: _BUFFER_SIZE - 1].split(b"\0", 1)[0].decode("utf-8", errors="replace")
        packet = parse_packet(text)
        self._context.dispatch(packet)
        return packet

    def capture_packets(self) -> None:
        """Receive datagrams until stopped."""
        while self._running:
            try:
                payload, _sender = self._sock.recvfrom(_BUFFER_SIZE - 1)
            except socket.timeout:
                continue
            except OSError:
                if not self._running:
                    break
                raise
            if payload:
                self.handle_datagram(payload)

    def stop(self) -> None:
        self._running = False

    def close(self) -> None:
        self.stop()
        if not self._closed:
            self._closed = True
            self._sock.close()


def start_capture(receiver: PacketReceiver) -> threading.Thread:
    """Run ``receiver.capture_packets`` on a daemon thread and return it."""
    thread = threading.Thread(target=receiver.capture_packets, name="receiver", daemon=True)
    thread.start()
    return thread