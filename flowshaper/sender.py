"""Interactive tool that sends test packets to a receiver."""

from __future__ import annotations

import ipaddress
import random
import re
import socket
import sys
import time
from typing import Callable, Iterable, TextIO

DEFAULT_PORT = 9999
BURST_COUNT = 10
SEQUENCE_DELAY = 3.0
BURST_DELAY = 0.1

TEST_PACKETS = (
    "SRC=192.168.0.101|PROTO=UDP|PORT=9999|DATA=EMERGENCY_STOP",
    "SRC=192.168.0.102|PROTO=UDP|PORT=8888|DATA=TEMP_UPDATE",
    "SRC=192.168.0.103|PROTO=ICMP|PORT=0|DATA=PING",
    "SRC=192.168.0.104|PROTO=TCP|PORT=22|DATA=SSH_REQUEST",
    "SRC=192.168.0.105|PROTO=UDP|PORT=7777|DATA=STATUS",
)
ICMP_PACKET = "SRC=192.168.0.103|PROTO=ICMP|PORT=0|DATA=PING"
UDP_400_PACKET = "SRC=192.168.0.101|PROTO=UDP|PORT=400|DATA=EMERGENCY_STOP"

MENU = """
--- Packet Sender Menu ---
1. Send all test packets in sequence (1 every 3 sec)
2. Send one random packet
3. Send burst of random packets
4. Send burst of only ICMP packets
5. Send burst of only UDP packets
6. Exit"""

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(text: str) -> int | None:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def parse_port(text: str) -> int:
    """Parse a port number from the leading digits of ``text``; it must be 1-65535."""
    port = _leading_int(text) or 0
    if not 0 < port <= 65535:
        raise ValueError("Invalid port number. Must be between 1 and 65535.")
    return port


class PacketSender:
    """Sends test packets over a datagram socket to one address."""

    def __init__(
        self,
        sock: socket.socket,
        address: tuple[str, int],
        out: TextIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ) -> None:
        self._sock = sock
        self._address = address
        self._out = out
        self._sleep = sleep
        self._rng = rng if rng is not None else random.Random()

    def _print(self, text: str, end: str = "\n") -> None:
        out = self._out if self._out is not None else sys.stdout
        print(text, end=end, file=out, flush=True)

    def send(self, message: str) -> None:
        self._sock.sendto(message.encode(), self._address)
        self._print(f"Sent: {message}")

    def send_sequence(self) -> None:
        """Send every test packet in turn, pausing after each."""
        for message in TEST_PACKETS:
            self.send(message)
            self._sleep(SEQUENCE_DELAY)

    def send_random(self) -> str:
        """Send one randomly chosen test packet and return it."""
        message = self._rng.choice(TEST_PACKETS)
        self.send(message)
        return message

    def send_burst(self, message: str | None = None) -> None:
        """Send a burst of ``message``, or of random test packets if none is given."""
        for _ in range(BURST_COUNT):
            self.send(message if message is not None else self._rng.choice(TEST_PACKETS))
            self._sleep(BURST_DELAY)

    def run_menu(self, lines: Iterable[str]) -> None:
        """Show the menu and act on choices read from ``lines`` until exit or end of input."""
        actions: dict[int, Callable[[], object]] = {
            1: self.send_sequence,
            2: self.send_random,
            3: self.send_burst,
            4: lambda: self.send_burst(ICMP_PACKET),
            5: lambda: self.send_burst(UDP_400_PACKET),
        }
        for line in self._prompts(lines):
            option = _leading_int(line)
            if option is None:
                self._print("Invalid input. Try again.")
            elif option == 6:
                return
            elif option in actions:
                actions[option]()
            else:
                self._print("Invalid option. Try again.")

    def _prompts(self, lines: Iterable[str]):
        self._print(MENU)
        self._print("Choose an option: ", end="")
        for line in lines:
            if not line.strip():
                continue
            yield line
            self._print(MENU)
            self._print("Choose an option: ", end="")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: flowshaper-send <target_ip> [port]", file=sys.stderr)
        return 1
    target_ip = args[0]
    port = DEFAULT_PORT
    if len(args) >= 2:
        try:
            port = parse_port(args[1])
        except ValueError as exc:
            print(exc, file=sys.stderr)
            return 1
    try:
        ipaddress.IPv4Address(target_ip)
    except ValueError:
        print(f"Invalid target address: {target_ip}", file=sys.stderr)
        return 1

    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        PacketSender(sock, (target_ip, port)).run_menu(sys.stdin)
    return 0


if __name__ == "__main__":
    sys.exit(main())