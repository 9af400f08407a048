"""Command that runs the receiver and the processor together."""

from __future__ import annotations

import argparse
import sys
import threading

from .context import SharedContext
from .processor import PacketProcessor
from .receiver import DEFAULT_PORT, PacketReceiver


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowshaper", description="Receive packets and process them by flow priority."
    )
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="UDP port to listen on")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    context = SharedContext()
    print("Starting packet processor...", flush=True)

    try:
        receiver = PacketReceiver(context, args.host, args.port)
    except OSError as exc:
        print(f"Bind failed: {exc}", file=sys.stderr)
        return 1
    processor = PacketProcessor(context)

    threads = [
        threading.Thread(target=receiver.capture_packets, name="receiver", daemon=True),
        threading.Thread(target=processor.process_packets, name="processor", daemon=True),
    ]
    for thread in threads:
        thread.start()
    try:
        for thread in threads:
            thread.join()
    except KeyboardInterrupt:
        pass
    finally:
        receiver.stop()
        processor.stop()
        for thread in threads:
            thread.join(1)
        receiver.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())