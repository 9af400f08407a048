# flowshaper

flowshaper listens for UDP datagrams and routes each one into a flow queue.
The queue is chosen by the protocol and port named in the datagram. Each queue
has its own flow priority and its own packet budget, and the budget refills
once per time period. A processor thread serves the queue with the highest
flow priority that still has packets and budget. Among queues with equal
priority, the first one listed wins. Within the chosen queue, the processor
takes the packet with the highest priority first. On a tie, it takes the
earliest packet.

## Packet format

Datagrams are plain text. The fields are separated by `|`:

```
SRC=192.168.0.101|PROTO=UDP|PORT=400|DATA=EMERGENCY_STOP
```

- Fields may appear in any order.
- Unknown fields are ignored.
- A later field overrides an earlier one.
- A `PORT` value must begin with an integer. Otherwise `parse_packet`
  raises `ValueError`.

Packets are routed to these queues:

| Traffic            | Flow priority | Budget (per 5 s) | Packet priority |
|--------------------|---------------|------------------|-----------------|
| ICMP / ARP         | 3             | 3                | 3               |
| UDP port 400       | 2             | 5                | 2               |
| TCP port 80        | 2             | 2                | 1               |
| TCP port 443       | 2             | 2                | 1               |
| other UDP          | 1             | 2                | 0               |
| anything else      | 0             | 2                | 0               |

A queue spends one unit of budget for each packet it admits. When the budget
is used up, the queue drops further packets and prints
`[RATE LIMIT] FlowQueue over budget. Dropping packet.`. It is also not served
by the processor until its period has passed and the budget refills.

## Installation

```
pip install .
```

## Running the processor

```
flowshaper [--host HOST] [--port PORT]
```

By default this binds UDP port 9999 on `0.0.0.0`. Each processed packet is
printed under a separator line, with a timestamp:

```
[2025-03-30 12:00:00] 	Processing packet from 192.168.0.103 [PROTO=ICMP, PORT=0, PRIORITY=3]: PING
```

If the port cannot be bound, the command prints the error and exits with
status 1. Stop it with Ctrl-C.

## Sending test traffic

```
flowshaper-send 127.0.0.1 9999
```

The target must be an IPv4 address. The port is optional and defaults to
9999; it must be between 1 and 65535. An interactive menu then lets you send:

1. all five test packets in sequence, one every 3 seconds
2. one random test packet
3. a burst of ten random test packets, 100 ms apart
4. a burst of ten ICMP packets
5. a burst of ten UDP port-400 packets
6. exit

## Library use

```python
from flowshaper.context import SharedContext
from flowshaper.receiver import parse_packet
from flowshaper.processor import PacketProcessor

context = SharedContext()
context.dispatch(parse_packet("SRC=10.0.0.1|PROTO=ICMP|PORT=0|DATA=PING"))
PacketProcessor(context).process_next(timeout=1.0)
```

The main pieces:

- `flowshaper.packet.Packet`: the packet record.
- `flowshaper.flow_queue.FlowQueue`: one rate-limited queue. It raises
  `EmptyQueueError` when `dequeue` or `peek` is called on an empty queue.
- `flowshaper.context.SharedContext`: the six queues, plus `queue_for`,
  `dispatch` and `has_packets`.
- `flowshaper.receiver`: provides `parse_packet` and `assign_priority`, and
  `PacketReceiver`. Use `PacketReceiver.handle_datagram` to feed a datagram
  without going through the network.
- `flowshaper.processor`: provides `PacketProcessor` and `format_packet`.
- `flowshaper.sender.PacketSender`: the sending side of the menu tool.

The following parts accept injectable clocks, output streams, sleep functions
and random generators, so rate limiting, reports and sending can be tested
deterministically:

- `FlowQueue` and `SharedContext` accept a `clock`.
- `PacketProcessor` accepts an `out` stream.
- `PacketSender` accepts `out`, `sleep` and `rng`.

## Limits

- flowshaper does not capture real network traffic. The protocol and port
  come from the text fields of each UDP datagram, not from packet headers.
- Packets that are dropped for being over budget are not recorded
  automatically. `FlowQueue.dropped_packets` and `print_dropped_stats` only
  count packets added with `add_dropped_packet`.
- `RateLimiter.enforce_limit` only prints a message.

## Running the tests

```
pip install .[test]
pytest
```