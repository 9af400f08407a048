import io

import pytest

from flowshaper.flow_queue import EmptyQueueError, FlowQueue
from flowshaper.packet import Packet


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def make(priority=0, data="x"):
    return Packet("192.168.0.101", "UDP", 9999, data, priority)


@pytest.fixture
def clock():
    return FakeClock()


def test_constructor_defaults():
    queue = FlowQueue()
    assert queue.priority == 0
    assert queue.period_ms == 1000
    assert queue.budget_limit == 5
    assert queue.budget_remaining == 5


def test_enqueue_within_budget(clock):
    queue = FlowQueue(1, 5000, 2, clock)
    assert queue.enqueue(make())
    assert queue.enqueue(make())
    assert len(queue) == 2
    assert queue.budget_remaining == 0
    assert not queue.is_empty()


def test_enqueue_over_budget_drops(clock, capsys):
    queue = FlowQueue(1, 5000, 1, clock)
    assert queue.enqueue(make())
    assert queue.enqueue(make()) is False
    assert len(queue) == 1
    assert "[RATE LIMIT] FlowQueue over budget. Dropping packet." in capsys.readouterr().out


def test_budget_resets_after_period(clock):
    queue = FlowQueue(1, 5000, 1, clock)
    queue.enqueue(make())
    clock.now = 5.0
    assert queue.enqueue(make())
    assert len(queue) == 2


def test_budget_not_reset_before_period(clock):
    queue = FlowQueue(1, 5000, 1, clock)
    queue.enqueue(make())
    clock.now = 4.999
    queue.reset_budget_if_needed()
    assert queue.budget_remaining == 0
    clock.now = 5.0
    queue.reset_budget_if_needed()
    assert queue.budget_remaining == queue.budget_limit


def test_dequeue_highest_priority_first(clock):
    queue = FlowQueue(1, 5000, 5, clock)
    queue.enqueue(make(0, "low"))
    queue.enqueue(make(3, "high"))
    queue.enqueue(make(1, "mid"))
    assert [queue.dequeue().data for _ in range(3)] == ["high", "mid", "low"]
    assert queue.is_empty()


def test_dequeue_ties_keep_arrival_order(clock):
    queue = FlowQueue(1, 5000, 5, clock)
    queue.enqueue(make(2, "first"))
    queue.enqueue(make(2, "second"))
    assert queue.dequeue().data == "first"
    assert queue.dequeue().data == "second"


def test_dequeue_empty_raises():
    with pytest.raises(EmptyQueueError, match="Queue is empty"):
        FlowQueue().dequeue()


def test_peek_returns_oldest_without_removing(clock):
    queue = FlowQueue(1, 5000, 5, clock)
    queue.enqueue(make(0, "a"))
    queue.enqueue(make(3, "b"))
    assert queue.peek().data == "a"
    assert len(queue) == 2


def test_peek_empty_raises():
    with pytest.raises(EmptyQueueError, match="Peek called on empty queue"):
        FlowQueue().peek()


def test_can_process_empty_is_false(clock):
    assert FlowQueue(1, 5000, 5, clock).can_process() is False


def test_can_process_with_budget(clock):
    queue = FlowQueue(1, 5000, 2, clock)
    queue.enqueue(make())
    assert queue.can_process() is True


def test_can_process_budget_spent_until_period(clock):
    queue = FlowQueue(1, 5000, 1, clock)
    queue.enqueue(make())
    assert queue.can_process() is False
    clock.now = 5.0
    assert queue.can_process() is True


def test_priority_is_settable():
    queue = FlowQueue(1)
    queue.priority = 3
    assert queue.priority == 3


def test_dropped_packets_are_recorded():
    queue = FlowQueue()
    first, second = make(data="a"), make(data="b")
    queue.add_dropped_packet(first)
    queue.add_dropped_packet(second)
    assert queue.dropped_packets == (first, second)


def test_dropped_stats_text():
    queue = FlowQueue()
    assert queue.dropped_stats() == "[DROP STATS] Dropped packets: 0"
    queue.add_dropped_packet(make())
    assert queue.dropped_stats() == "[DROP STATS] Dropped packets: 1"


def test_print_dropped_stats_writes_line():
    queue = FlowQueue()
    out = io.StringIO()
    queue.print_dropped_stats(out)
    assert out.getvalue() == "[DROP STATS] Dropped packets: 0\n"