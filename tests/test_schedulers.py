import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
    schedule_sjtr,
)
from schedsim.errors import InvalidQuantumError
from schedsim.gantt import normalize_segments
from schedsim.models import Algorithm, Process


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5, priority=2),
        Process("P2", arrival_time=1, burst_time=3, priority=1),
        Process("P3", arrival_time=2, burst_time=8, priority=3),
    ]


def _spans(segments):
    return [(s.pid, s.start_time, s.end_time) for s in segments]


def test_fcfs_order():
    assert _spans(schedule_fcfs(_procs())) == [("P1", 0, 5), ("P2", 5, 8), ("P3", 8, 16)]


def test_fcfs_idle_gaps():
    procs = [Process("A", 2, 3), Process("B", 10, 1)]
    assert _spans(schedule_fcfs(procs)) == [
        ("idle", 0, 2),
        ("A", 2, 5),
        ("idle", 5, 10),
        ("B", 10, 11),
    ]


def test_fcfs_keeps_input_order_on_equal_arrival():
    procs = [Process("Z", 0, 1), Process("A", 0, 1)]
    assert [s.pid for s in schedule_fcfs(procs)] == ["Z", "A"]


def test_sjf_does_not_preempt():
    # B and C are shorter than A but arrive after A has started.
    procs = [Process("A", 0, 8), Process("B", 1, 4), Process("C", 2, 2)]
    assert _spans(schedule_sjf(procs)) == [("A", 0, 8), ("C", 8, 10), ("B", 10, 14)]


def test_sjf_tie_breaks_on_arrival_then_pid():
    procs = [Process("P2", 0, 3), Process("P1", 0, 3), Process("P0", 1, 3), Process("X", 0, 9)]
    assert [s.pid for s in schedule_sjf(procs)] == ["P1", "P2", "P0", "X"]


def test_sjf_idles_until_next_arrival():
    procs = [Process("A", 4, 2)]
    assert _spans(schedule_sjf(procs)) == [("idle", 0, 4), ("A", 4, 6)]


def test_sjtr_preempts_on_shorter_arrival():
    assert _spans(schedule_sjtr(_procs())) == [("P1", 0, 1), ("P2", 1, 4), ("P1", 4, 8), ("P3", 8, 16)]


def test_sjtr_tie_keeps_lower_pid_running():
    procs = [Process("B", 0, 3), Process("A", 0, 3)]
    assert _spans(schedule_sjtr(procs)) == [("A", 0, 3), ("B", 3, 6)]


def test_sjtr_tie_breaks_on_arrival():
    # At t=2 both have 2 units left; the earlier arrival wins over the lower PID.
    procs = [Process("Z", 0, 4), Process("A", 2, 2)]
    assert _spans(schedule_sjtr(procs)) == [("Z", 0, 4), ("A", 4, 6)]


def test_sjtr_flushes_before_idle():
    procs = [Process("A", 0, 2), Process("B", 5, 3)]
    assert _spans(schedule_sjtr(procs)) == [("A", 0, 2), ("idle", 2, 5), ("B", 5, 8)]


def test_priority_static():
    procs = [Process("A", 0, 4, priority=3), Process("B", 1, 2, priority=1), Process("C", 2, 3, priority=2)]
    assert _spans(schedule_priority(procs)) == [("A", 0, 4), ("B", 4, 6), ("C", 6, 9)]


def test_priority_ignores_burst():
    procs = [Process("long", 0, 9, priority=0), Process("short", 0, 1, priority=5)]
    assert [s.pid for s in schedule_priority(procs)] == ["long", "short"]


def test_priority_tie_breaks_on_arrival_then_pid():
    procs = [Process("B", 0, 9, priority=1), Process("C", 1, 1, priority=0), Process("A", 1, 1, priority=0)]
    assert [s.pid for s in schedule_priority(procs)] == ["B", "A", "C"]

    procs = [Process("X", 0, 2, priority=5), Process("L", 2, 1, priority=1), Process("E", 1, 1, priority=1)]
    assert [s.pid for s in schedule_priority(procs)] == ["X", "E", "L"]


def test_rr_quantum_2():
    timeline = normalize_segments(schedule_rr(_procs(), quantum=2))
    assert _spans(timeline) == [
        ("P1", 0, 2),
        ("P2", 2, 4),
        ("P3", 4, 6),
        ("P1", 6, 8),
        ("P2", 8, 9),
        ("P3", 9, 11),
        ("P1", 11, 12),
        ("P3", 12, 16),
    ]


def test_rr_new_arrivals_queue_ahead_of_preempted_process():
    procs = [Process("A", 0, 3), Process("B", 1, 2)]
    assert _spans(schedule_rr(procs, quantum=2)) == [("A", 0, 2), ("B", 2, 4), ("A", 4, 5)]


def test_rr_equal_arrivals_use_input_order():
    procs = [Process("B", 0, 1), Process("A", 0, 1)]
    assert [s.pid for s in schedule_rr(procs, quantum=1)] == ["B", "A"]


def test_rr_idle_start():
    raw = schedule_rr([Process("A", 3, 2)], quantum=1)
    assert _spans(raw) == [("idle", 0, 3), ("A", 3, 4), ("A", 4, 5)]
    assert _spans(normalize_segments(raw)) == [("idle", 0, 3), ("A", 3, 5)]


@pytest.mark.parametrize("quantum", [None, 0, -1, True])
def test_rr_rejects_bad_quantum(quantum):
    with pytest.raises(InvalidQuantumError):
        schedule_rr(_procs(), quantum=quantum)


def test_every_algorithm_has_a_scheduler():
    assert set(ALGORITHMS) == set(Algorithm)


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_empty_process_set_gives_empty_timeline(algorithm):
    assert ALGORITHMS[algorithm]([], quantum=1) == []


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_schedulers_do_not_touch_input(algorithm):
    procs = _procs()
    snapshot = list(procs)
    ALGORITHMS[algorithm](procs, quantum=2)
    assert procs == snapshot
