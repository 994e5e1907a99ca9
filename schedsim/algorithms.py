from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .errors import InvalidQuantumError
from .models import IDLE_PID, Algorithm, GanttSegment, Process

# Every scheduler takes the process set (and an optional quantum) and returns
# the raw, un-normalized timeline. Metrics are derived afterwards from the
# timeline alone, see metrics.compute_process_metrics.
Scheduler = Callable[..., List[GanttSegment]]


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> List[GanttSegment]:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    ``sorted`` is stable, so processes arriving together keep input order.
    """
    processes_sorted = sorted(processes, key=lambda p: p.arrival_time)

    time = 0
    timeline: List[GanttSegment] = []

    for p in processes_sorted:
        if time < p.arrival_time:
            timeline.append(GanttSegment(pid=IDLE_PID, start_time=time, end_time=p.arrival_time))
            time = p.arrival_time

        timeline.append(GanttSegment(pid=p.pid, start_time=time, end_time=time + p.burst_time))
        time += p.burst_time

    return timeline


def _schedule_non_preemptive(
    processes: Sequence[Process],
    key: Callable[[Process], Tuple],
) -> List[GanttSegment]:
    """
    Shared loop for SJF and Priority: pick the best ready process by ``key``
    and run its whole burst.
    """
    order = {p.pid: idx for idx, p in enumerate(processes)}

    time = 0
    timeline: List[GanttSegment] = []
    completed_pids: set[str] = set()

    while len(completed_pids) < len(processes):
        # Ready queue: processes that have arrived and are not completed.
        ready = [p for p in processes if p.arrival_time <= time and p.pid not in completed_pids]

        if not ready:
            next_arrival = min(p.arrival_time for p in processes if p.pid not in completed_pids)
            timeline.append(GanttSegment(pid=IDLE_PID, start_time=time, end_time=next_arrival))
            time = next_arrival
            continue

        p = min(ready, key=lambda x: key(x) + (x.arrival_time, x.pid, order[x.pid]))

        # Runs to completion even if a better candidate arrives meanwhile.
        timeline.append(GanttSegment(pid=p.pid, start_time=time, end_time=time + p.burst_time))
        completed_pids.add(p.pid)
        time += p.burst_time

    return timeline


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> List[GanttSegment]:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time; break ties by
    earlier arrival time, then PID.
    """
    return _schedule_non_preemptive(processes, key=lambda p: (p.burst_time,))


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> List[GanttSegment]:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes, choose the one with the smallest priority; break ties
    by earlier arrival time, then PID.
    """
    return _schedule_non_preemptive(processes, key=lambda p: (p.priority,))


def schedule_sjtr(processes: Sequence[Process], quantum: Optional[int] = None) -> List[GanttSegment]:
    """
    Shortest Remaining Time (preemptive SJF), simulated one time unit at a time.

    The running slice stays open while the same PID keeps winning the
    selection, and is flushed when another PID (or idle time) takes over.
    """
    remaining: Dict[str, int] = {p.pid: p.burst_time for p in processes}
    order = {p.pid: idx for idx, p in enumerate(processes)}

    time = 0
    timeline: List[GanttSegment] = []
    running: Optional[str] = None
    slice_start = 0

    def flush() -> None:
        if running is not None:
            timeline.append(GanttSegment(pid=running, start_time=slice_start, end_time=time))

    while any(rt > 0 for rt in remaining.values()):
        ready = [p for p in processes if p.arrival_time <= time and remaining[p.pid] > 0]

        if not ready:
            next_arrival = min(p.arrival_time for p in processes if remaining[p.pid] > 0)
            flush()
            running = None
            timeline.append(GanttSegment(pid=IDLE_PID, start_time=time, end_time=next_arrival))
            time = next_arrival
            continue

        # Smallest remaining time (tie: earlier arrival, then PID, then input order).
        current = min(ready, key=lambda p: (remaining[p.pid], p.arrival_time, p.pid, order[p.pid]))

        if current.pid != running:
            flush()
            running = current.pid
            slice_start = time

        remaining[current.pid] -= 1
        time += 1

    flush()
    return timeline


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> List[GanttSegment]:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive while a slice is running are queued before the
    preempted process goes back to the tail.
    """
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidQuantumError("Round Robin requires a positive integer quantum (use --quantum)")

    # Remaining burst time per PID
    remaining: Dict[str, int] = {p.pid: p.burst_time for p in processes}

    time = 0
    timeline: List[GanttSegment] = []

    # Ready queue as list of PIDs, plus the PIDs that ever entered it.
    ready: List[str] = []
    enqueued: set[str] = set()

    def enqueue_new_arrivals(current_time: int) -> None:
        # Input order, not re-sorted, among processes arriving together.
        for p in processes:
            if p.arrival_time <= current_time and p.pid not in enqueued and remaining[p.pid] > 0:
                ready.append(p.pid)
                enqueued.add(p.pid)

    enqueue_new_arrivals(time)

    while any(rt > 0 for rt in remaining.values()):
        if not ready:
            # CPU is idle until the next process shows up.
            next_arrival = min(
                p.arrival_time for p in processes if remaining[p.pid] > 0 and p.pid not in enqueued
            )
            timeline.append(GanttSegment(pid=IDLE_PID, start_time=time, end_time=next_arrival))
            time = next_arrival
            enqueue_new_arrivals(time)
            continue

        pid = ready.pop(0)

        run_time = min(quantum, remaining[pid])
        timeline.append(GanttSegment(pid=pid, start_time=time, end_time=time + run_time))

        time += run_time
        remaining[pid] -= run_time

        enqueue_new_arrivals(time)

        if remaining[pid] > 0:
            ready.append(pid)

    return timeline


ALGORITHMS: Dict[Algorithm, Scheduler] = {
    Algorithm.FCFS: schedule_fcfs,
    Algorithm.SJF: schedule_sjf,
    Algorithm.SJTR: schedule_sjtr,
    Algorithm.PRIORITY: schedule_priority,
    Algorithm.RR: schedule_rr,
}
