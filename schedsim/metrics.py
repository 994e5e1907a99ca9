from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .models import GanttSegment, Process, ProcessMetrics, SystemMetrics


def compute_process_metrics(
    timeline: Sequence[GanttSegment],
    processes: Sequence[Process],
) -> Dict[str, ProcessMetrics]:
    """
    Derive per-process metrics from a timeline.

    A process may run in several disjoint segments under preemptive
    algorithms, so completion is the latest end and start the earliest
    start among its segments. Result keys follow input order.
    """
    first_start: Dict[str, int] = {}
    completion: Dict[str, int] = {}
    for seg in timeline:
        if seg.is_idle:
            continue
        first_start[seg.pid] = min(first_start.get(seg.pid, seg.start_time), seg.start_time)
        completion[seg.pid] = max(completion.get(seg.pid, seg.end_time), seg.end_time)

    metrics: Dict[str, ProcessMetrics] = {}
    for p in processes:
        # A process absent from the timeline never ran.
        completion_time = completion.get(p.pid, p.arrival_time)
        start_time = first_start.get(p.pid, p.arrival_time)
        turnaround_time = completion_time - p.arrival_time

        metrics[p.pid] = ProcessMetrics(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            start_time=start_time,
            completion_time=completion_time,
            waiting_time=turnaround_time - p.burst_time,
            turnaround_time=turnaround_time,
            response_time=start_time - p.arrival_time,
            priority=p.priority,
        )
    return metrics


def summarize_process_metrics(processes: Sequence[ProcessMetrics]) -> Dict[str, Optional[float]]:
    """
    Return averages of the key per-process metrics for quick comparison.

    With no processes there is nothing to average, so every value is None.
    """
    if not processes:
        return {"avg_waiting": None, "avg_turnaround": None, "avg_response": None}

    n = len(processes)
    return {
        "avg_waiting": sum(p.waiting_time for p in processes) / n,
        "avg_turnaround": sum(p.turnaround_time for p in processes) / n,
        "avg_response": sum(p.response_time for p in processes) / n,
    }


def compute_system_metrics(timeline: List[GanttSegment], process_count: int) -> SystemMetrics:
    """
    Compute throughput and CPU utilization over the whole timeline.
    """
    if not timeline:
        return SystemMetrics(cpu_busy_time=0, idle_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = max(seg.end_time for seg in timeline)
    cpu_busy_time = sum(seg.duration for seg in timeline if not seg.is_idle)
    idle_time = sum(seg.duration for seg in timeline if seg.is_idle)

    throughput = process_count / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        idle_time=idle_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
