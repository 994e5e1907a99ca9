from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .algorithms import ALGORITHMS
from .errors import DuplicatePidError, EmptyWorkloadError, InvalidProcessError, InvalidQuantumError
from .gantt import normalize_segments
from .metrics import compute_process_metrics, compute_system_metrics, summarize_process_metrics
from .models import IDLE_PID, Algorithm, Process, ScheduleResult

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_processes(processes: Iterable[Process]) -> List[Process]:
    """
    Check a process set before any simulation runs and return it as a new list.

    Raises on the first problem found: an empty set, a blank or reserved PID,
    a duplicate PID, a negative arrival, a non-positive burst, or any of those
    fields not being an integer.
    """
    checked = list(processes)
    if not checked:
        raise EmptyWorkloadError("Nothing to schedule: the process set is empty")

    seen: set[str] = set()
    for p in checked:
        if not isinstance(p.pid, str) or not p.pid.strip():
            raise InvalidProcessError(f"Process PID must be a non-empty string, got {p.pid!r}", pid=p.pid)
        if p.pid == IDLE_PID:
            raise InvalidProcessError(f"PID '{IDLE_PID}' is reserved for idle CPU time", pid=p.pid)
        if p.pid in seen:
            raise DuplicatePidError(f"Duplicate PID '{p.pid}'", pid=p.pid)
        seen.add(p.pid)

        if not _is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidProcessError(
                f"Process {p.pid}: arrival time must be a non-negative integer, got {p.arrival_time!r}",
                pid=p.pid,
            )
        if not _is_int(p.burst_time) or p.burst_time <= 0:
            raise InvalidProcessError(
                f"Process {p.pid}: burst time must be a positive integer, got {p.burst_time!r}",
                pid=p.pid,
            )
        if not _is_int(p.priority):
            raise InvalidProcessError(
                f"Process {p.pid}: priority must be an integer, got {p.priority!r}",
                pid=p.pid,
            )

    return checked


def validate_quantum(algorithm: Algorithm, quantum: Optional[int]) -> Optional[int]:
    """
    Return the quantum to use for ``algorithm``; None unless it is Round Robin.
    """
    if not algorithm.needs_quantum:
        if quantum is not None:
            logger.debug("Ignoring quantum %r for %s", quantum, algorithm.label)
        return None
    if not _is_int(quantum) or quantum <= 0:
        raise InvalidQuantumError(f"{algorithm.label} requires a positive integer quantum, got {quantum!r}")
    return quantum


def simulate(
    processes: Sequence[Process],
    algorithm: str | Algorithm,
    quantum: Optional[int] = None,
) -> ScheduleResult:
    """
    Validate the input, run one scheduling algorithm and build its report.

    The caller's sequence is copied before anything else happens, so repeated
    runs on the same input always see the same data. ``algorithm`` may also
    be a name such as ``"rr"``.
    """
    algorithm = Algorithm.parse(algorithm)
    procs = validate_processes(processes)
    quantum = validate_quantum(algorithm, quantum)

    logger.debug("Running %s on %d processes (quantum=%s)", algorithm.label, len(procs), quantum)

    raw = ALGORITHMS[algorithm](procs, quantum=quantum)
    timeline = normalize_segments(raw)

    metrics = compute_process_metrics(timeline, procs)
    summary = summarize_process_metrics(list(metrics.values()))
    system = compute_system_metrics(timeline, len(procs))

    logger.debug(
        "%s produced %d segments (%d raw), makespan %d",
        algorithm.label,
        len(timeline),
        len(raw),
        system.makespan,
    )

    return ScheduleResult(
        algorithm=algorithm,
        quantum=quantum,
        timeline=timeline,
        processes=metrics,
        avg_waiting=summary["avg_waiting"],
        avg_turnaround=summary["avg_turnaround"],
        avg_response=summary["avg_response"],
        system=system,
    )


def run_algorithm(name: str | Algorithm, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm by name (``fcfs``, ``sjf``, ``sjtr``,
    ``priority``, ``rr``).
    """
    return simulate(processes, name, quantum=quantum)
