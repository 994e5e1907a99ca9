"""
CPU scheduling simulator.

Runs FCFS, SJF, SJTR, Priority and Round Robin over a process set and
reports the resulting Gantt timeline with per-process statistics.
"""

from .engine import run_algorithm, simulate
from .errors import SchedulingError
from .models import Algorithm, GanttSegment, Process, ScheduleResult

__all__ = [
    "Algorithm",
    "GanttSegment",
    "Process",
    "ScheduleResult",
    "SchedulingError",
    "run_algorithm",
    "simulate",
]
