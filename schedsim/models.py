from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .errors import UnknownAlgorithmError

IDLE_PID = "idle"


class Algorithm(Enum):
    FCFS = "fcfs"
    SJF = "sjf"
    SJTR = "sjtr"
    PRIORITY = "priority"
    RR = "rr"

    @classmethod
    def parse(cls, value: "str | Algorithm") -> "Algorithm":
        if isinstance(value, Algorithm):
            return value
        name = str(value).strip().lower()
        if name == "srtf":
            return cls.SJTR
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(a.value for a in cls)
            raise UnknownAlgorithmError(f"Unknown algorithm '{value}' (choose from {choices})") from None

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def preemptive(self) -> bool:
        return self in (Algorithm.SJTR, Algorithm.RR)

    @property
    def needs_quantum(self) -> bool:
        return self is Algorithm.RR


_LABELS = {
    Algorithm.FCFS: "FCFS",
    Algorithm.SJF: "SJF (non-preemptive)",
    Algorithm.SJTR: "SJTR (preemptive)",
    Algorithm.PRIORITY: "Priority (non-preemptive)",
    Algorithm.RR: "Round Robin",
}


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class GanttSegment:
    """
    One contiguous slice of the timeline, either a process or idle CPU.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.pid == IDLE_PID


@dataclass
class ProcessMetrics:
    pid: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: int = 0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    idle_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: Algorithm
    quantum: Optional[int]
    timeline: List[GanttSegment] = field(default_factory=list)
    processes: Dict[str, ProcessMetrics] = field(default_factory=dict)
    avg_waiting: Optional[float] = None
    avg_turnaround: Optional[float] = None
    avg_response: Optional[float] = None
    system: Optional[SystemMetrics] = None
