from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import GanttSegment

PALETTE = ["red", "green", "yellow", "blue", "magenta", "cyan"]
IDLE_STYLE = "on grey30"


def normalize_segments(segments: Iterable[GanttSegment]) -> List[GanttSegment]:
    """
    Clean up a raw timeline in one left-to-right pass.

    Zero or negative length segments are dropped, and a segment is folded
    into the previous one when both belong to the same PID and touch. The
    input segments are left untouched.
    """
    cleaned: List[GanttSegment] = []
    for seg in segments:
        if seg.end_time <= seg.start_time:
            continue
        if cleaned and cleaned[-1].pid == seg.pid and cleaned[-1].end_time == seg.start_time:
            cleaned[-1] = replace(cleaned[-1], end_time=seg.end_time)
        else:
            cleaned.append(seg)
    return cleaned


def render_gantt(slices: List[GanttSegment]) -> str:
    """
    Plain-text Gantt chart. Idle time is drawn with dots.
    """
    if not slices:
        return "(no execution)"

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))

    line = "|"
    labels = ""
    time_marks = f"{slices[0].start_time}"

    for sl in slices:
        width = max(1, sl.duration)
        line += ("." if sl.is_idle else "=") * width
        label = "" if sl.is_idle else sl.pid[:width]
        labels += label.ljust(width)
        time_marks += f"{sl.end_time:>3}"

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels,
            time_marks,
        ]
    )


def build_rich_gantt(slices: List[GanttSegment]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            idx = len(pid_to_color) % len(PALETTE)
            pid_to_color[pid] = PALETTE[idx]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = f"{slices[0].start_time}"

    for sl in slices:
        width = max(1, sl.duration)
        if sl.is_idle:
            timeline.append(" " * width, style=IDLE_STYLE)
            labels.append(" " * width)
        else:
            timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
            labels.append(sl.pid[:width].ljust(width), style="bold")

        time_marks += f"{sl.end_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    return panel, time_marks
