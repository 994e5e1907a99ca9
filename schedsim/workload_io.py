from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Sequence

from .errors import WorkloadFormatError
from .models import Process

logger = logging.getLogger(__name__)

# Used by the CLI when no workload file is given.
EXAMPLE_WORKLOAD: List[Process] = [
    Process("P1", arrival_time=0, burst_time=5, priority=1),
    Process("P2", arrival_time=1, burst_time=3, priority=2),
    Process("P3", arrival_time=2, burst_time=8, priority=3),
    Process("P4", arrival_time=3, burst_time=6, priority=2),
]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise WorkloadFormatError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.debug("Loaded %d processes from %s", len(processes), path)
    return processes


def dump_workload(processes: Sequence[Process], path: str | Path) -> None:
    """
    Write processes as a JSON list that load_workload can read back.
    """
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump([asdict(p) for p in processes], f, indent=2)


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadFormatError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadFormatError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            processes.append(_process_from_mapping(row))
    return processes


def _to_int(value) -> int:
    # JSON gives floats, CSV gives strings; 2.0 and "2.0" are fine, 2.5 or inf is not.
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            value = float(value)
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


def _process_from_mapping(mapping) -> Process:
    try:
        raw_pid = mapping["pid"]
        # JSON null, or a short CSV row that DictReader pads with None.
        if raw_pid is None:
            raise ValueError("missing pid")
        pid = str(raw_pid).strip()
        arrival_time = _to_int(mapping["arrival_time"])
        burst_time = _to_int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = _to_int(priority_val) if priority_val not in (None, "") else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise WorkloadFormatError(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
