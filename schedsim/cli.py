from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .engine import simulate
from .errors import SchedulingError
from .gantt import build_rich_gantt
from .models import Algorithm, Process, ScheduleResult
from .workload_io import EXAMPLE_WORKLOAD, load_workload

logger = logging.getLogger(__name__)

ALGORITHM_NAMES = [a.value for a in Algorithm]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SJTR, Priority, RR).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, sjtr, priority, rr).",
    )
    _add_workload_arguments(run_parser)
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    _add_workload_arguments(compare_parser)
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=ALGORITHM_NAMES,
        help=f"Algorithms to compare (default: {' '.join(ALGORITHM_NAMES)}).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=2,
        help="Time quantum used for RR when included (default: 2).",
    )

    return parser


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file.",
    )
    group.add_argument(
        "--example",
        action="store_true",
        help="Use the built-in four-process example workload (default when no file is given).",
    )


def _read_processes(args: argparse.Namespace) -> List[Process]:
    if args.example or args.workload is None:
        logger.info("Using the built-in example workload")
        return list(EXAMPLE_WORKLOAD)
    return load_workload(Path(args.workload))


def _fmt_avg(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f}"


def _print_result(result: ScheduleResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm.label}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    console.print(f"[bold]Preemptive:[/bold] {'yes' if result.algorithm.preemptive else 'no'}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Priority",
        "Complete",
        "Turnaround",
        "Wait",
        "Response",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in sorted(result.processes.values(), key=lambda m: m.pid):
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.completion_time),
            str(p.turnaround_time),
            str(p.waiting_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", _fmt_avg(result.avg_waiting))
    sys_table.add_row("Avg turnaround", _fmt_avg(result.avg_turnaround))
    sys_table.add_row("Avg response", _fmt_avg(result.avg_response))
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Idle time", str(sys.idle_time))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(processes: List[Process], algorithms: List[Algorithm], quantum: int, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("Makespan", justify="right")

    for alg in algorithms:
        result = simulate(processes, alg, quantum=quantum if alg.needs_quantum else None)
        summary_table.add_row(
            alg.label,
            "" if result.quantum is None else str(result.quantum),
            _fmt_avg(result.avg_waiting),
            _fmt_avg(result.avg_turnaround),
            _fmt_avg(result.avg_response),
            str(result.system.makespan) if result.system else "",
        )

    console.print(summary_table)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    console = Console()
    err_console = Console(stderr=True)

    try:
        processes = _read_processes(args)

        if args.command == "run":
            result = simulate(processes, Algorithm.parse(args.algorithm), quantum=args.quantum)
            _print_result(result, console)
            return 0

        if args.command == "compare":
            algorithms = [Algorithm.parse(name) for name in args.algorithms]
            _print_comparison(processes, algorithms, args.quantum, console)
            return 0
    except (SchedulingError, OSError) as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
