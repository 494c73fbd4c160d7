from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .models import Process, ScheduleResult
from .workload_io import WorkloadError, load_workload

logger = logging.getLogger(__name__)

DEFAULT_ORDER = ["fcfs", "sjf", "priority", "rr"]
TABLE_HEADERS = ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, preemptive SJF, preemptive Priority, Round-robin).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity on stderr (default: WARNING).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run scheduling algorithms on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        default="all",
        help=f"Algorithm to use ({', '.join(ALGORITHMS)}) or 'all' (default).",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin. Without it each process gets one unit per pass.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text report instead of the rich one.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(DEFAULT_ORDER),
        help="Algorithms to compare (default: fcfs sjf priority rr).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum used for round-robin when included.",
    )

    return parser


def configure_logging(level: str, console: Optional[Console] = None) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), show_path=False)],
        force=True,
    )


def _table_rows(result: ScheduleResult) -> List[List[str]]:
    return [
        [
            r.pid,
            str(r.priority),
            str(r.burst_time),
            str(r.arrival_time),
            str(r.wait_time),
            str(r.turnaround_time),
            str(r.completion_time),
        ]
        for r in result.rows
    ]


def _footer(result: ScheduleResult) -> List[str]:
    stats = result.stats
    return [
        "",
        "",
        "",
        "",
        f"Average\n{stats.average_wait:.2f}",
        f"Average\n{stats.average_turnaround:.2f}",
        f"Throughput\n{stats.throughput:.2f}/t",
    ]


def _banner(title: str) -> List[str]:
    rule = "-" * (len(title) * 2)
    return [rule, " " * (len(title) // 2) + " " + title, rule]


def _print_result(result: ScheduleResult, console: Console) -> None:
    for line in _banner(result.algorithm):
        console.print(line, highlight=False)
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    table = Table(title="Schedule table", box=box.SIMPLE_HEAVY, show_footer=True)
    for header, footer in zip(TABLE_HEADERS, _footer(result)):
        justify = "center" if header in {"ID", "Priority"} else "right"
        table.add_column(header, footer=footer, justify=justify)

    for row in _table_rows(result):
        table.add_row(*row)

    console.print(table)
    console.print(
        f"[dim]CPU busy {result.stats.cpu_busy_time} of {result.stats.makespan} "
        f"({result.stats.cpu_utilization * 100:.1f}%)[/dim]"
    )
    console.print()


def format_plain_report(result: ScheduleResult) -> str:
    """
    Plain-text report: banner, Gantt schedule and a fixed-width schedule table.
    """
    rows = [TABLE_HEADERS] + _table_rows(result)
    footer = [cell.replace("\n", " ") for cell in _footer(result)]
    widths = [max(len(r[i]) for r in rows + [footer]) for i in range(len(TABLE_HEADERS))]

    def fmt(cells: Sequence[str]) -> str:
        return "| " + " | ".join(c.rjust(w) for c, w in zip(cells, widths)) + " |"

    separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    lines = _banner(result.algorithm)
    if result.quantum is not None:
        lines.append(f"Quantum: {result.quantum}")
    lines.append(render_gantt(result.timeline))
    lines.append("")
    lines.append("Schedule table")
    lines.append(separator)
    lines.append(fmt(rows[0]))
    lines.append(separator)
    lines.extend(fmt(r) for r in rows[1:])
    lines.append(separator)
    lines.append(fmt(footer))
    lines.append(separator)
    return "\n".join(lines)


def _print_comparison(processes: Sequence[Process], algorithms: Sequence[str], quantum: Optional[int], console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Throughput", justify="right")

    for alg in algorithms:
        result = run_algorithm(alg, processes, quantum=quantum)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.stats.average_wait:.2f}",
            f"{result.stats.average_turnaround:.2f}",
            f"{result.stats.throughput:.2f}/t",
        )

    console.print(summary_table)


def _load(path: str) -> Optional[List[Process]]:
    try:
        return load_workload(Path(path))
    except WorkloadError as exc:
        logger.error("%s", exc)
        return None


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    configure_logging(args.log_level)

    processes = _load(args.workload)
    if processes is None:
        return 1

    try:
        if args.command == "run":
            names = DEFAULT_ORDER if args.algorithm.lower() == "all" else [args.algorithm]
            for name in names:
                result = run_algorithm(name, processes, quantum=args.quantum)
                if args.plain:
                    print(format_plain_report(result))
                    print()
                else:
                    _print_result(result, console)
            return 0

        if args.command == "compare":
            _print_comparison(processes, args.algorithms, args.quantum, console)
            return 0
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    raise SystemExit(main())
