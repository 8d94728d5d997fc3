from __future__ import annotations

import argparse
import logging
import math
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import List, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .export import DEFAULT_EXPORT_NAME, export_to_csv, format_number, write_csv
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_by_task
from .models import SimulationConfig, SimulationResult, Task
from .simulator import PartitionedScheduler
from .validation import ConfigurationError
from .workload_io import load_config

logger = logging.getLogger(__name__)


def _number(value: str):
    number = float(value)
    return int(number) if number.is_integer() else number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="partsched",
        description="Partitioned multi-core simulator for periodic real-time tasks.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging (partition assignment, per-run instance counts).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_workload_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--workload",
            "-w",
            required=True,
            help="Path to JSON or CSV task set.",
        )
        sub.add_argument(
            "--horizon",
            "-t",
            type=_number,
            default=None,
            help="Total simulation time (overrides the workload file; default: 20).",
        )

    run_parser = subparsers.add_parser("run", help="Simulate a task set and print the schedule and statistics.")
    add_workload_args(run_parser)
    run_parser.add_argument(
        "--cores",
        "-c",
        type=int,
        default=None,
        help="Number of CPU cores (overrides the workload file; default: 2).",
    )
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Replay the computed schedule one time unit at a time before the summary.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=1.0,
        help="Seconds to wait between steps when --step is used (default: 1.0).",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print a plain-text Gantt chart instead of the colored one.",
    )
    run_parser.add_argument(
        "--export",
        "-o",
        default=None,
        help="Also write the simulation log as CSV to this path.",
    )
    run_parser.add_argument(
        "--delimiter",
        default=",",
        help="Field delimiter for the CSV export (default: ',').",
    )

    export_parser = subparsers.add_parser("export", help="Simulate a task set and write the log as CSV.")
    add_workload_args(export_parser)
    export_parser.add_argument(
        "--cores",
        "-c",
        type=int,
        default=None,
        help="Number of CPU cores (overrides the workload file; default: 2).",
    )
    export_parser.add_argument(
        "--output",
        "-o",
        default=None,
        help=f"Output path, '-' for stdout (default: {DEFAULT_EXPORT_NAME}).",
    )
    export_parser.add_argument(
        "--delimiter",
        default=",",
        help="Field delimiter (default: ',').",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run the same task set on several core counts and compare the statistics.",
    )
    add_workload_args(compare_parser)
    compare_parser.add_argument(
        "--cores",
        "-c",
        type=int,
        nargs="+",
        default=[1, 2, 4],
        help="Core counts to compare (default: 1 2 4).",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _resolve(args: argparse.Namespace) -> Tuple[List[Task], SimulationConfig]:
    tasks, config = load_config(Path(args.workload))
    cores = getattr(args, "cores", None)
    if isinstance(cores, int):
        config = replace(config, num_cores=cores)
    if args.horizon is not None:
        config = replace(config, total_time=args.horizon)
    if getattr(args, "step", False):
        config = replace(config, realtime=True)
    return tasks, config


def _print_result(result: SimulationResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Tasks:[/bold] {len(result.tasks)}")
    console.print(f"[bold]Cores:[/bold] {result.num_cores}")
    console.print(f"[bold]Horizon:[/bold] {format_number(result.total_time)}")

    console.print()

    if plain:
        console.print(render_gantt(result.schedule, result.num_cores, result.total_time), highlight=False, markup=False)
    else:
        console.print(build_rich_gantt(result.schedule, result.num_cores, result.total_time))

    console.print()

    headers = ["Task", "Core", "Start", "Duration", "End", "Deadline", "Missed"]

    log_table = Table(title="Simulation log", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"Task", "Core", "Missed"} else "right"
        log_table.add_column(h, justify=justify)

    for entry in result.logs:
        log_table.add_row(
            entry.task_id,
            str(entry.core_assigned),
            format_number(entry.start_time),
            format_number(entry.duration),
            format_number(entry.end_time),
            format_number(entry.deadline),
            "[red]Yes[/red]" if entry.missed_deadline else "No",
        )

    console.print(log_table)
    console.print()

    task_table = Table(title="Per-task summary", box=box.SIMPLE_HEAVY)
    task_table.add_column("Task", justify="center")
    task_table.add_column("Core", justify="center")
    task_table.add_column("Instances", justify="right")
    task_table.add_column("Misses", justify="right")
    task_table.add_column("Busy time", justify="right")
    for summary in summarize_by_task(result.logs):
        task_table.add_row(
            summary.task_id,
            str(summary.core_id),
            str(summary.instances),
            str(summary.misses),
            format_number(summary.busy_time),
        )
    console.print(task_table)
    console.print()

    stats = result.stats
    sys_table = Table(title="Statistics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    for core in stats.core_utilizations:
        sys_table.add_row(f"Core {core.core_id} utilization", f"{core.utilization:.2f}%")
    misses = str(stats.total_deadline_misses)
    if stats.total_deadline_misses:
        misses += f" ({stats.deadline_miss_rate:.1f}%)"
    sys_table.add_row("Deadline misses", misses)
    sys_table.add_row("Avg response time", f"{stats.average_response_time:.2f}")
    sys_table.add_row("Total tasks", str(stats.total_tasks))
    sys_table.add_row("System utilization", f"{stats.system_utilization:.1f}%")
    sys_table.add_row("Dropped (past horizon)", str(result.dropped_instances))

    console.print(sys_table)


def _animate_result(result: SimulationResult, delay: float, console: Console) -> None:
    """
    Time-stepped replay of an already computed schedule.
    """
    if not result.schedule:
        console.print("[red]No execution to animate.[/red]")
        return

    ticks = int(math.ceil(result.total_time))
    console.print(f"[bold]Replaying {len(result.schedule)} executions[/bold] (horizon {format_number(result.total_time)})")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    for t in range(ticks + 1):
        running = []
        for core_id in range(result.num_cores):
            current = next(
                (e for e in result.schedule if e.core_id == core_id and e.start_time <= t < e.end_time),
                None,
            )
            if current is None:
                running.append(f"C{core_id}: [dim]idle[/dim]")
            else:
                running.append(f"C{core_id}: [bold]{current.task_id}[/bold]")
        console.print(f"t={t:3d}: " + "  ".join(running))
        time.sleep(delay)

    console.print(build_rich_gantt(result.schedule, result.num_cores, result.total_time, current_time=ticks))


def _run_compare(tasks: List[Task], config: SimulationConfig, core_counts: List[int], console: Console) -> None:
    summary_table = Table(title="Core count comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Cores", justify="right")
    summary_table.add_column("Placed", justify="right")
    summary_table.add_column("Dropped", justify="right")
    summary_table.add_column("Misses", justify="right")
    summary_table.add_column("Miss rate", justify="right")
    summary_table.add_column("Avg response", justify="right")
    summary_table.add_column("System util.", justify="right")

    for cores in core_counts:
        result = PartitionedScheduler(tasks, cores, config.total_time).simulate()
        stats = result.stats
        summary_table.add_row(
            str(cores),
            str(stats.total_tasks),
            str(result.dropped_instances),
            str(stats.total_deadline_misses),
            f"{stats.deadline_miss_rate:.1f}%",
            f"{stats.average_response_time:.2f}",
            f"{stats.system_utilization:.1f}%",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    console = Console()

    try:
        tasks, config = _resolve(args)
        if not tasks:
            logger.warning("workload %s has no tasks; the schedule will be empty", args.workload)

        if args.command == "run":
            result = PartitionedScheduler(tasks, config.num_cores, config.total_time).simulate()
            if config.realtime:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console, plain=args.plain)
            if args.export:
                path = write_csv(result.logs, args.export, delimiter=args.delimiter)
                console.print(f"[green]Log written to {path}[/green]")
            return 0

        if args.command == "export":
            result = PartitionedScheduler(tasks, config.num_cores, config.total_time).simulate()
            if args.output == "-":
                sys.stdout.write(export_to_csv(result.logs, delimiter=args.delimiter) + "\n")
            else:
                path = write_csv(result.logs, args.output or DEFAULT_EXPORT_NAME, delimiter=args.delimiter)
                console.print(f"[green]Log written to {path}[/green]")
            return 0

        if args.command == "compare":
            _run_compare(tasks, config, args.cores, console)
            return 0
    except ConfigurationError as exc:
        console.print(f"[red]Invalid configuration: {exc}[/red]")
        return 2
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
