from __future__ import annotations

from typing import List, Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .export import format_number
from .models import Number, ScheduleEntry

DEFAULT_WIDTH = 60


def _column(t: Number, total_time: Number, width: int) -> int:
    return min(width, max(0, int(round(t / total_time * width))))


def _core_entries(schedule: Sequence[ScheduleEntry], core_id: int) -> List[ScheduleEntry]:
    return sorted((e for e in schedule if e.core_id == core_id), key=lambda e: (e.start_time, e.end_time))


def _span(entry: ScheduleEntry, cursor: int, total_time: Number, width: int) -> tuple[int, int]:
    start = max(cursor, _column(entry.start_time, total_time, width))
    end = max(start + 1, _column(entry.end_time, total_time, width))
    return start, min(end, width)


def render_gantt(
    schedule: Sequence[ScheduleEntry], num_cores: int, total_time: Number, width: Optional[int] = None
) -> str:
    """
    Plain-text Gantt chart, one row per core. ``=`` is execution, ``.`` is idle.
    """
    if not schedule:
        return "(no execution)"

    width = width or DEFAULT_WIDTH
    digits = len(str(num_cores - 1))
    lines = ["Gantt Chart:"]

    for core_id in range(num_cores):
        cells = ["."] * width
        cursor = 0
        for entry in _core_entries(schedule, core_id):
            start, end = _span(entry, cursor, total_time, width)
            if start >= width:
                break
            label = entry.task_id[: end - start].ljust(end - start, "=")
            cells[start:end] = list(label)
            cursor = end
        lines.append(f"Core {core_id:<{digits}} |{''.join(cells)}|")

    prefix = " " * len(f"Core {'':<{digits}} |")
    lines.append(prefix + "0" + format_number(total_time).rjust(width - 1))
    return "\n".join(lines)


def build_rich_gantt(
    schedule: Sequence[ScheduleEntry],
    num_cores: int,
    total_time: Number,
    current_time: Optional[Number] = None,
    width: Optional[int] = None,
) -> Panel:
    """
    Build a Rich Panel with one colored bar per core.

    With ``current_time`` set, entries that have not finished by then are
    dimmed and a cursor row marks the time.
    """
    if not schedule:
        return Panel("No execution", title="Gantt Chart")

    width = width or DEFAULT_WIDTH

    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold")
    table.add_column()

    for core_id in range(num_cores):
        row = Text()
        cursor = 0
        for entry in _core_entries(schedule, core_id):
            start, end = _span(entry, cursor, total_time, width)
            if start >= width:
                break
            if start > cursor:
                row.append("·" * (start - cursor), style="dim")

            done = current_time is None or entry.end_time <= current_time
            style = f"bold white on {entry.color}" if done else f"dim on {entry.color}"
            row.append(entry.task_id[: end - start].ljust(end - start), style=style)
            cursor = end
        if cursor < width:
            row.append("·" * (width - cursor), style="dim")
        table.add_row(f"Core {core_id}", row)

    axis = Text("0" + format_number(total_time).rjust(width - 1), style="dim")
    table.add_row("", axis)

    title = "Gantt Chart"
    if current_time is not None:
        marker = Text(" " * _column(current_time, total_time, width) + "▲", style="bold yellow")
        table.add_row("", marker)
        title = f"Gantt Chart (t={format_number(current_time)} / {format_number(total_time)})"

    return Panel.fit(table, title=title)
