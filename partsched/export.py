from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from .models import LogEntry, Number

CSV_HEADERS = [
    "Task ID",
    "Core Assigned",
    "Start Time",
    "Duration",
    "End Time",
    "Deadline",
    "Missed Deadline",
]

DEFAULT_EXPORT_NAME = "simulation_logs.csv"


def format_number(value: Optional[Number]) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _row(entry: LogEntry) -> List[str]:
    return [
        entry.task_id,
        str(entry.core_assigned),
        format_number(entry.start_time),
        format_number(entry.duration),
        format_number(entry.end_time),
        format_number(entry.deadline),
        "Yes" if entry.missed_deadline else "No",
    ]


def export_to_csv(logs: Sequence[LogEntry], delimiter: str = ",") -> str:
    """
    Serialize log entries to delimited text, header row first, rows joined by newline.

    Fields are not quoted or escaped: a task id containing the delimiter
    produces a row with too many columns.
    """
    rows = [CSV_HEADERS] + [_row(entry) for entry in logs]
    return "\n".join(delimiter.join(row) for row in rows)


def write_csv(logs: Sequence[LogEntry], path: str | Path = DEFAULT_EXPORT_NAME, delimiter: str = ",") -> Path:
    path = Path(path)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(export_to_csv(logs, delimiter=delimiter))
    return path
