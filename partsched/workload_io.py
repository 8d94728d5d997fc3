from __future__ import annotations

import csv
import json
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from .models import Number, SimulationConfig, Task

# Accepted spellings per field; the camelCase forms match the web UI's task objects.
_KEYS = {
    "id": ("id", "task_id"),
    "execution_time": ("execution_time", "executionTime"),
    "period": ("period",),
    "deadline": ("deadline",),
    "priority": ("priority",),
}


def load_workload(path: str | Path) -> List[Task]:
    """
    Load a task set from a JSON or CSV file into a list of Task objects.
    """
    tasks, _ = _load(Path(path))
    return tasks


def load_config(path: str | Path, defaults: Optional[SimulationConfig] = None) -> Tuple[List[Task], SimulationConfig]:
    """
    Load tasks plus any ``num_cores`` / ``total_time`` settings stored beside them.

    Only JSON object workloads carry settings; anything missing falls back to ``defaults``.
    """
    config = defaults or SimulationConfig()
    tasks, settings = _load(Path(path))

    if "num_cores" in settings:
        config = replace(config, num_cores=_parse_int(settings["num_cores"], "num_cores"))
    if "total_time" in settings:
        config = replace(config, total_time=_parse_number(settings["total_time"], "total_time"))
    return tasks, config


def _load(path: Path) -> Tuple[List[Task], Mapping[str, Any]]:
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path), {}

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> Tuple[List[Task], Mapping[str, Any]]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    settings: Mapping[str, Any] = {}
    if isinstance(raw, dict):
        settings = {k: v for k, v in raw.items() if k in ("num_cores", "total_time")}
        raw = raw.get("tasks", [])

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of task objects or an object with a 'tasks' list")

    return [_task_from_mapping(entry) for entry in raw], settings


def _load_csv(path: Path) -> List[Task]:
    tasks: List[Task] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            tasks.append(_task_from_mapping(row))
    return tasks


def _lookup(mapping: Mapping[str, Any], field: str) -> Any:
    for key in _KEYS[field]:
        value = mapping.get(key)
        if value not in (None, ""):
            return value
    return None


def _parse_number(value: Any, field: str) -> Number:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number, got {value!r}")
    number = float(value)
    return int(number) if number.is_integer() else number


def _parse_int(value: Any, field: str) -> int:
    number = _parse_number(value, field)
    if not isinstance(number, int):
        raise ValueError(f"{field} must be an integer, got {value!r}")
    return number


def _task_from_mapping(mapping) -> Task:
    try:
        raw_id = _lookup(mapping, "id")
        if raw_id is None:
            raise KeyError("id")
        task_id = str(raw_id).strip()
        execution_time = _parse_number(_lookup(mapping, "execution_time"), "execution_time")
        period = _parse_number(_lookup(mapping, "period"), "period")
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid task entry: {mapping!r}") from exc

    deadline_val = _lookup(mapping, "deadline")
    priority_val = _lookup(mapping, "priority")
    try:
        deadline = _parse_number(deadline_val, "deadline") if deadline_val is not None else None
        priority = _parse_int(priority_val, "priority") if priority_val is not None else None
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid task entry: {mapping!r}") from exc

    return Task(
        id=task_id,
        execution_time=execution_time,
        period=period,
        deadline=deadline,
        priority=priority,
    )
