from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional

from .models import Number, Task


class ConfigurationError(ValueError):
    """
    Invalid simulation input. ``field`` names the offending setting or task field.
    """

    def __init__(self, field: str, value: Any, message: str, task_id: str | None = None):
        self.field = field
        self.value = value
        self.task_id = task_id
        prefix = f"task {task_id!r}: " if task_id is not None else ""
        super().__init__(f"{prefix}{field}={value!r}: {message}")


def _require_positive(field: str, value: Number, message: str, task_id: Optional[str] = None) -> None:
    # NaN fails every comparison; an infinite horizon never stops generating arrivals.
    if not math.isfinite(value):
        raise ConfigurationError(field, value, "must be a finite number", task_id=task_id)
    if value <= 0:
        raise ConfigurationError(field, value, message, task_id=task_id)


def validate_num_cores(num_cores: int) -> None:
    if isinstance(num_cores, bool) or not isinstance(num_cores, int):
        raise ConfigurationError("num_cores", num_cores, "core count must be an integer")
    _require_positive("num_cores", num_cores, "core count must be positive")


def validate_total_time(total_time: Number) -> None:
    _require_positive("total_time", total_time, "simulation horizon must be positive")


def validate_task(task: Task) -> None:
    if not str(task.id).strip():
        raise ConfigurationError("id", task.id, "task id must not be empty")
    _require_positive("execution_time", task.execution_time, "execution time must be positive", task.id)
    _require_positive("period", task.period, "period must be positive", task.id)
    if task.deadline is not None:
        _require_positive("deadline", task.deadline, "deadline must be positive", task.id)


def validate_tasks(tasks: Iterable[Task]) -> List[Task]:
    """
    Check every task and reject duplicate ids. Returns the tasks as a list.
    """
    seen: set[str] = set()
    checked: List[Task] = []
    for task in tasks:
        validate_task(task)
        if task.id in seen:
            raise ConfigurationError("id", task.id, "task id must be unique", task_id=task.id)
        seen.add(task.id)
        checked.append(task)
    return checked


def validate_config(tasks: Iterable[Task], num_cores: int, total_time: Number) -> List[Task]:
    validate_num_cores(num_cores)
    validate_total_time(total_time)
    return validate_tasks(tasks)
