from __future__ import annotations

from typing import List, Sequence

from .models import Number, Task, TaskInstance
from .validation import validate_task, validate_total_time


def generate_instances(task: Task, total_time: Number) -> List[TaskInstance]:
    """
    Expand a periodic task into its arrivals ``0, p, 2p, ...`` strictly before ``total_time``.
    """
    validate_total_time(total_time)
    validate_task(task)

    relative_deadline = task.relative_deadline
    instances: List[TaskInstance] = []

    k = 0
    arrival: Number = 0
    while arrival < total_time:
        instances.append(
            TaskInstance(
                task_id=task.id,
                arrival_time=arrival,
                deadline=arrival + relative_deadline,
                execution_time=task.execution_time,
            )
        )
        k += 1
        arrival = k * task.period

    return instances


def generate_all_instances(tasks: Sequence[Task], total_time: Number) -> List[TaskInstance]:
    """
    Concatenate every task's instances, in task-list order then arrival order.
    """
    instances: List[TaskInstance] = []
    for task in tasks:
        instances.extend(generate_instances(task, total_time))
    return instances
