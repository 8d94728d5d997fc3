from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .colors import color_map
from .instances import generate_all_instances
from .metrics import compute_stats
from .models import LogEntry, Number, ScheduleEntry, SimulationResult, Task, TaskInstance
from .partition import assign_partitions
from .validation import validate_config

logger = logging.getLogger(__name__)


def simulate(tasks: Sequence[Task], num_cores: int, total_time: Number) -> SimulationResult:
    """
    Partitioned, non-preemptive simulation of periodic tasks over ``[0, total_time)``.

    Instances from all tasks are visited once in arrival order. Ties keep
    task-list order (stable sort over the concatenation), which decides who
    runs first when two tasks on one core arrive together. Each instance
    starts at ``max(arrival, core free time)``; if it cannot finish by
    ``total_time`` it is dropped and the core's free time is left unchanged.
    """
    tasks = validate_config(tasks, num_cores, total_time)

    assignments = assign_partitions(tasks, num_cores)
    colors = color_map(tasks)

    instances = generate_all_instances(tasks, total_time)
    ordered: List[TaskInstance] = sorted(instances, key=lambda inst: inst.arrival_time)

    core_timelines: List[Number] = [0] * num_cores
    schedule: List[ScheduleEntry] = []
    logs: List[LogEntry] = []

    for inst in ordered:
        core_id = assignments[inst.task_id]
        start_time = max(inst.arrival_time, core_timelines[core_id])
        end_time = start_time + inst.execution_time

        if end_time > total_time:
            continue

        schedule.append(
            ScheduleEntry(
                task_id=inst.task_id,
                core_id=core_id,
                start_time=start_time,
                duration=inst.execution_time,
                end_time=end_time,
                color=colors[inst.task_id],
            )
        )
        logs.append(
            LogEntry(
                task_id=inst.task_id,
                core_assigned=core_id,
                start_time=start_time,
                duration=inst.execution_time,
                end_time=end_time,
                deadline=inst.deadline,
                missed_deadline=end_time > inst.deadline,
            )
        )
        core_timelines[core_id] = end_time

    logger.debug(
        "simulated %d tasks on %d cores: %d instances generated, %d placed, %d past horizon",
        len(tasks),
        num_cores,
        len(instances),
        len(logs),
        len(instances) - len(logs),
    )

    return SimulationResult(
        tasks=list(tasks),
        num_cores=num_cores,
        total_time=total_time,
        assignments=assignments,
        schedule=schedule,
        logs=logs,
        stats=compute_stats(logs, num_cores, total_time),
        generated_instances=len(instances),
    )


class PartitionedScheduler:
    """
    A fixed configuration that can be simulated repeatedly.

    Validation happens at construction; every ``simulate()`` call builds fresh
    core timelines, so repeated calls return identical results.
    """

    def __init__(self, tasks: Sequence[Task], num_cores: int, total_time: Number):
        self.tasks = validate_config(tasks, num_cores, total_time)
        self.num_cores = num_cores
        self.total_time = total_time
        self.assignments: Dict[str, int] = assign_partitions(self.tasks, num_cores)
        for task_id, core_id in self.assignments.items():
            logger.debug("task %s -> core %d", task_id, core_id)

    def simulate(self) -> SimulationResult:
        return simulate(self.tasks, self.num_cores, self.total_time)
