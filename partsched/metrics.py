from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from .models import CoreUtilization, LogEntry, Number, SimulationStats


def compute_core_utilizations(
    logs: Sequence[LogEntry], num_cores: int, total_time: Number
) -> List[CoreUtilization]:
    """
    Busy time and utilization (percent of the horizon, two decimals) for every declared core.
    """
    busy: Dict[int, Number] = {core_id: 0 for core_id in range(num_cores)}
    for entry in logs:
        busy[entry.core_assigned] = busy.get(entry.core_assigned, 0) + entry.duration

    return [
        CoreUtilization(
            core_id=core_id,
            busy_time=busy[core_id],
            utilization=round(busy[core_id] / total_time * 100, 2),
        )
        for core_id in range(num_cores)
    ]


def compute_stats(logs: Sequence[LogEntry], num_cores: int, total_time: Number) -> SimulationStats:
    """
    Aggregate a finished run's log into the summary numbers.

    ``average_response_time`` is the mean of ``end_time - start_time``, which in
    this non-preemptive model equals the execution time. Dropped instances are
    not in the log, so they count toward neither ``total_tasks`` nor the average.
    """
    if not logs:
        return SimulationStats(
            core_utilizations=compute_core_utilizations(logs, num_cores, total_time),
            total_deadline_misses=0,
            average_response_time=0.0,
            total_tasks=0,
        )

    response_times = [entry.end_time - entry.start_time for entry in logs]
    average = sum(response_times) / len(response_times)

    return SimulationStats(
        core_utilizations=compute_core_utilizations(logs, num_cores, total_time),
        total_deadline_misses=sum(1 for entry in logs if entry.missed_deadline),
        average_response_time=round(average, 2),
        total_tasks=len(logs),
    )


@dataclass
class TaskSummary:
    task_id: str
    core_id: int
    instances: int
    misses: int
    busy_time: Number


def summarize_by_task(logs: Sequence[LogEntry]) -> List[TaskSummary]:
    """
    Per-task totals over the logged instances, in order of first appearance.
    """
    summaries: Dict[str, TaskSummary] = {}
    for entry in logs:
        summary = summaries.get(entry.task_id)
        if summary is None:
            summary = TaskSummary(
                task_id=entry.task_id, core_id=entry.core_assigned, instances=0, misses=0, busy_time=0
            )
            summaries[entry.task_id] = summary
        summary.instances += 1
        summary.busy_time += entry.duration
        if entry.missed_deadline:
            summary.misses += 1
    return list(summaries.values())
