from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Task:
    id: str
    execution_time: Number
    period: Number
    deadline: Optional[Number] = None
    priority: Optional[int] = None

    @property
    def relative_deadline(self) -> Number:
        return self.deadline if self.deadline is not None else self.period


@dataclass(frozen=True)
class TaskInstance:
    """
    One periodic arrival of a task. ``deadline`` is absolute.
    """

    task_id: str
    arrival_time: Number
    deadline: Number
    execution_time: Number


@dataclass
class ScheduleEntry:
    """
    One placed instance on a core's timeline (what the Gantt chart draws).
    """

    task_id: str
    core_id: int
    start_time: Number
    duration: Number
    end_time: Number
    color: str


@dataclass
class LogEntry:
    task_id: str
    core_assigned: int
    start_time: Number
    duration: Number
    end_time: Number
    deadline: Optional[Number] = None
    missed_deadline: bool = False


@dataclass
class CoreUtilization:
    core_id: int
    busy_time: Number
    utilization: float


@dataclass
class SimulationStats:
    core_utilizations: List[CoreUtilization] = field(default_factory=list)
    total_deadline_misses: int = 0
    average_response_time: float = 0.0
    total_tasks: int = 0

    @property
    def deadline_miss_rate(self) -> float:
        """
        Misses as a percentage of logged instances.
        """
        if self.total_tasks == 0:
            return 0.0
        return self.total_deadline_misses / self.total_tasks * 100

    @property
    def system_utilization(self) -> float:
        if not self.core_utilizations:
            return 0.0
        return sum(c.utilization for c in self.core_utilizations) / len(self.core_utilizations)


@dataclass
class SimulationConfig:
    num_cores: int = 2
    total_time: Number = 20
    realtime: bool = False


@dataclass
class SimulationResult:
    tasks: List[Task]
    num_cores: int
    total_time: Number
    assignments: Dict[str, int] = field(default_factory=dict)
    schedule: List[ScheduleEntry] = field(default_factory=list)
    logs: List[LogEntry] = field(default_factory=list)
    stats: SimulationStats = field(default_factory=SimulationStats)
    generated_instances: int = 0

    @property
    def dropped_instances(self) -> int:
        return self.generated_instances - len(self.logs)
