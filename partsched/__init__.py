"""
Partitioned scheduler simulator package.

Simulates periodic real-time tasks on a multi-core machine under static
round-robin partitioning and reports deadline misses and core utilization.
"""

from .models import LogEntry, ScheduleEntry, SimulationConfig, SimulationResult, SimulationStats, Task
from .simulator import PartitionedScheduler, simulate
from .validation import ConfigurationError

__all__ = [
    "ConfigurationError",
    "LogEntry",
    "PartitionedScheduler",
    "ScheduleEntry",
    "SimulationConfig",
    "SimulationResult",
    "SimulationStats",
    "Task",
    "cli",
    "simulate",
]
