from __future__ import annotations

from typing import Dict, Sequence

from .models import Task
from .validation import validate_num_cores


def assign_partitions(tasks: Sequence[Task], num_cores: int) -> Dict[str, int]:
    """
    Round-robin partitioning: the task at position ``i`` runs on core ``i % num_cores``.

    Load-oblivious on purpose; execution time and period are never consulted.
    """
    validate_num_cores(num_cores)
    return {task.id: index % num_cores for index, task in enumerate(tasks)}
