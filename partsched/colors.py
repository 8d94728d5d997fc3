from __future__ import annotations

from typing import Dict, Sequence

from .models import Task

TASK_COLORS = [
    "#a855f7",
    "#ec4899",
    "#06b6d4",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#f97316",
    "#84cc16",
    "#6366f1",
]


def task_color(index: int) -> str:
    return TASK_COLORS[index % len(TASK_COLORS)]


def color_map(tasks: Sequence[Task]) -> Dict[str, str]:
    """
    Map each task id to a palette color by its position in the input list.
    """
    return {task.id: task_color(index) for index, task in enumerate(tasks)}
