from partsched.metrics import compute_stats, summarize_by_task
from partsched.models import LogEntry


def _log(task_id, core, start, duration, deadline, missed=None):
    end = start + duration
    return LogEntry(
        task_id=task_id,
        core_assigned=core,
        start_time=start,
        duration=duration,
        end_time=end,
        deadline=deadline,
        missed_deadline=end > deadline if missed is None else missed,
    )


def test_utilization_per_declared_core():
    logs = [_log("A", 0, 0, 1, 3), _log("A", 0, 3, 1, 6), _log("A", 0, 6, 1, 9)]
    stats = compute_stats(logs, num_cores=2, total_time=7)
    assert stats.core_utilizations[0].busy_time == 3
    assert stats.core_utilizations[0].utilization == 42.86
    assert stats.core_utilizations[1].busy_time == 0
    assert stats.core_utilizations[1].utilization == 0.0


def test_misses_and_average_response():
    logs = [_log("A", 0, 0, 3, 4), _log("B", 0, 3, 3, 4), _log("C", 1, 0, 2, 5)]
    stats = compute_stats(logs, num_cores=2, total_time=10)
    assert stats.total_deadline_misses == 1
    assert stats.average_response_time == 2.67
    assert stats.total_tasks == 3
    assert round(stats.deadline_miss_rate, 2) == 33.33


def test_system_utilization_is_mean_of_cores():
    logs = [_log("A", 0, 0, 5, 10)]
    stats = compute_stats(logs, num_cores=2, total_time=10)
    assert stats.system_utilization == 25.0


def test_empty_log():
    stats = compute_stats([], num_cores=2, total_time=10)
    assert stats.average_response_time == 0
    assert stats.total_tasks == 0
    assert stats.deadline_miss_rate == 0.0
    assert len(stats.core_utilizations) == 2


def test_summarize_by_task():
    logs = [_log("A", 0, 0, 3, 4), _log("B", 1, 0, 3, 2), _log("A", 0, 4, 3, 8)]
    summaries = summarize_by_task(logs)
    assert [s.task_id for s in summaries] == ["A", "B"]
    assert summaries[0].instances == 2
    assert summaries[0].busy_time == 6
    assert summaries[1].misses == 1
