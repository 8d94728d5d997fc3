from pathlib import Path

import pytest

from partsched.models import SimulationConfig, Task
from partsched.workload_io import load_config, load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"id":"T1","execution_time":2,"period":5,"priority":1},'
                 '{"id":"T2","executionTime":1.5,"period":4,"deadline":3}]')
    tasks = load_workload(p)
    assert isinstance(tasks[0], Task)
    assert tasks[0].deadline is None
    assert tasks[0].priority == 1
    assert tasks[1].execution_time == 1.5
    assert tasks[1].deadline == 3
    assert tasks[1].priority is None


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("id,execution_time,period,deadline,priority\nA,3,10,,1\nB,2,5,4,\n")
    tasks = load_workload(p)
    assert tasks[0].id == "A"
    assert tasks[0].deadline is None
    assert tasks[1].deadline == 4
    assert tasks[1].priority is None
    assert isinstance(tasks[0].period, int)


def test_load_config_with_settings(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"num_cores": 4, "total_time": 50, "tasks": [{"id":"T1","execution_time":2,"period":5}]}')
    tasks, config = load_config(p)
    assert [t.id for t in tasks] == ["T1"]
    assert config.num_cores == 4
    assert config.total_time == 50
    assert config.realtime is False


def test_load_config_falls_back_to_defaults(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("id,execution_time,period\nA,1,2\n")
    _, config = load_config(p, defaults=SimulationConfig(num_cores=3, total_time=9))
    assert config == SimulationConfig(num_cores=3, total_time=9)


def test_invalid_entry(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"id":"T1","period":5}]')
    with pytest.raises(ValueError, match="Invalid task entry"):
        load_workload(p)


def test_unsupported_format(tmp_path: Path):
    p = tmp_path / "w.yaml"
    p.write_text("")
    with pytest.raises(ValueError, match="Unsupported workload format"):
        load_workload(p)
