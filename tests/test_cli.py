import copy
import json
from pathlib import Path

from rich.console import Console

from partsched.cli import _animate_result, main
from partsched.models import Task
from partsched.simulator import simulate


def _workload(tmp_path: Path) -> Path:
    p = tmp_path / "tasks.json"
    p.write_text(
        json.dumps(
            {
                "num_cores": 1,
                "total_time": 12,
                "tasks": [
                    {"id": "T1", "execution_time": 3, "period": 4},
                    {"id": "T2", "execution_time": 3, "period": 4},
                ],
            }
        )
    )
    return p


def test_run_prints_summary(tmp_path: Path, capsys):
    assert main(["run", "-w", str(_workload(tmp_path)), "--plain"]) == 0
    out = capsys.readouterr().out
    assert "Gantt Chart:" in out
    assert "Deadline misses" in out
    assert "100.00%" in out


def test_run_with_export(tmp_path: Path):
    out_path = tmp_path / "log.csv"
    assert main(["run", "-w", str(_workload(tmp_path)), "--export", str(out_path)]) == 0
    assert out_path.read_text(encoding="utf-8").splitlines()[1] == "T1,0,0,3,3,4,No"


def test_export_to_stdout_with_overrides(tmp_path: Path, capsys):
    assert main(["export", "-w", str(_workload(tmp_path)), "--cores", "2", "-o", "-"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[1] == "T1,0,0,3,3,4,No"
    assert lines[2] == "T2,1,0,3,3,4,No"


def test_compare(tmp_path: Path, capsys):
    assert main(["compare", "-w", str(_workload(tmp_path)), "--cores", "1", "2"]) == 0
    assert "Core count comparison" in capsys.readouterr().out


def test_invalid_core_count(tmp_path: Path, capsys):
    assert main(["run", "-w", str(_workload(tmp_path)), "--cores", "0"]) == 2
    assert "num_cores" in capsys.readouterr().out


def test_missing_workload(tmp_path: Path):
    assert main(["run", "-w", str(tmp_path / "missing.json")]) == 2


def test_non_finite_horizon_rejected(tmp_path: Path, capsys):
    assert main(["run", "-w", str(_workload(tmp_path)), "--horizon", "inf"]) == 2
    assert "total_time" in capsys.readouterr().out


def test_step_replay(tmp_path: Path, capsys):
    assert main(["run", "-w", str(_workload(tmp_path)), "--step", "--step-delay", "0"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "t=  0: C0: T1" in lines
    assert "t=  3: C0: T2" in lines
    assert "t=  6: C0: T1" in lines
    assert "t= 12: C0: idle" in lines
    assert any("t=12 / 12" in line for line in lines)


def test_step_replay_on_idle_cores(tmp_path: Path, capsys):
    p = tmp_path / "tasks.json"
    p.write_text(json.dumps([{"id": "T1", "execution_time": 2, "period": 10}]))
    assert main(["run", "-w", str(p), "--cores", "2", "--horizon", "4", "--step", "--step-delay", "0"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "t=  1: C0: T1  C1: idle" in lines
    assert "t=  2: C0: idle  C1: idle" in lines


def test_step_replay_without_execution(tmp_path: Path, capsys):
    p = tmp_path / "tasks.json"
    p.write_text(json.dumps([{"id": "BIG", "execution_time": 25, "period": 10}]))
    assert main(["run", "-w", str(p), "--horizon", "20", "--step", "--step-delay", "0"]) == 0
    assert "No execution to animate." in capsys.readouterr().out


def test_replay_leaves_result_unchanged():
    tasks = [Task("T1", execution_time=3, period=4), Task("T2", execution_time=3, period=4)]
    result = simulate(tasks, num_cores=1, total_time=12)
    before = copy.deepcopy(result)

    _animate_result(result, delay=0, console=Console(record=True, width=100))

    assert result == before
    assert result == simulate(tasks, num_cores=1, total_time=12)
