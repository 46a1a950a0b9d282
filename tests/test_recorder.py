import time
import tracemalloc

import pytest

from algorithms.astar import AStarMachine
from engine import ManualClock, Recorder, Stepper
from errors import ConfigurationError
from grid import Grid


def test_records_a_pathfinding_run():
    grid = Grid(size=5, start=(0, 0), end=(4, 4))
    rec = Recorder()
    rec.start("astar", grid=grid)
    metrics = rec.run_to_completion()

    assert metrics is rec.get_metrics()
    assert metrics.algo_key == "astar"
    assert metrics.algo_label == "A* Search"
    assert metrics.family == "pathfinding"
    assert metrics.status == "found"
    assert metrics.found
    assert metrics.path_length == 9
    assert metrics.total_steps == len(rec.steps)
    assert rec.steps[0].status == "ready"
    assert rec.steps[-1].is_final
    assert metrics.finalized_count == rec.result.finalized_count


def test_recording_copies_the_grid():
    grid = Grid(size=4)
    rec = Recorder()
    rec.start("astar", grid=grid)
    grid.toggle_wall((1, 1))
    rec.run_to_completion()
    assert rec.export()["grid"]["walls"] == []


def test_export_is_serialisable():
    rec = Recorder()
    rec.start("bubble_sort", params={"array_size": 6, "seed": 3})
    rec.run_to_completion()
    data = rec.export()

    assert data["algo_key"] == "bubble_sort"
    assert data["params"] == {"array_size": 6, "seed": 3}
    assert data["grid"] is None
    assert data["result"]["status"] == "finished"
    assert data["metrics"]["summary"]["array"] == sorted(data["steps"][0]["array"])
    assert len(data["steps"]) == data["metrics"]["total_steps"]
    assert [s["step_number"] for s in data["steps"]] == list(range(len(data["steps"])))


def test_search_miss_is_recorded_as_exhausted():
    rec = Recorder()
    rec.start("linear_search", params={"array_size": 5, "seed": 1, "target": -1})
    metrics = rec.run_to_completion()
    assert metrics.status == "exhausted"
    assert not metrics.found
    assert metrics.summary["index"] == -1


def test_unknown_algorithm_is_rejected():
    with pytest.raises(ConfigurationError):
        Recorder().start("bogosort")


def test_run_before_start_raises():
    with pytest.raises(RuntimeError):
        Recorder().run_to_completion()


def test_recorded_frames_match_a_stepper_run():
    grid = Grid(size=8, start=(0, 0), end=(7, 7), walls=[(3, y) for y in range(7)])
    rec = Recorder()
    rec.start("astar", grid=grid)
    rec.run_to_completion()

    stepper = Stepper(clock=ManualClock())
    stepper.run(AStarMachine(grid), delay_ms=0)
    assert list(rec.steps) == list(stepper.steps)


def test_largest_grid_records_within_budget():
    grid = Grid(size=50, start=(0, 0), end=(49, 49))
    rec = Recorder()
    rec.start("astar", grid=grid, params={"heuristic": "zero"})

    tracemalloc.start()
    started = time.monotonic()
    try:
        metrics = rec.run_to_completion()
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()
    elapsed = time.monotonic() - started

    assert metrics.status == "found"
    assert metrics.total_steps == 2501
    assert peak < 64 * 1024 * 1024
    assert elapsed < 20

    middle = rec.steps[1250]
    assert len(middle.cells) == 2500
    assert sum(c["visited"] for c in middle.cells) == 1250
    assert rec.steps[-1].path == rec.result.path
    assert len(rec.result.path) == 99


def test_run_twice_without_start_raises():
    rec = Recorder()
    rec.start("bubble_sort", params={"array_size": 4, "seed": 1})
    rec.run_to_completion()
    with pytest.raises(RuntimeError):
        rec.run_to_completion()
