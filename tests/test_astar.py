from collections import deque

import pytest

from algorithms.astar import AStarMachine
from algorithms.base import MachineState
from algorithms.step import StepStatus
from errors import ConfigurationError
from grid import Grid


def bfs_path_cells(grid):
    """Cells on a shortest start → end path (both included), or None."""
    dist = {grid.start: 1}
    queue = deque([grid.start])
    while queue:
        cur = queue.popleft()
        if cur == grid.end:
            return dist[cur]
        for nbr in grid.neighbours(cur):
            if nbr not in dist:
                dist[nbr] = dist[cur] + 1
                queue.append(nbr)
    return None


def reachable_from_start(grid):
    seen = {grid.start}
    queue = deque([grid.start])
    while queue:
        for nbr in grid.neighbours(queue.popleft()):
            if nbr not in seen:
                seen.add(nbr)
                queue.append(nbr)
    return len(seen)


def manhattan_to(goal, c):
    return abs(c[0] - goal[0]) + abs(c[1] - goal[1])


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------
def test_open_grid_finds_a_nine_cell_path(drive):
    grid = Grid(size=5, start=(0, 0), end=(4, 4))
    snapshots, result = drive(AStarMachine(grid))

    assert result.status == "found"
    assert result.path_length == 9
    assert result.path[0] == (0, 0)
    assert result.path[-1] == (4, 4)
    for a, b in zip(result.path, result.path[1:]):
        assert abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1
    distances = [manhattan_to((4, 4), c) for c in result.path]
    assert distances == sorted(distances, reverse=True)
    assert len(set(distances)) == len(distances)

    final = snapshots[-1]
    assert final.is_final
    assert final.path == result.path
    on_path = {(c["x"], c["y"]) for c in final.cells if c["on_best_path"]}
    assert on_path == set(result.path)


def test_full_wall_row_exhausts_the_reachable_region(drive):
    walls = [(x, 2) for x in range(5)]
    grid = Grid(size=5, start=(0, 0), end=(4, 4), walls=walls)
    snapshots, result = drive(AStarMachine(grid))

    assert result.status == "exhausted"
    assert result.path == []
    assert not result.found
    assert result.finalized_count == 10
    assert snapshots[-1].status == "exhausted"


def test_start_equal_to_end_finishes_in_one_step():
    grid = Grid(size=5, start=(2, 2), end=(2, 2))
    machine = AStarMachine(grid)
    outcome = machine.advance()

    assert outcome.status == StepStatus.DONE
    assert outcome.result.path == [(2, 2)]
    assert outcome.result.finalized_count == 1
    assert machine.state == MachineState.FOUND


def test_ready_snapshot_holds_only_the_start():
    grid = Grid(size=5, start=(1, 1), end=(3, 3))
    snap = AStarMachine(grid).snapshot()

    assert snap.step_number == 0
    assert snap.status == "ready"
    assert snap.frontier == [(1, 1)]
    start = next(c for c in snap.cells if (c["x"], c["y"]) == (1, 1))
    assert start["g"] == 0 and start["h"] == 4 and start["f"] == 4
    assert not any(c["visited"] for c in snap.cells)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------
@pytest.mark.parametrize("seed", range(25))
@pytest.mark.parametrize("heuristic", ["manhattan", "zero"])
def test_path_length_matches_breadth_first_search(drive, seed, heuristic):
    grid = Grid.generate_maze(10, wall_prob=0.3, start=(0, 0), end=(9, 9), seed=seed)
    _, result = drive(AStarMachine(grid, heuristic=heuristic))

    expected = bfs_path_cells(grid)
    if expected is None:
        assert result.status == "exhausted"
        assert result.path == []
        assert result.finalized_count == reachable_from_start(grid)
    else:
        assert result.status == "found"
        assert result.path_length == expected


def test_identical_configurations_replay_identically(drive):
    grid = Grid.generate_maze(12, wall_prob=0.25, start=(1, 1), end=(10, 8), seed=11)
    snaps_a, result_a = drive(AStarMachine(grid))
    snaps_b, result_b = drive(AStarMachine(grid))

    assert snaps_a == snaps_b
    assert result_a == result_b


def test_each_step_finalizes_exactly_one_cell_and_never_reopens_it():
    grid = Grid.generate_maze(8, wall_prob=0.2, start=(0, 0), end=(7, 7), seed=5)
    machine = AStarMachine(grid)
    finalized = {}
    previous_count = 0

    while not machine.is_terminal:
        outcome = machine.advance()
        snap = machine.snapshot()
        visited = {(c["x"], c["y"]): c["g"] for c in snap.cells if c["visited"]}
        if machine.state != MachineState.EXHAUSTED:
            assert snap.metrics["finalized"] == previous_count + 1
        previous_count = snap.metrics["finalized"]
        for coord, g in finalized.items():
            assert visited[coord] == g
        finalized = visited
        assert not set(snap.frontier) & set(finalized)
        if outcome.is_terminal:
            break


def test_editing_the_grid_mid_run_does_not_affect_it(drive):
    grid = Grid(size=6, start=(0, 0), end=(5, 5))
    reference = grid.copy()
    machine = AStarMachine(grid)
    machine.advance()

    for x in range(6):
        if (x, 3) != grid.end:
            grid.toggle_wall((x, 3))
    grid.set_end((0, 1))

    _, edited = drive(machine)
    _, fresh = drive(AStarMachine(reference))
    assert edited.path == fresh.path
    assert edited.status == "found"


def test_snapshots_are_not_aliased_to_machine_state():
    machine = AStarMachine(Grid(size=5))
    first = machine.snapshot()
    frontier_before = list(first.frontier)
    cells_before = [dict(c) for c in first.cells]
    for _ in range(5):
        machine.advance()
    assert first.frontier == frontier_before
    assert first.cells == cells_before


def test_advance_after_terminal_raises():
    machine = AStarMachine(Grid(size=2, start=(0, 0), end=(0, 0)))
    machine.advance()
    with pytest.raises(RuntimeError):
        machine.advance()


def test_finalizing_a_cell_twice_fails_the_run():
    machine = AStarMachine(Grid(size=3, start=(0, 0), end=(2, 2)))
    machine.advance()
    machine.start.f = -1
    machine.frontier.insert(machine.start)

    outcome = machine.advance()
    assert outcome.status == StepStatus.FAILED
    assert machine.state == MachineState.FAILED
    assert machine.result.status == "failed"
    assert "finalized twice" in outcome.reason


def test_unknown_heuristic_is_rejected():
    with pytest.raises(ConfigurationError):
        AStarMachine(Grid(size=3), heuristic="euclidean")
