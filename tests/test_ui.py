import pytest

from algorithms import REGISTRY
from algorithms.astar import AStarMachine
from algorithms.clustering import KMeansMachine
from algorithms.local_search import SimulatedAnnealingMachine
from algorithms.sorting import QuickSortMachine
from algorithms.step import Snapshot
from engine import Recorder
from grid import Grid
from ui import (
    analytics_panel,
    explanation_panel,
    heuristic_playground,
    parameter_panel,
    pseudocode_viewer,
    render_grid_config,
    render_snapshot,
)


def test_grid_frame_marks_every_cell(drive):
    grid = Grid(size=4, start=(0, 0), end=(3, 3), walls=[(1, 1)])
    snapshots, _ = drive(AStarMachine(grid))
    svg = render_snapshot(snapshots[-1])

    assert svg.count('class="cell ') == 16
    assert 'class="cell wall" data-x="1" data-y="1"' in svg
    assert 'class="cell start" data-x="0" data-y="0"' in svg
    assert "<polyline" in svg


def test_array_curve_and_point_frames_render(drive):
    for machine in (
        QuickSortMachine([3, 1, 2]),
        SimulatedAnnealingMachine(max_iterations=10, seed=1),
        KMeansMachine(k=2, num_points=10, seed=1),
    ):
        snapshots, _ = drive(machine)
        for snap in (machine.snapshot(), snapshots[0]):
            svg = render_snapshot(snap)
            assert svg.startswith("<svg")
            assert svg.rstrip().endswith("</svg>")


def test_empty_and_unknown_frames():
    assert render_snapshot(None).endswith("</svg>")
    with pytest.raises(ValueError):
        render_snapshot(Snapshot(kind="hologram"))


def test_idle_editor_shows_the_grid():
    svg = render_grid_config(Grid(size=3, start=(0, 0), end=(2, 2)))
    assert svg.count('class="cell empty"') == 7


def test_pseudocode_highlights_one_line_and_escapes():
    html = pseudocode_viewer(["if a < b:", "    swap"], current_line=0)
    assert html.count("highlight") == 1
    assert "a &lt; b" in html


def test_explanation_respects_learning_mode():
    assert "swap <b>" not in explanation_panel("swap <b>", show=True)
    assert "Learning mode disabled" in explanation_panel("anything", show=False)


def test_open_set_table_lists_frontier_cells(drive):
    machine = AStarMachine(Grid(size=5, start=(2, 2), end=(4, 4)))
    machine.advance()
    html = heuristic_playground(machine.snapshot())
    assert html.count("<tr><td>(") == 4
    assert "manhattan" in html
    assert "Run A*" in heuristic_playground(None)


def test_parameter_panel_uses_stored_values():
    html = parameter_panel(REGISTRY["simulated_annealing"], {"cooling_rate": 0.9})
    assert 'data-param="cooling_rate" min="0.8" max="0.999" step="0.001" value="0.9"' in html
    assert 'placeholder="random"' in html


def test_analytics_panel_for_a_finished_run():
    assert "Run an algorithm" in analytics_panel(None)

    rec = Recorder()
    rec.start("astar", grid=Grid(size=5, start=(0, 0), end=(4, 4)))
    html = analytics_panel(rec.run_to_completion())
    assert "Path Length" in html
    assert "9 cells" in html
