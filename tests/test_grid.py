import math

import pytest

from errors import ConfigurationError
from grid import Cell, Grid


def test_defaults_put_end_in_the_far_corner():
    g = Grid(size=5)
    assert g.start == (0, 0)
    assert g.end == (4, 4)
    assert g.walls == set()


@pytest.mark.parametrize("kwargs", [
    {"size": 0},
    {"size": -3},
    {"size": 5, "start": (5, 0)},
    {"size": 5, "end": (-1, 2)},
    {"size": 5, "walls": [(7, 7)]},
    {"size": 5, "start": (1, 1), "walls": [(1, 1)]},
    {"size": 5, "end": (3, 3), "walls": [(3, 3)]},
    {"size": 5, "start": "not a coord"},
])
def test_invalid_configuration_is_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        Grid(**kwargs)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        Grid(size=0)


def test_neighbours_come_up_right_down_left():
    g = Grid(size=5)
    assert g.neighbours((2, 2)) == [(2, 1), (3, 2), (2, 3), (1, 2)]


def test_neighbours_skip_out_of_bounds_and_walls():
    g = Grid(size=5, walls=[(1, 0)])
    assert g.neighbours((0, 0)) == [(0, 1)]


def test_toggle_wall_flips_and_protects_markers():
    g = Grid(size=5, start=(0, 0), end=(4, 4))
    assert g.toggle_wall((2, 2)) is True
    assert g.is_wall((2, 2))
    assert g.toggle_wall((2, 2)) is True
    assert not g.is_wall((2, 2))

    assert g.toggle_wall((0, 0)) is False
    assert g.toggle_wall((4, 4)) is False
    assert g.walls == set()


def test_toggle_wall_out_of_bounds_raises():
    g = Grid(size=5)
    with pytest.raises(ConfigurationError):
        g.toggle_wall((5, 5))


def test_set_start_rejects_walls_and_out_of_bounds():
    g = Grid(size=5, walls=[(2, 2)])
    with pytest.raises(ConfigurationError):
        g.set_start((2, 2))
    with pytest.raises(ConfigurationError):
        g.set_end((9, 0))
    g.set_start({"x": 3, "y": 1})
    assert g.start == (3, 1)


def test_start_may_equal_end():
    g = Grid(size=3, start=(1, 1), end=(1, 1))
    assert g.start == g.end


def test_resize_clears_walls_and_clamps_markers():
    g = Grid(size=20, start=(2, 2), end=(17, 17), walls=[(5, 5)])
    g.resize(10)
    assert g.size == 10
    assert g.walls == set()
    assert g.start == (2, 2)
    assert g.end == (9, 9)
    g.validate()


def test_clear_walls():
    g = Grid(size=4, walls=[(1, 1), (2, 2)])
    g.clear_walls()
    assert g.walls == set()


def test_build_cells_is_row_major_and_reset():
    g = Grid(size=3)
    cells = g.build_cells()
    assert len(cells) == 3 and all(len(row) == 3 for row in cells)
    assert cells[2][1].coord == (1, 2)
    c = cells[0][0]
    assert math.isinf(c.g) and math.isinf(c.f)
    assert c.h == 0 and c.predecessor is None
    assert not c.visited and not c.on_best_path


def test_cell_to_dict_renders_infinity_as_none():
    c = Cell(1, 2)
    assert c.to_dict() == {
        "x": 1, "y": 2, "g": None, "h": 0.0, "f": None,
        "visited": False, "on_best_path": False,
    }
    c.g, c.h, c.f = 3, 2.0, 5.0
    assert c.to_dict()["f"] == 5.0


def test_copy_is_independent():
    g = Grid(size=4, walls=[(1, 1)])
    other = g.copy()
    other.toggle_wall((2, 2))
    assert (2, 2) not in g.walls
    assert other != g


def test_dict_round_trip_accepts_web_spelling():
    g = Grid.from_dict({"gridSize": 6, "start": "1,1", "end": {"x": 4, "y": 5}, "walls": [[2, 2], [3, 3]]})
    assert g.size == 6
    assert g.start == (1, 1)
    assert g.end == (4, 5)
    assert g.walls == {(2, 2), (3, 3)}
    assert Grid.from_dict(g.to_dict()) == g


def test_generate_maze_is_seeded_and_keeps_markers_clear():
    a = Grid.generate_maze(12, wall_prob=0.4, start=(0, 0), end=(11, 11), seed=3)
    b = Grid.generate_maze(12, wall_prob=0.4, start=(0, 0), end=(11, 11), seed=3)
    assert a == b
    assert a.walls
    assert (0, 0) not in a.walls and (11, 11) not in a.walls


def test_generate_maze_rejects_bad_probability():
    with pytest.raises(ConfigurationError):
        Grid.generate_maze(5, wall_prob=1.5)
