import pytest

from algorithms import (
    REGISTRY,
    algorithms_by_family,
    coerce_params,
    create_machine,
    get_algorithm,
    list_algorithms,
)
from algorithms.base import MachineState
from errors import ConfigurationError
from grid import Grid


def test_every_algorithm_is_registered():
    assert set(REGISTRY) == {
        "astar",
        "hill_climbing", "simulated_annealing",
        "genetic_algorithm", "particle_swarm",
        "linear_search", "binary_search",
        "bubble_sort", "selection_sort", "insertion_sort", "merge_sort", "quick_sort",
        "kmeans",
    }
    assert [a.key for a in list_algorithms()] == list(REGISTRY)
    assert {a.key for a in algorithms_by_family("sorting")} == {
        "bubble_sort", "selection_sort", "insertion_sort", "merge_sort", "quick_sort",
    }
    assert get_algorithm("dijkstra") is None


@pytest.mark.parametrize("key", sorted(REGISTRY))
def test_every_key_builds_a_ready_machine(key):
    info = REGISTRY[key]
    machine = create_machine(key, grid=Grid(size=6), params={"seed": 1} if info.param("seed") else None)

    assert machine.key == key
    assert machine.state == MachineState.READY
    assert machine.PSEUDOCODE == info.pseudocode
    snap = machine.snapshot()
    assert snap.step_number == 0
    assert snap.status == "ready"
    assert 0 <= snap.pseudocode_line < len(info.pseudocode)


def test_metadata_is_json_ready():
    data = REGISTRY["simulated_annealing"].to_dict()
    assert data["family"] == "local-search"
    names = [p["name"] for p in data["params"]]
    assert names == ["function", "initial_temperature", "cooling_rate", "max_iterations", "seed"]


def test_coerce_params_fills_defaults():
    params = coerce_params(REGISTRY["hill_climbing"], {})
    assert params == {"function": "quadratic", "step_size": 0.1, "max_iterations": 100, "seed": None}


def test_coerce_params_converts_form_strings():
    params = coerce_params(REGISTRY["kmeans"], {"k": "4", "num_points": "30", "seed": ""})
    assert params["k"] == 4
    assert params["num_points"] == 30
    assert params["seed"] is None


@pytest.mark.parametrize("key, raw", [
    ("bubble_sort", {"array_size": 500}),
    ("bubble_sort", {"array_size": 2.5}),
    ("hill_climbing", {"function": "ackley"}),
    ("astar", {"heuristic": "euclidean"}),
    ("kmeans", {"k": "many"}),
    ("quick_sort", {"pivot": "median"}),
    ("simulated_annealing", {"cooling_rate": "nan"}),
    ("simulated_annealing", {"cooling_rate": float("nan")}),
    ("hill_climbing", {"step_size": float("inf")}),
    ("hill_climbing", {"step_size": "-inf"}),
    ("kmeans", {"k": float("inf")}),
])
def test_coerce_params_rejects_bad_input(key, raw):
    with pytest.raises(ConfigurationError):
        coerce_params(REGISTRY[key], raw)


def test_unknown_algorithm_is_rejected():
    with pytest.raises(ConfigurationError):
        create_machine("bogosort")


def test_pathfinding_needs_a_grid():
    with pytest.raises(ConfigurationError):
        create_machine("astar")


def test_binary_search_gets_sorted_input():
    machine = create_machine("binary_search", params={"array_size": 30, "seed": 5})
    assert machine.values == sorted(machine.values)


def test_search_target_is_passed_through():
    machine = create_machine("linear_search", params={"array_size": 5, "seed": 1, "target": "-1"})
    assert machine.target == -1.0
