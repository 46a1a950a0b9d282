"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the animator knows about.

    from algorithms import REGISTRY, get_algorithm, create_machine

REGISTRY is a dict:
    {
        "astar": AlgoInfo(key, label, family, machine, pseudocode, params, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and UI both consume it,
so adding a new algorithm is: write the machine, add one entry here.
ParamSpec entries double as the slider definitions for the UI and as the
validation rules for incoming parameters.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from algorithms.astar          import AStarMachine, HEURISTICS
from algorithms.clustering     import KMeansMachine
from algorithms.evolutionary   import GeneticAlgorithmMachine, ParticleSwarmMachine
from algorithms.local_search   import HillClimbingMachine, SimulatedAnnealingMachine
from algorithms.objectives     import OBJECTIVES
from algorithms.searching      import BinarySearchMachine, LinearSearchMachine
from algorithms.sorting        import (
    BubbleSortMachine,
    InsertionSortMachine,
    MergeSortMachine,
    QuickSortMachine,
    SelectionSortMachine,
    random_values,
)
from algorithms.base           import AlgorithmMachine
from errors import ConfigurationError
from grid import Grid


# ---------------------------------------------------------------------------
# ParamSpec — one user-adjustable parameter
# ---------------------------------------------------------------------------
@dataclass
class ParamSpec:
    name:      str                          # keyword passed to the machine
    label:     str                          # slider caption
    default:   Any
    kind:      str            = "int"       # "int" | "float" | "choice"
    minimum:   Optional[float] = None
    maximum:   Optional[float] = None
    step:      Optional[float] = None
    choices:   List[str]      = field(default_factory=list)
    optional:  bool           = False       # None / "" accepted (seed, target)

    def coerce(self, raw: Any) -> Any:
        if raw is None or raw == "":
            if self.optional:
                return None
            return self.default
        if self.kind == "choice":
            if raw not in self.choices:
                raise ConfigurationError(
                    f"{self.name} must be one of {self.choices}, got {raw!r}"
                )
            return raw
        try:
            if self.kind == "int":
                if isinstance(raw, float) and not raw.is_integer():
                    raise ValueError
                value = int(raw)
            else:
                value = float(raw)
                if not math.isfinite(value):
                    raise ValueError
        except (TypeError, ValueError):
            raise ConfigurationError(f"{self.name} must be a number, got {raw!r}")
        if self.minimum is not None and value < self.minimum:
            raise ConfigurationError(f"{self.name} must be >= {self.minimum}, got {value}")
        if self.maximum is not None and value > self.maximum:
            raise ConfigurationError(f"{self.name} must be <= {self.maximum}, got {value}")
        return value


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:               str                    # registry key, e.g. "astar"
    label:             str                    # human label, e.g. "A* Search"
    family:            str                    # "pathfinding", "sorting", …
    machine:           Callable[..., AlgorithmMachine]
    pseudocode:        List[str]
    params:            List[ParamSpec] = field(default_factory=list)
    tags:              List[str] = field(default_factory=list)
    complexity_time:   str      = ""
    complexity_space:  str      = ""
    description:       str      = ""

    def param(self, name: str) -> Optional[ParamSpec]:
        for p in self.params:
            if p.name == name:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key":              self.key,
            "label":            self.label,
            "family":           self.family,
            "pseudocode":       list(self.pseudocode),
            "params":           [p.__dict__ for p in self.params],
            "tags":             list(self.tags),
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


# ---------------------------------------------------------------------------
# Shared parameter definitions
# ---------------------------------------------------------------------------
_FUNCTIONS = sorted(OBJECTIVES)

def _seed() -> ParamSpec:
    return ParamSpec("seed", "Random seed", None, kind="int", optional=True)

def _function(default: str = "quadratic") -> ParamSpec:
    return ParamSpec("function", "Objective", default, kind="choice", choices=_FUNCTIONS)

def _array_size() -> ParamSpec:
    return ParamSpec("array_size", "Array size", 20, minimum=2, maximum=50, step=1)


def _SORT_PARAMS() -> List[ParamSpec]:
    return [_array_size(), _seed()]

def _SEARCH_PARAMS() -> List[ParamSpec]:
    return [
        _array_size(),
        ParamSpec("target", "Target value", None, kind="float", optional=True),
        _seed(),
    ]


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "astar": AlgoInfo(
        key="astar", label="A* Search", family="pathfinding",
        machine=AStarMachine, pseudocode=AStarMachine.PSEUDOCODE,
        params=[ParamSpec("heuristic", "Heuristic", "manhattan", kind="choice",
                          choices=sorted(HEURISTICS))],
        tags=["grid", "shortest-path", "heuristic"],
        complexity_time="O(V²) (linear-scan open set)", complexity_space="O(V)",
        description="Finalizes the cell with the lowest f = g + h. Optimal with an admissible h.",
    ),

    "hill_climbing": AlgoInfo(
        key="hill_climbing", label="Hill Climbing", family="local-search",
        machine=HillClimbingMachine, pseudocode=HillClimbingMachine.PSEUDOCODE,
        params=[
            _function(),
            ParamSpec("step_size", "Step size", 0.1, kind="float", minimum=0.01, maximum=1.0, step=0.01),
            ParamSpec("max_iterations", "Max iterations", 100, minimum=10, maximum=500, step=10),
            _seed(),
        ],
        tags=["optimization", "greedy"],
        complexity_time="O(iterations)", complexity_space="O(1)",
        description="Always moves uphill. Fast, but gets stuck on the first local peak.",
    ),

    "simulated_annealing": AlgoInfo(
        key="simulated_annealing", label="Simulated Annealing", family="local-search",
        machine=SimulatedAnnealingMachine, pseudocode=SimulatedAnnealingMachine.PSEUDOCODE,
        params=[
            _function(),
            ParamSpec("initial_temperature", "Initial temperature", 100.0, kind="float",
                      minimum=1, maximum=500, step=1),
            ParamSpec("cooling_rate", "Cooling rate", 0.95, kind="float",
                      minimum=0.8, maximum=0.999, step=0.001),
            ParamSpec("max_iterations", "Max iterations", 200, minimum=10, maximum=1000, step=10),
            _seed(),
        ],
        tags=["optimization", "stochastic"],
        complexity_time="O(iterations)", complexity_space="O(1)",
        description="Accepts downhill moves with a probability that shrinks as it cools.",
    ),

    "genetic_algorithm": AlgoInfo(
        key="genetic_algorithm", label="Genetic Algorithm", family="evolutionary",
        machine=GeneticAlgorithmMachine, pseudocode=GeneticAlgorithmMachine.PSEUDOCODE,
        params=[
            _function("rastrigin"),
            ParamSpec("population_size", "Population size", 20, minimum=2, maximum=100, step=1),
            ParamSpec("mutation_rate", "Mutation rate", 0.1, kind="float", minimum=0, maximum=1, step=0.01),
            ParamSpec("crossover_rate", "Crossover rate", 0.8, kind="float", minimum=0, maximum=1, step=0.01),
            ParamSpec("generations", "Generations", 50, minimum=1, maximum=200, step=1),
            _seed(),
        ],
        tags=["optimization", "population"],
        complexity_time="O(generations · population)", complexity_space="O(population)",
        description="Selection, crossover and mutation breed better candidates each generation.",
    ),

    "particle_swarm": AlgoInfo(
        key="particle_swarm", label="Particle Swarm Optimization", family="evolutionary",
        machine=ParticleSwarmMachine, pseudocode=ParticleSwarmMachine.PSEUDOCODE,
        params=[
            _function("rastrigin"),
            ParamSpec("swarm_size", "Swarm size", 15, minimum=1, maximum=100, step=1),
            ParamSpec("inertia", "Inertia (w)", 0.7, kind="float", minimum=0, maximum=1.5, step=0.05),
            ParamSpec("cognitive", "Cognitive (c1)", 1.5, kind="float", minimum=0, maximum=3, step=0.1),
            ParamSpec("social", "Social (c2)", 1.5, kind="float", minimum=0, maximum=3, step=0.1),
            ParamSpec("iterations", "Iterations", 50, minimum=1, maximum=200, step=1),
            _seed(),
        ],
        tags=["optimization", "population"],
        complexity_time="O(iterations · swarm)", complexity_space="O(swarm)",
        description="Particles are pulled toward their own best and the swarm's best position.",
    ),

    "linear_search": AlgoInfo(
        key="linear_search", label="Linear Search", family="searching",
        machine=LinearSearchMachine, pseudocode=LinearSearchMachine.PSEUDOCODE,
        params=_SEARCH_PARAMS(),
        tags=["array", "search"],
        complexity_time="O(n)", complexity_space="O(1)",
        description="Checks every element in order until the target turns up.",
    ),

    "binary_search": AlgoInfo(
        key="binary_search", label="Binary Search", family="searching",
        machine=BinarySearchMachine, pseudocode=BinarySearchMachine.PSEUDOCODE,
        params=_SEARCH_PARAMS(),
        tags=["array", "search", "sorted-input"],
        complexity_time="O(log n)", complexity_space="O(1)",
        description="Halves the sorted search range with every comparison.",
    ),

    "bubble_sort": AlgoInfo(
        key="bubble_sort", label="Bubble Sort", family="sorting",
        machine=BubbleSortMachine, pseudocode=BubbleSortMachine.PSEUDOCODE,
        params=_SORT_PARAMS(), tags=["array", "sort", "stable"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Repeatedly swaps adjacent out-of-order pairs; large values bubble up.",
    ),

    "selection_sort": AlgoInfo(
        key="selection_sort", label="Selection Sort", family="sorting",
        machine=SelectionSortMachine, pseudocode=SelectionSortMachine.PSEUDOCODE,
        params=_SORT_PARAMS(), tags=["array", "sort"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Selects the minimum of the unsorted part and moves it to the front.",
    ),

    "insertion_sort": AlgoInfo(
        key="insertion_sort", label="Insertion Sort", family="sorting",
        machine=InsertionSortMachine, pseudocode=InsertionSortMachine.PSEUDOCODE,
        params=_SORT_PARAMS(), tags=["array", "sort", "stable"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Grows a sorted prefix by sliding each new element into place.",
    ),

    "merge_sort": AlgoInfo(
        key="merge_sort", label="Merge Sort", family="sorting",
        machine=MergeSortMachine, pseudocode=MergeSortMachine.PSEUDOCODE,
        params=_SORT_PARAMS(), tags=["array", "sort", "stable", "divide-and-conquer"],
        complexity_time="O(n log n)", complexity_space="O(n)",
        description="Sorts both halves recursively, then merges them.",
    ),

    "quick_sort": AlgoInfo(
        key="quick_sort", label="Quick Sort", family="sorting",
        machine=QuickSortMachine, pseudocode=QuickSortMachine.PSEUDOCODE,
        params=_SORT_PARAMS(), tags=["array", "sort", "divide-and-conquer"],
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Partitions around a pivot, then sorts each side.",
    ),

    "kmeans": AlgoInfo(
        key="kmeans", label="k-means Clustering", family="clustering",
        machine=KMeansMachine, pseudocode=KMeansMachine.PSEUDOCODE,
        params=[
            ParamSpec("k", "Clusters (k)", 3, minimum=1, maximum=10, step=1),
            ParamSpec("num_points", "Points", 60, minimum=10, maximum=200, step=10),
            ParamSpec("max_iterations", "Max iterations", 20, minimum=1, maximum=100, step=1),
            _seed(),
        ],
        tags=["unsupervised", "clustering"],
        complexity_time="O(iterations · n · k)", complexity_space="O(n + k)",
        description="Alternates assigning points to centroids and moving centroids to the mean.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_family(family: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.family == family]


def coerce_params(info: AlgoInfo, raw: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Defaults filled in, types coerced, ranges checked.  Unknown keys are rejected."""
    raw = dict(raw or {})
    unknown = set(raw) - {p.name for p in info.params}
    if unknown:
        raise ConfigurationError(f"{info.key} does not take parameter(s): {', '.join(sorted(unknown))}")
    return {p.name: p.coerce(raw.get(p.name)) for p in info.params}


def create_machine(
    key: str,
    grid: Optional[Grid] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> AlgorithmMachine:
    """Build a Ready machine from a registry key and raw user parameters."""
    info = get_algorithm(key)
    if info is None:
        raise ConfigurationError(f"Unknown algorithm: {key}")
    kwargs = coerce_params(info, params)

    if info.family == "pathfinding":
        if grid is None:
            raise ConfigurationError(f"{key} needs a grid")
        return info.machine(grid, **kwargs)

    if info.family in ("sorting", "searching"):
        size = kwargs.pop("array_size")
        values = random_values(size, seed=kwargs.get("seed"), sort=(key == "binary_search"))
        kwargs.pop("seed")
        return info.machine(values, **kwargs)

    return info.machine(**kwargs)


__all__ = [
    "AlgoInfo",
    "ParamSpec",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_family",
    "coerce_params",
    "create_machine",
]
