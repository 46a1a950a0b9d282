"""
objectives.py — Toy objective functions
========================================
One-dimensional functions the local-search and evolutionary visualizers
maximise over the domain [0, 10].

  • quadratic – single peak at x = 5
  • sine      – smooth, two peaks inside the domain
  • rastrigin – many local optima, the classic trap for hill climbing
"""

import math
from typing import Callable, Dict, Tuple

from errors import ConfigurationError

DOMAIN: Tuple[float, float] = (0.0, 10.0)


def quadratic(x: float) -> float:
    return -(x - 5) * (x - 5) + 25

def sine(x: float) -> float:
    return math.sin(x) * 10 + 15

def rastrigin(x: float) -> float:
    return 20 - (x * x - 10 * math.cos(2 * math.pi * x))

OBJECTIVES: Dict[str, Callable[[float], float]] = {
    "quadratic": quadratic,
    "sine":      sine,
    "rastrigin": rastrigin,
}


def get_objective(name: str) -> Callable[[float], float]:
    try:
        return OBJECTIVES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown objective {name!r}; choose one of {sorted(OBJECTIVES)}"
        )


def in_domain(x: float) -> bool:
    return DOMAIN[0] <= x <= DOMAIN[1]


def clamp(x: float) -> float:
    return max(DOMAIN[0], min(DOMAIN[1], x))
