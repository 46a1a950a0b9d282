"""
local_search.py — Hill Climbing & Simulated Annealing
======================================================
Both machines walk a single point along a 1-D objective (see
objectives.py) and record every position they occupy in `history`, which
the curve renderer draws as a trail.

Hill climbing
  Each step tries x + step and x - step and moves to the better in-bounds
  neighbour if it strictly improves.  Stops at a local optimum or when the
  iteration budget runs out.

Simulated annealing
  Each step proposes x + (u - 0.5)·2.  Improvements are always accepted,
  worse moves with probability exp(Δ / T).  T is multiplied by the cooling
  rate after every in-bounds proposal; proposals that leave the domain are
  rejected outright and do not cool.

Randomness comes from a private random.Random(seed), so a fixed seed
replays the exact same run.
"""

import math
import random
import time
from typing import Any, Callable, Dict, Generator, List, Optional

from algorithms.base import GeneratorMachine, MachineState
from algorithms.objectives import DOMAIN, get_objective, in_domain
from algorithms.step import SnapshotBuilder
from errors import ConfigurationError


# ---------------------------------------------------------------------------
# Shared base for single-point curve walkers
# ---------------------------------------------------------------------------
class CurveMachine(GeneratorMachine):
    kind = "curve"

    def __init__(
        self,
        function: str = "quadratic",
        start: Optional[float] = None,
        seed: Optional[int] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        super().__init__(timer=timer)
        self.function_name = function
        self.f = get_objective(function)
        self.rng = random.Random(seed)
        if start is not None and not in_domain(start):
            raise ConfigurationError(f"start {start} is outside the domain {DOMAIN}")
        self.x: float = self.rng.random() * DOMAIN[1] if start is None else float(start)
        self.value: float = self.f(self.x)
        self.best_x: float = self.x
        self.best_value: float = self.value
        self.iterations: int = 0
        self.history: List[Dict[str, Any]] = [{"x": self.x, "y": self.value, "accepted": True}]
        self.explanation = f"Ready: start at x={self.x:.3f}, f(x)={self.value:.3f}."

    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        sb.points  = self.history
        sb.current = {"x": self.x, "y": self.value}
        sb.overlay["function"] = self.function_name
        sb.overlay["best"] = {"x": self.best_x, "y": self.best_value}
        sb.metrics["iterations"] = self.iterations
        sb.metrics["best_value"] = round(self.best_value, 6)
        sb.metrics["position"] = round(self.best_x, 6)


# ---------------------------------------------------------------------------
# Hill climbing
# ---------------------------------------------------------------------------
class HillClimbingMachine(CurveMachine):
    key = "hill_climbing"
    PSEUDOCODE = [
        "x ← random start",                                 # 0
        "repeat max_iterations times:",                     # 1
        "    candidates ← {x + step, x - step} ∩ domain",   # 2
        "    best ← argmax f(candidates)",                  # 3
        "    if f(best) ≤ f(x): stop (local optimum)",      # 4
        "    x ← best",                                     # 5
        "return x",                                         # 6
    ]

    def __init__(
        self,
        function: str = "quadratic",
        step_size: float = 0.1,
        max_iterations: int = 100,
        start: Optional[float] = None,
        seed: Optional[int] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        if step_size <= 0:
            raise ConfigurationError(f"step_size must be positive, got {step_size}")
        if max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be >= 1, got {max_iterations}")
        super().__init__(function=function, start=start, seed=seed, timer=timer)
        self.step_size = step_size
        self.max_iterations = max_iterations
        self.stop_reason = ""

    def _run(self) -> Generator:
        for _ in range(self.max_iterations):
            best_x, best_value = self.x, self.value
            for candidate in (self.x + self.step_size, self.x - self.step_size):
                if not in_domain(candidate):
                    continue
                value = self.f(candidate)
                if value > best_value:
                    best_x, best_value = candidate, value

            if best_value <= self.value:
                self.stop_reason = "local optimum"
                return

            self.x, self.value = best_x, best_value
            self.best_x, self.best_value = best_x, best_value
            self.iterations += 1
            self.history.append({"x": self.x, "y": self.value, "accepted": True})
            yield 5, f"Climb to x={self.x:.3f}: f(x)={self.value:.3f}."
        self.stop_reason = "iteration budget exhausted"

    def _terminal(self):
        self.pseudocode_line = 4 if self.stop_reason == "local optimum" else 6
        self.explanation = (
            f"Stopped ({self.stop_reason}) after {self.iterations} move(s): "
            f"x={self.x:.3f}, f(x)={self.value:.3f}."
        )
        return MachineState.FINISHED, {
            "finalized_count": self.iterations,
            "summary": {
                "iterations":  self.iterations,
                "best_value":  self.best_value,
                "position":    self.best_x,
                "stop_reason": self.stop_reason,
                "history":     [dict(p) for p in self.history],
            },
        }


# ---------------------------------------------------------------------------
# Simulated annealing
# ---------------------------------------------------------------------------
class SimulatedAnnealingMachine(CurveMachine):
    key = "simulated_annealing"
    PSEUDOCODE = [
        "x ← random start; T ← T0",                         # 0
        "repeat max_iterations times:",                     # 1
        "    x' ← x + uniform(-1, 1)",                      # 2
        "    if x' outside domain: reject",                 # 3
        "    Δ ← f(x') - f(x)",                             # 4
        "    if Δ > 0 or rand() < exp(Δ / T): x ← x'",      # 5
        "    T ← T · cooling_rate",                         # 6
        "return best x",                                    # 7
    ]

    def __init__(
        self,
        function: str = "quadratic",
        initial_temperature: float = 100.0,
        cooling_rate: float = 0.95,
        max_iterations: int = 200,
        start: Optional[float] = None,
        seed: Optional[int] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        if initial_temperature <= 0:
            raise ConfigurationError(f"initial_temperature must be positive, got {initial_temperature}")
        if not 0 < cooling_rate <= 1:
            raise ConfigurationError(f"cooling_rate must be in (0, 1], got {cooling_rate}")
        if max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be >= 1, got {max_iterations}")
        super().__init__(function=function, start=start, seed=seed, timer=timer)
        self.initial_temperature = initial_temperature
        self.temperature = initial_temperature
        self.cooling_rate = cooling_rate
        self.max_iterations = max_iterations
        self.acceptances = 0

    def _run(self) -> Generator:
        for _ in range(self.max_iterations):
            self.iterations += 1
            proposal = self.x + (self.rng.random() - 0.5) * 2

            if not in_domain(proposal):
                self.history.append({"x": self.x, "y": self.value, "accepted": False})
                yield 3, f"Proposal x'={proposal:.3f} leaves the domain — rejected."
                continue

            value = self.f(proposal)
            delta = value - self.value
            accepted = delta > 0 or self.rng.random() < _acceptance(delta, self.temperature)
            if accepted:
                self.x, self.value = proposal, value
                self.acceptances += 1
                if value > self.best_value:
                    self.best_x, self.best_value = proposal, value
            self.history.append({"x": self.x, "y": self.value, "accepted": accepted})
            self.temperature *= self.cooling_rate

            if accepted:
                yield 5, (
                    f"Accept x'={proposal:.3f} (Δ={delta:+.3f}); "
                    f"T cools to {self.temperature:.2f}."
                )
            else:
                yield 6, (
                    f"Reject x'={proposal:.3f} (Δ={delta:+.3f}, "
                    f"p={_acceptance(delta, self.temperature / self.cooling_rate):.3f}); "
                    f"T cools to {self.temperature:.2f}."
                )

    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        super()._fill_snapshot(sb)
        sb.overlay["temperature"] = self.temperature
        sb.overlay["temperature_ratio"] = self.temperature / self.initial_temperature
        sb.metrics["acceptances"] = self.acceptances

    def _terminal(self):
        self.pseudocode_line = 7
        self.explanation = (
            f"Cooled down after {self.iterations} iteration(s): best f(x)={self.best_value:.3f} "
            f"at x={self.best_x:.3f}, {self.acceptances} move(s) accepted."
        )
        return MachineState.FINISHED, {
            "finalized_count": self.iterations,
            "summary": {
                "iterations":  self.iterations,
                "best_value":  self.best_value,
                "position":    self.best_x,
                "acceptances": self.acceptances,
                "temperature": self.temperature,
            },
        }


def _acceptance(delta: float, temperature: float) -> float:
    """Metropolis probability for a non-improving move."""
    if delta > 0:
        return 1.0
    if temperature <= 0:
        return 0.0
    return math.exp(delta / temperature)
