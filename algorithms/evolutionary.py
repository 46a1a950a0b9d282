"""
evolutionary.py — Genetic Algorithm & Particle Swarm Optimization
==================================================================
Population-based optimisers over the same 1-D objectives as the local
search visualizers.  One advance() = one generation (GA) or one
velocity/position pass over the whole swarm (PSO).  Both stop when the
generation / iteration budget is spent.

GA operators:
  • tournament selection (size 3)
  • blend crossover  child = α·p1 + (1-α)·p2
  • Gaussian mutation (σ = 0.5), clamped to the domain
  • elitism: the best individual survives unchanged

PSO update (synchronous — global best refreshed after the whole pass):
  v ← w·v + c1·r1·(pbest - x) + c2·r2·(gbest - x),   v clamped to ±1
  x ← clamp(x + v)
"""

import random
import time
from typing import Callable, Dict, Generator, List, Optional

from algorithms.base import GeneratorMachine, MachineState
from algorithms.objectives import DOMAIN, clamp, get_objective
from algorithms.step import SnapshotBuilder
from errors import ConfigurationError

TOURNAMENT_SIZE = 3
MUTATION_SIGMA = 0.5
MAX_VELOCITY = 1.0


class _PopulationMachine(GeneratorMachine):
    kind = "curve"

    def __init__(
        self,
        function: str,
        seed: Optional[int],
        timer: Callable[[], float],
    ):
        super().__init__(timer=timer)
        self.function_name = function
        self.f = get_objective(function)
        self.rng = random.Random(seed)
        self.generation: int = 0
        self.best_x: float = 0.0
        self.best_value: float = float("-inf")
        self.best_history: List[float] = []

    def _track_best(self, positions: List[float]) -> None:
        for x in positions:
            value = self.f(x)
            if value > self.best_value:
                self.best_x, self.best_value = x, value

    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        sb.overlay["function"] = self.function_name
        sb.overlay["best"] = {"x": self.best_x, "y": self.best_value}
        sb.overlay["best_history"] = list(self.best_history)
        sb.metrics["generation"] = self.generation
        sb.metrics["best_value"] = round(self.best_value, 6)
        sb.metrics["position"] = round(self.best_x, 6)


# ---------------------------------------------------------------------------
# Genetic algorithm
# ---------------------------------------------------------------------------
class GeneticAlgorithmMachine(_PopulationMachine):
    key = "genetic_algorithm"
    PSEUDOCODE = [
        "population ← random individuals",                  # 0
        "repeat generations times:",                        # 1
        "    next ← [best(population)]",                    # 2
        "    while |next| < size:",                         # 3
        "        p1, p2 ← tournament(), tournament()",      # 4
        "        child ← crossover(p1, p2)",                # 5
        "        child ← mutate(child)",                    # 6
        "        next.add(child)",                          # 7
        "    population ← next",                            # 8
        "return best individual",                           # 9
    ]

    def __init__(
        self,
        function: str = "rastrigin",
        population_size: int = 20,
        mutation_rate: float = 0.1,
        crossover_rate: float = 0.8,
        generations: int = 50,
        seed: Optional[int] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        if population_size < 2:
            raise ConfigurationError(f"population_size must be >= 2, got {population_size}")
        if not 0 <= mutation_rate <= 1:
            raise ConfigurationError(f"mutation_rate must be in [0, 1], got {mutation_rate}")
        if not 0 <= crossover_rate <= 1:
            raise ConfigurationError(f"crossover_rate must be in [0, 1], got {crossover_rate}")
        if generations < 1:
            raise ConfigurationError(f"generations must be >= 1, got {generations}")
        super().__init__(function, seed, timer)
        self.population_size = population_size
        self.mutation_rate = mutation_rate
        self.crossover_rate = crossover_rate
        self.generations = generations
        self.mutations = 0
        self.population: List[float] = [
            self.rng.uniform(*DOMAIN) for _ in range(population_size)
        ]
        self._track_best(self.population)
        self.best_history.append(self.best_value)
        self.explanation = (
            f"Ready: {population_size} random individuals, best f(x)={self.best_value:.3f}."
        )

    def _tournament(self) -> float:
        contenders = [self.rng.choice(self.population) for _ in range(TOURNAMENT_SIZE)]
        return max(contenders, key=self.f)

    def _run(self) -> Generator:
        for _ in range(self.generations):
            elite = max(self.population, key=self.f)
            offspring = [elite]
            while len(offspring) < self.population_size:
                p1, p2 = self._tournament(), self._tournament()
                if self.rng.random() < self.crossover_rate:
                    alpha = self.rng.random()
                    child = alpha * p1 + (1 - alpha) * p2
                else:
                    child = p1
                if self.rng.random() < self.mutation_rate:
                    child = clamp(child + self.rng.gauss(0, MUTATION_SIGMA))
                    self.mutations += 1
                offspring.append(child)
            self.population = offspring
            self.generation += 1
            self._track_best(self.population)
            self.best_history.append(self.best_value)
            yield 8, (
                f"Generation {self.generation}: best f(x)={self.best_value:.3f} "
                f"at x={self.best_x:.3f}."
            )

    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        super()._fill_snapshot(sb)
        sb.points = [{"x": x, "y": self.f(x)} for x in self.population]
        sb.metrics["mutations"] = self.mutations

    def _terminal(self):
        self.pseudocode_line = 9
        self.explanation = (
            f"Evolved {self.generation} generation(s): best f(x)={self.best_value:.3f} "
            f"at x={self.best_x:.3f}."
        )
        return MachineState.FINISHED, {
            "finalized_count": self.generation,
            "summary": {
                "generations":  self.generation,
                "best_value":   self.best_value,
                "position":     self.best_x,
                "mutations":    self.mutations,
                "best_history": list(self.best_history),
            },
        }


# ---------------------------------------------------------------------------
# Particle swarm optimization
# ---------------------------------------------------------------------------
class ParticleSwarmMachine(_PopulationMachine):
    key = "particle_swarm"
    PSEUDOCODE = [
        "init particles x, v randomly",                     # 0
        "repeat iterations times:",                         # 1
        "    for each particle:",                           # 2
        "        v ← w·v + c1·r1·(pbest-x) + c2·r2·(gbest-x)",  # 3
        "        x ← x + v",                                # 4
        "        if f(x) > f(pbest): pbest ← x",            # 5
        "    gbest ← best pbest",                           # 6
        "return gbest",                                     # 7
    ]

    def __init__(
        self,
        function: str = "rastrigin",
        swarm_size: int = 15,
        inertia: float = 0.7,
        cognitive: float = 1.5,
        social: float = 1.5,
        iterations: int = 50,
        seed: Optional[int] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        if swarm_size < 1:
            raise ConfigurationError(f"swarm_size must be >= 1, got {swarm_size}")
        if iterations < 1:
            raise ConfigurationError(f"iterations must be >= 1, got {iterations}")
        if inertia < 0 or cognitive < 0 or social < 0:
            raise ConfigurationError("inertia, cognitive and social weights must be non-negative")
        super().__init__(function, seed, timer)
        self.swarm_size = swarm_size
        self.inertia = inertia
        self.cognitive = cognitive
        self.social = social
        self.iterations = iterations
        self.positions: List[float] = [self.rng.uniform(*DOMAIN) for _ in range(swarm_size)]
        self.velocities: List[float] = [
            self.rng.uniform(-MAX_VELOCITY, MAX_VELOCITY) for _ in range(swarm_size)
        ]
        self.personal_best: List[float] = list(self.positions)
        self._track_best(self.positions)
        self.best_history.append(self.best_value)
        self.explanation = (
            f"Ready: {swarm_size} particle(s), global best f(x)={self.best_value:.3f}."
        )

    def _run(self) -> Generator:
        for _ in range(self.iterations):
            for i in range(self.swarm_size):
                r1, r2 = self.rng.random(), self.rng.random()
                x = self.positions[i]
                v = (
                    self.inertia * self.velocities[i]
                    + self.cognitive * r1 * (self.personal_best[i] - x)
                    + self.social * r2 * (self.best_x - x)
                )
                v = max(-MAX_VELOCITY, min(MAX_VELOCITY, v))
                self.velocities[i] = v
                self.positions[i] = clamp(x + v)
                if self.f(self.positions[i]) > self.f(self.personal_best[i]):
                    self.personal_best[i] = self.positions[i]
            self._track_best(self.personal_best)
            self.generation += 1
            self.best_history.append(self.best_value)
            yield 6, (
                f"Iteration {self.generation}: global best f(x)={self.best_value:.3f} "
                f"at x={self.best_x:.3f}."
            )

    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        super()._fill_snapshot(sb)
        sb.points = [
            {"x": x, "y": self.f(x), "vx": v}
            for x, v in zip(self.positions, self.velocities)
        ]

    def _terminal(self):
        self.pseudocode_line = 7
        self.explanation = (
            f"Swarm settled after {self.generation} iteration(s): best f(x)={self.best_value:.3f} "
            f"at x={self.best_x:.3f}."
        )
        return MachineState.FINISHED, {
            "finalized_count": self.generation,
            "summary": {
                "iterations":   self.generation,
                "best_value":   self.best_value,
                "position":     self.best_x,
                "best_history": list(self.best_history),
            },
        }
