"""
clustering.py — k-means
========================
Lloyd's algorithm on 2-D points, split so that each advance() shows one
pass:

    assignment pass – every point joins its nearest centroid
    update pass     – every centroid moves to the mean of its points

The run converges when an assignment pass changes nothing, or stops when
`max_iterations` update passes have been made.  A centroid that loses
all its points stays where it is.
"""

import random
import time
from typing import Callable, Dict, Generator, List, Optional, Sequence, Tuple

from algorithms.base import GeneratorMachine, MachineState
from algorithms.step import SnapshotBuilder
from errors import ConfigurationError

Point = Tuple[float, float]

CANVAS_EXTENT = 100.0


def generate_blobs(
    num_points: int = 60,
    centers: int = 3,
    spread: float = 8.0,
    seed: Optional[int] = None,
) -> List[Point]:
    """Gaussian blobs inside [0, 100]², good for showing clusters form."""
    if num_points < 1:
        raise ConfigurationError(f"num_points must be positive, got {num_points}")
    rng = random.Random(seed)
    anchors = [
        (rng.uniform(15, CANVAS_EXTENT - 15), rng.uniform(15, CANVAS_EXTENT - 15))
        for _ in range(max(centers, 1))
    ]
    points = []
    for i in range(num_points):
        cx, cy = anchors[i % len(anchors)]
        x = min(CANVAS_EXTENT, max(0.0, rng.gauss(cx, spread)))
        y = min(CANVAS_EXTENT, max(0.0, rng.gauss(cy, spread)))
        points.append((x, y))
    return points


class KMeansMachine(GeneratorMachine):
    key = "kmeans"
    kind = "points"
    PSEUDOCODE = [
        "centroids ← k random points",                      # 0
        "repeat max_iterations times:",                     # 1
        "    assign each point to nearest centroid",        # 2
        "    move each centroid to mean of its points",     # 3
        "    if no assignment changed: stop",               # 4
        "return centroids",                                 # 5
    ]

    def __init__(
        self,
        points: Optional[Sequence[Point]] = None,
        k: int = 3,
        max_iterations: int = 20,
        num_points: int = 60,
        seed: Optional[int] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        super().__init__(timer=timer)
        self.rng = random.Random(seed)
        if points is None:
            points = generate_blobs(num_points=num_points, centers=k, seed=seed)
        self.points: List[Point] = [(float(x), float(y)) for x, y in points]
        if k < 1:
            raise ConfigurationError(f"k must be >= 1, got {k}")
        if k > len(self.points):
            raise ConfigurationError(f"k={k} exceeds the number of points ({len(self.points)})")
        if max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be >= 1, got {max_iterations}")
        self.k = k
        self.max_iterations = max_iterations
        self.centroids: List[Point] = [self.points[i] for i in self.rng.sample(range(len(self.points)), k)]
        self.assignments: List[int] = [-1] * len(self.points)
        self.iteration: int = 0
        self.phase: str = "init"
        self.converged: bool = False
        self.explanation = f"Ready: {len(self.points)} point(s), {k} centroid(s) picked at random."

    def _nearest(self, p: Point) -> int:
        best, best_d = 0, float("inf")
        for i, (cx, cy) in enumerate(self.centroids):
            d = (p[0] - cx) ** 2 + (p[1] - cy) ** 2
            if d < best_d:
                best, best_d = i, d
        return best

    def _run(self) -> Generator:
        for _ in range(self.max_iterations):
            # -- assignment pass --
            assignments = [self._nearest(p) for p in self.points]
            changed = sum(1 for a, b in zip(assignments, self.assignments) if a != b)
            if not changed:
                self.converged = True
                return
            self.assignments = assignments
            self.phase = "assign"
            yield 2, f"Assignment pass: {changed} point(s) changed cluster."

            # -- update pass --
            moved = 0
            for c in range(self.k):
                members = [p for p, a in zip(self.points, self.assignments) if a == c]
                if not members:
                    continue
                mean = (
                    sum(p[0] for p in members) / len(members),
                    sum(p[1] for p in members) / len(members),
                )
                if mean != self.centroids[c]:
                    moved += 1
                self.centroids[c] = mean
            self.iteration += 1
            self.phase = "update"
            yield 3, f"Update pass {self.iteration}: {moved} centroid(s) moved to their cluster mean."

    def inertia(self) -> float:
        """Sum of squared distances from each point to its centroid."""
        total = 0.0
        for p, a in zip(self.points, self.assignments):
            if a < 0:
                continue
            cx, cy = self.centroids[a]
            total += (p[0] - cx) ** 2 + (p[1] - cy) ** 2
        return total

    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        sb.points = [
            {"x": x, "y": y, "cluster": a}
            for (x, y), a in zip(self.points, self.assignments)
        ]
        sb.overlay["centroids"] = [{"x": x, "y": y, "cluster": i} for i, (x, y) in enumerate(self.centroids)]
        sb.overlay["phase"] = self.phase
        sb.metrics["iteration"] = self.iteration
        sb.metrics["inertia"] = round(self.inertia(), 4)

    def _terminal(self):
        self.phase = "done"
        self.pseudocode_line = 4 if self.converged else 5
        reason = "converged" if self.converged else "iteration budget exhausted"
        self.explanation = (
            f"Stopped ({reason}) after {self.iteration} update pass(es); "
            f"inertia={self.inertia():.2f}."
        )
        summary: Dict[str, object] = {
            "iterations":  self.iteration,
            "converged":   self.converged,
            "inertia":     self.inertia(),
            "centroids":   [list(c) for c in self.centroids],
            "assignments": list(self.assignments),
        }
        return MachineState.FINISHED, {"finalized_count": self.iteration, "summary": summary}
