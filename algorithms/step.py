"""
step.py — Snapshots, Step Outcomes & Run Results
=================================================
Every algorithm is a state machine whose advance() performs one unit of
observable work.  After each advance the machine can hand out a
Snapshot: a frozen-in-time picture of everything the renderer needs to
draw one frame.

    • Grid algorithms   – every cell's g/h/f/visited/on_best_path, walls,
                          start, end, frontier, path
    • Array algorithms  – the array plus highlighted indices
    • Curve algorithms  – sampled points on the objective (hill climbing,
                          annealing, GA, PSO)
    • Point algorithms  – 2-D points + centroids (k-means)
    • Always            – pseudocode line, plain-English explanation,
                          running metrics

Design decisions:
  - Snapshot is a frozen dataclass built by SnapshotBuilder, which copies
    every container.  The machine is the only writer; stepper / renderer
    are pure readers and never see the machine's live lists.
  - `overlay` is a free-form dict so algorithms can push whatever extra
    info they want (temperature, generation best, partition range, …).
  - StepOutcome is what advance() returns; RunResult is attached once the
    machine reaches a terminal state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Any

from grid.cell import Coord


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Snapshot:
    """
    Attributes:
        step_number     : 0 for the Ready state, then one per advance().
        algorithm       : Registry key of the producing algorithm.
        kind            : "grid" | "array" | "curve" | "points" — picks the renderer.
        status          : MachineState value at the time of the snapshot.
        current         : Cell coordinate / array index / item being worked on.
        cells           : [{x, y, g, h, f, visited, on_best_path}] for grid runs.
        walls           : Blocked coordinates (grid runs).
        start, end      : Grid markers.
        frontier        : Frontier coordinates in insertion order.
        path            : Reconstructed best path (empty until found).
        array           : Current array contents (array runs).
        highlights      : {"compare": [i, j], "swap": [...], "sorted": [...], …}
        points          : [{x, y, ...}] for curve / point runs.
        pseudocode_line : 0-based index of the pseudocode line executing now.
        explanation     : Human-readable "why" text for Learning Mode.
        overlay         : Free-form dict for algo-specific extras.
        metrics         : Running tally (finalized, comparisons, iteration, …).
        is_final        : True on the snapshot of a terminal state.
    """

    step_number:      int                          = 0
    algorithm:        str                          = ""
    kind:             str                          = "grid"
    status:           str                          = "ready"
    current:          Optional[Any]                = None
    cells:            List[Dict[str, Any]]         = field(default_factory=list)
    walls:            List[Coord]                  = field(default_factory=list)
    start:            Optional[Coord]              = None
    end:              Optional[Coord]              = None
    frontier:         List[Coord]                  = field(default_factory=list)
    path:             List[Coord]                  = field(default_factory=list)
    array:            List[float]                  = field(default_factory=list)
    highlights:       Dict[str, List[int]]         = field(default_factory=dict)
    points:           List[Dict[str, Any]]         = field(default_factory=list)
    pseudocode_line:  int                          = 0
    explanation:      str                          = ""
    overlay:          Dict[str, Any]               = field(default_factory=dict)
    metrics:          Dict[str, Any]               = field(default_factory=dict)
    is_final:         bool                         = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number":     self.step_number,
            "algorithm":       self.algorithm,
            "kind":            self.kind,
            "status":          self.status,
            "current":         list(self.current) if isinstance(self.current, tuple) else self.current,
            "cells":           [dict(c) for c in self.cells],
            "walls":           [list(w) for w in self.walls],
            "start":           list(self.start) if self.start is not None else None,
            "end":             list(self.end) if self.end is not None else None,
            "frontier":        [list(c) for c in self.frontier],
            "path":            [list(c) for c in self.path],
            "array":           list(self.array),
            "highlights":      {k: list(v) for k, v in self.highlights.items()},
            "points":          [dict(p) for p in self.points],
            "pseudocode_line": self.pseudocode_line,
            "explanation":     self.explanation,
            "overlay":         dict(self.overlay),
            "metrics":         dict(self.metrics),
            "is_final":        self.is_final,
        }


# ---------------------------------------------------------------------------
# Convenience builder so machines don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class SnapshotBuilder:
    """
    Mutable scratch-pad that machines use to construct Snapshots cleanly.

    Usage inside snapshot():
        sb = SnapshotBuilder(algorithm="bubble_sort", kind="array")
        sb.array = self.values
        sb.highlight("compare", [j, j + 1])
        sb.explanation = "Compare neighbours 3 and 4."
        return sb.build(step_number=self.step_number)
    """

    def __init__(self, algorithm: str = "", kind: str = "grid"):
        self.algorithm = algorithm
        self.kind = kind
        self.reset()

    def reset(self):
        self.status:           str                   = "ready"
        self.current:          Optional[Any]         = None
        self.cells:            List[Dict[str, Any]]  = []
        self.walls:            List[Coord]           = []
        self.start:            Optional[Coord]       = None
        self.end:              Optional[Coord]       = None
        self.frontier:         List[Coord]           = []
        self.path:             List[Coord]           = []
        self.array:            List[float]           = []
        self.highlights:       Dict[str, List[int]]  = {}
        self.points:           List[Dict[str, Any]]  = []
        self.pseudocode_line:  int                   = 0
        self.explanation:      str                   = ""
        self.overlay:          Dict[str, Any]        = {}
        self.metrics:          Dict[str, Any]        = {}

    # -- helpers --
    def highlight(self, name: str, indices) -> None:
        self.highlights[name] = sorted(indices) if isinstance(indices, set) else list(indices)

    def set_path(self, path: List[Coord]) -> None:
        self.path = list(path)
        self.metrics["path_length"] = len(path)

    def build(self, step_number: int = 0, is_final: bool = False) -> Snapshot:
        return Snapshot(
            step_number=step_number,
            algorithm=self.algorithm,
            kind=self.kind,
            status=self.status,
            current=self.current,
            cells=[dict(c) for c in self.cells],
            walls=sorted(self.walls),
            start=self.start,
            end=self.end,
            frontier=list(self.frontier),
            path=list(self.path),
            array=list(self.array),
            highlights={k: list(v) for k, v in self.highlights.items()},
            points=[dict(p) for p in self.points],
            pseudocode_line=self.pseudocode_line,
            explanation=self.explanation,
            overlay=dict(self.overlay),
            metrics=dict(self.metrics),
            is_final=is_final,
        )


# ---------------------------------------------------------------------------
# Run Result — produced once per completed run
# ---------------------------------------------------------------------------
@dataclass
class RunResult:
    """
    Attributes:
        algorithm       : Registry key.
        status          : "found" | "exhausted" | "finished" | "failed".
        path            : Start → goal cells (empty when unreachable / not a search).
        finalized_count : Cells finalized (pathfinding) or units of work done.
        elapsed_ms      : Wall-clock time of the run.  Excluded from equality
                          so two identical runs compare equal.
        summary         : Family-specific statistics (comparisons, best_value, …).
        reason          : Failure description when status == "failed".
    """

    algorithm:        str                  = ""
    status:           str                  = "finished"
    path:             List[Coord]          = field(default_factory=list)
    finalized_count:  int                  = 0
    elapsed_ms:       float                = field(default=0.0, compare=False)
    summary:          Dict[str, Any]       = field(default_factory=dict)
    reason:           str                  = ""

    @property
    def path_length(self) -> int:
        return len(self.path)

    @property
    def found(self) -> bool:
        return self.status == "found"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm":       self.algorithm,
            "status":          self.status,
            "path":            [list(c) for c in self.path],
            "path_length":     self.path_length,
            "finalized_count": self.finalized_count,
            "elapsed_ms":      round(self.elapsed_ms, 3),
            "summary":         dict(self.summary),
            "reason":          self.reason,
        }


# ---------------------------------------------------------------------------
# Step Outcome — what advance() returns
# ---------------------------------------------------------------------------
class StepStatus(Enum):
    IN_PROGRESS = "in_progress"
    DONE        = "done"
    FAILED      = "failed"


@dataclass(frozen=True)
class StepOutcome:
    status:  StepStatus
    result:  Optional[RunResult] = None
    reason:  str                 = ""

    @classmethod
    def in_progress(cls) -> "StepOutcome":
        return cls(StepStatus.IN_PROGRESS)

    @classmethod
    def done(cls, result: RunResult) -> "StepOutcome":
        return cls(StepStatus.DONE, result=result)

    @classmethod
    def failed(cls, reason: str, result: Optional[RunResult] = None) -> "StepOutcome":
        return cls(StepStatus.FAILED, result=result, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.status != StepStatus.IN_PROGRESS
