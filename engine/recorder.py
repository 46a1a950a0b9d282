"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete algorithm run onto a RunTape, then computes the
analytics the UI shows in the Analytics panel.

Usage:
    rec = Recorder()
    rec.start(algo_key="astar", grid=g)
    rec.run_to_completion()          # drives the machine to a terminal state
    metrics = rec.get_metrics()      # the analytics card
    rec.steps[i]                     # full Snapshot, rebuilt from the tape
    rec.export()                     # serialisable frame list for replay

Recording drives the machine directly and never sleeps.  Grid runs keep
only per-step cell changes, so a 50×50 run stays small; rec.steps[i]
is identical to what a paced Stepper run emits at step i.
"""

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional

from algorithms import AlgoInfo, create_machine, get_algorithm
from algorithms.base import AlgorithmMachine
from algorithms.step import RunResult, StepStatus
from engine.tape import RunTape
from errors import ConfigurationError
from grid import Grid

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:        str   = ""
    algo_label:      str   = ""
    family:          str   = ""
    status:          str   = ""
    finalized_count: int   = 0          # cells finalized / units of work
    path_length:     int   = 0          # cells on the best path, start and goal included
    total_steps:     int   = 0          # snapshots recorded, Ready state included
    elapsed_ms:      float = 0.0        # machine-reported algorithm time
    wall_time_ms:    float = 0.0        # wall-clock time to record the run
    found:           bool  = False
    summary:         Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps       : RunTape of the run; steps[0] is Ready, steps[i] a full Snapshot.
        metrics     : Computed RunMetrics (available after run_to_completion).
        result      : The machine's RunResult.
    """

    def __init__(self):
        self.steps:   RunTape              = RunTape()
        self.metrics: Optional[RunMetrics] = None
        self.result:  Optional[RunResult]  = None

        self._algo_info: Optional[AlgoInfo]         = None
        self._machine:   Optional[AlgorithmMachine] = None
        self._grid:      Optional[Grid]             = None
        self._params:    Dict[str, Any]             = {}

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(
        self,
        algo_key: str,
        grid: Optional[Grid] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Build the machine for this run.  Raises ConfigurationError on bad input."""
        info = get_algorithm(algo_key)
        if info is None:
            raise ConfigurationError(f"Unknown algorithm: {algo_key}")

        self._algo_info = info
        self._grid      = grid.copy() if grid is not None else None
        self._params    = dict(params or {})
        self._machine   = create_machine(algo_key, grid=grid, params=params)
        self.steps      = RunTape()
        self.metrics    = None
        self.result     = None

    def run_to_completion(self) -> RunMetrics:
        """Drive the machine to a terminal state, record every step, compute metrics."""
        machine = self._machine
        if machine is None:
            raise RuntimeError("Call start() first.")
        if machine.is_terminal:
            raise RuntimeError("Run already recorded; call start() again.")

        started = time.monotonic()
        self.steps.append(*machine.frame())
        while not machine.is_terminal:
            outcome = machine.advance()
            if outcome.status == StepStatus.FAILED:
                logger.warning("%s: run failed: %s", machine.key, outcome.reason)
                break
            self.steps.append(*machine.frame())
        self.result = machine.result
        wall_ms     = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        logger.info(
            "recorded %s: %s, %d snapshot(s)",
            self.metrics.algo_key, self.metrics.status, self.metrics.total_steps,
        )
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot list)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "params":   dict(self._params),
            "grid":     self._grid.to_dict() if self._grid else None,
            "result":   self.result.to_dict() if self.result else None,
            "metrics":  self.metrics.to_dict() if self.metrics else {},
            "steps":    self.steps.to_list(),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info   = self._algo_info
        result = self.result or RunResult(algorithm=info.key if info else "", status="cancelled")
        return RunMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            family=info.family if info else "",
            status=result.status,
            finalized_count=result.finalized_count,
            path_length=result.path_length,
            total_steps=len(self.steps),
            elapsed_ms=round(result.elapsed_ms, 3),
            wall_time_ms=round(wall_ms, 2),
            found=result.found,
            summary=dict(result.summary),
        )
