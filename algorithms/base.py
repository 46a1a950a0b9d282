"""
base.py — Algorithm State Machine
==================================
The contract every algorithm implements so a single Stepper can drive
all of them:

    advance()  -> StepOutcome   one unit of observable work
    snapshot() -> Snapshot      immutable view of the current state

State machine:
    READY  →  advance()  →  RUNNING
    RUNNING → (terminal step) → FOUND | EXHAUSTED | FINISHED
    any     → (invariant broken) → FAILED

Two flavours:
  - AlgorithmMachine   – subclasses write `_advance()` by hand (A*).
  - GeneratorMachine   – subclasses write `_run()` as a generator; every
                         `yield` marks one observable step.  This is the
                         natural way to express sorts and nested loops.
"""

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple

from algorithms.step import RunResult, Snapshot, SnapshotBuilder, StepOutcome
from grid.cell import Coord
from errors import InvariantViolation

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class MachineState(Enum):
    READY     = "ready"
    RUNNING   = "running"
    FOUND     = "found"
    EXHAUSTED = "exhausted"
    FINISHED  = "finished"
    FAILED    = "failed"


TERMINAL_STATES = (
    MachineState.FOUND,
    MachineState.EXHAUSTED,
    MachineState.FINISHED,
    MachineState.FAILED,
)


# ---------------------------------------------------------------------------
# AlgorithmMachine
# ---------------------------------------------------------------------------
class AlgorithmMachine(ABC):
    """
    Attributes:
        key         : Registry key, copied into every Snapshot / RunResult.
        kind        : Renderer family ("grid", "array", "curve", "points").
        PSEUDOCODE  : Lines for the side panel.
        state       : Current MachineState.
        step_number : Number of advance() calls that did work.
        result      : RunResult once terminal, else None.
    """

    key:        str       = ""
    kind:       str       = "grid"
    PSEUDOCODE: List[str] = []

    def __init__(self, timer: Callable[[], float] = time.perf_counter):
        self.state:       MachineState        = MachineState.READY
        self.step_number: int                 = 0
        self.result:      Optional[RunResult] = None
        self._timer                           = timer
        self._started_at: Optional[float]     = None

        # what the last step did, for the snapshot
        self.pseudocode_line: int = 0
        self.explanation:     str = "Ready."

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------
    def advance(self) -> StepOutcome:
        if self.is_terminal:
            raise RuntimeError(f"{self.key}: advance() called after the run finished")
        if self.state == MachineState.READY:
            self.state = MachineState.RUNNING
            self._started_at = self._timer()
            logger.debug("%s: run started", self.key)

        try:
            outcome = self._advance()
        except InvariantViolation as exc:
            logger.error("%s: invariant violated at step %d: %s", self.key, self.step_number, exc)
            self.state = MachineState.FAILED
            self.result = RunResult(
                algorithm=self.key,
                status=MachineState.FAILED.value,
                elapsed_ms=self._elapsed_ms(),
                reason=str(exc),
            )
            return StepOutcome.failed(str(exc), result=self.result)

        self.step_number += 1
        return outcome

    def snapshot(self) -> Snapshot:
        sb = self._builder()
        self._fill_snapshot(sb)
        return sb.build(step_number=self.step_number, is_final=self.is_terminal)

    def frame(self) -> Tuple[Snapshot, Optional[Dict[Coord, Dict[str, Any]]]]:
        """
        Recording view of the current state: (snapshot, changed_cells).

        Machines with a per-cell field override this to leave `cells` and
        `walls` off the snapshot and return only the cells changed since
        the previous frame().  The default is the full snapshot and None.
        """
        return self.snapshot(), None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _advance(self) -> StepOutcome:
        """Perform one unit of observable work."""

    @abstractmethod
    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        """Copy algorithm-specific state into the builder."""

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------
    def _finish(self, state: MachineState, **kwargs: Any) -> StepOutcome:
        self.state = state
        self.result = RunResult(
            algorithm=self.key,
            status=state.value,
            elapsed_ms=self._elapsed_ms(),
            **kwargs,
        )
        logger.info(
            "%s: %s after %d step(s) in %.2f ms",
            self.key, state.value, self.step_number + 1, self.result.elapsed_ms,
        )
        return StepOutcome.done(self.result)

    def _builder(self) -> SnapshotBuilder:
        sb = SnapshotBuilder(algorithm=self.key, kind=self.kind)
        sb.status          = self.state.value
        sb.pseudocode_line = self.pseudocode_line
        sb.explanation     = self.explanation
        return sb

    def _elapsed_ms(self) -> float:
        if self._started_at is None:
            return 0.0
        return (self._timer() - self._started_at) * 1000

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(state={self.state.value}, step={self.step_number})"


# ---------------------------------------------------------------------------
# GeneratorMachine
# ---------------------------------------------------------------------------
class GeneratorMachine(AlgorithmMachine):
    """
    Subclasses implement `_run()` as a generator that mutates `self` and
    yields `(pseudocode_line, explanation)` after every observable change.
    When the generator returns, `_terminal()` decides the final state.
    """

    def __init__(self, timer: Callable[[], float] = time.perf_counter):
        super().__init__(timer=timer)
        self._events: Optional[Generator] = None

    def _advance(self) -> StepOutcome:
        if self._events is None:
            self._events = self._run()
        try:
            self.pseudocode_line, self.explanation = next(self._events)
        except StopIteration:
            state, kwargs = self._terminal()
            return self._finish(state, **kwargs)
        return StepOutcome.in_progress()

    @abstractmethod
    def _run(self) -> Generator:
        """Yield (pseudocode_line, explanation) once per observable step."""

    @abstractmethod
    def _terminal(self) -> "tuple[MachineState, Dict[str, Any]]":
        """Final MachineState plus RunResult kwargs, called when _run() returns."""
