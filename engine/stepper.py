"""
stepper.py — Step-by-Step Playback Engine
==========================================
The Stepper drives any AlgorithmMachine (advance() / snapshot()) and is
the ONLY object the UI talks to during a run.  Two ways to use it:

  run(machine, delay_ms, on_snapshot)
      Drive the machine to completion: advance, hand the snapshot to the
      callback, suspend for delay_ms on the injected clock, repeat.
      delay_ms only changes pacing, never which snapshots are produced.

  start(machine) + next_step() / prev_step() / play() / tick()
      Interactive playback.  Every step is kept on a RunTape so the user
      can rewind; tick() auto-advances from the host's event loop.

State machine:
    IDLE  →  start()  →  PAUSED
    PAUSED  →  play()   →  PLAYING
    PLAYING →  pause()  →  PAUSED
    PLAYING →  (machine terminal) → FINISHED
    any     →  reset() / cancel()  →  IDLE

Cancellation:
  Each start()/run() takes a new generation token.  cancel() or a newer
  start()/run() bumps the token; a superseded run() notices at its next
  resumption point and returns None without advancing or emitting.
  Machine state is not rolled back — the next run builds a fresh machine.

Thread safety:
  This class is NOT thread-safe.  One advance() is in flight at a time,
  from a single thread (or an async event loop calling tick()).
"""

import logging
from enum import Enum
from typing import Callable, Optional

from algorithms.base import AlgorithmMachine
from algorithms.step import RunResult, Snapshot, StepOutcome, StepStatus
from engine.clock import Clock, SystemClock
from engine.tape import RunTape
from errors import ConfigurationError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed presets (seconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   0.5,    # teaching mode
    "medium": 0.1,
    "fast":   0.05,   # default animation speed
    "turbo":  0.01,
}


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state       : Current StepperState.
        steps       : RunTape of every step so far; steps[0] is the Ready state.
        current_idx : Index into `steps` that is currently displayed.
        speed       : Seconds between auto-advance ticks.
        on_step     : Optional callback(Snapshot) fired every time the
                      displayed step changes.  The UI hooks its redraw here.
        clock       : Time source for tick() and run() suspension.
        result      : RunResult once the machine reaches a terminal state.
    """

    def __init__(
        self,
        on_step: Optional[Callable[[Snapshot], None]] = None,
        clock: Optional[Clock] = None,
    ):
        self._machine:    Optional[AlgorithmMachine] = None
        self.steps:       RunTape            = RunTape()
        self.current_idx: int                = -1
        self.state:       StepperState       = StepperState.IDLE
        self.speed:       float              = SPEED_PRESETS["medium"]
        self.on_step:     Optional[Callable[[Snapshot], None]] = on_step
        self.clock:       Clock              = clock or SystemClock()
        self.result:      Optional[RunResult] = None

        self._generation: int   = 0
        self._last_tick:  float = 0.0

    # ------------------------------------------------------------------
    # Run to completion
    # ------------------------------------------------------------------
    def run(
        self,
        machine: AlgorithmMachine,
        delay_ms: float = 0,
        on_snapshot: Optional[Callable[[Snapshot], None]] = None,
    ) -> Optional[RunResult]:
        """
        Drive `machine` until it reports Done or Failed and return its
        RunResult.  Returns None if the run was cancelled or superseded.
        A Failed step emits no snapshot.
        """
        if delay_ms < 0:
            raise ConfigurationError(f"delay_ms must be >= 0, got {delay_ms}")
        callback = on_snapshot or self.on_step
        token = self._begin(machine)
        self.state = StepperState.PLAYING
        delay_s = delay_ms / 1000.0

        while True:
            if token != self._generation:
                logger.info("%s: run superseded after %d step(s)", machine.key, len(self.steps) - 1)
                return None

            outcome = self._fetch_next()
            if outcome is None or outcome.status == StepStatus.FAILED:
                self.state = StepperState.FINISHED
                return self.result

            self.current_idx = len(self.steps) - 1
            if callback is not None:
                callback(self.steps[-1])
                if token != self._generation:
                    continue  # cancelled from the callback; no sleep

            if outcome.is_terminal:
                if token == self._generation:
                    self.state = StepperState.FINISHED
                return outcome.result

            if delay_s > 0:
                self.clock.sleep(delay_s)

    def cancel(self) -> None:
        """Supersede the in-flight run; its next resumption becomes a no-op."""
        if self._machine is not None:
            logger.info("%s: run cancelled", self._machine.key)
        self._generation += 1
        self._machine = None
        self.state = StepperState.IDLE

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, machine: AlgorithmMachine) -> None:
        """Attach a fresh machine and show its Ready snapshot."""
        self._begin(machine)
        self.state = StepperState.PAUSED
        self._goto(0)

    def reset(self) -> None:
        """Back to IDLE — caller must call start() again."""
        self._generation += 1
        self._machine    = None
        self.steps       = RunTape()
        self.current_idx = -1
        self.result      = None
        self.state       = StepperState.IDLE
        self._notify(None)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_step(self) -> bool:
        """Advance one step forward.  Returns False if already at end."""
        target = self.current_idx + 1
        # if we haven't produced this step yet, try
        if target >= len(self.steps):
            outcome = self._fetch_next()
            if outcome is None or target >= len(self.steps):
                self.state = StepperState.FINISHED
                return False
        self._goto(target)
        if self._machine is not None and self._machine.is_terminal and target == len(self.steps) - 1:
            self.state = StepperState.FINISHED
        return True

    def prev_step(self) -> bool:
        """Rewind one step.  Returns False if already at start."""
        if self.current_idx <= 0:
            return False
        self._goto(self.current_idx - 1)
        if self.state == StepperState.FINISHED:
            self.state = StepperState.PAUSED
        return True

    def goto_step(self, idx: int) -> bool:
        """Jump to an arbitrary step index, producing steps forward if needed."""
        while idx >= len(self.steps):
            if self._fetch_next() is None:
                break
        if 0 <= idx < len(self.steps):
            self._goto(idx)
            return True
        return False

    def rewind(self) -> None:
        """Jump back to step 0."""
        if self.steps:
            self._goto(0)
            if self.state == StepperState.FINISHED:
                self.state = StepperState.PAUSED

    def jump_to_end(self) -> None:
        """Run the machine out and jump to the final step."""
        while self._fetch_next() is not None:
            pass
        if self.steps:
            self._goto(len(self.steps) - 1)
        self.state = StepperState.FINISHED

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        if self.state in (StepperState.FINISHED, StepperState.IDLE):
            return
        self.state      = StepperState.PLAYING
        self._last_tick = self.clock.monotonic()

    def pause(self) -> None:
        if self.state == StepperState.PLAYING:
            self.state = StepperState.PAUSED

    def toggle_play(self) -> None:
        if self.state == StepperState.PLAYING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        Call periodically (e.g. every 16 ms).  If playing and enough
        time has elapsed, advances one step.  Returns True if a step
        was taken.
        """
        if self.state != StepperState.PLAYING:
            return False
        now = self.clock.monotonic()
        if now - self._last_tick >= self.speed:
            self._last_tick = now
            if not self.next_step():
                self.state = StepperState.FINISHED
                return False
            return True
        return False

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.speed = SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"])

    def set_speed_value(self, seconds: float) -> None:
        self.speed = max(0.0, seconds)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def machine(self) -> Optional[AlgorithmMachine]:
        return self._machine

    @property
    def current_step(self) -> Optional[Snapshot]:
        if 0 <= self.current_idx < len(self.steps):
            return self.steps[self.current_idx]
        return None

    @property
    def total_steps_fetched(self) -> int:
        return len(self.steps)

    @property
    def is_finished(self) -> bool:
        return self.state == StepperState.FINISHED

    @property
    def is_playing(self) -> bool:
        return self.state == StepperState.PLAYING

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _begin(self, machine: AlgorithmMachine) -> int:
        if self._machine is not None and not self._machine.is_terminal:
            logger.info("%s: superseded by a new %s run", self._machine.key, machine.key)
        self._generation += 1
        self._machine    = machine
        self.steps       = RunTape()
        self.steps.append(*machine.frame())
        self.current_idx = 0
        self.result      = machine.result
        return self._generation

    def _fetch_next(self) -> Optional[StepOutcome]:
        """Advance the machine once and buffer the resulting snapshot."""
        if self._machine is None or self._machine.is_terminal:
            return None
        outcome = self._machine.advance()
        if outcome.is_terminal:
            self.result = outcome.result
        if outcome.status == StepStatus.FAILED:
            logger.warning("%s: run failed: %s", self._machine.key, outcome.reason)
            return outcome
        self.steps.append(*self._machine.frame())
        return outcome

    def _goto(self, idx: int) -> None:
        self.current_idx = idx
        self._notify(self.steps[idx] if 0 <= idx < len(self.steps) else None)

    def _notify(self, step: Optional[Snapshot]) -> None:
        if self.on_step and step is not None:
            self.on_step(step)
