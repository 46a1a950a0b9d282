import pytest

from algorithms.astar import AStarMachine
from algorithms.base import AlgorithmMachine
from algorithms.sorting import BubbleSortMachine
from algorithms.step import StepOutcome
from engine import SPEED_PRESETS, ManualClock, Stepper, StepperState
from errors import ConfigurationError, InvariantViolation
from grid import Grid


class FlakyMachine(AlgorithmMachine):
    """Breaks an invariant on its `fail_at`-th advance."""

    key = "flaky"
    kind = "array"

    def __init__(self, fail_at=3):
        super().__init__()
        self.fail_at = fail_at

    def _advance(self):
        if self.step_number + 1 == self.fail_at:
            raise InvariantViolation("boom")
        return StepOutcome.in_progress()

    def _fill_snapshot(self, sb):
        sb.array = [self.step_number]


def _grid():
    return Grid.generate_maze(8, wall_prob=0.2, start=(0, 0), end=(7, 7), seed=2)


# ---------------------------------------------------------------------------
# run()
# ---------------------------------------------------------------------------
def test_delay_changes_pacing_but_not_snapshots():
    fast_clock, slow_clock = ManualClock(), ManualClock()
    fast, slow = [], []

    r_fast = Stepper(clock=fast_clock).run(AStarMachine(_grid()), 0, fast.append)
    r_slow = Stepper(clock=slow_clock).run(AStarMachine(_grid()), 500, slow.append)

    assert fast == slow
    assert r_fast == r_slow
    assert fast_clock.sleeps == []
    assert slow_clock.sleeps == [0.5] * (len(slow) - 1)


def test_run_buffers_the_ready_snapshot_first():
    stepper = Stepper(clock=ManualClock())
    emitted = []
    result = stepper.run(BubbleSortMachine([3, 1, 2]), 0, emitted.append)

    assert result.status == "finished"
    assert stepper.steps[0].status == "ready"
    assert stepper.steps[1:] == emitted
    assert [s.step_number for s in stepper.steps] == list(range(len(stepper.steps)))
    assert stepper.is_finished
    assert stepper.result is result


def test_negative_delay_is_rejected():
    with pytest.raises(ConfigurationError):
        Stepper(clock=ManualClock()).run(BubbleSortMachine([2, 1]), -1)


def test_cancel_during_sleep_stops_the_run():
    stepper = None
    clock = ManualClock(on_sleep=lambda s: stepper.cancel())
    stepper = Stepper(clock=clock)
    machine = AStarMachine(_grid())
    emitted = []

    assert stepper.run(machine, 100, emitted.append) is None
    assert len(emitted) == 1
    assert machine.step_number == 1
    assert stepper.state == StepperState.IDLE


def test_cancel_from_the_snapshot_callback():
    stepper = Stepper(clock=ManualClock())
    machine = BubbleSortMachine([5, 4, 3, 2, 1])
    emitted = []

    def on_snapshot(snap):
        emitted.append(snap)
        if len(emitted) == 3:
            stepper.cancel()

    assert stepper.run(machine, 0, on_snapshot) is None
    assert len(emitted) == 3
    assert machine.step_number == 3


def test_cancel_from_the_callback_skips_the_pending_delay():
    clock = ManualClock()
    stepper = Stepper(clock=clock)
    emitted = []

    def on_snapshot(snap):
        emitted.append(snap)
        stepper.cancel()

    assert stepper.run(BubbleSortMachine([3, 2, 1]), 100, on_snapshot) is None
    assert len(emitted) == 1
    assert clock.sleeps == []


def test_starting_a_new_run_supersedes_the_old_one():
    replacement = BubbleSortMachine([2, 1])
    stepper = None

    def supersede(_seconds):
        if stepper.machine is not replacement:
            stepper.start(replacement)

    stepper = Stepper(clock=ManualClock(on_sleep=supersede))
    first = AStarMachine(_grid())

    assert stepper.run(first, 10) is None
    assert first.step_number == 1
    assert stepper.machine is replacement
    assert stepper.steps[0].algorithm == "bubble_sort"
    assert stepper.state == StepperState.PAUSED


def test_failed_step_returns_the_failure_without_a_snapshot():
    stepper = Stepper(clock=ManualClock())
    emitted = []
    result = stepper.run(FlakyMachine(fail_at=3), 0, emitted.append)

    assert result.status == "failed"
    assert result.reason == "boom"
    assert len(emitted) == 2
    assert len(stepper.steps) == 3


# ---------------------------------------------------------------------------
# Interactive playback
# ---------------------------------------------------------------------------
def test_navigation_forward_and_back():
    seen = []
    stepper = Stepper(on_step=seen.append, clock=ManualClock())
    stepper.start(BubbleSortMachine([3, 2, 1]))

    assert stepper.state == StepperState.PAUSED
    assert stepper.current_step.step_number == 0
    assert stepper.prev_step() is False

    assert stepper.next_step() is True
    assert stepper.next_step() is True
    assert stepper.current_idx == 2
    assert stepper.prev_step() is True
    assert stepper.current_idx == 1
    assert [s.step_number for s in seen] == [0, 1, 2, 1]

    assert stepper.goto_step(4) is True
    assert stepper.current_step.step_number == 4


def test_jump_to_end_and_rewind():
    stepper = Stepper(clock=ManualClock())
    stepper.start(BubbleSortMachine([4, 3, 2, 1]))
    stepper.jump_to_end()

    assert stepper.is_finished
    assert stepper.current_step.is_final
    assert stepper.result.summary["array"] == [1, 2, 3, 4]
    assert stepper.next_step() is False

    stepper.rewind()
    assert stepper.current_idx == 0
    assert stepper.state == StepperState.PAUSED


def test_tick_advances_on_the_clock():
    clock = ManualClock()
    stepper = Stepper(clock=clock)
    stepper.start(BubbleSortMachine([2, 1]))
    stepper.set_speed_value(0.1)
    stepper.play()

    assert stepper.is_playing
    assert stepper.tick() is False
    clock.advance(0.1)
    assert stepper.tick() is True
    assert stepper.current_idx == 1

    stepper.pause()
    clock.advance(1)
    assert stepper.tick() is False


def test_play_runs_out_to_finished():
    clock = ManualClock()
    stepper = Stepper(clock=clock)
    stepper.start(BubbleSortMachine([1, 2]))
    stepper.set_speed("turbo")
    stepper.play()
    for _ in range(10):
        clock.advance(1)
        stepper.tick()
    assert stepper.is_finished
    assert not stepper.is_playing


def test_unknown_speed_preset_falls_back_to_medium():
    stepper = Stepper()
    stepper.set_speed("ludicrous")
    assert stepper.speed == SPEED_PRESETS["medium"]


def test_reset_goes_idle():
    stepper = Stepper(clock=ManualClock())
    stepper.start(BubbleSortMachine([2, 1]))
    stepper.reset()
    assert stepper.state == StepperState.IDLE
    assert stepper.current_step is None
    assert stepper.machine is None
