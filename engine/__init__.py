"""
engine/
-------
Playback, timing & recording layer.

    from engine import Stepper, Recorder, ManualClock
"""

from engine.clock    import Clock, ManualClock, SystemClock
from engine.stepper  import Stepper, StepperState, SPEED_PRESETS
from engine.recorder import Recorder, RunMetrics
from engine.tape     import RunTape

__all__ = [
    "Clock",
    "ManualClock",
    "SystemClock",
    "Stepper",
    "StepperState",
    "SPEED_PRESETS",
    "Recorder",
    "RunMetrics",
    "RunTape",
]
