"""
clock.py — Time Sources for the Stepper
========================================
The Stepper never calls `time` directly; it asks a Clock.  Production
uses SystemClock, tests use ManualClock so a 500 ms delay costs nothing
and cancellation can be triggered from inside a "sleep".
"""

import time
from typing import Callable, List, Optional


class Clock:
    """Interface: a monotonic reading plus a way to wait."""

    def monotonic(self) -> float:
        raise NotImplementedError

    def sleep(self, seconds: float) -> None:
        raise NotImplementedError


class SystemClock(Clock):

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)


class ManualClock(Clock):
    """
    Virtual time.  sleep() advances `now` instantly and records the
    request; `on_sleep` (if set) is called after each sleep — tests use it
    to cancel or supersede a run at a suspension point.
    """

    def __init__(self, start: float = 0.0, on_sleep: Optional[Callable[[float], None]] = None):
        self.now: float = start
        self.sleeps: List[float] = []
        self.on_sleep = on_sleep

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        if self.on_sleep is not None:
            self.on_sleep(seconds)

    def advance(self, seconds: float) -> None:
        """Move time forward without a sleep (drives Stepper.tick())."""
        self.now += seconds
