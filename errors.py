"""
errors.py — Error taxonomy
===========================
Three kinds of "something went wrong":

  • Expected terminal outcomes (goal unreachable, target not in array)
    are NOT exceptions — they come back as a RunResult status.
  • ConfigurationError  – bad user input, rejected before a run starts.
  • InvariantViolation  – programmer-error class; aborts the run.
"""


class VisualizerError(Exception):
    """Base class for every error raised by the animator."""


class ConfigurationError(VisualizerError, ValueError):
    """Rejected configuration: out-of-bounds coordinates, start on a wall, …"""


class InvariantViolation(VisualizerError, RuntimeError):
    """Internal state no longer satisfies an algorithm invariant."""


__all__ = [
    "VisualizerError",
    "ConfigurationError",
    "InvariantViolation",
]
