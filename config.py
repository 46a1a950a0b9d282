"""
config.py — Application Settings
=================================
Defaults for the web app, overridable through environment variables:

    ANIMATOR_SECRET_KEY       – Flask session key (random if unset)
    ANIMATOR_LOG_LEVEL        – DEBUG / INFO / WARNING … (default INFO)
    ANIMATOR_GRID_SIZE        – default grid size (default 20)
    ANIMATOR_STEP_DELAY_MS    – default playback delay (default 50)
    ANIMATOR_MAX_GRID_SIZE    – upper bound accepted by /api/grid/config
    ANIMATOR_MAX_ARRAY_SIZE   – upper bound for sorting / searching arrays
    ANIMATOR_MAX_RUNS         – recorded runs kept in memory across sessions (default 32)
"""

import os
import secrets
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from errors import ConfigurationError


@dataclass
class AppConfig:
    secret_key:      str              = field(default_factory=lambda: secrets.token_hex(32))
    log_level:       str              = "INFO"
    grid_size:       int              = 20
    start:           Tuple[int, int]  = (2, 2)
    end:             Tuple[int, int]  = (17, 17)
    step_delay_ms:   int              = 50
    max_grid_size:   int              = 50
    max_array_size:  int              = 50
    max_runs:        int              = 32

    def __post_init__(self):
        if self.grid_size < 1 or self.grid_size > self.max_grid_size:
            raise ConfigurationError(
                f"grid_size must be in [1, {self.max_grid_size}], got {self.grid_size}"
            )
        if self.step_delay_ms < 0:
            raise ConfigurationError(f"step_delay_ms must be >= 0, got {self.step_delay_ms}")
        if self.max_runs < 1:
            raise ConfigurationError(f"max_runs must be >= 1, got {self.max_runs}")
        # keep the default markers on the board for small grids
        last = self.grid_size - 1
        self.start = (min(self.start[0], last), min(self.start[1], last))
        self.end   = (min(self.end[0], last),   min(self.end[1], last))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        kwargs = {}
        if env.get("ANIMATOR_SECRET_KEY"):
            kwargs["secret_key"] = env["ANIMATOR_SECRET_KEY"]
        if env.get("ANIMATOR_LOG_LEVEL"):
            kwargs["log_level"] = env["ANIMATOR_LOG_LEVEL"].upper()
        for key, name in (
            ("grid_size",      "ANIMATOR_GRID_SIZE"),
            ("step_delay_ms",  "ANIMATOR_STEP_DELAY_MS"),
            ("max_grid_size",  "ANIMATOR_MAX_GRID_SIZE"),
            ("max_array_size", "ANIMATOR_MAX_ARRAY_SIZE"),
            ("max_runs",       "ANIMATOR_MAX_RUNS"),
        ):
            if env.get(name):
                try:
                    kwargs[key] = int(env[name])
                except ValueError:
                    raise ConfigurationError(f"{name} must be an integer, got {env[name]!r}")
        return cls(**kwargs)

    def to_flask(self) -> dict:
        """Keys copied into `app.config`."""
        return {
            "SECRET_KEY":              self.secret_key,
            "ANIMATOR_GRID_SIZE":      self.grid_size,
            "ANIMATOR_START":          self.start,
            "ANIMATOR_END":            self.end,
            "ANIMATOR_STEP_DELAY_MS":  self.step_delay_ms,
            "ANIMATOR_MAX_GRID_SIZE":  self.max_grid_size,
            "ANIMATOR_MAX_ARRAY_SIZE": self.max_array_size,
            "ANIMATOR_MAX_RUNS":       self.max_runs,
        }
