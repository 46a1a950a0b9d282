"""
ui/
---
Presentation layer.

    from ui import render_snapshot, render_grid_config
    from ui import playback_controls, algorithm_selector, …
"""

from ui.canvas import render_snapshot, render_grid_config, CanvasConfig

from ui.controls import (
    playback_controls,
    algorithm_selector,
    parameter_panel,
    grid_settings,
    analytics_panel,
    pseudocode_viewer,
    explanation_panel,
    heuristic_playground,
    mode_toggle,
)

__all__ = [
    "render_snapshot",
    "render_grid_config",
    "CanvasConfig",
    "playback_controls",
    "algorithm_selector",
    "parameter_panel",
    "grid_settings",
    "analytics_panel",
    "pseudocode_viewer",
    "explanation_panel",
    "heuristic_playground",
    "mode_toggle",
]
