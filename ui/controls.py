"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls       – play/pause/next/prev/rewind/speed/delay
  • algorithm_selector      – dropdown grouped by family
  • parameter_panel         – one slider / select per ParamSpec
  • grid_settings           – grid size, clear walls, random maze
  • analytics_panel         – finalized cells, path length, steps, time, …
  • pseudocode_viewer       – with live line highlighting
  • explanation_panel       – Learning Mode "why this step happened"
  • heuristic_playground    – A* g/h/f table for the open set
  • mode_toggle             – Learning vs Expert

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - The main app stitches them together.
"""

from typing import Any, Dict, List, Mapping, Optional

from algorithms import AlgoInfo, ParamSpec
from algorithms.step import Snapshot
from engine import SPEED_PRESETS, RunMetrics

FAMILY_LABELS = {
    "pathfinding":  "Pathfinding",
    "local-search": "Local Search",
    "evolutionary": "Evolutionary",
    "searching":    "Searching",
    "sorting":      "Sorting",
    "clustering":   "Clustering",
}


def _escape(text: str) -> str:
    return str(text).replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    is_playing: bool = False,
    current_step: int = 0,
    total_steps: int = 0,
    speed: str = "fast",
    delay_ms: int = 50,
    is_finished: bool = False,
) -> str:
    play_icon = "⏸" if is_playing else "▶"
    play_label = "Pause" if is_playing else "Play"

    speed_options = []
    for name, seconds in SPEED_PRESETS.items():
        sel = 'selected' if name == speed else ''
        speed_options.append(f'<option value="{name}" {sel}>{name.capitalize()} ({int(seconds * 1000)} ms)</option>')

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-rewind" title="Rewind to start">⏮</button>
        <button id="btn-prev" title="Previous step">◀</button>
        <button id="btn-play" title="{play_label}">{play_icon}</button>
        <button id="btn-next" title="Next step">▶</button>
        <button id="btn-end" title="Jump to end">⏭</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{current_step}</span> / <span id="total-steps">{total_steps}</span>
        {' <span class="finished-badge">FINISHED</span>' if is_finished else ''}
      </div>
      <div class="speed-control">
        <label>Speed:</label>
        <select id="speed-selector">
          {''.join(speed_options)}
        </select>
        <label>Delay: <input type="range" id="delay-slider" min="0" max="500" step="10" value="{delay_ms}">
               <span id="delay-val">{delay_ms}</span> ms</label>
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(
    algorithms: List[AlgoInfo],
    selected_key: str = "astar",
) -> str:
    groups: Dict[str, List[AlgoInfo]] = {}
    for algo in algorithms:
        groups.setdefault(algo.family, []).append(algo)

    optgroups = []
    for family, algos in groups.items():
        options = []
        for algo in algos:
            sel = 'selected' if algo.key == selected_key else ''
            options.append(
                f'<option value="{algo.key}" {sel}>{algo.label} — {algo.complexity_time}</option>'
            )
        optgroups.append(
            f'<optgroup label="{FAMILY_LABELS.get(family, family)}">{"".join(options)}</optgroup>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <select id="algo-selector">
        {''.join(optgroups)}
      </select>
      <button id="btn-run" class="btn-primary">▶ Run Algorithm</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Parameter Panel
# ---------------------------------------------------------------------------
def _param_input(spec: ParamSpec, value: Any) -> str:
    if spec.kind == "choice":
        options = "".join(
            f'<option value="{c}" {"selected" if c == value else ""}>{c}</option>'
            for c in spec.choices
        )
        return f'<select class="param" data-param="{spec.name}">{options}</select>'

    if spec.optional:
        shown = "" if value is None else value
        return (
            f'<input type="number" class="param" data-param="{spec.name}" '
            f'value="{shown}" placeholder="random">'
        )

    bounds = ""
    if spec.minimum is not None:
        bounds += f' min="{spec.minimum:g}"'
    if spec.maximum is not None:
        bounds += f' max="{spec.maximum:g}"'
    if spec.step is not None:
        bounds += f' step="{spec.step:g}"'
    return (
        f'<input type="range" class="param" data-param="{spec.name}"{bounds} value="{value}">'
        f'<span class="param-val" data-param="{spec.name}">{value}</span>'
    )


def parameter_panel(info: Optional[AlgoInfo], values: Optional[Mapping[str, Any]] = None) -> str:
    if info is None or not info.params:
        return """
        <div class="panel parameter-panel">
          <h3>🎛 Parameters</h3>
          <p class="placeholder">This algorithm has no parameters.</p>
        </div>
        """
    values = values or {}
    rows = []
    for spec in info.params:
        value = values.get(spec.name, spec.default)
        rows.append(f'<label>{spec.label}: {_param_input(spec, value)}</label>')

    return f"""
    <div class="panel parameter-panel" data-algo="{info.key}">
      <h3>🎛 Parameters — {info.label}</h3>
      {''.join(rows)}
    </div>
    """


# ---------------------------------------------------------------------------
# Grid Settings
# ---------------------------------------------------------------------------
def grid_settings(size: int = 20, max_size: int = 50) -> str:
    return f"""
    <div class="panel grid-settings">
      <h3>🧱 Grid</h3>
      <label>Size: <input type="number" id="grid-size" value="{size}" min="2" max="{max_size}"></label>
      <label>Wall %: <input type="range" id="maze-density" min="0" max="0.5" step="0.05" value="0.25">
             <span id="maze-density-val">0.25</span></label>
      <button id="btn-maze" class="btn-secondary">Random Maze</button>
      <button id="btn-clear-walls" class="btn-secondary">Clear Walls</button>
      <p class="hint">Click cells to toggle walls. Shift-click sets the start, Alt-click the end.</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Analytics Panel
# ---------------------------------------------------------------------------
def analytics_panel(metrics: Optional[RunMetrics] = None) -> str:
    if not metrics:
        return """
        <div class="panel analytics-panel">
          <h3>📊 Analytics</h3>
          <p class="placeholder">Run an algorithm to see metrics.</p>
        </div>
        """

    status = {
        "found":     "✅ Found",
        "exhausted": "❌ No path / not found",
        "finished":  "🏁 Finished",
        "failed":    "⚠️ Failed",
    }.get(metrics.status, metrics.status)

    rows = [
        ("Status", status),
        ("Finalized", metrics.finalized_count),
        ("Total Steps", metrics.total_steps),
        ("Algorithm Time", f"{metrics.elapsed_ms:.2f} ms"),
    ]
    if metrics.family == "pathfinding":
        rows.insert(2, ("Path Length", f"{metrics.path_length} cells"))
    for key in ("comparisons", "swaps", "best_value", "position", "iterations", "inertia"):
        value = metrics.summary.get(key)
        if isinstance(value, float):
            rows.append((key.replace("_", " ").title(), f"{value:.4f}"))
        elif value is not None:
            rows.append((key.replace("_", " ").title(), value))

    table = "".join(f"<tr><td>{k}:</td><td><strong>{v}</strong></td></tr>" for k, v in rows)
    return f"""
    <div class="panel analytics-panel">
      <h3>📊 Analytics — {metrics.algo_label}</h3>
      <table>
        {table}
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(
    pseudocode_lines: List[str],
    current_line: int = -1,
) -> str:
    if not pseudocode_lines:
        return """
        <div class="code-block">
          <div style="color: #7d8590; padding: 20px; text-align: center;">
            Select an algorithm to view pseudocode
          </div>
        </div>
        """

    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = 'highlight' if i == current_line else ''
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{_escape(line)}</div>')

    return f"""
    <div class="code-block">
      {''.join(lines_html)}
    </div>
    """


# ---------------------------------------------------------------------------
# Explanation Panel (Learning Mode)
# ---------------------------------------------------------------------------
def explanation_panel(explanation: str = "", show: bool = True) -> str:
    if not show:
        return """<div class="explanation-text" style="color: #7d8590; padding: 20px;">Learning mode disabled</div>"""

    if not explanation:
        return ("<div class=\"explanation-text\">▶ Click <strong>Run Algorithm</strong> to see "
                "step-by-step explanations of what's happening at each stage.</div>")

    return f"""<div class="explanation-text">{_escape(explanation)}</div>"""


# ---------------------------------------------------------------------------
# Heuristic Playground (A* teaching tool)
# ---------------------------------------------------------------------------
def heuristic_playground(snapshot: Optional[Snapshot] = None, limit: int = 10) -> str:
    if snapshot is None or snapshot.kind != "grid":
        return """
        <div class="panel heuristic-playground">
          <h3>🧪 Heuristic Playground</h3>
          <p class="placeholder">Run A* to explore heuristic behavior.</p>
        </div>
        """

    open_set = {tuple(c) for c in snapshot.frontier}
    scored = [c for c in snapshot.cells if (c["x"], c["y"]) in open_set]
    scored.sort(key=lambda c: c["f"])

    rows = []
    for c in scored[:limit]:
        rows.append(
            f"<tr><td>({c['x']},{c['y']})</td><td>{c['g']:g}</td>"
            f"<td>{c['h']:g}</td><td>{c['f']:g}</td></tr>"
        )

    heuristic = snapshot.overlay.get("heuristic", "")
    return f"""
    <div class="panel heuristic-playground">
      <h3>🧪 Open Set — {heuristic}</h3>
      <p>A* = g (actual cost) + h (heuristic estimate). If h is <strong>admissible</strong> (never overestimates),
         A* guarantees an optimal path.</p>
      <table class="scores-table">
        <thead>
          <tr><th>Cell</th><th>g</th><th>h</th><th>f = g+h</th></tr>
        </thead>
        <tbody>
          {''.join(rows)}
        </tbody>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Mode Toggle (Learning vs Expert)
# ---------------------------------------------------------------------------
def mode_toggle(learning_mode: bool = True) -> str:
    return f"""
    <div class="panel mode-toggle">
      <h3>🎓 Mode</h3>
      <label>
        <input type="checkbox" id="learning-mode-toggle" {'checked' if learning_mode else ''}>
        Learning Mode (tooltips + explanations)
      </label>
    </div>
    """
