"""
main.py — Algorithm Animator Flask App
========================================
The web server that powers the animator.

Routes:
  GET  /                       – main UI
  GET  /api/algorithms         – registry metadata (labels, params, pseudocode)
  GET  /api/state              – current session state (for polling)
  POST /api/grid/config        – size / start / end / walls / random maze
  POST /api/grid/toggle_wall   – flip one cell
  POST /api/grid/clear_walls   – remove every wall
  POST /api/run                – record a run of the selected algorithm
  POST /api/step/next          – advance one step
  POST /api/step/prev          – rewind one step
  POST /api/step/goto          – jump to step N
  POST /api/step/play          – toggle play/pause
  POST /api/config/algo        – select algorithm
  POST /api/config/speed       – speed preset or explicit delay_ms
  POST /api/config/mode        – Learning Mode on/off

State management:
  The Flask session (a signed cookie) holds the small stuff:
    • grid            – serialised Grid configuration
    • selected_algo / params
    • delay_ms / speed / is_playing / learning_mode
    • run_id          – key into RUNS
  Recorded runs are too big for a cookie and live in the in-memory RUNS
  store.  A new run for the session replaces the old one, and the store
  keeps at most ANIMATOR_MAX_RUNS runs, dropping the least recently used.
"""

import logging
import uuid
from collections import OrderedDict
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, current_app, jsonify, render_template_string, request, session

from algorithms import REGISTRY, coerce_params, get_algorithm, list_algorithms
from config import AppConfig
from engine import SPEED_PRESETS, Recorder
from errors import ConfigurationError
from grid import Grid
from ui import (
    render_snapshot,
    render_grid_config,
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

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# In-memory run store: run_id → {"recorder": Recorder, "index": int},
# least recently used first
RUNS: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

bp = Blueprint("animator", __name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


# ---------------------------------------------------------------------------
# Session State Helpers
# ---------------------------------------------------------------------------
def get_grid() -> Grid:
    """Deserialise grid from session, or create the default one."""
    if "grid" not in session:
        cfg = current_app.config
        session["grid"] = Grid(
            size=cfg["ANIMATOR_GRID_SIZE"],
            start=cfg["ANIMATOR_START"],
            end=cfg["ANIMATOR_END"],
        ).to_dict()
    return Grid.from_dict(session["grid"])


def save_grid(grid: Grid) -> None:
    session["grid"] = grid.to_dict()


def get_state() -> Dict[str, Any]:
    """Return current app state as a dict."""
    return {
        "selected_algo":  session.get("selected_algo", "astar"),
        "params":         session.get("params", {}),
        "learning_mode":  session.get("learning_mode", True),
        "is_playing":     session.get("is_playing", False),
        "speed":          session.get("speed", "fast"),
        "delay_ms":       session.get("delay_ms", current_app.config["ANIMATOR_STEP_DELAY_MS"]),
        "run_id":         session.get("run_id"),
    }


def set_state(**kwargs) -> None:
    for k, v in kwargs.items():
        session[k] = v


def get_run() -> Optional[Dict[str, Any]]:
    run_id = session.get("run_id")
    if not run_id or run_id not in RUNS:
        return None
    RUNS.move_to_end(run_id)
    return RUNS[run_id]


def store_run(rec: Recorder) -> str:
    """Keep `rec` under a fresh run_id, evicting the least recently used runs."""
    run_id = str(uuid.uuid4())
    RUNS[run_id] = {"recorder": rec, "index": 0}
    limit = current_app.config["ANIMATOR_MAX_RUNS"]
    while len(RUNS) > limit:
        evicted, _ = RUNS.popitem(last=False)
        logger.info("run %s evicted (store holds %d run(s))", evicted, limit)
    return run_id


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Request body must be a JSON object")
    return data


def _as_int(value: Any, name: str) -> int:
    try:
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ValueError
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


TRUTHY = {"true", "1", "on", "yes"}
FALSY  = {"false", "0", "off", "no"}


def _as_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in TRUTHY | FALSY:
        return value.strip().lower() in TRUTHY
    raise ConfigurationError(f"{name} must be true or false, got {value!r}")


def _step_payload(run: Dict[str, Any], idx: int) -> Dict[str, Any]:
    """Everything the page redraws when the displayed step changes."""
    rec: Recorder = run["recorder"]
    step = rec.steps[idx]
    info = get_algorithm(step.algorithm)
    learning = session.get("learning_mode", True)
    return {
        "svg":          render_snapshot(step),
        "pseudocode":   pseudocode_viewer(info.pseudocode if info else [], current_line=step.pseudocode_line),
        "explanation":  explanation_panel(step.explanation, show=learning),
        "scores":       heuristic_playground(step) if step.kind == "grid" else "",
        "current_step": idx,
        "total_steps":  len(rec.steps),
        "is_final":     idx == len(rec.steps) - 1,
    }


def _grid_payload(grid: Grid) -> Dict[str, Any]:
    return {"svg": render_grid_config(grid), "grid": grid.to_dict()}


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@bp.route("/")
def index():
    grid = get_grid()
    state = get_state()
    algo_info = get_algorithm(state["selected_algo"]) or REGISTRY["astar"]

    run = get_run()
    if run is not None:
        payload = _step_payload(run, run["index"])
        svg = payload["svg"]
        current, total = payload["current_step"], payload["total_steps"]
        metrics = run["recorder"].metrics
    else:
        svg = render_grid_config(grid)
        current, total, metrics = 0, 0, None

    html = render_template_string(INDEX_TEMPLATE,
        svg=svg,
        delay_ms=state["delay_ms"],
        playback=playback_controls(
            is_playing=state["is_playing"],
            current_step=current,
            total_steps=total,
            speed=state["speed"],
            delay_ms=state["delay_ms"],
        ),
        algo_selector=algorithm_selector(list_algorithms(), selected_key=algo_info.key),
        params=parameter_panel(algo_info, state["params"].get(algo_info.key)),
        grid_settings=grid_settings(grid.size, current_app.config["ANIMATOR_MAX_GRID_SIZE"]),
        analytics=analytics_panel(metrics),
        pseudocode=pseudocode_viewer(algo_info.pseudocode),
        explanation=explanation_panel(show=state["learning_mode"]),
        mode_toggle=mode_toggle(learning_mode=state["learning_mode"]),
    )
    return html


@bp.route("/api/algorithms")
def api_algorithms():
    return jsonify([a.to_dict() for a in list_algorithms()])


@bp.route("/api/state")
def api_state():
    state = get_state()
    run = get_run()
    state["grid"] = get_grid().to_dict()
    state["run"] = None
    if run is not None:
        rec: Recorder = run["recorder"]
        state["run"] = {
            "algo_key":     rec.metrics.algo_key if rec.metrics else "",
            "current_step": run["index"],
            "total_steps":  len(rec.steps),
            "metrics":      rec.metrics.to_dict() if rec.metrics else {},
        }
    return jsonify(state)


# ---------------------------------------------------------------------------
# API: Grid Editing
# ---------------------------------------------------------------------------
@bp.route("/api/grid/config", methods=["POST"])
def api_grid_config():
    data = _json_body()
    grid = get_grid()

    size = data.get("size", data.get("gridSize", data.get("grid_size")))
    if size is not None:
        size = _as_int(size, "size")
        max_size = current_app.config["ANIMATOR_MAX_GRID_SIZE"]
        if not 2 <= size <= max_size:
            raise ConfigurationError(f"size must be in [2, {max_size}], got {size}")
        if size != grid.size:
            grid.resize(size)

    if "walls" in data:
        grid = Grid(size=grid.size, start=data.get("start", grid.start),
                    end=data.get("end", grid.end), walls=data["walls"])
    else:
        if "start" in data:
            grid.set_start(data["start"])
        if "end" in data:
            grid.set_end(data["end"])

    if data.get("maze") is not None:
        try:
            density = float(data["maze"])
        except (TypeError, ValueError):
            raise ConfigurationError(f"maze must be a wall probability, got {data['maze']!r}")
        seed = data.get("seed")
        grid = Grid.generate_maze(
            grid.size, wall_prob=density, start=grid.start, end=grid.end,
            seed=_as_int(seed, "seed") if seed is not None else None,
        )

    if grid.start == grid.end:
        logger.info("start and end coincide at %s", grid.start)
    save_grid(grid)
    return jsonify(_grid_payload(grid))


@bp.route("/api/grid/toggle_wall", methods=["POST"])
def api_grid_toggle_wall():
    data = _json_body()
    grid = get_grid()
    coord = data.get("cell", data)
    toggled = grid.toggle_wall(coord)
    save_grid(grid)
    payload = _grid_payload(grid)
    payload["toggled"] = toggled
    return jsonify(payload)


@bp.route("/api/grid/clear_walls", methods=["POST"])
def api_grid_clear_walls():
    grid = get_grid()
    grid.clear_walls()
    save_grid(grid)
    return jsonify(_grid_payload(grid))


# ---------------------------------------------------------------------------
# API: Run Algorithm
# ---------------------------------------------------------------------------
@bp.route("/api/run", methods=["POST"])
def api_run():
    data = _json_body()
    state = get_state()
    algo_key = data.get("algo_key", state["selected_algo"])
    info = get_algorithm(algo_key)
    if info is None:
        raise ConfigurationError(f"Unknown algorithm: {algo_key}")

    raw_params = data.get("params")
    if raw_params is None:
        raw_params = state["params"].get(algo_key, {})
    params = coerce_params(info, raw_params)
    max_array = current_app.config["ANIMATOR_MAX_ARRAY_SIZE"]
    if params.get("array_size", 0) > max_array:
        raise ConfigurationError(f"array_size must be <= {max_array}, got {params['array_size']}")

    grid = get_grid() if info.family == "pathfinding" else None
    rec = Recorder()
    rec.start(algo_key, grid=grid, params=params)
    rec.run_to_completion()

    # supersede this session's previous run
    old_id = session.get("run_id")
    if old_id in RUNS:
        del RUNS[old_id]
        logger.info("run %s replaced by a new %s run", old_id, algo_key)

    run_id = store_run(rec)
    stored = dict(state["params"])
    stored[algo_key] = {k: v for k, v in params.items()}
    set_state(run_id=run_id, selected_algo=algo_key, params=stored, is_playing=False)

    payload = _step_payload(RUNS[run_id], 0)
    payload["run_id"] = run_id
    payload["analytics"] = analytics_panel(rec.metrics)
    payload["metrics"] = rec.metrics.to_dict()
    payload["delay_ms"] = state["delay_ms"]
    return jsonify(payload)


# ---------------------------------------------------------------------------
# API: Step Navigation
# ---------------------------------------------------------------------------
def _require_run() -> Dict[str, Any]:
    run = get_run()
    if run is None:
        raise ConfigurationError("No run recorded yet — run an algorithm first")
    return run


@bp.route("/api/step/next", methods=["POST"])
def api_step_next():
    run = _require_run()
    if run["index"] >= len(run["recorder"].steps) - 1:
        set_state(is_playing=False)
        return jsonify({"error": "Already at last step"}), 400
    run["index"] += 1
    return jsonify(_step_payload(run, run["index"]))


@bp.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    run = _require_run()
    if run["index"] <= 0:
        return jsonify({"error": "Already at first step"}), 400
    run["index"] -= 1
    return jsonify(_step_payload(run, run["index"]))


@bp.route("/api/step/goto", methods=["POST"])
def api_step_goto():
    run = _require_run()
    data = _json_body()
    total = len(run["recorder"].steps)
    idx = data.get("index", 0)
    if idx == "end":
        idx = total - 1
    idx = _as_int(idx, "index")
    if not (0 <= idx < total):
        return jsonify({"error": "Invalid step index"}), 400
    run["index"] = idx
    return jsonify(_step_payload(run, idx))


@bp.route("/api/step/play", methods=["POST"])
def api_step_play():
    state = get_state()
    playing = not state["is_playing"]
    set_state(is_playing=playing)
    return jsonify({"is_playing": playing, "delay_ms": state["delay_ms"]})


# ---------------------------------------------------------------------------
# API: Config Changes
# ---------------------------------------------------------------------------
@bp.route("/api/config/algo", methods=["POST"])
def api_config_algo():
    algo_key = _json_body().get("algo_key", "astar")
    info = get_algorithm(algo_key)
    if info is None:
        raise ConfigurationError(f"Unknown algorithm: {algo_key}")
    set_state(selected_algo=algo_key)
    return jsonify({
        "algo_key":   algo_key,
        "params":     parameter_panel(info, get_state()["params"].get(algo_key)),
        "pseudocode": pseudocode_viewer(info.pseudocode),
    })


@bp.route("/api/config/speed", methods=["POST"])
def api_config_speed():
    data = _json_body()
    if "delay_ms" in data:
        delay = _as_int(data["delay_ms"], "delay_ms")
        if delay < 0:
            raise ConfigurationError(f"delay_ms must be >= 0, got {delay}")
        speed = "custom"
    else:
        speed = data.get("speed", "fast")
        if speed not in SPEED_PRESETS:
            raise ConfigurationError(f"speed must be one of {sorted(SPEED_PRESETS)}, got {speed!r}")
        delay = int(SPEED_PRESETS[speed] * 1000)
    set_state(speed=speed, delay_ms=delay)
    return jsonify({"speed": speed, "delay_ms": delay})


@bp.route("/api/config/mode", methods=["POST"])
def api_config_mode():
    learning = _as_bool(_json_body().get("learning_mode", True), "learning_mode")
    set_state(learning_mode=learning)
    return jsonify({"learning_mode": learning})


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
def handle_configuration_error(exc: ConfigurationError):
    logger.warning("rejected request to %s: %s", request.path, exc)
    return jsonify({"error": str(exc)}), 400


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config: Optional[AppConfig] = None) -> Flask:
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.config.update(config.to_flask())
    app.register_blueprint(bp)
    app.register_error_handler(ConfigurationError, handle_configuration_error)
    logger.info("Algorithm Animator ready: %d algorithms registered", len(REGISTRY))
    return app


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Algorithm Animator</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    :root {
      --bg-dark: #0d1117;
      --bg-darker: #010409;
      --bg-panel: #161b22;
      --border: #30363d;
      --text-primary: #e6edf3;
      --text-secondary: #7d8590;
      --text-muted: #484f58;
      --accent-cyan: #0ea5e9;
      --accent-teal: #06b6d4;
      --accent-emerald: #10b981;
      --glow-cyan: rgba(14, 165, 233, 0.4);
    }

    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
      background: var(--bg-darker);
      color: var(--text-primary);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    #sidebar {
      width: 340px;
      background: var(--bg-dark);
      border-right: 1px solid var(--border);
      overflow-y: auto;
      padding: 24px 16px;
    }

    #main { flex: 1; display: flex; flex-direction: column; }

    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
      border-bottom: 1px solid var(--border);
    }
    #canvas-svg svg { max-width: 100%; max-height: 60vh; }
    #canvas-svg rect.cell { cursor: pointer; }

    #bottom-panel {
      display: grid;
      grid-template-columns: 1fr 1fr 1fr;
      gap: 16px;
      padding: 16px;
      background: var(--bg-dark);
      min-height: 280px;
      max-height: 360px;
    }
    #bottom-panel > div {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 16px;
      overflow-y: auto;
    }
    #bottom-panel h3, .panel h3 {
      font-size: 13px;
      font-weight: 700;
      text-transform: uppercase;
      letter-spacing: 0.5px;
      margin-bottom: 12px;
      color: var(--accent-cyan);
    }

    .code-block { font-family: 'JetBrains Mono', 'Courier New', monospace; font-size: 13px; line-height: 1.6; }
    .code-line { padding: 4px 10px; border-radius: 6px; white-space: pre; }
    .code-line.highlight {
      background: rgba(6, 182, 212, 0.15);
      border-left: 3px solid var(--accent-cyan);
      box-shadow: 0 0 20px var(--glow-cyan);
    }
    .explanation-text { color: var(--text-secondary); line-height: 1.8; font-size: 14px; }

    .panel {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 16px;
      margin-bottom: 14px;
    }
    .button-row { display: flex; gap: 8px; margin-bottom: 10px; }
    button {
      background: linear-gradient(135deg, var(--accent-cyan), var(--accent-teal));
      color: #fff;
      border: none;
      padding: 8px 14px;
      border-radius: 8px;
      cursor: pointer;
      font-size: 13px;
      font-weight: 600;
    }
    .btn-primary { background: linear-gradient(135deg, var(--accent-emerald), #059669); width: 100%; margin-top: 8px; }
    .btn-secondary { background: #1c2128; border: 1px solid var(--border); }

    select, input[type="number"], input[type="range"] {
      width: 100%;
      padding: 8px 10px;
      margin: 4px 0;
      background: var(--bg-darker);
      border: 1px solid var(--border);
      border-radius: 8px;
      color: var(--text-primary);
    }
    label { display: block; margin: 8px 0 2px; font-size: 12px; color: var(--text-secondary); }
    .step-info {
      font-family: monospace;
      font-size: 13px;
      padding: 6px 10px;
      background: var(--bg-darker);
      border-left: 3px solid var(--accent-cyan);
      border-radius: 6px;
    }
    .finished-badge { background: var(--accent-emerald); color: #fff; padding: 2px 8px; border-radius: 6px; font-size: 11px; }
    table { width: 100%; font-size: 13px; }
    table td:last-child, table th { text-align: right; font-family: monospace; color: var(--accent-cyan); }
    .hint, .placeholder { font-size: 11px; color: var(--text-muted); margin-top: 8px; }
    .error-toast {
      position: fixed; bottom: 16px; right: 16px; background: #7f1d1d; color: #fff;
      padding: 10px 16px; border-radius: 8px; display: none;
    }
  </style>
</head>
<body>
  <div id="sidebar">
    <div id="mode-toggle">{{ mode_toggle|safe }}</div>
    <div id="algo-panel">{{ algo_selector|safe }}</div>
    <div id="params">{{ params|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
    <div id="grid-settings">{{ grid_settings|safe }}</div>
    <div id="analytics">{{ analytics|safe }}</div>
  </div>

  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ svg|safe }}</div>
    </div>

    <div id="bottom-panel">
      <div>
        <h3>Pseudocode</h3>
        <div id="pseudocode">{{ pseudocode|safe }}</div>
      </div>
      <div>
        <h3>Step Explanation</h3>
        <div id="explanation">{{ explanation|safe }}</div>
      </div>
      <div>
        <h3>Scores</h3>
        <div id="scores"></div>
      </div>
    </div>
  </div>
  <div id="error-toast" class="error-toast"></div>

  <script>
    let delayMs = {{ delay_ms }};
    let playing = false;
    let timer = null;
    let generation = 0;

    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      const body = await res.json();
      if (!res.ok && body.error) showError(body.error);
      return body;
    }

    function showError(msg) {
      const el = document.getElementById('error-toast');
      el.textContent = msg;
      el.style.display = 'block';
      setTimeout(() => { el.style.display = 'none'; }, 3000);
    }

    function applyStep(data) {
      if (data.svg) document.getElementById('canvas-svg').innerHTML = data.svg;
      if (data.pseudocode) document.getElementById('pseudocode').innerHTML = data.pseudocode;
      if (data.explanation) document.getElementById('explanation').innerHTML = data.explanation;
      if (data.scores !== undefined) document.getElementById('scores').innerHTML = data.scores;
      if (data.analytics) document.getElementById('analytics').innerHTML = data.analytics;
      if (data.current_step !== undefined) document.getElementById('current-step').textContent = data.current_step;
      if (data.total_steps !== undefined) document.getElementById('total-steps').textContent = data.total_steps;
    }

    function collectParams() {
      const params = {};
      document.querySelectorAll('#params .param').forEach(el => {
        params[el.dataset.param] = el.value;
      });
      return params;
    }

    // Playback: one step per delayMs until the final snapshot
    function stopPlaying() {
      playing = false;
      generation += 1;
      if (timer) clearTimeout(timer);
      timer = null;
    }

    async function playLoop() {
      if (!playing) return;
      const gen = generation;
      const data = await post('/api/step/next');
      if (gen !== generation) return;  // stopped or superseded while waiting
      if (data.error) { stopPlaying(); return; }
      applyStep(data);
      if (data.is_final) { stopPlaying(); return; }
      timer = setTimeout(playLoop, delayMs);
    }

    document.addEventListener('click', async (e) => {
      const id = e.target.id;
      if (id === 'btn-run') {
        stopPlaying();
        const data = await post('/api/run', {
          algo_key: document.getElementById('algo-selector').value,
          params: collectParams(),
        });
        if (!data.error) { applyStep(data); playing = true; playLoop(); }
      } else if (id === 'btn-next') {
        applyStep(await post('/api/step/next'));
      } else if (id === 'btn-prev') {
        applyStep(await post('/api/step/prev'));
      } else if (id === 'btn-rewind') {
        stopPlaying();
        applyStep(await post('/api/step/goto', {index: 0}));
      } else if (id === 'btn-end') {
        stopPlaying();
        applyStep(await post('/api/step/goto', {index: 'end'}));
      } else if (id === 'btn-play') {
        const data = await post('/api/step/play');
        if (playing) { stopPlaying(); } else { playing = true; playLoop(); }
      } else if (id === 'btn-clear-walls') {
        applyStep(await post('/api/grid/clear_walls'));
      } else if (id === 'btn-maze') {
        applyStep(await post('/api/grid/config', {
          size: +document.getElementById('grid-size').value,
          maze: +document.getElementById('maze-density').value,
        }));
      } else if (e.target.classList && e.target.classList.contains('cell')) {
        const cell = {x: +e.target.dataset.x, y: +e.target.dataset.y};
        if (e.shiftKey) applyStep(await post('/api/grid/config', {start: cell}));
        else if (e.altKey) applyStep(await post('/api/grid/config', {end: cell}));
        else applyStep(await post('/api/grid/toggle_wall', cell));
      }
    });

    document.addEventListener('change', async (e) => {
      const id = e.target.id;
      if (id === 'algo-selector') {
        const data = await post('/api/config/algo', {algo_key: e.target.value});
        if (data.params) document.getElementById('params').innerHTML = data.params;
        if (data.pseudocode) document.getElementById('pseudocode').innerHTML = data.pseudocode;
      } else if (id === 'speed-selector') {
        const data = await post('/api/config/speed', {speed: e.target.value});
        if (data.delay_ms !== undefined) {
          delayMs = data.delay_ms;
          document.getElementById('delay-slider').value = delayMs;
          document.getElementById('delay-val').textContent = delayMs;
        }
      } else if (id === 'delay-slider') {
        const data = await post('/api/config/speed', {delay_ms: +e.target.value});
        if (data.delay_ms !== undefined) delayMs = data.delay_ms;
      } else if (id === 'grid-size') {
        stopPlaying();
        applyStep(await post('/api/grid/config', {size: +e.target.value}));
      } else if (id === 'learning-mode-toggle') {
        await post('/api/config/mode', {learning_mode: e.target.checked});
      }
    });

    document.addEventListener('input', (e) => {
      if (e.target.id === 'delay-slider') document.getElementById('delay-val').textContent = e.target.value;
      if (e.target.id === 'maze-density') document.getElementById('maze-density-val').textContent = e.target.value;
      if (e.target.classList.contains('param')) {
        const label = document.querySelector(`.param-val[data-param="${e.target.dataset.param}"]`);
        if (label) label.textContent = e.target.value;
      }
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app = create_app()
    logger.info("Starting Flask server on http://localhost:5000")
    app.run(debug=True)
