"""
canvas.py — SVG Snapshot Renderer
==================================
Pure rendering functions: Snapshot → SVG string.

The renderer consumes:
  • snapshot   – the current Snapshot (cells / array / points, overlay data)
  • config     – visual config (canvas size, colors, fonts, …)

And produces an SVG string ready to inject into the DOM.

Design decisions:
  - NO mutation.  These functions are stateless — the caller passes in
    everything it needs and gets back a string.
  - One renderer per Snapshot.kind; render_snapshot() dispatches.
  - Cell coloring is a priority lookup: wall > start/end > current >
    best path > frontier > visited > empty.
"""

import math
from typing import Callable, Dict, List, Optional, Tuple

from algorithms.objectives import DOMAIN, get_objective
from algorithms.step import Snapshot
from grid import Grid


# ---------------------------------------------------------------------------
# Visual Config — color palette, dimensions, fonts
# ---------------------------------------------------------------------------
class CanvasConfig:
    # canvas
    width:  int = 600
    height: int = 600
    bg:     str = "#0d1117"

    # cell colors (state → fill)
    cell_colors: Dict[str, str] = {
        "empty":    "#1c2128",   # dark grey
        "wall":     "#484f58",   # slate
        "start":    "#10b981",   # emerald
        "end":      "#ec4899",   # pink
        "frontier": "#0ea5e9",   # cyan blue — open set
        "visited":  "#1e3a5f",   # muted blue — closed set
        "current":  "#06b6d4",   # bright teal
        "path":     "#a855f7",   # purple — best path
    }
    cell_gap: int = 1

    # bar colors (highlight name → fill)
    bar_colors: Dict[str, str] = {
        "default": "#30363d",
        "compare": "#f59e0b",    # amber
        "swap":    "#ef4444",    # red
        "pivot":   "#a855f7",
        "sorted":  "#10b981",
        "found":   "#ec4899",
        "checked": "#21262d",
    }
    range_fill: str = "#161b22"

    # curve / points
    curve_color:    str = "#7d8590"
    accepted_color: str = "#10b981"
    rejected_color: str = "#ef4444"
    current_color:  str = "#06b6d4"
    best_color:     str = "#ec4899"
    cluster_colors: List[str] = [
        "#0ea5e9", "#f97316", "#10b981", "#a855f7", "#ec4899",
        "#f59e0b", "#06b6d4", "#ef4444", "#84cc16", "#e6edf3",
    ]
    curve_samples:  int = 200
    margin:         int = 30

    # text
    label_color: str = "#e6edf3"
    label_size:  int = 12
    muted_text:  str = "#7d8590"


CONFIG = CanvasConfig()


# ---------------------------------------------------------------------------
# Main Render Functions
# ---------------------------------------------------------------------------
def render_snapshot(snapshot: Optional[Snapshot], config: CanvasConfig = CONFIG) -> str:
    """Return an SVG string for any Snapshot (or an empty canvas for None)."""
    if snapshot is None:
        return _svg_open(config) + "</svg>"
    renderer = _RENDERERS.get(snapshot.kind)
    if renderer is None:
        raise ValueError(f"No renderer for snapshot kind {snapshot.kind!r}")
    return renderer(snapshot, config)


def render_grid_config(grid: Grid, config: CanvasConfig = CONFIG) -> str:
    """The idle editor: walls, start and end, before any run exists."""
    cell = config.width / grid.size
    parts = [_svg_open(config)]
    for y in range(grid.size):
        for x in range(grid.size):
            coord = (x, y)
            if coord == grid.start:
                state = "start"
            elif coord == grid.end:
                state = "end"
            elif coord in grid.walls:
                state = "wall"
            else:
                state = "empty"
            parts.append(_cell_rect(x, y, cell, state, config))
    parts.append("</svg>")
    return "\n".join(parts)


def _svg_open(config: CanvasConfig) -> str:
    return (
        f'<svg width="{config.width}" height="{config.height}" '
        f'viewBox="0 0 {config.width} {config.height}" '
        f'xmlns="http://www.w3.org/2000/svg" style="background: {config.bg};">'
        f'<rect width="{config.width}" height="{config.height}" fill="{config.bg}"/>'
    )


# ---------------------------------------------------------------------------
# Grid Rendering (pathfinding)
# ---------------------------------------------------------------------------
def _cell_rect(x: int, y: int, cell: float, state: str, config: CanvasConfig, title: str = "") -> str:
    fill = config.cell_colors.get(state, config.cell_colors["empty"])
    gap = config.cell_gap
    tooltip = f"<title>{title}</title>" if title else ""
    return (
        f'<rect class="cell {state}" data-x="{x}" data-y="{y}" '
        f'x="{x * cell + gap:.2f}" y="{y * cell + gap:.2f}" '
        f'width="{max(cell - 2 * gap, 1):.2f}" height="{max(cell - 2 * gap, 1):.2f}" '
        f'fill="{fill}">{tooltip}</rect>'
    )


def _grid_size(snapshot: Snapshot) -> int:
    size = snapshot.overlay.get("size")
    if size:
        return int(size)
    return max(1, math.isqrt(len(snapshot.cells)))


def _render_grid(snapshot: Snapshot, config: CanvasConfig) -> str:
    size = _grid_size(snapshot)
    cell = config.width / size
    walls = {tuple(w) for w in snapshot.walls}
    frontier = {tuple(c) for c in snapshot.frontier}
    current = tuple(snapshot.current) if snapshot.current is not None else None

    parts = [_svg_open(config)]
    for c in snapshot.cells:
        coord = (c["x"], c["y"])
        if coord in walls:
            state = "wall"
        elif coord == snapshot.start:
            state = "start"
        elif coord == snapshot.end:
            state = "end"
        elif coord == current:
            state = "current"
        elif c["on_best_path"]:
            state = "path"
        elif coord in frontier:
            state = "frontier"
        elif c["visited"]:
            state = "visited"
        else:
            state = "empty"
        title = ""
        if c["g"] is not None:
            title = f"({coord[0]},{coord[1]}) g={c['g']:g} h={c['h']:g} f={c['f']:g}"
        parts.append(_cell_rect(coord[0], coord[1], cell, state, config, title))

    # best path polyline on top
    if len(snapshot.path) > 1:
        pts = " ".join(f"{(x + 0.5) * cell:.2f},{(y + 0.5) * cell:.2f}" for x, y in snapshot.path)
        parts.append(
            f'<polyline points="{pts}" fill="none" stroke="{config.cell_colors["path"]}" '
            f'stroke-width="{max(cell / 5, 2):.2f}" stroke-linecap="round" opacity="0.8"/>'
        )
    parts.append("</svg>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Array Rendering (sorting / searching)
# ---------------------------------------------------------------------------
def _bar_state(i: int, highlights: Dict[str, List[int]]) -> str:
    for name in ("swap", "compare", "found", "pivot", "sorted", "checked"):
        if i in highlights.get(name, ()):
            return name
    return "default"


def _render_array(snapshot: Snapshot, config: CanvasConfig) -> str:
    values = snapshot.array
    parts = [_svg_open(config)]
    if not values:
        parts.append("</svg>")
        return "\n".join(parts)

    m = config.margin
    usable_w = config.width - 2 * m
    usable_h = config.height - 2 * m
    bar_w = usable_w / len(values)
    top = max(max(values), 1)

    # active sub-range (merge / quick sort, binary search)
    rng = snapshot.highlights.get("range")
    if rng and len(rng) == 2:
        lo, hi = rng
        parts.append(
            f'<rect class="range" x="{m + lo * bar_w:.2f}" y="{m}" '
            f'width="{(hi - lo + 1) * bar_w:.2f}" height="{usable_h}" fill="{config.range_fill}"/>'
        )

    for i, v in enumerate(values):
        h = usable_h * v / top
        state = _bar_state(i, snapshot.highlights)
        fill = config.bar_colors.get(state, config.bar_colors["default"])
        parts.append(
            f'<rect class="bar {state}" data-index="{i}" x="{m + i * bar_w + 1:.2f}" '
            f'y="{m + usable_h - h:.2f}" width="{max(bar_w - 2, 1):.2f}" height="{h:.2f}" fill="{fill}">'
            f'<title>[{i}] = {v:g}</title></rect>'
        )
        if bar_w >= 18:
            parts.append(
                f'<text x="{m + (i + 0.5) * bar_w:.2f}" y="{m + usable_h - h - 4:.2f}" '
                f'text-anchor="middle" font-size="{config.label_size - 2}" '
                f'fill="{config.muted_text}">{v:g}</text>'
            )

    target = snapshot.overlay.get("target")
    if target is not None:
        parts.append(
            f'<text x="{m}" y="{m - 10}" font-size="{config.label_size}" '
            f'fill="{config.label_color}">target = {target:g}</text>'
        )
    parts.append("</svg>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Curve Rendering (hill climbing, annealing, GA, PSO)
# ---------------------------------------------------------------------------
def _curve_mapper(f: Callable[[float], float], config: CanvasConfig) -> Tuple[Callable, List[Tuple[float, float]]]:
    lo, hi = DOMAIN
    n = config.curve_samples
    samples = [(lo + (hi - lo) * i / n, 0.0) for i in range(n + 1)]
    samples = [(x, f(x)) for x, _ in samples]
    y_min = min(y for _, y in samples)
    y_max = max(y for _, y in samples)
    span = (y_max - y_min) or 1.0
    m = config.margin

    def to_px(x: float, y: float) -> Tuple[float, float]:
        px = m + (x - lo) / (hi - lo) * (config.width - 2 * m)
        py = config.height - m - (y - y_min) / span * (config.height - 2 * m)
        return px, py

    return to_px, samples


def _render_curve(snapshot: Snapshot, config: CanvasConfig) -> str:
    f = get_objective(snapshot.overlay.get("function", "quadratic"))
    to_px, samples = _curve_mapper(f, config)

    parts = [_svg_open(config)]
    pts = " ".join("{:.2f},{:.2f}".format(*to_px(x, y)) for x, y in samples)
    parts.append(f'<polyline class="objective" points="{pts}" fill="none" stroke="{config.curve_color}" stroke-width="2"/>')

    for p in snapshot.points:
        px, py = to_px(p["x"], p["y"])
        color = config.accepted_color if p.get("accepted", True) else config.rejected_color
        parts.append(f'<circle class="sample" cx="{px:.2f}" cy="{py:.2f}" r="3" fill="{color}" opacity="0.7"/>')

    best = snapshot.overlay.get("best")
    if best and math.isfinite(best["y"]):
        px, py = to_px(best["x"], best["y"])
        parts.append(f'<circle class="best" cx="{px:.2f}" cy="{py:.2f}" r="7" fill="none" stroke="{config.best_color}" stroke-width="2"/>')

    if isinstance(snapshot.current, dict):
        px, py = to_px(snapshot.current["x"], snapshot.current["y"])
        parts.append(f'<circle class="current" cx="{px:.2f}" cy="{py:.2f}" r="6" fill="{config.current_color}"/>')

    ratio = snapshot.overlay.get("temperature_ratio")
    if ratio is not None:
        # temperature gauge, top-right
        w = 120
        x0 = config.width - config.margin - w
        parts.append(f'<rect x="{x0}" y="10" width="{w}" height="8" fill="#21262d" rx="4"/>')
        parts.append(f'<rect class="temperature" x="{x0}" y="10" width="{w * ratio:.2f}" height="8" fill="#f97316" rx="4"/>')
        parts.append(
            f'<text x="{x0}" y="32" font-size="{config.label_size - 1}" fill="{config.muted_text}">'
            f'T = {snapshot.overlay.get("temperature", 0):.3f}</text>'
        )
    parts.append("</svg>")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Points Rendering (k-means)
# ---------------------------------------------------------------------------
def _render_points(snapshot: Snapshot, config: CanvasConfig) -> str:
    m = config.margin
    scale_x = (config.width - 2 * m) / 100.0
    scale_y = (config.height - 2 * m) / 100.0
    palette = config.cluster_colors

    parts = [_svg_open(config)]
    for p in snapshot.points:
        cluster = p.get("cluster", -1)
        color = palette[cluster % len(palette)] if cluster >= 0 else config.curve_color
        parts.append(
            f'<circle class="point" cx="{m + p["x"] * scale_x:.2f}" cy="{m + p["y"] * scale_y:.2f}" '
            f'r="4" fill="{color}"/>'
        )
    for c in snapshot.overlay.get("centroids", []):
        cx, cy = m + c["x"] * scale_x, m + c["y"] * scale_y
        color = palette[c["cluster"] % len(palette)]
        parts.append(
            f'<g class="centroid"><line x1="{cx - 8:.2f}" y1="{cy - 8:.2f}" x2="{cx + 8:.2f}" y2="{cy + 8:.2f}" '
            f'stroke="{color}" stroke-width="3"/><line x1="{cx - 8:.2f}" y1="{cy + 8:.2f}" '
            f'x2="{cx + 8:.2f}" y2="{cy - 8:.2f}" stroke="{color}" stroke-width="3"/></g>'
        )
    parts.append("</svg>")
    return "\n".join(parts)


_RENDERERS: Dict[str, Callable[[Snapshot, CanvasConfig], str]] = {
    "grid":   _render_grid,
    "array":  _render_array,
    "curve":  _render_curve,
    "points": _render_points,
}
