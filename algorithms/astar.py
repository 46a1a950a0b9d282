"""
astar.py — A* Grid Pathfinding
===============================
State-machine A* over a square grid with 4-directional unit-cost moves.

Each advance() finalizes exactly one frontier cell:
  1. frontier empty            → EXHAUSTED, empty path
  2. pop min-f cell (first inserted wins ties)
  3. mark visited, finalized_count += 1
  4. cell is the goal          → FOUND, reconstruct + mark best path
  5. otherwise relax up/right/down/left neighbours that are in bounds,
     not walls and not visited; insert-if-absent into the frontier

Heuristics (both admissible and consistent on a 4-connected unit grid):
  • manhattan – |Δx| + |Δy|
  • zero      – h = 0, A* degrades to Dijkstra.  Useful for teaching.

The grid configuration is copied at construction, so moving the start,
end or walls while a run is in flight only affects the next run.

frame() hands a RunTape only the cells touched since the previous frame,
so recording a 50×50 run costs a few cells per step, not the whole field.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from algorithms.base import AlgorithmMachine, MachineState
from algorithms.frontier import Frontier
from algorithms.step import Snapshot, SnapshotBuilder, StepOutcome
from errors import ConfigurationError, InvariantViolation
from grid import Cell, Coord, Grid


# ---------------------------------------------------------------------------
# Built-in heuristics  (all take two Cells, return float)
# ---------------------------------------------------------------------------
def manhattan(a: Cell, b: Cell) -> float:
    return abs(a.x - b.x) + abs(a.y - b.y)

def zero(a: Cell, b: Cell) -> float:
    return 0.0

HEURISTICS: Dict[str, Callable[[Cell, Cell], float]] = {
    "manhattan": manhattan,
    "zero":      zero,
}

EDGE_COST = 1


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def AStar(grid, start, goal):",                # 0
    "    g[start] ← 0; f[start] ← h(start)",         # 1
    "    open ← [start]",                            # 2
    "    while open is not empty:",                  # 3
    "        cur ← open.pop_min_f()",                # 4
    "        cur.visited ← true",                    # 5
    "        if cur == goal: return path(cur)",      # 6
    "        for nbr in neighbours(cur):",           # 7
    "            if nbr.visited: continue",          # 8
    "            tentative ← g[cur] + 1",            # 9
    "            if tentative < g[nbr]:",            # 10
    "                parent[nbr] ← cur",             # 11
    "                g[nbr] ← tentative",            # 12
    "                f[nbr] ← g[nbr] + h(nbr)",      # 13
    "                open.add_if_absent(nbr)",       # 14
    "    return NOT FOUND",                          # 15
]


# ---------------------------------------------------------------------------
# Machine
# ---------------------------------------------------------------------------
class AStarMachine(AlgorithmMachine):
    """
    Attributes:
        grid            : Private copy of the configuration captured at Ready.
        cells           : cells[y][x], owned by this run.
        frontier        : Open set.
        finalized_count : Cells removed from the frontier so far.
        path            : Start → goal cells once FOUND.
    """

    key        = "astar"
    kind       = "grid"
    PSEUDOCODE = PSEUDOCODE

    def __init__(
        self,
        grid: Grid,
        heuristic: str = "manhattan",
        timer: Callable[[], float] = time.perf_counter,
    ):
        super().__init__(timer=timer)
        if heuristic not in HEURISTICS:
            raise ConfigurationError(
                f"Unknown heuristic {heuristic!r}; choose one of {sorted(HEURISTICS)}"
            )
        grid.validate()
        self.grid: Grid = grid.copy()
        self.heuristic_name = heuristic
        self._h = HEURISTICS[heuristic]

        self.cells: List[List[Cell]] = self.grid.build_cells()
        self.start: Cell = self.cell_at(self.grid.start)
        self.goal:  Cell = self.cell_at(self.grid.end)
        self.frontier = Frontier()
        self.finalized_count: int = 0
        self.current: Optional[Cell] = None
        self.path: List[Cell] = []

        # cells touched since the last frame()
        self._changed: Set[Coord] = set()
        self._framed = False

        self.start.g = 0
        self.start.h = self._h(self.start, self.goal)
        self.start.f = self.start.h
        self.frontier.insert(self.start)

        self.pseudocode_line = 2
        self.explanation = (
            f"Ready: g(start)=0, h(start)={self.start.h:g} ({heuristic}), "
            f"f(start)={self.start.f:g}. The open set holds only the start cell."
        )

    def cell_at(self, coord: Coord) -> Cell:
        x, y = coord
        return self.cells[y][x]

    # ------------------------------------------------------------------
    # Transition
    # ------------------------------------------------------------------
    def _advance(self) -> StepOutcome:
        # -- 1. exhausted --
        if not self.frontier:
            self.current = None
            self.pseudocode_line = 15
            self.explanation = (
                f"Open set empty after finalizing {self.finalized_count} cell(s). "
                f"The goal {self.goal.coord} is not reachable."
            )
            return self._finish(MachineState.EXHAUSTED, finalized_count=self.finalized_count)

        # -- 2-3. finalize the best cell --
        cur = self.frontier.pop_min()
        if cur.visited:
            raise InvariantViolation(f"cell {cur.coord} was finalized twice")
        cur.visited = True
        self._changed.add(cur.coord)
        self.finalized_count += 1
        self.current = cur

        # -- 4. goal check --
        if cur is self.goal:
            self.path = self._reconstruct(cur)
            for cell in self.path:
                cell.on_best_path = True
                self._changed.add(cell.coord)
            self.pseudocode_line = 6
            self.explanation = (
                f"Goal {cur.coord} reached! Shortest path has {len(self.path)} cell(s) "
                f"({len(self.path) - 1} move(s)); {self.finalized_count} cell(s) finalized."
            )
            return self._finish(
                MachineState.FOUND,
                path=[c.coord for c in self.path],
                finalized_count=self.finalized_count,
            )

        # -- 5. relax neighbours --
        updated = []
        for coord in self.grid.neighbours(cur.coord):
            nbr = self.cell_at(coord)
            if nbr.visited:
                continue
            tentative_g = cur.g + EDGE_COST
            if tentative_g <= cur.g:
                raise InvariantViolation(f"non-positive step cost from {cur.coord} to {coord}")
            if tentative_g < nbr.g:
                nbr.predecessor = cur
                nbr.g = tentative_g
                nbr.h = self._h(nbr, self.goal)
                nbr.f = nbr.g + nbr.h
                self.frontier.insert(nbr)
                self._changed.add(coord)
                updated.append(coord)

        # -- 6. in progress --
        self.pseudocode_line = 14 if updated else 7
        self.explanation = (
            f"Finalize {cur.coord}: g={cur.g:g}, h={cur.h:g}, f={cur.f:g}. "
            + (
                f"Updated {len(updated)} neighbour(s): {', '.join(map(str, updated))}."
                if updated else
                "No neighbour improved."
            )
        )
        return StepOutcome.in_progress()

    def _reconstruct(self, cell: Cell) -> List[Cell]:
        path: List[Cell] = []
        limit = self.grid.size * self.grid.size
        cur: Optional[Cell] = cell
        while cur is not None:
            path.append(cur)
            if len(path) > limit:
                raise InvariantViolation(f"cycle in predecessor chain from {cell.coord}")
            cur = cur.predecessor
        path.reverse()
        if path[0] is not self.start:
            raise InvariantViolation(f"predecessor chain of {cell.coord} does not reach the start")
        return path

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        sb.cells = [cell.to_dict() for row in self.cells for cell in row]
        sb.walls = list(self.grid.walls)
        self._fill_header(sb)

    def _fill_header(self, sb: SnapshotBuilder) -> None:
        sb.start    = self.grid.start
        sb.end      = self.grid.end
        sb.frontier = self.frontier.coords()
        sb.current  = self.current.coord if self.current else None
        sb.set_path([c.coord for c in self.path])
        sb.overlay["heuristic"] = self.heuristic_name
        sb.overlay["size"] = self.grid.size
        sb.metrics["finalized"] = self.finalized_count
        sb.metrics["frontier_size"] = len(self.frontier)

    def frame(self) -> Tuple[Snapshot, Optional[Dict[Coord, Dict[str, Any]]]]:
        # first frame is complete, later ones carry only the touched cells
        if not self._framed:
            self._framed = True
            self._changed.clear()
            return self.snapshot(), None
        sb = self._builder()
        self._fill_header(sb)
        changed = {coord: self.cell_at(coord).to_dict() for coord in sorted(self._changed)}
        self._changed.clear()
        return sb.build(step_number=self.step_number, is_final=self.is_terminal), changed
