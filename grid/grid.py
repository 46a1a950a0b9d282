"""
grid.py — Grid Configuration & Cell Field
==========================================
Single source of truth for the pathfinding board the user edits:
size, start, end and the wall set.

Responsibilities:
  1. Validation                       (bounds, start/end never on a wall)
  2. Editing                          (toggle walls, move start/end, resize)
  3. Adjacency queries                (4-neighbours, fixed order)
  4. Cell-field factory               (fresh Cells for every run)
  5. Serialisation round-trip         (to_dict / from_dict)

Design decisions:
  - Walls are a set of coordinates; membership is checked, never owned.
    Wall positions still get Cells, they are just skipped by neighbours().
  - The Grid holds no per-run state.  A run asks for build_cells() and
    owns the result, so editing the Grid mid-run never leaks into the
    in-flight search.
"""

import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Set

from errors import ConfigurationError
from grid.cell import Cell, Coord

logger = logging.getLogger(__name__)


# up, right, down, left; expansion order must not change between runs
DIRECTIONS: List[Coord] = [(0, -1), (1, 0), (0, 1), (-1, 0)]


class Grid:
    """
    Attributes:
        size   : Width and height (the board is square).
        start  : (x, y) of the start marker.
        end    : (x, y) of the goal marker.
        walls  : Set of blocked (x, y) coordinates, disjoint from start/end.
    """

    def __init__(
        self,
        size: int = 20,
        start: Coord = (0, 0),
        end: Optional[Coord] = None,
        walls: Optional[Iterable[Coord]] = None,
    ):
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise ConfigurationError(f"Grid size must be a positive integer, got {size!r}")
        self.size: int = size
        self.start: Coord = _as_coord(start, "start")
        self.end: Coord = _as_coord(end if end is not None else (size - 1, size - 1), "end")
        self.walls: Set[Coord] = {_as_coord(w, "wall") for w in (walls or ())}
        self.validate()

    # ==================================================================
    # VALIDATION
    # ==================================================================
    def validate(self) -> None:
        """Raise ConfigurationError unless the configuration can start a run."""
        for name, coord in (("start", self.start), ("end", self.end)):
            if not self.in_bounds(coord):
                raise ConfigurationError(
                    f"{name} {coord} is outside the {self.size}x{self.size} grid"
                )
            if coord in self.walls:
                raise ConfigurationError(f"{name} {coord} sits on a wall")
        for wall in self.walls:
            if not self.in_bounds(wall):
                raise ConfigurationError(
                    f"wall {wall} is outside the {self.size}x{self.size} grid"
                )

    # ==================================================================
    # QUERIES
    # ==================================================================
    def in_bounds(self, coord: Coord) -> bool:
        x, y = coord
        return 0 <= x < self.size and 0 <= y < self.size

    def is_wall(self, coord: Coord) -> bool:
        return coord in self.walls

    def neighbours(self, coord: Coord) -> List[Coord]:
        """In-bounds, non-wall orthogonal neighbours in up/right/down/left order."""
        x, y = coord
        result = []
        for dx, dy in DIRECTIONS:
            nbr = (x + dx, y + dy)
            if self.in_bounds(nbr) and nbr not in self.walls:
                result.append(nbr)
        return result

    # ==================================================================
    # EDITING
    # ==================================================================
    def toggle_wall(self, coord: Coord) -> bool:
        """Flip a wall.  Start/end can't be walled: returns False and does nothing."""
        coord = _as_coord(coord, "wall")
        if not self.in_bounds(coord):
            raise ConfigurationError(f"wall {coord} is outside the {self.size}x{self.size} grid")
        if coord == self.start or coord == self.end:
            return False
        if coord in self.walls:
            self.walls.discard(coord)
        else:
            self.walls.add(coord)
        return True

    def set_start(self, coord: Coord) -> None:
        self.start = self._checked_marker(coord, "start")

    def set_end(self, coord: Coord) -> None:
        self.end = self._checked_marker(coord, "end")

    def clear_walls(self) -> None:
        self.walls.clear()

    def resize(self, size: int) -> None:
        """New dimensions; clears walls and pulls start/end back onto the board."""
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise ConfigurationError(f"Grid size must be a positive integer, got {size!r}")
        last = size - 1
        self.size = size
        self.walls.clear()
        self.start = (min(self.start[0], last), min(self.start[1], last))
        self.end = (min(self.end[0], last), min(self.end[1], last))
        logger.info("Grid resized to %dx%d (start=%s, end=%s)", size, size, self.start, self.end)

    def _checked_marker(self, coord: Coord, name: str) -> Coord:
        coord = _as_coord(coord, name)
        if not self.in_bounds(coord):
            raise ConfigurationError(f"{name} {coord} is outside the {self.size}x{self.size} grid")
        if coord in self.walls:
            raise ConfigurationError(f"{name} {coord} sits on a wall")
        return coord

    # ==================================================================
    # CELL FIELD
    # ==================================================================
    def build_cells(self) -> List[List[Cell]]:
        """Fresh cells[y][x] with every score reset."""
        return [[Cell(x, y) for x in range(self.size)] for y in range(self.size)]

    def copy(self) -> "Grid":
        return Grid(size=self.size, start=self.start, end=self.end, walls=set(self.walls))

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> Dict[str, Any]:
        return {
            "size":  self.size,
            "start": list(self.start),
            "end":   list(self.end),
            "walls": [list(w) for w in sorted(self.walls)],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Grid":
        """Accepts both `size` and the `gridSize` spelling used by the web UI."""
        size = data.get("size", data.get("gridSize", data.get("grid_size", 20)))
        if isinstance(size, str) and size.isdigit():
            size = int(size)
        return cls(
            size=size,
            start=data.get("start", (0, 0)),
            end=data.get("end"),
            walls=data.get("walls", ()),
        )

    # ==================================================================
    # GENERATORS
    # ==================================================================
    @classmethod
    def generate_maze(
        cls,
        size: int = 20,
        wall_prob: float = 0.25,
        start: Coord = (0, 0),
        end: Optional[Coord] = None,
        seed: Optional[int] = None,
    ) -> "Grid":
        """Random walls with probability `wall_prob`, never on start/end."""
        if not 0.0 <= wall_prob <= 1.0:
            raise ConfigurationError(f"wall_prob must be in [0, 1], got {wall_prob}")
        rng = random.Random(seed)
        g = cls(size=size, start=start, end=end)
        for y in range(size):
            for x in range(size):
                if (x, y) in (g.start, g.end):
                    continue
                if rng.random() < wall_prob:
                    g.walls.add((x, y))
        return g

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Grid(size={self.size}, start={self.start}, end={self.end}, walls={len(self.walls)})"

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, Grid)
            and self.size == other.size
            and self.start == other.start
            and self.end == other.end
            and self.walls == other.walls
        )


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------
def _as_coord(value: Any, name: str) -> Coord:
    """Accept (x, y), [x, y], {"x": .., "y": ..} or "x,y"."""
    if isinstance(value, dict):
        value = (value.get("x"), value.get("y"))
    elif isinstance(value, str):
        value = tuple(part.strip() for part in value.split(","))
    try:
        x, y = value
        if isinstance(x, bool) or isinstance(y, bool):
            raise TypeError
        if isinstance(x, float) and not x.is_integer():
            raise ValueError
        if isinstance(y, float) and not y.is_integer():
            raise ValueError
        return (int(x), int(y))
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an (x, y) pair of integers, got {value!r}")
