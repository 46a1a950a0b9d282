from typing import Optional, Tuple, Dict, Any


Coord = Tuple[int, int]   # (column x, row y)

INF = float("inf")


# ---------------------------------------------------------------------------
# Cell
# ---------------------------------------------------------------------------
class Cell:
    """
    One traversable-or-blocked position on the grid.

    Attributes:
        x, y         : Column / row, fixed for the cell's lifetime.
        g            : Cost of the best known path from start (inf = unknown).
        h            : Heuristic estimate of the remaining cost to the goal.
        f            : g + h — drives frontier selection.
        predecessor  : Cell the best known path arrives from (a back-reference,
                       not an ownership edge), or None.
        visited      : True once the cell has been finalized.
        on_best_path : Set only during path reconstruction, for rendering.
    """

    __slots__ = ("_x", "_y", "g", "h", "f", "predecessor", "visited", "on_best_path")

    def __init__(self, x: int, y: int):
        self._x: int = x
        self._y: int = y
        self.reset()

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def coord(self) -> Coord:
        return (self._x, self._y)

    def reset(self) -> None:
        """Wipe algorithm state back to defaults — called before every run."""
        self.g: float                   = INF
        self.h: float                   = 0.0
        self.f: float                   = INF
        self.predecessor: Optional[Cell] = None
        self.visited: bool              = False
        self.on_best_path: bool         = False

    # ------------------------------------------------------------------
    # Serialisation (JSON has no Infinity, so unknown scores become None)
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "x":            self._x,
            "y":            self._y,
            "g":            _finite_or_none(self.g),
            "h":            _finite_or_none(self.h),
            "f":            _finite_or_none(self.f),
            "visited":      self.visited,
            "on_best_path": self.on_best_path,
        }

    def __repr__(self) -> str:
        return f"Cell(x={self._x}, y={self._y}, g={self.g}, f={self.f}, visited={self.visited})"


def _finite_or_none(value: float) -> Optional[float]:
    return None if value == INF else value
