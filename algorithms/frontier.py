"""
frontier.py — A* Open Set
==========================
Insert-if-absent collection of not-yet-finalized cells.

pop_min() scans linearly and returns the FIRST cell with the smallest f,
i.e. ties go to whichever cell has been waiting longest.  Scores of
queued cells can drop after insertion (re-relaxation), so a heap keyed at
push time could break ties differently; the scan keeps ties in
insertion order.
"""

from typing import Iterator, List, Set

from grid.cell import Cell, Coord


class Frontier:

    def __init__(self):
        self._cells:   List[Cell] = []
        self._members: Set[int]   = set()   # id(cell); membership is by identity

    def insert(self, cell: Cell) -> bool:
        """Append `cell` unless it is already queued.  Returns True if added."""
        if id(cell) in self._members:
            return False
        self._cells.append(cell)
        self._members.add(id(cell))
        return True

    def pop_min(self) -> Cell:
        if not self._cells:
            raise IndexError("pop_min() from an empty frontier")
        best_idx = 0
        for i in range(1, len(self._cells)):
            if self._cells[i].f < self._cells[best_idx].f:
                best_idx = i
        cell = self._cells.pop(best_idx)
        self._members.discard(id(cell))
        return cell

    def coords(self) -> List[Coord]:
        return [c.coord for c in self._cells]

    def __contains__(self, cell: Cell) -> bool:
        return id(cell) in self._members

    def __len__(self) -> int:
        return len(self._cells)

    def __bool__(self) -> bool:
        return bool(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(list(self._cells))
