"""
tape.py — Compact Run Storage
==============================
A recorded run is a list of frames.  Array, curve and point runs store
their full Snapshots.  Grid runs store the full Ready snapshot once and
then, per step, a snapshot without `cells`/`walls` plus only the cells
that changed on that step.  Frames are rebuilt on request.

Memory is O(steps × changed cells) instead of O(steps × size²).  Every
`keyframe_interval` steps the tape keeps a copy of the whole cell map so
rebuilding any frame replays at most that many deltas.

    tape = RunTape()
    tape.append(*machine.frame())
    tape[17]        # full Snapshot for step 17
    len(tape)
"""

import bisect
import dataclasses
from typing import Any, Dict, Iterator, List, Optional, Tuple

from algorithms.step import Snapshot
from grid.cell import Coord

KEYFRAME_INTERVAL = 64

CellMap = Dict[Coord, Dict[str, Any]]


class RunTape:
    """
    Attributes:
        keyframe_interval : Partial frames between two stored cell maps.
    """

    def __init__(self, keyframe_interval: int = KEYFRAME_INTERVAL):
        if keyframe_interval < 1:
            raise ValueError("keyframe_interval must be >= 1")
        self.keyframe_interval = keyframe_interval

        self._frames: List[Tuple[Snapshot, Optional[CellMap]]] = []
        self._order:  List[Coord] = []
        self._walls:  List[Coord] = []
        self._live:   Optional[CellMap] = None

        # frame index -> full cell map at that frame
        self._keyframes:   Dict[int, CellMap] = {}
        self._key_indices: List[int] = []

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------
    def append(self, snapshot: Snapshot, changed: Optional[CellMap] = None) -> None:
        """
        Add one frame.  `changed=None` means `snapshot` is complete;
        otherwise `snapshot` omits cells and walls and `changed` holds the
        cells that differ from the previous frame.
        """
        idx = len(self._frames)
        if changed is None:
            self._frames.append((snapshot, None))
            if snapshot.cells:
                self._live  = {(c["x"], c["y"]): dict(c) for c in snapshot.cells}
                self._order = list(self._live)
                self._walls = list(snapshot.walls)
                self._store_keyframe(idx)
            return

        if self._live is None:
            raise ValueError("a cell delta needs a complete grid frame before it")
        delta = {coord: dict(cell) for coord, cell in changed.items()}
        self._live.update(delta)
        self._frames.append((snapshot, delta))
        if idx - self._key_indices[-1] >= self.keyframe_interval:
            self._store_keyframe(idx)

    def _store_keyframe(self, idx: int) -> None:
        self._keyframes[idx] = dict(self._live)
        self._key_indices.append(idx)

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return [self[i] for i in range(*idx.indices(len(self._frames)))]
        if idx < 0:
            idx += len(self._frames)
        if not 0 <= idx < len(self._frames):
            raise IndexError(f"frame {idx} out of range")

        snapshot, delta = self._frames[idx]
        if delta is None:
            return snapshot

        base = self._key_indices[bisect.bisect_right(self._key_indices, idx) - 1]
        cells = dict(self._keyframes[base])
        for _, step_delta in self._frames[base + 1:idx + 1]:
            cells.update(step_delta)
        return dataclasses.replace(
            snapshot,
            cells=[dict(cells[coord]) for coord in self._order],
            walls=list(self._walls),
        )

    def __iter__(self) -> Iterator[Snapshot]:
        for idx in range(len(self._frames)):
            yield self[idx]

    def to_list(self) -> List[Dict[str, Any]]:
        """Serialisable frames; grid deltas carry only their changed cells."""
        out = []
        for snapshot, delta in self._frames:
            data = snapshot.to_dict()
            if delta is not None:
                data["delta"] = True
                data["cells"] = [dict(cell) for cell in delta.values()]
            out.append(data)
        return out
