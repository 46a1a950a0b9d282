"""
searching.py — Linear & Binary Search
======================================
Both machines take the array and the value to look for.  One comparison
per step.  Finding the target ends in FOUND (summary["index"] is its
position); running out of candidates ends in EXHAUSTED with index -1,
which is a normal result, not an error.
"""

import time
from typing import Callable, Generator, Optional, Sequence

from algorithms.base import MachineState
from algorithms.sorting import ArrayMachine
from errors import ConfigurationError


class _SearchMachine(ArrayMachine):

    def __init__(
        self,
        values: Sequence[float],
        target: Optional[float] = None,
        timer: Callable[[], float] = time.perf_counter,
    ):
        super().__init__(values, timer=timer)
        # default target: the middle element, so the demo always has a hit
        self.target = self.values[len(self.values) // 2] if target is None else target
        self.found_index: int = -1
        self.explanation = f"Ready: looking for {self.target:g} in {len(self.values)} element(s)."

    def _fill_snapshot(self, sb) -> None:
        super()._fill_snapshot(sb)
        sb.overlay["target"] = self.target
        sb.metrics["found_index"] = self.found_index

    def _terminal(self):
        found = self.found_index >= 0
        if not found:
            self.pseudocode_line = len(self.PSEUDOCODE) - 1
        if found:
            self._mark(found=[self.found_index])
            self.explanation = (
                f"Found {self.target:g} at index {self.found_index} "
                f"after {self.comparisons} comparison(s)."
            )
        else:
            self._mark()
            self.explanation = f"{self.target:g} is not in the array ({self.comparisons} comparison(s))."
        return (MachineState.FOUND if found else MachineState.EXHAUSTED), {
            "finalized_count": self.comparisons,
            "summary": {
                "index":       self.found_index,
                "target":      self.target,
                "comparisons": self.comparisons,
            },
        }


# ---------------------------------------------------------------------------
# Linear search
# ---------------------------------------------------------------------------
class LinearSearchMachine(_SearchMachine):
    key = "linear_search"
    PSEUDOCODE = [
        "for i in 0 .. n-1:",                     # 0
        "    if a[i] == target: return i",        # 1
        "return NOT FOUND",                       # 2
    ]

    def _run(self) -> Generator:
        for i, value in enumerate(self.values):
            self.comparisons += 1
            self._mark(compare=[i], checked=range(i))
            if value == self.target:
                self.found_index = i
                yield 1, f"a[{i}]={value:g} equals the target — found it."
                return
            yield 1, f"a[{i}]={value:g} is not {self.target:g}; move on."


# ---------------------------------------------------------------------------
# Binary search
# ---------------------------------------------------------------------------
class BinarySearchMachine(_SearchMachine):
    key = "binary_search"
    PSEUDOCODE = [
        "lo ← 0; hi ← n-1",                        # 0
        "while lo ≤ hi:",                          # 1
        "    mid ← (lo + hi) // 2",                # 2
        "    if a[mid] == target: return mid",     # 3
        "    if a[mid] < target: lo ← mid + 1",    # 4
        "    else: hi ← mid - 1",                  # 5
        "return NOT FOUND",                        # 6
    ]

    def __init__(self, values, target=None, timer=time.perf_counter):
        if any(values[i] > values[i + 1] for i in range(len(values) - 1)):
            raise ConfigurationError("binary search needs the array sorted in ascending order")
        super().__init__(values, target=target, timer=timer)

    def _run(self) -> Generator:
        a = self.values
        lo, hi = 0, len(a) - 1
        while lo <= hi:
            mid = (lo + hi) // 2
            self.comparisons += 1
            self._mark(compare=[mid], range=[lo, hi])
            if a[mid] == self.target:
                self.found_index = mid
                yield 3, f"a[{mid}]={a[mid]:g} equals the target — found it."
                return
            if a[mid] < self.target:
                yield 4, f"a[{mid}]={a[mid]:g} < {self.target:g}: discard the left half."
                lo = mid + 1
            else:
                yield 5, f"a[{mid}]={a[mid]:g} > {self.target:g}: discard the right half."
                hi = mid - 1
