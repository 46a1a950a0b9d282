"""
sorting.py — Sorting Visualizers
=================================
Bubble, selection, insertion, merge and quick sort as generator machines.
Every `yield` is one comparison, swap or write, so each frame shows
exactly one visually distinct change.

Highlights pushed into the snapshot:
  • compare – the two indices being compared
  • swap    – the two indices just exchanged (or the index just written)
  • sorted  – indices known to be in their final position
  • pivot   – quick sort pivot index
  • range   – [lo, hi] of the sub-array being worked on
"""

import random
import time
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence

from algorithms.base import GeneratorMachine, MachineState
from algorithms.step import SnapshotBuilder
from errors import ConfigurationError


def random_values(
    size: int = 20,
    seed: Optional[int] = None,
    low: int = 5,
    high: int = 100,
    sort: bool = False,
) -> List[int]:
    """Random integers for the bar chart."""
    if size < 1:
        raise ConfigurationError(f"array size must be positive, got {size}")
    rng = random.Random(seed)
    values = [rng.randint(low, high) for _ in range(size)]
    return sorted(values) if sort else values


# ---------------------------------------------------------------------------
# Shared base for array algorithms
# ---------------------------------------------------------------------------
class ArrayMachine(GeneratorMachine):
    """
    Attributes:
        values      : Working copy of the input; mutated in place.
        comparisons : Number of element comparisons so far.
        swaps       : Number of swaps / writes so far.
        highlights  : Indices to colour in the next snapshot.
    """

    kind = "array"

    def __init__(self, values: Sequence[float], timer: Callable[[], float] = time.perf_counter):
        super().__init__(timer=timer)
        if not values:
            raise ConfigurationError("cannot visualize an empty array")
        self.values: List[float] = list(values)
        self.comparisons: int = 0
        self.swaps: int = 0
        self.sorted_idx: set = set()
        self.highlights: Dict[str, List[int]] = {}
        self.explanation = f"Ready: {len(self.values)} element(s)."

    def _mark(self, **highlights: Any) -> None:
        self.highlights = {k: list(v) for k, v in highlights.items()}
        if self.sorted_idx:
            self.highlights["sorted"] = sorted(self.sorted_idx)

    def _swap(self, i: int, j: int) -> None:
        self.values[i], self.values[j] = self.values[j], self.values[i]
        self.swaps += 1

    def _fill_snapshot(self, sb: SnapshotBuilder) -> None:
        sb.array = self.values
        for name, idx in self.highlights.items():
            sb.highlight(name, idx)
        sb.metrics["comparisons"] = self.comparisons
        sb.metrics["swaps"] = self.swaps

    def _summary(self) -> Dict[str, Any]:
        return {
            "comparisons": self.comparisons,
            "swaps":       self.swaps,
            "array":       list(self.values),
        }

    def _terminal(self):
        self.sorted_idx = set(range(len(self.values)))
        self._mark()
        self.pseudocode_line = len(self.PSEUDOCODE) - 1
        self.explanation = (
            f"Sorted with {self.comparisons} comparison(s) and {self.swaps} swap(s)/write(s)."
        )
        return MachineState.FINISHED, {
            "finalized_count": self.step_number + 1,
            "summary": self._summary(),
        }


# ---------------------------------------------------------------------------
# Bubble sort
# ---------------------------------------------------------------------------
class BubbleSortMachine(ArrayMachine):
    key = "bubble_sort"
    PSEUDOCODE = [
        "for i in 0 .. n-2:",                     # 0
        "    swapped ← false",                    # 1
        "    for j in 0 .. n-i-2:",               # 2
        "        if a[j] > a[j+1]:",              # 3
        "            swap(a[j], a[j+1])",         # 4
        "    if not swapped: break",              # 5
        "return a",                               # 6
    ]

    def _run(self) -> Generator:
        a, n = self.values, len(self.values)
        for i in range(n - 1):
            swapped = False
            for j in range(n - i - 1):
                self.comparisons += 1
                self._mark(compare=[j, j + 1])
                yield 3, f"Compare a[{j}]={a[j]:g} with a[{j + 1}]={a[j + 1]:g}."
                if a[j] > a[j + 1]:
                    self._swap(j, j + 1)
                    swapped = True
                    self._mark(swap=[j, j + 1])
                    yield 4, f"a[{j}] > a[{j + 1}] — swap them."
            self.sorted_idx.add(n - i - 1)
            if not swapped:
                return


# ---------------------------------------------------------------------------
# Selection sort
# ---------------------------------------------------------------------------
class SelectionSortMachine(ArrayMachine):
    key = "selection_sort"
    PSEUDOCODE = [
        "for i in 0 .. n-2:",                     # 0
        "    min ← i",                            # 1
        "    for j in i+1 .. n-1:",               # 2
        "        if a[j] < a[min]: min ← j",      # 3
        "    swap(a[i], a[min])",                 # 4
        "return a",                               # 5
    ]

    def _run(self) -> Generator:
        a, n = self.values, len(self.values)
        for i in range(n - 1):
            min_idx = i
            for j in range(i + 1, n):
                self.comparisons += 1
                self._mark(compare=[min_idx, j])
                yield 3, f"Is a[{j}]={a[j]:g} smaller than the current minimum a[{min_idx}]={a[min_idx]:g}?"
                if a[j] < a[min_idx]:
                    min_idx = j
            if min_idx != i:
                self._swap(i, min_idx)
                self.sorted_idx.add(i)
                self._mark(swap=[i, min_idx])
                yield 4, f"Move the minimum {a[i]:g} into position {i}."
            else:
                self.sorted_idx.add(i)


# ---------------------------------------------------------------------------
# Insertion sort
# ---------------------------------------------------------------------------
class InsertionSortMachine(ArrayMachine):
    key = "insertion_sort"
    PSEUDOCODE = [
        "for i in 1 .. n-1:",                     # 0
        "    key ← a[i]; j ← i - 1",              # 1
        "    while j ≥ 0 and a[j] > key:",        # 2
        "        a[j+1] ← a[j]; j ← j - 1",       # 3
        "    a[j+1] ← key",                       # 4
        "return a",                               # 5
    ]

    def _run(self) -> Generator:
        a, n = self.values, len(self.values)
        for i in range(1, n):
            j = i
            while j > 0:
                self.comparisons += 1
                self._mark(compare=[j - 1, j])
                yield 2, f"Compare a[{j - 1}]={a[j - 1]:g} with the key {a[j]:g}."
                if a[j - 1] <= a[j]:
                    break
                self._swap(j - 1, j)
                self._mark(swap=[j - 1, j])
                yield 3, f"Shift {a[j]:g} right; the key moves to index {j - 1}."
                j -= 1


# ---------------------------------------------------------------------------
# Merge sort (top-down, one write per step)
# ---------------------------------------------------------------------------
class MergeSortMachine(ArrayMachine):
    key = "merge_sort"
    PSEUDOCODE = [
        "def mergesort(a, lo, hi):",              # 0
        "    if hi - lo < 1: return",             # 1
        "    mid ← (lo + hi) // 2",               # 2
        "    mergesort(a, lo, mid)",              # 3
        "    mergesort(a, mid+1, hi)",            # 4
        "    merge: compare heads",               # 5
        "    merge: write smaller head",          # 6
        "return a",                               # 7
    ]

    def _run(self) -> Generator:
        yield from self._sort(0, len(self.values) - 1)

    def _sort(self, lo: int, hi: int) -> Generator:
        if hi <= lo:
            return
        mid = (lo + hi) // 2
        yield from self._sort(lo, mid)
        yield from self._sort(mid + 1, hi)
        yield from self._merge(lo, mid, hi)

    def _merge(self, lo: int, mid: int, hi: int) -> Generator:
        a = self.values
        left, right = a[lo:mid + 1], a[mid + 1:hi + 1]
        i = j = 0
        k = lo
        while i < len(left) and j < len(right):
            self.comparisons += 1
            self._mark(compare=[lo + i, mid + 1 + j], range=[lo, hi])
            yield 5, f"Merge [{lo}..{hi}]: compare {left[i]:g} with {right[j]:g}."
            if left[i] <= right[j]:
                a[k] = left[i]
                i += 1
            else:
                a[k] = right[j]
                j += 1
            self.swaps += 1
            self._mark(swap=[k], range=[lo, hi])
            yield 6, f"Write {a[k]:g} to index {k}."
            k += 1
        for value in left[i:] + right[j:]:
            a[k] = value
            self.swaps += 1
            self._mark(swap=[k], range=[lo, hi])
            yield 6, f"Copy the remaining {value:g} to index {k}."
            k += 1


# ---------------------------------------------------------------------------
# Quick sort (Lomuto partition, last element as pivot)
# ---------------------------------------------------------------------------
class QuickSortMachine(ArrayMachine):
    key = "quick_sort"
    PSEUDOCODE = [
        "def quicksort(a, lo, hi):",              # 0
        "    if lo ≥ hi: return",                 # 1
        "    pivot ← a[hi]; i ← lo",              # 2
        "    for j in lo .. hi-1:",               # 3
        "        if a[j] < pivot:",               # 4
        "            swap(a[i], a[j]); i ← i+1",  # 5
        "    swap(a[i], a[hi])",                  # 6
        "    quicksort(a, lo, i-1); quicksort(a, i+1, hi)",  # 7
        "return a",                               # 8
    ]

    def _run(self) -> Generator:
        yield from self._sort(0, len(self.values) - 1)

    def _sort(self, lo: int, hi: int) -> Generator:
        if lo > hi:
            return
        if lo == hi:
            self.sorted_idx.add(lo)
            return
        a = self.values
        pivot = a[hi]
        i = lo
        for j in range(lo, hi):
            self.comparisons += 1
            self._mark(compare=[j, hi], pivot=[hi], range=[lo, hi])
            yield 4, f"Is a[{j}]={a[j]:g} smaller than the pivot {pivot:g}?"
            if a[j] < pivot:
                if i != j:
                    self._swap(i, j)
                    self._mark(swap=[i, j], pivot=[hi], range=[lo, hi])
                    yield 5, f"Yes — swap it into the low partition at index {i}."
                i += 1
        if i != hi:
            self._swap(i, hi)
        self.sorted_idx.add(i)
        self._mark(swap=[i, hi], pivot=[i], range=[lo, hi])
        yield 6, f"Place the pivot {pivot:g} at its final index {i}."
        yield from self._sort(lo, i - 1)
        yield from self._sort(i + 1, hi)
