import math

import pytest

from algorithms.searching import BinarySearchMachine, LinearSearchMachine
from errors import ConfigurationError


def test_linear_search_finds_the_first_occurrence(drive):
    snapshots, result = drive(LinearSearchMachine([4, 8, 15, 8, 23], target=8))
    assert result.status == "found"
    assert result.found
    assert result.summary["index"] == 1
    assert result.summary["comparisons"] == 2
    assert snapshots[-1].highlights["found"] == [1]


def test_linear_search_miss_is_a_result_not_an_error(drive):
    _, result = drive(LinearSearchMachine([1, 2, 3], target=9))
    assert result.status == "exhausted"
    assert result.summary["index"] == -1
    assert result.summary["comparisons"] == 3


def test_default_target_is_always_present(drive):
    values = [9, 3, 7, 1, 5]
    _, result = drive(LinearSearchMachine(values))
    assert result.found
    assert values[result.summary["index"]] == result.summary["target"]


def test_binary_search_finds_the_target(drive):
    values = list(range(0, 64, 2))
    snapshots, result = drive(BinarySearchMachine(values, target=42))
    assert result.status == "found"
    assert values[result.summary["index"]] == 42
    assert result.summary["comparisons"] <= math.ceil(math.log2(len(values) + 1))
    lo, hi = snapshots[0].highlights["range"]
    assert (lo, hi) == (0, len(values) - 1)


def test_binary_search_miss(drive):
    values = [1, 3, 5, 7, 9, 11, 13]
    _, result = drive(BinarySearchMachine(values, target=6))
    assert result.status == "exhausted"
    assert result.summary["index"] == -1
    assert result.summary["comparisons"] <= 3


def test_binary_search_needs_sorted_input():
    with pytest.raises(ConfigurationError):
        BinarySearchMachine([3, 1, 2], target=1)
