import pytest

from algorithms.frontier import Frontier
from grid import Cell


def _cell(x, f):
    c = Cell(x, 0)
    c.f = f
    return c


def test_insert_is_by_identity_and_idempotent():
    fr = Frontier()
    a = _cell(0, 1)
    twin = _cell(0, 1)
    assert fr.insert(a) is True
    assert fr.insert(a) is False
    assert fr.insert(twin) is True
    assert len(fr) == 2
    assert a in fr


def test_pop_min_prefers_the_earliest_on_ties():
    fr = Frontier()
    first, second, third = _cell(0, 4), _cell(1, 4), _cell(2, 6)
    for c in (third, first, second):
        fr.insert(c)
    assert fr.pop_min() is first
    assert fr.pop_min() is second
    assert fr.pop_min() is third
    assert not fr


def test_pop_min_sees_scores_lowered_after_insertion():
    fr = Frontier()
    a, b = _cell(0, 5), _cell(1, 3)
    fr.insert(a)
    fr.insert(b)
    a.f = 2
    assert fr.pop_min() is a


def test_coords_keep_insertion_order():
    fr = Frontier()
    for x in (3, 1, 2):
        fr.insert(_cell(x, x))
    assert fr.coords() == [(3, 0), (1, 0), (2, 0)]


def test_pop_from_empty_raises():
    with pytest.raises(IndexError):
        Frontier().pop_min()
