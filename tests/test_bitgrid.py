import numpy as np
import pytest

from minesweeper_predictor import BitGrid


def test_empty_grid_has_no_positions():
    grid = BitGrid.empty(4, 3)
    assert grid.shape == (4, 3)
    assert grid.cardinality() == 0
    assert grid.is_empty()
    assert list(grid.positions()) == []


def test_set_and_get():
    grid = BitGrid.empty(4, 3)
    grid.set((2, 3), True)
    grid.set((0, 1))
    assert grid.get((2, 3))
    assert grid[(0, 1)]
    assert not grid.get((1, 1))
    assert grid.cardinality() == 2

    grid.set((2, 3), False)
    assert not grid.get((2, 3))
    assert len(grid) == 1


def test_positions_are_row_major_and_restartable():
    grid = BitGrid.from_positions(3, 3, [(2, 0), (0, 2), (1, 1)])
    assert list(grid.positions()) == [(0, 2), (1, 1), (2, 0)]
    # A second call starts over
    assert list(grid.positions()) == [(0, 2), (1, 1), (2, 0)]
    assert all(isinstance(v, int) for pos in grid for v in pos)


def test_and_or_not():
    a = BitGrid.from_positions(3, 1, [(0, 0), (0, 1)])
    b = BitGrid.from_positions(3, 1, [(0, 1), (0, 2)])

    assert list((a & b).positions()) == [(0, 1)]
    assert list((a | b).positions()) == [(0, 0), (0, 1), (0, 2)]
    assert list((~a).positions()) == [(0, 2)]
    assert list(a.and_(b.not_()).positions()) == [(0, 0)]


def test_operations_return_new_grids():
    a = BitGrid.from_positions(2, 2, [(0, 0)])
    b = BitGrid.from_positions(2, 2, [(1, 1)])
    union = a | b
    union.set((0, 1))
    assert a.cardinality() == 1
    assert b.cardinality() == 1


def test_combining_different_dimensions_raises():
    a = BitGrid.empty(3, 2)
    b = BitGrid.empty(2, 3)
    with pytest.raises(ValueError):
        a & b
    with pytest.raises(ValueError):
        a | b


def test_out_of_bounds_raises():
    grid = BitGrid.empty(2, 2)
    with pytest.raises(IndexError):
        grid.get((2, 0))
    with pytest.raises(IndexError):
        grid.set((0, -1), True)


@pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (-1, 2)])
def test_invalid_dimensions_raise(width, height):
    with pytest.raises(ValueError):
        BitGrid.empty(width, height)


def test_equality_and_hash():
    a = BitGrid.from_positions(3, 2, [(1, 2)])
    b = BitGrid.from_positions(3, 2, [(1, 2)])
    c = BitGrid.from_positions(2, 3, [(1, 1)])
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b}) == 1


def test_to_array_is_a_copy():
    grid = BitGrid.from_positions(2, 1, [(0, 1)])
    arr = grid.to_array()
    assert arr.shape == (1, 2)
    assert np.array_equal(arr, np.array([[False, True]]))
    arr[0, 0] = True
    assert not grid.get((0, 0))
