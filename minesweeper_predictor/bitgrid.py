"""Fixed-size two-dimensional bitset used as a region mask."""

from typing import Iterable, Iterator, Tuple

import numpy as np

from .utils import check_dimensions


class BitGrid:
    """
    A width x height grid of boolean flags addressed by (row, col).

    Flags are stored in a numpy boolean array of shape (height, width), which
    is a flat row-major store with stride ``width``. Dimensions are fixed at
    construction and travel with every instance; combining two grids of
    different dimensions raises ValueError.
    """

    __slots__ = ("width", "height", "_bits")

    def __init__(self, width: int, height: int, bits: np.ndarray) -> None:
        check_dimensions(width, height)
        if bits.shape != (height, width):
            raise ValueError(
                f"Bit array shape {bits.shape} does not match grid {height}x{width}."
            )
        self.width: int = width
        self.height: int = height
        self._bits: np.ndarray = bits.astype(bool, copy=False)

    @classmethod
    def empty(cls, width: int, height: int) -> "BitGrid":
        """Return an all-false grid of the given dimensions."""
        check_dimensions(width, height)
        return cls(width, height, np.zeros((height, width), dtype=bool))

    @classmethod
    def from_positions(
        cls, width: int, height: int, positions: Iterable[Tuple[int, int]]
    ) -> "BitGrid":
        """Return a grid with exactly the given positions set."""
        grid = cls.empty(width, height)
        for pos in positions:
            grid.set(pos, True)
        return grid

    @property
    def shape(self) -> Tuple[int, int]:
        """Dimensions as (width, height)."""
        return self.width, self.height

    def _check_pos(self, pos: Tuple[int, int]) -> Tuple[int, int]:
        row, col = pos
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"Position {pos} is outside the {self.height}x{self.width} grid."
            )
        return row, col

    def set(self, pos: Tuple[int, int], value: bool = True) -> None:
        """Set or clear the flag at (row, col)."""
        self._bits[self._check_pos(pos)] = bool(value)

    def get(self, pos: Tuple[int, int]) -> bool:
        """Return the flag at (row, col)."""
        return bool(self._bits[self._check_pos(pos)])

    __getitem__ = get

    def cardinality(self) -> int:
        """Return the number of set positions."""
        return int(np.count_nonzero(self._bits))

    def __len__(self) -> int:
        return self.cardinality()

    def is_empty(self) -> bool:
        return not self._bits.any()

    def positions(self) -> Iterator[Tuple[int, int]]:
        """
        Iterate over set positions in row-major order.

        Each call returns a fresh iterator, so the sequence can be restarted.
        """
        return ((int(r), int(c)) for r, c in np.argwhere(self._bits))

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return self.positions()

    def _check_compatible(self, other: "BitGrid") -> None:
        if not isinstance(other, BitGrid):
            raise TypeError(f"Cannot combine BitGrid with {type(other).__name__}.")
        if self.shape != other.shape:
            raise ValueError(
                f"Cannot combine grids of different dimensions: "
                f"{self.shape} and {other.shape}."
            )

    def and_(self, other: "BitGrid") -> "BitGrid":
        self._check_compatible(other)
        return BitGrid(self.width, self.height, self._bits & other._bits)

    def or_(self, other: "BitGrid") -> "BitGrid":
        self._check_compatible(other)
        return BitGrid(self.width, self.height, self._bits | other._bits)

    def not_(self) -> "BitGrid":
        return BitGrid(self.width, self.height, ~self._bits)

    __and__ = and_
    __or__ = or_
    __invert__ = not_

    def copy(self) -> "BitGrid":
        return BitGrid(self.width, self.height, self._bits.copy())

    def to_array(self) -> np.ndarray:
        """Return a copy of the flags as a (height, width) boolean array."""
        return self._bits.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitGrid):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self._bits, other._bits)
        )

    def __hash__(self) -> int:
        return hash((self.width, self.height, np.packbits(self._bits).tobytes()))

    def __repr__(self) -> str:
        cells = sorted(self.positions())
        return f"BitGrid({self.width}x{self.height}, {cells})"
