"""Regions: exact mine counts over subsets of hidden cells."""

import logging
from typing import Optional, Tuple

from .bitgrid import BitGrid
from .board import Board, CellState
from .prediction import Prediction

logger = logging.getLogger(__name__)


class Region:
    """
    Constraint "the cells in ``mask`` hold exactly ``mines`` mines".

    ``size`` is the number of cells in the mask. A well-formed region has
    0 <= mines <= size; anything else is malformed and never decomposes.
    """

    __slots__ = ("mask", "size", "mines")

    def __init__(self, mask: BitGrid, mines: int) -> None:
        self.mask: BitGrid = mask
        self.size: int = mask.cardinality()
        self.mines: int = mines

    @classmethod
    def from_unrevealed(cls, board: Board) -> "Region":
        """Global region: every unrevealed cell holds the remaining mines."""
        mask = BitGrid.from_positions(
            board.width,
            board.height,
            (
                pos
                for pos in board.positions()
                if board.get(pos).state == CellState.UNREVEALED
            ),
        )
        return cls(mask, board.remaining_mines)

    @classmethod
    def from_revealed_cell(
        cls, board: Board, pos: Tuple[int, int]
    ) -> Optional["Region"]:
        """
        Local region around a cleared cell.

        The mask holds the unrevealed neighbors; the mine count is the cell's
        neighbor count minus its flagged neighbors. Returns None when the cell
        is not cleared.
        """
        cell = board.get(pos)
        if not cell.is_constraint:
            return None

        mask = BitGrid.empty(board.width, board.height)
        mines = cell.neighbors
        for npos in board.neighbors(pos):
            state = board.get(npos).state
            if state == CellState.FLAGGED:
                mines -= 1
            elif state == CellState.UNREVEALED:
                mask.set(npos, True)

        region = cls(mask, mines)
        if region.is_malformed():
            logger.warning("Malformed region at %s: %r", pos, region)
        return region

    def is_clear(self) -> bool:
        """Every masked cell is provably free."""
        return self.mines == 0

    def is_full(self) -> bool:
        """Every masked cell is provably a mine."""
        return self.size == self.mines

    def is_malformed(self) -> bool:
        return self.mines < 0 or self.mines > self.size

    def probability(self) -> float:
        if self.size == 0:
            raise ValueError("An empty region has no mine probability.")
        return self.mines / self.size

    def prediction(self) -> Prediction:
        """Classification shared by every cell in the mask."""
        if self.is_malformed():
            return Prediction.contradiction()
        return Prediction.from_probability(self.probability())

    def split_overlap(
        self, other: "Region"
    ) -> Optional[Tuple["Region", "Region", "Region"]]:
        """
        Decompose two overlapping regions into three disjoint ones.

        Returns (a_only, overlap, b_only) when the overlap's mine count is
        forced: the feasible overlap counts allowed by each region alone must
        meet at exactly one shared endpoint. Returns None when the regions do
        not overlap, when the count is not yet determined, or when either
        region is malformed. Outputs may have size 0; callers drop those.
        """
        a, b = self, other
        if a.is_malformed() or b.is_malformed():
            return None

        overlap = a.mask & b.mask
        overlap_size = overlap.cardinality()
        if overlap_size == 0:
            return None

        a_low = max(0, a.mines - (a.size - overlap_size))
        a_high = min(a.mines, overlap_size)
        b_low = max(0, b.mines - (b.size - overlap_size))
        b_high = min(b.mines, overlap_size)

        if a_low == b_high:
            overlap_mines = a_low
        elif a_high == b_low:
            overlap_mines = a_high
        else:
            return None

        a_only = a.mask & ~b.mask
        b_only = b.mask & ~a.mask
        return (
            Region(a_only, a.mines - overlap_mines),
            Region(overlap, overlap_mines),
            Region(b_only, b.mines - overlap_mines),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Region):
            return NotImplemented
        return self.mines == other.mines and self.mask == other.mask

    def __hash__(self) -> int:
        return hash((self.mask, self.mines))

    def __repr__(self) -> str:
        return f"Region(mines={self.mines}, cells={sorted(self.mask.positions())})"
