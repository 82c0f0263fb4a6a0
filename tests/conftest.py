import matplotlib
import pytest

from minesweeper_predictor import BitGrid, Board, Region

# Headless backend for the plotting tests
matplotlib.use("Agg")


@pytest.fixture
def row_region():
    """Build a Region on a single-row grid from column indices."""

    def make(width, cols, mines):
        return Region(BitGrid.from_positions(width, 1, ((0, c) for c in cols)), mines)

    return make


@pytest.fixture
def one_two_one():
    """Classic 1-2-1 pattern: mines sit under both 1s."""
    return Board.from_text(
        """
        121
        ...
        """,
        total_mines=2,
    )
