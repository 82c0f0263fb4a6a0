"""Read-only board snapshot consumed by the predictor."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Sequence, Tuple

from .utils import check_dimensions, get_neighborhoods


class CellState(Enum):
    """Visible state of a board cell."""

    UNREVEALED = "unrevealed"
    FLAGGED = "flagged"
    # Cleared, showing a neighbor count
    REVEALED = "revealed"
    # Cleared, was a mine
    EXPLODED = "exploded"
    # Cleared, no neighboring mines
    EMPTY = "empty"


@dataclass(frozen=True)
class Cell:
    """A single cell as the player sees it."""

    state: CellState = CellState.UNREVEALED
    neighbors: int = 0

    @property
    def is_constraint(self) -> bool:
        """True for cleared cells whose count constrains their neighbors."""
        return self.state in (CellState.REVEALED, CellState.EMPTY)


# ASCII encoding used by Board.from_text / Board.to_text
_CHAR_TO_STATE: Dict[str, CellState] = {
    ".": CellState.UNREVEALED,
    "x": CellState.UNREVEALED,
    "F": CellState.FLAGGED,
    "*": CellState.EXPLODED,
    "_": CellState.EMPTY,
    "0": CellState.EMPTY,
}


class Board:
    """
    Immutable snapshot of a Minesweeper board.

    The snapshot carries everything the predictor reads: grid dimensions, the
    state and neighbor count of each cell, the number of mines not yet
    flagged, and bounded 8-connected adjacency. It has no game logic; revealing
    and flagging belong to the surrounding game.
    """

    def __init__(
        self,
        width: int,
        height: int,
        cells: Sequence[Sequence[Cell]],
        remaining_mines: int,
    ) -> None:
        """
        Build a snapshot from a row-major grid of cells.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            cells: cells[row][col] for every position on the board.
            remaining_mines: Total mines minus flags placed, must be >= 0.

        Raises:
            ValueError: If dimensions, cell grid or counts are invalid.
        """
        check_dimensions(width, height)
        if remaining_mines < 0:
            raise ValueError("remaining_mines must be non-negative.")
        if len(cells) != height or any(len(row) != width for row in cells):
            raise ValueError("Cell grid does not match the board dimensions.")

        for row in cells:
            for cell in row:
                if not 0 <= cell.neighbors <= 8:
                    raise ValueError("Neighbor counts must be between 0 and 8.")

        self.width: int = width
        self.height: int = height
        self.remaining_mines: int = remaining_mines
        self._cells: Tuple[Tuple[Cell, ...], ...] = tuple(
            tuple(row) for row in cells
        )
        self._neighborhoods: Dict[
            Tuple[int, int], Tuple[Tuple[int, int], ...]
        ] = get_neighborhoods(width, height)

    @classmethod
    def from_text(cls, text: str, total_mines: int) -> "Board":
        """
        Parse an ASCII board.

        ``.`` or ``x`` = unrevealed, ``F`` = flagged, ``*`` = exploded,
        ``_`` or ``0`` = empty, ``1``-``8`` = revealed count. Blank lines and
        surrounding whitespace are ignored, e.g.::

            1F1
            ...

        The remaining mine count is total_mines minus the number of flags,
        floored at zero.
        """
        lines = [ln.strip() for ln in text.strip().splitlines() if ln.strip()]
        if not lines:
            raise ValueError("Board text is empty.")

        width = len(lines[0])
        cells: List[List[Cell]] = []
        for ln in lines:
            if len(ln) != width:
                raise ValueError("All board rows must have the same length.")
            row: List[Cell] = []
            for c in ln:
                if c in _CHAR_TO_STATE:
                    row.append(Cell(_CHAR_TO_STATE[c]))
                elif c.isdigit() and 1 <= int(c) <= 8:
                    row.append(Cell(CellState.REVEALED, int(c)))
                else:
                    raise ValueError(f"Unknown board character {c!r}.")
            cells.append(row)

        flags = sum(cell.state == CellState.FLAGGED for row in cells for cell in row)
        return cls(width, len(cells), cells, max(0, total_mines - flags))

    def to_text(self) -> str:
        """Render the snapshot in the format accepted by from_text."""

        def cell_char(cell: Cell) -> str:
            if cell.state == CellState.REVEALED:
                return str(cell.neighbors)
            return {
                CellState.UNREVEALED: ".",
                CellState.FLAGGED: "F",
                CellState.EXPLODED: "*",
                CellState.EMPTY: "_",
            }[cell.state]

        return "\n".join("".join(cell_char(c) for c in row) for row in self._cells)

    @property
    def size(self) -> Tuple[int, int]:
        """Dimensions as (width, height)."""
        return self.width, self.height

    def get(self, pos: Tuple[int, int]) -> Cell:
        row, col = pos
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"Position {pos} is outside the board.")
        return self._cells[row][col]

    __getitem__ = get

    def neighbors(self, pos: Tuple[int, int]) -> Tuple[Tuple[int, int], ...]:
        """Return precomputed neighbor positions for a cell."""
        return self._neighborhoods[pos]

    def positions(self) -> Iterator[Tuple[int, int]]:
        """Iterate over every board position in row-major order."""
        for row in range(self.height):
            for col in range(self.width):
                yield row, col

    def count(self, state: CellState) -> int:
        """Return the number of cells in the given state."""
        return sum(cell.state == state for row in self._cells for cell in row)

    def __repr__(self) -> str:
        return (
            f"Board({self.width}x{self.height}, "
            f"remaining_mines={self.remaining_mines})"
        )
