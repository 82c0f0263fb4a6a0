import pytest

from minesweeper_predictor import Board, Cell, CellState


def test_from_text_parses_every_state():
    board = Board.from_text(
        """
        .F*
        _03
        """,
        total_mines=4,
    )
    assert board.size == (3, 2)
    assert board.get((0, 0)).state == CellState.UNREVEALED
    assert board.get((0, 1)).state == CellState.FLAGGED
    assert board.get((0, 2)).state == CellState.EXPLODED
    assert board.get((1, 0)).state == CellState.EMPTY
    assert board.get((1, 1)).state == CellState.EMPTY
    assert board[(1, 2)] == Cell(CellState.REVEALED, 3)
    assert board.remaining_mines == 3


def test_remaining_mines_never_negative():
    board = Board.from_text("FF.", total_mines=1)
    assert board.remaining_mines == 0


def test_to_text():
    board = Board.from_text("x2F\n_*.", total_mines=2)
    assert board.to_text() == ".2F\n_*."


@pytest.mark.parametrize(
    "text",
    ["", "..\n...", "..?"],
)
def test_from_text_rejects_bad_input(text):
    with pytest.raises(ValueError):
        Board.from_text(text, total_mines=1)


def test_neighbors_are_bounded():
    board = Board.from_text("...\n...\n...", total_mines=1)
    assert sorted(board.neighbors((0, 0))) == [(0, 1), (1, 0), (1, 1)]
    assert len(board.neighbors((1, 1))) == 8
    assert len(board.neighbors((2, 1))) == 5


def test_single_cell_board_has_no_neighbors():
    board = Board.from_text(".", total_mines=1)
    assert board.neighbors((0, 0)) == ()


def test_positions_and_count():
    board = Board.from_text("F.\n1.", total_mines=2)
    assert list(board.positions()) == [(0, 0), (0, 1), (1, 0), (1, 1)]
    assert board.count(CellState.UNREVEALED) == 2
    assert board.count(CellState.FLAGGED) == 1


def test_constructor_validation():
    cells = [[Cell(), Cell()]]
    with pytest.raises(ValueError):
        Board(0, 1, [], 0)
    with pytest.raises(ValueError):
        Board(3, 1, cells, 0)
    with pytest.raises(ValueError):
        Board(2, 1, cells, -1)
    with pytest.raises(ValueError):
        Board(2, 1, [[Cell(CellState.REVEALED, 9), Cell()]], 0)


def test_out_of_bounds_get_raises():
    board = Board.from_text("..", total_mines=0)
    with pytest.raises(IndexError):
        board.get((1, 0))


def test_constraint_cells():
    assert Cell(CellState.REVEALED, 2).is_constraint
    assert Cell(CellState.EMPTY).is_constraint
    assert not Cell(CellState.UNREVEALED).is_constraint
    assert not Cell(CellState.FLAGGED).is_constraint
    assert not Cell(CellState.EXPLODED).is_constraint
