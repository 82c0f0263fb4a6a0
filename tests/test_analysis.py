import random

import matplotlib.pyplot as plt
import pytest

from minesweeper_predictor import (
    CONFLICT,
    Board,
    CellState,
    RegionSolver,
    format_predictions,
    format_probabilities,
    plot_calibration,
    random_snapshot,
    run_prediction_level_analysis,
    run_prediction_many_tests,
    run_prediction_single_test,
)
from minesweeper_predictor.analysis import calibration_table, score_predictions
from minesweeper_predictor.utils import get_neighborhoods


def test_random_snapshot_is_consistent_with_layout():
    board, mines = random_snapshot(
        10, 7, 15, reveal_fraction=0.7, flag_fraction=0.5, rng=random.Random(3)
    )
    assert len(mines) == 15
    assert board.remaining_mines == 15 - board.count(CellState.FLAGGED)

    neighborhoods = get_neighborhoods(10, 7)
    for pos in board.positions():
        cell = board.get(pos)
        if cell.state in (CellState.FLAGGED,):
            assert pos in mines
        elif cell.is_constraint:
            assert pos not in mines
            assert cell.neighbors == sum(n in mines for n in neighborhoods[pos])


def test_random_snapshot_validation():
    with pytest.raises(ValueError):
        random_snapshot(0, 3, 1)
    with pytest.raises(ValueError):
        random_snapshot(2, 2, 5)
    with pytest.raises(ValueError):
        random_snapshot(2, 2, 1, reveal_fraction=1.5)


def test_score_predictions(one_two_one):
    solver = RegionSolver(one_two_one)
    payload = score_predictions(one_two_one, {(1, 0), (1, 2)}, solver)
    assert payload["hidden_cells_count"] == 3
    assert payload["predicted_count"] == 3
    assert payload["unpredicted_count"] == 0
    assert payload["mine_count"] == 2
    assert payload["free_count"] == 1
    assert payload["unsound_count"] == 0
    assert payload["splits_count"] == solver.splits_count


def test_single_test_payload():
    payload = run_prediction_single_test(6, 6, 6, rng=random.Random(0))
    assert payload["unsound_count"] == 0
    assert payload["predicted_count"] + payload["unpredicted_count"] == payload[
        "hidden_cells_count"
    ]


def test_many_tests_are_sound_and_reproducible():
    first = run_prediction_many_tests(7, 7, 8, runs=10, reveal_fraction=0.6, seed=11)
    second = run_prediction_many_tests(7, 7, 8, runs=10, reveal_fraction=0.6, seed=11)
    assert first["soundness_rate"] == 1.0
    assert 0.0 <= first["certainty_rate"] <= 1.0
    assert first["avg_free_count"] == second["avg_free_count"]
    assert first["calibration"] == second["calibration"]


def test_many_tests_validation():
    with pytest.raises(ValueError):
        run_prediction_many_tests(5, 5, 3, runs=0)


def test_calibration_table():
    pairs = [(0.1, False), (0.15, True), (0.5, True), (0.55, False), (1.0, True)]
    table = calibration_table(pairs, bins=4)
    assert table["counts"] == [2.0, 2.0, 1.0]
    assert table["bin_centers"] == pytest.approx([0.125, 0.625, 0.875])
    assert table["predicted"] == pytest.approx([0.125, 0.525, 1.0])
    assert table["observed"] == pytest.approx([0.5, 0.5, 1.0])
    assert calibration_table([])["counts"] == []


def test_format_predictions(one_two_one):
    grid = RegionSolver(one_two_one).predictions()
    text = format_predictions(grid, one_two_one, show_coords=False)
    assert text.splitlines() == [" 1  2  1", " M  S  M"]

    with_coords = format_predictions(grid)
    assert with_coords.splitlines()[0] == "    0  1  2"


def test_format_probabilities():
    board = Board.from_text("1.\n..", total_mines=1)
    text = format_probabilities(RegionSolver(board).cell_probabilities(), show_coords=False)
    assert text.splitlines() == ["    . 0.33", " 0.33 0.33"]


def test_format_probabilities_keeps_columns_aligned():
    grid = [[CONFLICT, 0.5, None], [None, 1.0, 0.0]]

    lines = format_probabilities(grid).splitlines()

    assert lines == [
        "        0    1    2",
        " 0 |    ? 0.50    .",
        " 1 |    . 1.00 0.00",
    ]
    assert len({len(line) for line in lines}) == 1


def test_plot_calibration(monkeypatch):
    shown = []
    monkeypatch.setattr(plt, "show", lambda: shown.append(True))
    results = run_prediction_many_tests(6, 6, 6, runs=3, seed=2)
    plot_calibration(results)
    assert shown == [True]
    plt.close("all")


def test_level_analysis_without_plots(monkeypatch):
    monkeypatch.setattr(plt, "show", lambda: pytest.fail("plot=False must not show"))
    results = run_prediction_level_analysis(runs=2, reveal_fraction=0.6, seed=5, plot=False)
    assert set(results) == {"beginner", "intermediate", "expert"}
    for level_results in results.values():
        assert level_results["soundness_rate"] == 1.0
        assert 0.0 <= level_results["certainty_rate"] <= 1.0
