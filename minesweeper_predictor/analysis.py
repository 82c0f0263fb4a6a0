"""Analysis and benchmarking tools for the Minesweeper predictor."""

import logging
import random
from collections import defaultdict
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .board import Board, Cell, CellState
from .prediction import Prediction, PredictionKind
from .solver import CONFLICT, RegionSolver
from .utils import get_neighborhoods

logger = logging.getLogger(__name__)


def format_predictions(
    predictions: Sequence[Sequence[Optional[Prediction]]],
    board: Optional[Board] = None,
    *,
    show_coords: bool = True,
) -> str:
    """
    Format a prediction grid as a human-readable string.

    Args:
        predictions: grid[row][col] of optional predictions.
        board: If given, cells without a prediction show the board's
            visible state instead of a blank.
        show_coords: If True, include coordinate labels and a header.

    Returns:
        A text grid where 'S' is certainly free, 'M' certainly a mine,
        '!' a contradiction, a digit the mine probability in tenths, and
        ' ' an unpredicted cell.
    """
    height = len(predictions)
    width = len(predictions[0]) if height else 0
    board_rows = board.to_text().splitlines() if board is not None else None

    def cell_char(row: int, col: int) -> str:
        prediction = predictions[row][col]
        if prediction is not None:
            return prediction.symbol()
        if board_rows is not None:
            return board_rows[row][col]
        return " "

    lines: List[str] = []
    if show_coords:
        header = " ".join(f"{c:2d}" for c in range(width))
        lines.append("   " + header)
        lines.append("   " + "-" * (3 * width - 1))

    for row in range(height):
        cells = " ".join(f" {cell_char(row, col)}" for col in range(width))
        lines.append(f"{row:2d} |" + cells if show_coords else cells)

    return "\n".join(lines)


def format_probabilities(
    probabilities: Sequence[Sequence[Optional[Any]]], *, show_coords: bool = True
) -> str:
    """Format a probability grid, five characters per cell ('?' on conflict, '.' when absent)."""
    height = len(probabilities)
    width = len(probabilities[0]) if height else 0

    def cell_str(value: Optional[Any]) -> str:
        if value is None:
            return f"{'.':>5}"
        if value == CONFLICT:
            return f"{'?':>5}"
        return f"{value:5.2f}"

    lines: List[str] = []
    if show_coords:
        lines.append("    " + "".join(f"{c:5d}" for c in range(width)))
    for row in range(height):
        cells = "".join(cell_str(v) for v in probabilities[row])
        lines.append(f"{row:2d} |" + cells if show_coords else cells)
    return "\n".join(lines)


def random_snapshot(
    width: int,
    height: int,
    mines_count: int,
    *,
    reveal_fraction: float = 0.5,
    flag_fraction: float = 0.0,
    rng: Optional[random.Random] = None,
) -> Tuple[Board, Set[Tuple[int, int]]]:
    """
    Generate a random board snapshot together with its hidden mine layout.

    Mines are sampled uniformly; each safe cell is shown (with its neighbor
    count) with probability reveal_fraction, and each mine is flagged with
    probability flag_fraction. There is no flood fill, so the snapshot need
    not be reachable by play, but it is always consistent with the layout.

    Args:
        width: Board width, must be > 0.
        height: Board height, must be > 0.
        mines_count: Number of mines, must be in [0, width * height].
        reveal_fraction: Chance that a safe cell is shown.
        flag_fraction: Chance that a mine is flagged.
        rng: Random source; a fresh one is used if omitted.

    Returns:
        Tuple of (board, mines) where mines is the set of mined (row, col).

    Raises:
        ValueError: If the arguments are out of range.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Width and height must be positive.")
    if not 0 <= mines_count <= width * height:
        raise ValueError("mines_count must be between 0 and width * height.")
    if not (0.0 <= reveal_fraction <= 1.0 and 0.0 <= flag_fraction <= 1.0):
        raise ValueError("reveal_fraction and flag_fraction must be within [0, 1].")

    rng = rng or random.Random()
    all_positions = [(r, c) for r in range(height) for c in range(width)]
    mines: Set[Tuple[int, int]] = set(rng.sample(all_positions, mines_count))

    neighborhoods = get_neighborhoods(width, height)

    cells: List[List[Cell]] = []
    flags = 0
    for row in range(height):
        cells_row: List[Cell] = []
        for col in range(width):
            pos = (row, col)
            if pos in mines:
                if rng.random() < flag_fraction:
                    cells_row.append(Cell(CellState.FLAGGED))
                    flags += 1
                else:
                    cells_row.append(Cell(CellState.UNREVEALED))
                continue

            if rng.random() < reveal_fraction:
                count = sum(1 for n in neighborhoods[pos] if n in mines)
                state = CellState.REVEALED if count else CellState.EMPTY
                cells_row.append(Cell(state, count))
            else:
                cells_row.append(Cell(CellState.UNREVEALED))
        cells.append(cells_row)

    return Board(width, height, cells, mines_count - flags), mines


def score_predictions(
    board: Board,
    mines: Set[Tuple[int, int]],
    solver: RegionSolver,
) -> Dict[str, Any]:
    """
    Compare a solver's predictions against the true mine layout.

    Returns:
        Payload with counts of predicted, unpredicted, free, mine,
        probability and contradiction cells, the number of unsound
        certainties (free cells that are mines, mine cells that are safe),
        and (probability, is_mine) pairs for calibration.
    """
    payload: Dict[str, Any] = {
        "hidden_cells_count": board.count(CellState.UNREVEALED),
        "predicted_count": 0,
        "free_count": 0,
        "mine_count": 0,
        "probability_count": 0,
        "contradiction_count": 0,
        "unsound_count": 0,
        "calibration_pairs": [],
    }

    for pos, prediction in solver.iter_predictions():
        payload["predicted_count"] += 1
        is_mine = pos in mines
        if prediction.kind == PredictionKind.FREE:
            payload["free_count"] += 1
            if is_mine:
                payload["unsound_count"] += 1
        elif prediction.kind == PredictionKind.MINE:
            payload["mine_count"] += 1
            if not is_mine:
                payload["unsound_count"] += 1
        elif prediction.kind == PredictionKind.CONTRADICTION:
            payload["contradiction_count"] += 1
        else:
            payload["probability_count"] += 1
            payload["calibration_pairs"].append((prediction.probability, is_mine))

    payload["unpredicted_count"] = (
        payload["hidden_cells_count"] - payload["predicted_count"]
    )
    payload.update(solver.metrics())
    return payload


def run_prediction_single_test(
    width: int,
    height: int,
    mines_count: int,
    *,
    reveal_fraction: float = 0.5,
    flag_fraction: float = 0.0,
    show_boards: bool = False,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    Predict one random snapshot and score the result.

    Args:
        width: Board width.
        height: Board height.
        mines_count: Total number of mines on the board.
        reveal_fraction: Chance that a safe cell is shown.
        flag_fraction: Chance that a mine is flagged.
        show_boards: If True, print the snapshot and the prediction grid.
        rng: Random source for the snapshot.

    Returns:
        The payload of score_predictions().
    """
    board, mines = random_snapshot(
        width,
        height,
        mines_count,
        reveal_fraction=reveal_fraction,
        flag_fraction=flag_fraction,
        rng=rng,
    )
    solver = RegionSolver(board)
    payload = score_predictions(board, mines, solver)

    if show_boards:
        print("Snapshot:")
        print(board.to_text())
        print()
        print("Predictions (S free, M mine, ! contradiction, digit = tenths):")
        print(format_predictions(solver.predictions(), board))

    return payload


def run_prediction_many_tests(
    width: int,
    height: int,
    mines_count: int,
    runs: int,
    *,
    reveal_fraction: float = 0.5,
    flag_fraction: float = 0.0,
    bins: int = 10,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Predict many random snapshots and return averaged metrics plus calibration.

    Args:
        width: Board width.
        height: Board height.
        mines_count: Total number of mines on the board.
        runs: Number of independent snapshots, must be > 0.
        reveal_fraction: Chance that a safe cell is shown.
        flag_fraction: Chance that a mine is flagged.
        bins: Number of equal-width probability bins for calibration.
        seed: Seed for reproducible runs.

    Returns:
        Averages of the per-run counters (prefixed with "avg_"), plus:
        - soundness_rate: fraction of runs with no unsound certainty
        - certainty_rate: certain cells / predicted cells
        - calibration: {"bin_centers", "predicted", "observed", "counts"}
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")
    if bins <= 0:
        raise ValueError("bins must be positive.")

    rng = random.Random(seed)
    sums: Dict[str, float] = defaultdict(float)
    sound_runs = 0
    pairs: List[Tuple[float, bool]] = []

    for _ in range(runs):
        payload = run_prediction_single_test(
            width,
            height,
            mines_count,
            reveal_fraction=reveal_fraction,
            flag_fraction=flag_fraction,
            rng=rng,
        )
        if payload["unsound_count"] == 0:
            sound_runs += 1
        pairs.extend(payload["calibration_pairs"])

        for k, v in payload.items():
            if isinstance(v, (int, float)) and not isinstance(v, bool):
                sums[f"avg_{k}"] += float(v)

    out: Dict[str, Any] = {k: total / runs for k, total in sums.items()}
    out["soundness_rate"] = sound_runs / runs

    certain = sums["avg_free_count"] + sums["avg_mine_count"]
    predicted = sums["avg_predicted_count"]
    out["certainty_rate"] = certain / predicted if predicted > 0 else 0.0
    out["calibration"] = calibration_table(pairs, bins)

    if sound_runs != runs:
        logger.warning(
            "%d of %d runs produced unsound certainties.", runs - sound_runs, runs
        )
    return out


def calibration_table(
    pairs: Sequence[Tuple[float, bool]], bins: int = 10
) -> Dict[str, List[float]]:
    """
    Bin (probability, is_mine) pairs into a reliability table.

    Returns:
        Dict of equal-length lists: bin_centers, predicted (mean predicted
        probability per bin), observed (mine frequency per bin) and counts.
        Empty bins are omitted.
    """
    if not pairs:
        return {"bin_centers": [], "predicted": [], "observed": [], "counts": []}

    probs = np.array([p for p, _ in pairs], dtype=float)
    hits = np.array([m for _, m in pairs], dtype=float)
    edges = np.linspace(0.0, 1.0, bins + 1)
    idx = np.clip(np.digitize(probs, edges) - 1, 0, bins - 1)

    table: Dict[str, List[float]] = {
        "bin_centers": [],
        "predicted": [],
        "observed": [],
        "counts": [],
    }
    for b in range(bins):
        selected = idx == b
        count = int(selected.sum())
        if count == 0:
            continue
        table["bin_centers"].append(float((edges[b] + edges[b + 1]) / 2))
        table["predicted"].append(float(probs[selected].mean()))
        table["observed"].append(float(hits[selected].mean()))
        table["counts"].append(float(count))
    return table


def plot_calibration(results: Dict[str, Any], *, title: Optional[str] = None) -> None:
    """
    Plot a reliability diagram from run_prediction_many_tests() results.

    Points on the diagonal mean the probabilities match observed mine rates.
    """
    calibration = results["calibration"]
    predicted = np.asarray(calibration["predicted"])
    observed = np.asarray(calibration["observed"])
    counts = np.asarray(calibration["counts"])

    plt.figure()  # type: ignore[misc]
    plt.plot([0.0, 1.0], [0.0, 1.0], linestyle="--", label="ideal")  # type: ignore[misc]
    if counts.size:
        sizes = 20.0 + 180.0 * counts / counts.max()
        plt.scatter(predicted, observed, s=sizes, label="region probability")  # type: ignore[misc]
    plt.xlim(0.0, 1.0)  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.xlabel("Predicted mine probability")  # type: ignore[misc]
    plt.ylabel("Observed mine frequency")  # type: ignore[misc]
    plt.title(title or "Prediction calibration")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]


def run_prediction_level_analysis(
    runs: int,
    *,
    reveal_fraction: float = 0.5,
    seed: Optional[int] = None,
    plot: bool = True,
) -> Dict[str, Dict[str, Any]]:
    """
    Run run_prediction_many_tests() on the standard difficulty levels.

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 30x16, 99 mines

    Returns:
        Mapping from level name to its results dict.
    """
    levels: Dict[str, Tuple[int, int, int]] = {
        "beginner": (9, 9, 10),
        "intermediate": (16, 16, 40),
        "expert": (30, 16, 99),
    }

    results: Dict[str, Dict[str, Any]] = {}
    for level, (w, h, m) in levels.items():
        results[level] = run_prediction_many_tests(
            w, h, m, runs, reveal_fraction=reveal_fraction, seed=seed
        )

    if not plot:
        return results

    level_names = list(levels.keys())
    x = np.arange(len(level_names))
    bar_w = 0.25

    free = [results[n]["avg_free_count"] for n in level_names]
    mine = [results[n]["avg_mine_count"] for n in level_names]
    prob = [results[n]["avg_probability_count"] for n in level_names]

    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w, free, width=bar_w, label="free")  # type: ignore[misc]
    plt.bar(x, mine, width=bar_w, label="mine")  # type: ignore[misc]
    plt.bar(x + bar_w, prob, width=bar_w, label="probability")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylabel("Average cells per snapshot")  # type: ignore[misc]
    plt.title("Prediction mix by difficulty level")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    plt.show()  # type: ignore[misc]

    for level in level_names:
        plot_calibration(results[level], title=f"Prediction calibration ({level})")

    return results
