"""
Minesweeper Predictor

Classifies every hidden cell of a Minesweeper board snapshot as certainly
free, certainly a mine, contradictory, or a mine probability:
- Regions: exact mine counts over subsets of hidden cells
- Decomposition: overlapping regions are split into disjoint ones to a fixed point
- Prediction: per-cell classification read off the final partition
"""

from .bitgrid import BitGrid
from .board import Board, Cell, CellState
from .region import Region
from .prediction import Prediction, PredictionKind, combine_all
from .solver import CONFLICT, RegionSolver, cell_probabilities, predict
from .analysis import (
    format_predictions,
    format_probabilities,
    random_snapshot,
    run_prediction_single_test,
    run_prediction_many_tests,
    run_prediction_level_analysis,
    plot_calibration,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "BitGrid",
    "Board",
    "Cell",
    "CellState",
    "Region",
    "Prediction",
    "PredictionKind",
    "RegionSolver",
    # Solving
    "predict",
    "cell_probabilities",
    "combine_all",
    "CONFLICT",
    # Analysis functions
    "format_predictions",
    "format_probabilities",
    "random_snapshot",
    "run_prediction_single_test",
    "run_prediction_many_tests",
    "run_prediction_level_analysis",
    "plot_calibration",
]
