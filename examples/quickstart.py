"""
Quickstart example for the Minesweeper Predictor.

This script demonstrates basic usage of the predictor.
"""

import logging

from minesweeper_predictor import (
    Board,
    RegionSolver,
    format_predictions,
    format_probabilities,
    run_prediction_many_tests,
)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Minesweeper Predictor - Quickstart Example")
    print("=" * 60)

    # Example 1: Predict a hand-written snapshot
    print("\n1. Predicting a small snapshot (10 mines total)...")
    print("-" * 60)

    board = Board.from_text(
        """
        ___1.....
        ___2.....
        1113.....
        .........
        """,
        total_mines=10,
    )
    print(board.to_text())

    solver = RegionSolver(board)
    predictions = solver.predictions()
    print()
    print(format_predictions(predictions, board))

    # Example 2: The underlying probabilities
    print("\n2. Per-cell probabilities:")
    print("-" * 60)
    print(format_probabilities(solver.cell_probabilities()))

    metrics = solver.metrics()
    print(f"\nInitial regions: {metrics['initial_regions_count']}")
    print(f"Splits: {metrics['splits_count']}")
    print(f"Final regions: {metrics['final_regions_count']}")

    # Example 3: Soundness and calibration over random snapshots
    print("\n3. Scoring 50 random Intermediate snapshots (16x16, 40 mines)...")
    print("-" * 60)

    results = run_prediction_many_tests(
        width=16,
        height=16,
        mines_count=40,
        runs=50,
        reveal_fraction=0.6,
        seed=1,
    )

    print(f"Soundness rate: {results['soundness_rate']*100:.1f}%")
    print(f"Certain cells per snapshot: {results['avg_free_count'] + results['avg_mine_count']:.1f}")
    print(f"Contradictions per snapshot: {results['avg_contradiction_count']:.1f}")
    print(f"Certainty rate: {results['certainty_rate']*100:.1f}%")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
