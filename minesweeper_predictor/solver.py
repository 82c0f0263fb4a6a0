"""Region-set solver: decomposes overlapping regions to a fixed point."""

import itertools
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .board import Board
from .prediction import Prediction
from .region import Region

logger = logging.getLogger(__name__)

# Marker stored in the probability grid for cells whose regions disagree
CONFLICT = "conflict"

ProbabilityGrid = List[List[Optional[Any]]]
PredictionGrid = List[List[Optional[Prediction]]]


class RegionSolver:
    """
    Classify every hidden cell of one board snapshot.

    The solver models player knowledge as regions (hidden cells paired with an
    exact mine count), built from the snapshot:
    1. One global region over all unrevealed cells with the remaining mines
    2. One region per cleared cell over its unrevealed neighbors

    It then repeatedly replaces an overlapping pair of regions with their
    disjoint decomposition until no pair decomposes, and reads per-cell
    probabilities off the surviving regions.

    Every split lowers the summed size of all regions by the overlap size, so
    the loop terminates; ``max_iterations`` is an additional hard cap.
    """

    def __init__(self, board: Board, max_iterations: Optional[int] = None) -> None:
        """
        Initialize a solver bound to a board snapshot.

        Args:
            board: The read-only snapshot to classify. It is never mutated.
            max_iterations: Maximum number of successful splits before the
                loop stops and finalizes whatever regions it has. None uses
                the summed size of the initial regions, which no
                terminating run can exceed.

        Raises:
            ValueError: If max_iterations is not positive.
        """
        if max_iterations is not None and max_iterations <= 0:
            raise ValueError("max_iterations must be positive.")

        self.board = board
        self.max_iterations: Optional[int] = max_iterations

        # Region arena: stable id -> region, iterated in insertion order
        self.regions: Dict[int, Region] = {}
        self._next_id: int = 0

        # Metrics / counters (for analysis)
        self.initial_regions_count: int = 0
        self.splits_count: int = 0
        self.attempted_pairs_count: int = 0
        self.scans_count: int = 0
        self.capped: bool = False
        self.solved: bool = False

    # -------------------------------------------------------------------------
    # Region arena
    # -------------------------------------------------------------------------

    def _add_region(self, region: Region) -> Optional[int]:
        if region.size == 0:
            return None
        region_id = self._next_id
        self._next_id += 1
        self.regions[region_id] = region
        return region_id

    def _apply_split(
        self, a_id: int, b_id: int, parts: Tuple[Region, Region, Region]
    ) -> None:
        """Replace two regions with the non-empty parts of their split."""
        del self.regions[a_id]
        del self.regions[b_id]
        for part in parts:
            self._add_region(part)

    def initial_regions(self) -> List[Region]:
        """Build the global region followed by one region per cleared cell."""
        regions: List[Region] = [Region.from_unrevealed(self.board)]
        for pos in self.board.positions():
            region = Region.from_revealed_cell(self.board, pos)
            if region is not None:
                regions.append(region)
        return [r for r in regions if r.size != 0]

    # -------------------------------------------------------------------------
    # Fixed-point loop
    # -------------------------------------------------------------------------

    def _find_split(
        self,
    ) -> Optional[Tuple[int, int, Tuple[Region, Region, Region]]]:
        """Scan pairs in insertion order and return the first decomposition."""
        self.scans_count += 1
        for (a_id, a), (b_id, b) in itertools.combinations(
            list(self.regions.items()), 2
        ):
            self.attempted_pairs_count += 1
            parts = a.split_overlap(b)
            if parts is not None:
                return a_id, b_id, parts
        return None

    def solve(self) -> List[Region]:
        """
        Run the decomposition loop to a fixed point.

        Returns:
            The surviving regions in insertion order.
        """
        if self.solved:
            return list(self.regions.values())

        for region in self.initial_regions():
            self._add_region(region)
        self.initial_regions_count = len(self.regions)

        if self.max_iterations is None:
            self.max_iterations = max(
                1, sum(r.size for r in self.regions.values())
            )

        while True:
            found = self._find_split()
            if found is None:
                break

            if self.splits_count >= self.max_iterations:
                self.capped = True
                logger.warning(
                    "Stopped after %d splits with %d regions left unresolved.",
                    self.splits_count,
                    len(self.regions),
                )
                break

            a_id, b_id, parts = found
            logger.debug(
                "Split regions %d and %d into %s", a_id, b_id, parts
            )
            self._apply_split(a_id, b_id, parts)
            self.splits_count += 1

        self.solved = True
        logger.info(
            "Solved %dx%d board: %d initial regions, %d splits, %d final regions.",
            self.board.width,
            self.board.height,
            self.initial_regions_count,
            self.splits_count,
            len(self.regions),
        )
        return list(self.regions.values())

    # -------------------------------------------------------------------------
    # Finalization
    # -------------------------------------------------------------------------

    def _empty_grid(self) -> List[List[Any]]:
        return [[None for _ in range(self.board.width)] for _ in range(self.board.height)]

    def cell_probabilities(self) -> ProbabilityGrid:
        """
        Per-cell mine probability read off the surviving regions.

        Returns:
            grid[row][col] holding a float in [0, 1], CONFLICT when two
            regions disagree on the cell (or a malformed region covers it),
            or None when no region covers the cell.
        """
        regions = self.solve()
        grid: ProbabilityGrid = self._empty_grid()

        for region in regions:
            if region.is_malformed():
                logger.warning("Malformed region survived solving: %r", region)
                value: Any = CONFLICT
            else:
                value = region.probability()

            for row, col in region.mask.positions():
                prev = grid[row][col]
                if prev is None:
                    grid[row][col] = value
                elif prev != value:
                    grid[row][col] = CONFLICT

        return grid

    def predictions(self) -> PredictionGrid:
        """
        Classify every cell of the board.

        Returns:
            grid[row][col] holding a Prediction for constrained cells and
            None for cells no region covers.
        """
        grid: PredictionGrid = self._empty_grid()
        for row, values in enumerate(self.cell_probabilities()):
            for col, value in enumerate(values):
                if value is None:
                    continue
                if value == CONFLICT:
                    grid[row][col] = Prediction.contradiction()
                else:
                    grid[row][col] = Prediction.from_probability(value)
        return grid

    def iter_predictions(
        self,
    ) -> Iterator[Tuple[Tuple[int, int], Prediction]]:
        """Yield ((row, col), prediction) for every predicted cell."""
        for row, values in enumerate(self.predictions()):
            for col, prediction in enumerate(values):
                if prediction is not None:
                    yield (row, col), prediction

    def metrics(self) -> Dict[str, Any]:
        """Return solver counters as a payload dict."""
        return {
            "initial_regions_count": self.initial_regions_count,
            "final_regions_count": len(self.regions),
            "splits_count": self.splits_count,
            "attempted_pairs_count": self.attempted_pairs_count,
            "scans_count": self.scans_count,
            "capped": self.capped,
        }


def predict(board: Board, **kwargs: Any) -> PredictionGrid:
    """Classify every cell of a board snapshot; see RegionSolver."""
    return RegionSolver(board, **kwargs).predictions()


def cell_probabilities(board: Board, **kwargs: Any) -> ProbabilityGrid:
    """Per-cell mine probabilities of a board snapshot; see RegionSolver."""
    return RegionSolver(board, **kwargs).cell_probabilities()
