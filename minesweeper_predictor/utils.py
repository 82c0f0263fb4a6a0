"""Grid helpers shared by the board snapshot and the analysis tooling."""

from typing import Dict, Tuple

Position = Tuple[int, int]
Neighborhoods = Dict[Position, Tuple[Position, ...]]

# Row/column offsets of the eight surrounding cells, in row-major order
NEIGHBOR_OFFSETS: Tuple[Position, ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)

_neighborhood_tables: Dict[Tuple[int, int], Neighborhoods] = {}


def check_dimensions(width: int, height: int) -> None:
    """Raise ValueError unless both grid dimensions are positive integers."""
    if not isinstance(width, int) or not isinstance(height, int):
        raise ValueError("width and height must be integers.")
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")


def _bounded_neighbors(pos: Position, width: int, height: int) -> Tuple[Position, ...]:
    row, col = pos
    return tuple(
        (row + dr, col + dc)
        for dr, dc in NEIGHBOR_OFFSETS
        if 0 <= row + dr < height and 0 <= col + dc < width
    )


def get_neighborhoods(width: int, height: int) -> Neighborhoods:
    """
    Return the neighbor table of a width x height grid, built once per shape.

    Args:
        width: Number of columns. Must be positive.
        height: Number of rows. Must be positive.

    Returns:
        Mapping from each (row, col) to its in-bounds 8-connected neighbors,
        listed in row-major order. Boards of the same shape share one table.

    Raises:
        ValueError: If either dimension is not a positive integer.
    """
    check_dimensions(width, height)
    table = _neighborhood_tables.get((width, height))
    if table is None:
        table = {
            (row, col): _bounded_neighbors((row, col), width, height)
            for row in range(height)
            for col in range(width)
        }
        _neighborhood_tables[(width, height)] = table
    return table
