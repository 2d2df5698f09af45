"""
Solve pipeline: validate input, build the matrix, run the search, and map
the selected rows back to placements.
"""

import time
from collections import Counter
from typing import List, Optional, Sequence

from cubecover.core.base import (
    InvalidInputError, Piece, Placement, SearchStats, SolveOutcome,
)
from cubecover.solver.dlx import DancingLinks, StopCheck
from cubecover.solver.matrix import build_exact_cover_matrix


def make_stop_check(max_nodes: Optional[int] = None,
                    time_limit: Optional[float] = None) -> Optional[StopCheck]:
    """
    Build a cooperative stop predicate from node and wall-clock budgets.

    The clock starts when this is called. Returns None when both are unset.
    """
    if max_nodes is None and time_limit is None:
        return None
    deadline = time.perf_counter() + time_limit if time_limit is not None else None

    def should_stop(stats: SearchStats) -> bool:
        if max_nodes is not None and stats.nodes > max_nodes:
            return True
        return deadline is not None and time.perf_counter() > deadline

    return should_stop


def validate_inputs(pieces: Sequence[Piece], cube_size: int) -> None:
    """
    Reject malformed requests before any matrix is built.

    Raises:
        InvalidInputError: On an empty piece list, a bad cube size or a
            degenerate piece definition
    """
    if isinstance(cube_size, bool) or not isinstance(cube_size, int):
        raise InvalidInputError(f"cube_size must be an integer, got {cube_size!r}")
    if cube_size <= 0:
        raise InvalidInputError(f"cube_size must be positive, got {cube_size}")
    if not pieces:
        raise InvalidInputError("At least one piece is required")

    for index, piece in enumerate(pieces):
        label = f"Piece {index} ({piece.name})"
        if not piece.shape:
            raise InvalidInputError(f"{label} has an empty shape")
        for voxel in piece.shape:
            if len(voxel) != 3 or not all(isinstance(c, int) and not isinstance(c, bool) for c in voxel):
                raise InvalidInputError(f"{label} has a non-integer coordinate: {voxel!r}")
        if len(set(piece.shape)) != len(piece.shape):
            raise InvalidInputError(f"{label} repeats a voxel")
        if piece.volume != len(piece.shape):
            raise InvalidInputError(
                f"{label} declares volume {piece.volume} but has {len(piece.shape)} voxels"
            )


def solve_with_stats(pieces: Sequence[Piece],
                     cube_size: int,
                     should_stop: Optional[StopCheck] = None) -> SolveOutcome:
    """Solve and also return the matrix size and search counters."""
    validate_inputs(pieces, cube_size)
    matrix = build_exact_cover_matrix(pieces, cube_size)
    links = DancingLinks(matrix.num_columns, (row.columns for row in matrix.rows))
    selected = links.search(should_stop)

    placements = None
    if selected is not None:
        placements = []
        for row_index in selected:
            row = matrix.rows[row_index]
            placements.append(Placement(
                piece_index=row.piece_index,
                piece_name=pieces[row.piece_index].name,
                coords=row.coords,
                rotation_index=row.rotation_index,
                translation=row.translation,
            ))

    return SolveOutcome(
        placements=placements,
        num_rows=len(matrix.rows),
        num_columns=matrix.num_columns,
        stats=links.stats,
    )


def solve_cube(pieces: Sequence[Piece],
               cube_size: int,
               should_stop: Optional[StopCheck] = None) -> Optional[List[Placement]]:
    """
    Partition an N x N x N cube among `pieces`.

    Args:
        pieces: Pieces in selection order, each used exactly once
        cube_size: Edge length N
        should_stop: Optional cooperative stop predicate

    Returns:
        One Placement per piece, or None when no exact partition exists

    Raises:
        InvalidInputError: If the request is malformed
        SearchInterrupted: If should_stop ended the search
    """
    return solve_with_stats(pieces, cube_size, should_stop).placements


def verify_solution(pieces: Sequence[Piece],
                    cube_size: int,
                    placements: Sequence[Placement]) -> List[str]:
    """Check that placements partition the cube exactly. Returns a list of problems."""
    problems = []
    used = Counter(p.piece_index for p in placements)
    for index in range(len(pieces)):
        if used[index] != 1:
            problems.append(f"Piece {index} used {used[index]} times")

    cells = Counter()
    for placement in placements:
        if not 0 <= placement.piece_index < len(pieces):
            problems.append(f"Placement references unknown piece {placement.piece_index}")
            continue
        expected = pieces[placement.piece_index].volume
        if len(placement.coords) != expected:
            problems.append(
                f"Piece {placement.piece_index} covers {len(placement.coords)} cells, expected {expected}"
            )
        for coord in placement.coords:
            if not all(0 <= c < cube_size for c in coord):
                problems.append(f"Cell {coord} lies outside the cube")
            cells[tuple(coord)] += 1

    overlaps = sorted(c for c, n in cells.items() if n > 1)
    if overlaps:
        problems.append(f"Overlapping cells: {overlaps}")
    missing = cube_size ** 3 - len([c for c in cells if all(0 <= v < cube_size for v in c)])
    if missing:
        problems.append(f"{missing} cells are not covered")
    return problems
