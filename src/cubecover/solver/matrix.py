"""
Exact-cover matrix construction.

Every (piece, rotation, translation) that keeps the piece inside the cube
becomes one row. Columns are numbered voxel-first: cell (x, y, z) owns
column ``z*N*N + y*N + x``, and piece ``i`` owns column ``N**3 + i``.
"""

from typing import List, Sequence, Tuple

from cubecover.core.base import ExactCoverMatrix, Piece, Row, Voxel
from cubecover.solver.rotation import ordered_rotations


def voxel_column(x: int, y: int, z: int, cube_size: int) -> int:
    """Column id of cube cell (x, y, z)."""
    return z * cube_size * cube_size + y * cube_size + x


def piece_column(piece_index: int, cube_size: int) -> int:
    """Column id enforcing that piece `piece_index` is used exactly once."""
    return cube_size ** 3 + piece_index


def column_coords(column_id: int, cube_size: int) -> Voxel:
    """Inverse of voxel_column."""
    if not 0 <= column_id < cube_size ** 3:
        raise ValueError(f"Column {column_id} is not a voxel column for cube size {cube_size}")
    z, rem = divmod(column_id, cube_size * cube_size)
    y, x = divmod(rem, cube_size)
    return (x, y, z)


def _translations(extent: Tuple[int, int, int], cube_size: int):
    max_x, max_y, max_z = extent
    for x in range(cube_size - max_x):
        for y in range(cube_size - max_y):
            for z in range(cube_size - max_z):
                yield (x, y, z)


def build_piece_rows(piece_index: int, piece: Piece, cube_size: int) -> List[Row]:
    """All rows for one piece. Empty when no orientation fits the cube."""
    rows = []
    usage = piece_column(piece_index, cube_size)
    for rot_index, rotation in enumerate(ordered_rotations(piece.shape)):
        # extent measured as max coordinate; rotations are normalized to min 0
        extent = (
            max(v[0] for v in rotation),
            max(v[1] for v in rotation),
            max(v[2] for v in rotation),
        )
        for tx, ty, tz in _translations(extent, cube_size):
            coords = tuple((vx + tx, vy + ty, vz + tz) for vx, vy, vz in rotation)
            columns = [usage]
            columns.extend(voxel_column(x, y, z, cube_size) for x, y, z in coords)
            rows.append(Row(
                piece_index=piece_index,
                rotation_index=rot_index,
                translation=(tx, ty, tz),
                columns=tuple(columns),
                coords=coords,
            ))
    return rows


def build_exact_cover_matrix(pieces: Sequence[Piece], cube_size: int) -> ExactCoverMatrix:
    """
    Build the exact-cover matrix for `pieces` packed into an N x N x N cube.

    Args:
        pieces: Pieces in selection order; the order fixes piece column ids
        cube_size: Edge length N of the target cube

    Returns:
        ExactCoverMatrix with N**3 + len(pieces) columns
    """
    matrix = ExactCoverMatrix(cube_size=cube_size, num_pieces=len(pieces))
    for piece_index, piece in enumerate(pieces):
        matrix.rows.extend(build_piece_rows(piece_index, piece, cube_size))
    return matrix
