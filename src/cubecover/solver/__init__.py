"""Exact-cover solver: rotations, matrix construction and dancing-links search."""

from cubecover.solver.rotation import (
    ROTATION_MATRICES,
    get_rotation_matrix,
    canonical_form,
    rotations,
    ordered_rotations,
    bounding_box,
)
from cubecover.solver.matrix import build_exact_cover_matrix, voxel_column, piece_column
from cubecover.solver.dlx import DancingLinks, solve
from cubecover.solver.pipeline import solve_cube, solve_with_stats, validate_inputs, verify_solution, make_stop_check

__all__ = [
    "ROTATION_MATRICES",
    "get_rotation_matrix",
    "canonical_form",
    "rotations",
    "ordered_rotations",
    "bounding_box",
    "build_exact_cover_matrix",
    "voxel_column",
    "piece_column",
    "DancingLinks",
    "solve",
    "solve_cube",
    "solve_with_stats",
    "validate_inputs",
    "verify_solution",
    "make_stop_check",
]
