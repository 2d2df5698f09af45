"""
The 24 proper rotations of the cube (Rot24) and canonical piece orientations.
"""

from typing import FrozenSet, Iterable, List, Tuple

import numpy as np

from cubecover.core.base import Shape, Voxel


def generate_24_rotations() -> List[np.ndarray]:
    """
    Generate the 24 proper rotation matrices (the discrete subgroup of SO(3)).

    Method: 6 face orientations, each followed by the 4 turns about the
    principal axis that face now points along.
    """
    rotations = []

    # 90 degrees about X
    Rx90 = np.array([
        [1, 0, 0],
        [0, 0, -1],
        [0, 1, 0]
    ], dtype=int)

    # 90 degrees about Y
    Ry90 = np.array([
        [0, 0, 1],
        [0, 1, 0],
        [-1, 0, 0]
    ], dtype=int)

    # 90 degrees about Z
    Rz90 = np.array([
        [0, -1, 0],
        [1, 0, 0],
        [0, 0, 1]
    ], dtype=int)

    I = np.eye(3, dtype=int)

    face_rotations = [
        I,                      # +Z stays +Z
        Rx90,                   # +Z -> -Y
        Rx90 @ Rx90,            # +Z -> -Z
        Rx90 @ Rx90 @ Rx90,     # +Z -> +Y
        Ry90,                   # +Z -> +X
        Ry90 @ Ry90 @ Ry90,     # +Z -> -X
    ]

    for face_rot in face_rotations:
        for i in range(4):
            z_rot = np.linalg.matrix_power(Rz90, i)
            rotations.append(face_rot @ z_rot)

    return rotations


ROTATION_MATRICES = generate_24_rotations()


def get_rotation_matrix(rot_index: int) -> np.ndarray:
    """
    Return rotation matrix `rot_index` (0-23).
    """
    if not 0 <= rot_index < 24:
        raise ValueError(f"Rotation index must be 0-23, got {rot_index}")
    return ROTATION_MATRICES[rot_index]


def _as_array(points: Iterable[Voxel]) -> np.ndarray:
    arr = np.array([tuple(p) for p in points], dtype=int)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError("points must be a non-empty collection of (x, y, z) triples")
    return arr


def normalize_shape(points: Iterable[Voxel]) -> np.ndarray:
    """Shift points so the minimum on every axis is 0."""
    arr = _as_array(points)
    return arr - arr.min(axis=0)


def canonical_form(points: Iterable[Voxel]) -> Shape:
    """
    Normalize the point set and sort it lexicographically (x, then y, then z).
    """
    normalized = normalize_shape(points)
    return tuple(sorted(tuple(int(c) for c in row) for row in normalized.tolist()))


def rotate_shape(points: Iterable[Voxel], rot_index: int) -> Shape:
    """Apply rotation `rot_index` and return the canonical form of the result."""
    arr = _as_array(points)
    rotated = arr @ get_rotation_matrix(rot_index).T
    return canonical_form(rotated)


def rotations(shape: Iterable[Voxel]) -> FrozenSet[Shape]:
    """
    Distinct canonical orientations of a shape under Rot24.

    Shapes with internal symmetry collapse to fewer than 24 entries; the
    count always divides 24.
    """
    arr = _as_array(shape)
    forms = set()
    for rot_matrix in ROTATION_MATRICES:
        forms.add(canonical_form(arr @ rot_matrix.T))
    return frozenset(forms)


def ordered_rotations(shape: Iterable[Voxel]) -> Tuple[Shape, ...]:
    """`rotations(shape)` as a sorted tuple, the order rows are generated in."""
    return tuple(sorted(rotations(shape)))


def bounding_box(shape: Iterable[Voxel]) -> Tuple[int, int, int]:
    """Extent (dx, dy, dz) of the shape's axis-aligned bounding box."""
    arr = _as_array(shape)
    extent = arr.max(axis=0) - arr.min(axis=0) + 1
    return (int(extent[0]), int(extent[1]), int(extent[2]))


def minimal_extent(shape: Iterable[Voxel]) -> Tuple[int, int, int]:
    """Smallest bounding box over all orientations, sorted ascending."""
    return min(tuple(sorted(bounding_box(form))) for form in rotations(shape))
