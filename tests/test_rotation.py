"""
Tests for cube rotations and canonical forms.
"""

import numpy as np
import pytest

from cubecover.core.catalog import SOMA_PIECES
from cubecover.solver.rotation import (
    ROTATION_MATRICES,
    get_rotation_matrix,
    canonical_form,
    rotate_shape,
    rotations,
    ordered_rotations,
    bounding_box,
    minimal_extent,
)


class TestRotationMatrices:
    """Test the Rot24 group."""

    def test_twenty_four_distinct_matrices(self):
        """All 24 matrices are distinct."""
        assert len(ROTATION_MATRICES) == 24
        keys = {tuple(m.flatten().tolist()) for m in ROTATION_MATRICES}
        assert len(keys) == 24

    def test_matrices_are_proper_rotations(self):
        """Every matrix is orthogonal with determinant +1."""
        for m in ROTATION_MATRICES:
            assert np.array_equal(m @ m.T, np.eye(3, dtype=int))
            assert round(np.linalg.det(m)) == 1

    def test_first_matrix_is_identity(self):
        assert np.array_equal(get_rotation_matrix(0), np.eye(3, dtype=int))

    def test_index_out_of_range(self):
        with pytest.raises(ValueError):
            get_rotation_matrix(24)
        with pytest.raises(ValueError):
            get_rotation_matrix(-1)


class TestCanonicalForm:
    """Test normalization and ordering."""

    def test_shift_to_origin(self):
        """Coordinates are shifted so every axis starts at 0."""
        assert canonical_form([(3, 5, 7), (4, 5, 7)]) == ((0, 0, 0), (1, 0, 0))

    def test_lexicographic_order(self):
        """Points sort by x, then y, then z."""
        form = canonical_form([(1, 0, 0), (0, 1, 0), (0, 0, 1), (0, 0, 0)])
        assert form == ((0, 0, 0), (0, 0, 1), (0, 1, 0), (1, 0, 0))

    def test_negative_coordinates(self):
        assert canonical_form([(-1, -1, -1), (0, -1, -1)]) == ((0, 0, 0), (1, 0, 0))

    def test_empty_shape_rejected(self):
        with pytest.raises(ValueError):
            canonical_form([])


class TestRotations:
    """Test orientation enumeration."""

    @pytest.mark.parametrize("name,expected", [
        ("L", 24),
        ("T", 12),
        ("Z", 12),
        ("A", 12),
        ("B", 8),
    ])
    def test_soma_orientation_counts(self, name, expected):
        """Orientation counts follow each piece's symmetry."""
        assert len(rotations(SOMA_PIECES[name].shape)) == expected

    def test_monocube_has_one_orientation(self):
        assert rotations([(0, 0, 0)]) == frozenset({((0, 0, 0),)})

    def test_bar_has_three_orientations(self):
        forms = rotations([(0, 0, 0), (1, 0, 0), (2, 0, 0)])
        assert forms == frozenset({
            ((0, 0, 0), (1, 0, 0), (2, 0, 0)),
            ((0, 0, 0), (0, 1, 0), (0, 2, 0)),
            ((0, 0, 0), (0, 0, 1), (0, 0, 2)),
        })

    def test_count_divides_24(self):
        for piece in SOMA_PIECES.values():
            assert 24 % len(rotations(piece.shape)) == 0

    def test_rotated_copy_has_same_orientations(self):
        """Rotating a shape first does not change its orientation set."""
        shape = SOMA_PIECES["L"].shape
        for rot_index in (1, 7, 13, 22):
            assert rotations(rotate_shape(shape, rot_index)) == rotations(shape)

    def test_input_order_irrelevant(self):
        shape = list(SOMA_PIECES["P"].shape)
        assert ordered_rotations(shape) == ordered_rotations(list(reversed(shape)))

    def test_ordered_rotations_sorted(self):
        ordered = ordered_rotations(SOMA_PIECES["T"].shape)
        assert list(ordered) == sorted(ordered)
        assert set(ordered) == rotations(SOMA_PIECES["T"].shape)


class TestExtents:
    """Test bounding boxes."""

    def test_bounding_box(self):
        assert bounding_box(SOMA_PIECES["L"].shape) == (3, 2, 1)

    def test_minimal_extent(self):
        assert minimal_extent(SOMA_PIECES["S"].shape) == (2, 2, 2)
        assert minimal_extent([(0, 0, 0), (0, 0, 1), (0, 0, 2), (0, 0, 3)]) == (1, 1, 4)
