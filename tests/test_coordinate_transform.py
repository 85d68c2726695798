"""
Unit tests for RigidTransform.

These tests verify:
- Application to coordinates and arrays
- Inverse and composition laws
- Matrix and dictionary serialization
"""

import numpy as np
import pytest

from beacon_mapping.alignment.beacons import Coordinate
from beacon_mapping.alignment.orientation import NUM_ORIENTATIONS
from beacon_mapping.utils.coordinate_transform import RigidTransform


class TestRigidTransformApply:
    def test_identity_leaves_points_unchanged(self):
        points = np.array([[1, 2, 3], [-4, 5, -6]])
        np.testing.assert_array_equal(RigidTransform.identity().apply(points), points)

    def test_rotation_then_translation(self):
        # orientation 9 maps (x, y, z) -> (y, z, x)
        transform = RigidTransform(orientation=9, translation=(10, 20, 30))

        assert transform.apply_to_coordinate(Coordinate(1, 2, 3)) == Coordinate(12, 23, 31)
        np.testing.assert_array_equal(transform.apply(np.array([[1, 2, 3]])), [[12, 23, 31]])

    def test_origin_is_translation(self):
        transform = RigidTransform(orientation=5, translation=(68, -1246, -43))

        assert transform.origin == Coordinate(68, -1246, -43)
        assert transform.apply_to_coordinate(Coordinate(0, 0, 0)) == transform.origin

    def test_apply_empty(self):
        out = RigidTransform(orientation=3, translation=(1, 1, 1)).apply(np.empty((0, 3)))
        assert out.shape == (0, 3)


class TestRigidTransformAlgebra:
    @pytest.mark.parametrize("orientation", range(NUM_ORIENTATIONS))
    def test_inverse_undoes_transform(self, orientation):
        transform = RigidTransform(orientation=orientation, translation=(5, -7, 11))
        point = Coordinate(3, -8, 13)

        assert transform.inverse().apply_to_coordinate(transform.apply_to_coordinate(point)) == point
        assert transform.compose(transform.inverse()) == RigidTransform.identity()

    def test_compose_applies_inner_first(self):
        outer = RigidTransform(orientation=9, translation=(1, 0, 0))
        inner = RigidTransform(orientation=14, translation=(0, 2, 0))
        point = Coordinate(4, 5, 6)

        expected = outer.apply_to_coordinate(inner.apply_to_coordinate(point))
        assert outer.compose(inner).apply_to_coordinate(point) == expected


class TestRigidTransformSerialization:
    def test_matrix_round_trip(self):
        transform = RigidTransform(orientation=17, translation=(-92, -2380, -20))
        matrix = transform.to_matrix()

        assert matrix.shape == (4, 4)
        np.testing.assert_array_equal(matrix[3], [0, 0, 0, 1])
        assert RigidTransform.from_matrix(matrix) == transform

    def test_dict_round_trip(self):
        transform = RigidTransform(orientation=2, translation=(1105, -1205, 1229))
        assert RigidTransform.from_dict(transform.to_dict()) == transform

    @pytest.mark.parametrize("missing", ["orientation", "translation"])
    def test_from_dict_requires_both_keys(self, missing):
        data = RigidTransform(orientation=2, translation=(1, 2, 3)).to_dict()
        del data[missing]

        with pytest.raises(KeyError):
            RigidTransform.from_dict(data)

    def test_translation_normalized_to_int_tuple(self):
        transform = RigidTransform(orientation=0, translation=np.array([1, 2, 3]))
        assert transform.translation == (1, 2, 3)
        assert all(type(v) is int for v in transform.translation)

    def test_invalid_orientation(self):
        with pytest.raises(ValueError):
            RigidTransform(orientation=24)

    def test_invalid_matrix_shape(self):
        with pytest.raises(ValueError):
            RigidTransform.from_matrix(np.eye(3))
