"""Tests for scanner layout measurements."""

import numpy as np
import pytest

from beacon_mapping.alignment.beacons import Coordinate
from beacon_mapping.analysis import (
    farthest_scanner_pair,
    max_scanner_distance,
    pairwise_manhattan_distances,
)

POSITIONS = {
    0: Coordinate(0, 0, 0),
    1: Coordinate(68, -1246, -43),
    2: Coordinate(1105, -1205, 1229),
    3: Coordinate(-92, -2380, -20),
    4: Coordinate(-20, -1133, 1061),
}


def test_pairwise_matrix_is_symmetric_with_zero_diagonal():
    D = pairwise_manhattan_distances(list(POSITIONS.values()))

    assert D.shape == (5, 5)
    np.testing.assert_array_equal(D, D.T)
    np.testing.assert_array_equal(np.diag(D), 0)
    assert D[0, 1] == POSITIONS[0].manhattan_distance(POSITIONS[1])


def test_max_scanner_distance():
    assert max_scanner_distance(list(POSITIONS.values())) == 3621


def test_fewer_than_two_positions():
    assert max_scanner_distance([]) == 0
    assert max_scanner_distance([Coordinate(5, 5, 5)]) == 0
    assert pairwise_manhattan_distances([]).shape == (0, 0)


def test_farthest_pair():
    assert farthest_scanner_pair(POSITIONS) == (2, 3, 3621)


def test_farthest_pair_requires_two():
    with pytest.raises(ValueError):
        farthest_scanner_pair({0: Coordinate(0, 0, 0)})
