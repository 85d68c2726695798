"""
Scanner Layout Analysis

Derived measurements on recovered scanner positions in the unified frame.
"""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

import numpy as np

from ..alignment.beacons import Coordinate


def pairwise_manhattan_distances(positions: Sequence[Coordinate]) -> np.ndarray:
    """
    Compute the matrix of Manhattan distances between scanner positions.

    Args:
        positions: Scanner origins in a common frame

    Returns:
        NxN int64 array of distances
    """
    if len(positions) == 0:
        return np.zeros((0, 0), dtype=np.int64)
    P = np.asarray(positions, dtype=np.int64).reshape(-1, 3)
    return np.abs(P[:, None, :] - P[None, :, :]).sum(axis=2)


def max_scanner_distance(positions: Sequence[Coordinate]) -> int:
    """Largest Manhattan distance between any two scanners (0 for fewer than two)."""
    if len(positions) < 2:
        return 0
    return int(pairwise_manhattan_distances(positions).max())


def farthest_scanner_pair(positions: Dict[int, Coordinate]) -> Tuple[int, int, int]:
    """
    Find the two scanners farthest apart.

    Returns:
        (scanner_a, scanner_b, distance) with scanner_a < scanner_b

    Raises:
        ValueError: If fewer than two positions are given
    """
    if len(positions) < 2:
        raise ValueError("At least two scanner positions are required")
    ids = sorted(positions)
    D = pairwise_manhattan_distances([positions[s] for s in ids])
    a, b = np.unravel_index(int(np.argmax(D)), D.shape)
    a, b = sorted((int(a), int(b)))
    return ids[a], ids[b], int(D[a, b])
