"""
Axis-Aligned Orientations

The 24 proper rotations of a scanner whose axes stay aligned with the world
axes. Each rotation is a signed permutation matrix with determinant +1,
stored in a fixed table so that index ``i`` means the same rotation for
every point of a set.
"""

from __future__ import annotations

from typing import Dict, List, TYPE_CHECKING

import numpy as np

from .beacons import Coordinate

if TYPE_CHECKING:
    from numpy.typing import NDArray


# Image of (x, y, z) under each orientation, in table order.
_ORIENTATION_AXES = (
    ("x", "y", "z"), ("x", "z", "-y"), ("x", "-y", "-z"), ("x", "-z", "y"),
    ("-x", "y", "-z"), ("-x", "-z", "-y"), ("-x", "-y", "z"), ("-x", "z", "y"),
    ("y", "-x", "z"), ("y", "z", "x"), ("y", "x", "-z"), ("y", "-z", "-x"),
    ("-y", "-x", "-z"), ("-y", "-z", "x"), ("-y", "x", "z"), ("-y", "z", "-x"),
    ("z", "x", "y"), ("z", "y", "-x"), ("z", "-x", "-y"), ("z", "-y", "x"),
    ("-z", "y", "x"), ("-z", "x", "-y"), ("-z", "-y", "-x"), ("-z", "-x", "y"),
)

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


def _axes_to_matrix(axes) -> np.ndarray:
    m = np.zeros((3, 3), dtype=np.int64)
    for row, term in enumerate(axes):
        sign = -1 if term.startswith("-") else 1
        m[row, _AXIS_INDEX[term.lstrip("-")]] = sign
    return m


ORIENTATIONS: "NDArray[np.int64]" = np.stack([_axes_to_matrix(a) for a in _ORIENTATION_AXES])
ORIENTATIONS.setflags(write=False)

NUM_ORIENTATIONS = len(ORIENTATIONS)

_INDEX_BY_MATRIX: Dict[bytes, int] = {m.tobytes(): i for i, m in enumerate(ORIENTATIONS)}


def orientation_matrix(index: int) -> "NDArray[np.int64]":
    if not 0 <= index < NUM_ORIENTATIONS:
        raise IndexError(f"Orientation index out of range: {index}")
    return ORIENTATIONS[index]


def orientation_index(matrix: "NDArray[np.integer]") -> int:
    """
    Look up the table index of a rotation matrix.

    Raises:
        ValueError: If the matrix is not one of the 24 axis-aligned rotations
    """
    key = np.asarray(matrix, dtype=np.int64).reshape(3, 3).tobytes()
    try:
        return _INDEX_BY_MATRIX[key]
    except KeyError:
        raise ValueError(f"Not an axis-aligned rotation:\n{np.asarray(matrix)}") from None


def rotate_points(points: "NDArray[np.integer]", index: int) -> "NDArray[np.int64]":
    """
    Rotate an (N, 3) integer array by the orientation at ``index``.

    Args:
        points: Nx3 array of coordinates
        index: Orientation table index (0..23)

    Returns:
        Nx3 int64 array of rotated coordinates
    """
    pts = np.asarray(points, dtype=np.int64)
    if pts.size == 0:
        return pts.reshape(0, 3)
    return pts @ orientation_matrix(index).T


def all_orientations(coord: Coordinate) -> List[Coordinate]:
    """Return the 24 images of ``coord`` in fixed table order."""
    images = ORIENTATIONS @ np.asarray(coord, dtype=np.int64)
    return [Coordinate(*row) for row in images.tolist()]
