"""
Rigid Transforms Between Scanner Frames.

Every scanner reports beacons in its own frame. Two frames are related by one
of the 24 axis-aligned rotations followed by an integer translation:

    target = R @ source + t

Because the origin of the source frame is the scanner itself, ``t`` is also
the scanner's position expressed in the target frame. Transforms compose, so
a scanner merged through several intermediate groups still ends up with a
single transform into the final unified frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, TYPE_CHECKING

import numpy as np

from ..alignment.beacons import Coordinate
from ..alignment.orientation import (
    NUM_ORIENTATIONS,
    orientation_index,
    orientation_matrix,
)

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True)
class RigidTransform:
    """Axis-aligned rotation plus integer translation.

    Attributes:
        orientation: Index into the orientation table (0..23)
        translation: Integer offset (tx, ty, tz) added after rotating

    Example:
        >>> t = RigidTransform(orientation=0, translation=(68, -1246, -43))
        >>> t.apply_to_coordinate(Coordinate(0, 0, 0))
        Coordinate(x=68, y=-1246, z=-43)
    """

    orientation: int = 0
    translation: Tuple[int, int, int] = field(default=(0, 0, 0))

    def __post_init__(self) -> None:
        if not 0 <= int(self.orientation) < NUM_ORIENTATIONS:
            raise ValueError(f"Orientation index out of range: {self.orientation}")
        if len(self.translation) != 3:
            raise ValueError(f"Translation must have 3 components, got {self.translation!r}")
        object.__setattr__(self, "orientation", int(self.orientation))
        object.__setattr__(self, "translation", tuple(int(v) for v in self.translation))

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls(orientation=0, translation=(0, 0, 0))

    @classmethod
    def from_matrix(cls, matrix: "NDArray[np.integer]") -> "RigidTransform":
        """Create a transform from a 4x4 homogeneous integer matrix.

        Raises:
            ValueError: If the matrix is not 4x4 or its rotation block is not
                one of the axis-aligned rotations
        """
        m = np.asarray(matrix)
        if m.shape != (4, 4):
            raise ValueError(f"Transform must be 4x4 matrix, got {m.shape}")
        return cls(
            orientation=orientation_index(m[:3, :3]),
            translation=tuple(int(v) for v in m[:3, 3]),
        )

    @property
    def rotation(self) -> "NDArray[np.int64]":
        return orientation_matrix(self.orientation)

    @property
    def origin(self) -> Coordinate:
        """Position of the source frame's origin in the target frame."""
        return Coordinate(*self.translation)

    def apply(self, points: "NDArray[np.integer]") -> "NDArray[np.int64]":
        """Map an Nx3 array of source-frame points into the target frame."""
        pts = np.asarray(points, dtype=np.int64)
        if pts.size == 0:
            return pts.reshape(0, 3)
        return pts @ self.rotation.T + np.asarray(self.translation, dtype=np.int64)

    def apply_to_coordinate(self, coord: Coordinate) -> Coordinate:
        out = self.rotation @ np.asarray(coord, dtype=np.int64) + np.asarray(self.translation, dtype=np.int64)
        return Coordinate(*out.tolist())

    def inverse(self) -> "RigidTransform":
        """Transform mapping target-frame points back into the source frame."""
        r_inv = self.rotation.T
        t_inv = -(r_inv @ np.asarray(self.translation, dtype=np.int64))
        return RigidTransform(orientation=orientation_index(r_inv), translation=tuple(t_inv.tolist()))

    def compose(self, inner: "RigidTransform") -> "RigidTransform":
        """Return ``self ∘ inner``: apply ``inner`` first, then ``self``."""
        rotation = self.rotation @ inner.rotation
        translation = self.rotation @ np.asarray(inner.translation, dtype=np.int64) + np.asarray(
            self.translation, dtype=np.int64
        )
        return RigidTransform(orientation=orientation_index(rotation), translation=tuple(translation.tolist()))

    def to_matrix(self) -> "NDArray[np.int64]":
        m = np.eye(4, dtype=np.int64)
        m[:3, :3] = self.rotation
        m[:3, 3] = self.translation
        return m

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON/YAML storage."""
        return {
            "orientation": self.orientation,
            "translation": list(self.translation),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RigidTransform":
        return cls(
            orientation=int(data["orientation"]),
            translation=tuple(int(v) for v in data["translation"]),
        )

    def __str__(self) -> str:
        tx, ty, tz = self.translation
        return f"RigidTransform(orientation={self.orientation}, translation=[{tx}, {ty}, {tz}])"
