"""
Beacon Data Model

Integer beacon coordinates and immutable beacon sets as reported by a single
scanner (or by a group of scanners already merged into one frame).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, NamedTuple, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray


class Coordinate(NamedTuple):
    """A beacon position (x, y, z) in some scanner frame."""

    x: int
    y: int
    z: int

    def manhattan_distance(self, other: "Coordinate") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)

    def __str__(self) -> str:
        return f"{self.x},{self.y},{self.z}"


@dataclass(frozen=True)
class BeaconSet:
    """
    Immutable set of beacon coordinates expressed in one reference frame.

    Merging never mutates a set; ``union`` and ``transformed`` return new
    instances. The NumPy view returned by ``to_array`` is sorted
    lexicographically so that searches over it are reproducible.
    """

    beacons: FrozenSet[Coordinate] = field(default_factory=frozenset)

    @classmethod
    def from_points(cls, points: Iterable[Iterable[int]]) -> "BeaconSet":
        return cls(frozenset(Coordinate(*(int(v) for v in p)) for p in points))

    @classmethod
    def from_array(cls, points: "NDArray[np.integer]") -> "BeaconSet":
        """Build a set from an (N, 3) integer array."""
        arr = np.asarray(points)
        if arr.size == 0:
            return cls()
        if arr.ndim != 2 or arr.shape[1] != 3:
            raise ValueError(f"Expected Nx3 array, got shape {arr.shape}")
        return cls(frozenset(Coordinate(*row) for row in arr.tolist()))

    def to_array(self) -> "NDArray[np.int64]":
        if not self.beacons:
            return np.empty((0, 3), dtype=np.int64)
        return np.array(sorted(self.beacons), dtype=np.int64)

    def union(self, other: "BeaconSet") -> "BeaconSet":
        return BeaconSet(self.beacons | other.beacons)

    def intersection(self, other: "BeaconSet") -> "BeaconSet":
        return BeaconSet(self.beacons & other.beacons)

    def transformed(self, transform) -> "BeaconSet":
        """Return this set mapped through a RigidTransform."""
        return BeaconSet.from_array(transform.apply(self.to_array()))

    def __len__(self) -> int:
        return len(self.beacons)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(sorted(self.beacons))

    def __contains__(self, item: object) -> bool:
        return item in self.beacons

    def __repr__(self) -> str:
        return f"BeaconSet({len(self.beacons)} beacons)"
