"""
Pairwise Overlap Detection

Finds the rigid transform (axis-aligned orientation plus integer translation)
under which two scanner reports share at least ``threshold`` beacons.

The translation search is separable: a full 3-D match implies that at least
``threshold`` points of each set agree on every single axis. Candidate offsets
are therefore filtered one axis at a time (x, then y within the x-band, then z
within the x,y-band) before the full 3-D intersection is verified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from .beacons import BeaconSet
from .orientation import NUM_ORIENTATIONS, rotate_points
from ..utils.coordinate_transform import RigidTransform
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

DEFAULT_OVERLAP_THRESHOLD = 12


class AmbiguousOverlapError(ValueError):
    """Raised when two reports overlap under more than one distinct transform."""


@dataclass(frozen=True)
class OverlapResult:
    """
    Outcome of a successful overlap search.

    Attributes:
        shared: Beacons common to both reports, in the reference frame
        merged: Union of both reports, in the reference frame
        transform: Maps candidate-frame points into the reference frame
    """

    shared: BeaconSet
    merged: BeaconSet
    transform: RigidTransform


def _axis_offsets(
    ref_values: np.ndarray,
    cand_values: np.ndarray,
    threshold: int,
) -> Iterator[Tuple[int, np.ndarray, np.ndarray]]:
    """
    Yield per-axis offsets ``d`` for which ``cand - d`` agrees with ``ref`` on
    at least ``threshold`` points of each side, in ascending order.

    Every viable offset lies in ``[min(cand) - max(ref), max(cand) - min(ref)]``
    and equals some pairwise difference ``cand_i - ref_j``, so only those
    differences are tried. A difference realised by fewer than ``threshold``
    pairs cannot reach the threshold on either side and is skipped outright.

    Yields:
        (offset, ref_mask, cand_mask) where the masks select the points whose
        values match on this axis
    """
    if len(ref_values) < threshold or len(cand_values) < threshold:
        return
    diffs, counts = np.unique(cand_values[:, None] - ref_values[None, :], return_counts=True)
    for d in diffs[counts >= threshold]:
        shifted = cand_values - d
        ref_mask = np.isin(ref_values, shifted)
        if int(ref_mask.sum()) < threshold:
            continue
        cand_mask = np.isin(shifted, ref_values)
        if int(cand_mask.sum()) < threshold:
            continue
        yield int(d), ref_mask, cand_mask


class OverlapDetector:
    """
    Search the 24 orientations and bounded integer translations for an
    overlap of at least ``threshold`` beacons between two reports.

    By default the first verified transform wins. With ``require_unique`` the
    search is exhaustive and a second transform producing a different merged
    set raises AmbiguousOverlapError.
    """

    def __init__(self, threshold: int = DEFAULT_OVERLAP_THRESHOLD, require_unique: bool = False):
        """
        Args:
            threshold: Minimum number of coinciding beacons (must be >= 1)
            require_unique: Treat multiple distinct full matches as an error
        """
        if threshold < 1:
            raise ValueError(f"Overlap threshold must be at least 1, got {threshold}")
        self.threshold = int(threshold)
        self.require_unique = require_unique

    def find_overlap(self, reference: BeaconSet, candidate: BeaconSet) -> Optional[OverlapResult]:
        """
        Find a transform aligning ``candidate`` with ``reference``.

        Args:
            reference: Report whose frame the result is expressed in
            candidate: Report to rotate and translate onto the reference

        Returns:
            OverlapResult, or None when no transform reaches the threshold

        Raises:
            AmbiguousOverlapError: If require_unique is set and the reports
                overlap under more than one distinct transform
        """
        if len(reference) < self.threshold or len(candidate) < self.threshold:
            logger.debug(
                "Skipping overlap search: %d and %d beacons, threshold %d.",
                len(reference),
                len(candidate),
                self.threshold,
            )
            return None

        matches = self._iter_matches(reference, candidate)
        first = next(matches, None)
        if first is None:
            return None

        if self.require_unique:
            for other in matches:
                if other.merged != first.merged:
                    raise AmbiguousOverlapError(
                        f"Reports overlap under more than one transform: {first.transform} "
                        f"({len(first.shared)} shared) and {other.transform} ({len(other.shared)} shared)"
                    )

        logger.debug(
            "Overlap found with %d shared beacons: %s",
            len(first.shared),
            first.transform,
        )
        return first

    def _iter_matches(self, reference: BeaconSet, candidate: BeaconSet) -> Iterator[OverlapResult]:
        ref = reference.to_array()
        cand = candidate.to_array()
        for index in range(NUM_ORIENTATIONS):
            rotated = rotate_points(cand, index)
            for offset in self._candidate_offsets(ref, rotated):
                moved = BeaconSet.from_array(rotated - offset)
                shared = reference.intersection(moved)
                if len(shared) < self.threshold:
                    # Per-axis agreement without a 3-D match
                    continue
                yield OverlapResult(
                    shared=shared,
                    merged=reference.union(moved),
                    transform=RigidTransform(orientation=index, translation=tuple((-offset).tolist())),
                )

    def _candidate_offsets(self, ref: np.ndarray, cand: np.ndarray) -> Iterator[np.ndarray]:
        T = self.threshold
        for dx, ref_mx, cand_mx in _axis_offsets(ref[:, 0], cand[:, 0], T):
            ref_x = ref[ref_mx]
            cand_x = cand[cand_mx]
            for dy, ref_my, cand_my in _axis_offsets(ref_x[:, 1], cand_x[:, 1], T):
                ref_xy = ref_x[ref_my]
                cand_xy = cand_x[cand_my]
                for dz, _, _ in _axis_offsets(ref_xy[:, 2], cand_xy[:, 2], T):
                    yield np.array([dx, dy, dz], dtype=np.int64)


def find_overlap(
    reference: BeaconSet,
    candidate: BeaconSet,
    threshold: int = DEFAULT_OVERLAP_THRESHOLD,
) -> Optional[OverlapResult]:
    """Convenience wrapper around ``OverlapDetector(threshold).find_overlap``."""
    return OverlapDetector(threshold=threshold).find_overlap(reference, candidate)
