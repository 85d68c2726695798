"""
Scanner Alignment Module

This module recovers the axis-aligned rigid transforms between scanner
reports and folds the reports into a single unified beacon map.
"""

from .beacons import Coordinate, BeaconSet
from .orientation import ORIENTATIONS, NUM_ORIENTATIONS, all_orientations, rotate_points
from .overlap_detection import (
    OverlapDetector,
    OverlapResult,
    AmbiguousOverlapError,
    find_overlap,
)
from .scanner_merge import (
    MergeOrchestrator,
    MergeResult,
    ScannerGroup,
    UnresolvedScannersError,
    merge_reports,
)

__all__ = [
    "Coordinate",
    "BeaconSet",
    "ORIENTATIONS",
    "NUM_ORIENTATIONS",
    "all_orientations",
    "rotate_points",
    "OverlapDetector",
    "OverlapResult",
    "AmbiguousOverlapError",
    "find_overlap",
    "MergeOrchestrator",
    "MergeResult",
    "ScannerGroup",
    "UnresolvedScannersError",
    "merge_reports",
]
