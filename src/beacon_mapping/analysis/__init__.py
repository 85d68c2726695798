"""
Analysis Module

Measurements derived from a merged beacon map, such as distances between
recovered scanner positions.
"""

from .scanner_layout import (
    pairwise_manhattan_distances,
    max_scanner_distance,
    farthest_scanner_pair,
)

__all__ = [
    "pairwise_manhattan_distances",
    "max_scanner_distance",
    "farthest_scanner_pair",
]
