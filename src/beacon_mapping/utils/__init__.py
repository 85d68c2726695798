"""
Utility Functions Module

This module provides common utility functions used across the beacon mapping project.
- Logging setup
- Rigid transforms between scanner frames
- Export of merged maps and scanner transforms
"""

from .logging import setup_logger
from .coordinate_transform import RigidTransform
from .export import (
    export_beacons_to_csv,
    export_scanner_transforms_to_json,
    load_scanner_transforms_from_json,
    save_transform_matrix,
    load_transform_matrix,
)

__all__ = [
    "setup_logger",
    "RigidTransform",
    "export_beacons_to_csv",
    "export_scanner_transforms_to_json",
    "load_scanner_transforms_from_json",
    "save_transform_matrix",
    "load_transform_matrix",
]
