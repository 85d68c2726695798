"""
Export utilities for merged beacon maps.

Provides functions to export merge results to:
- CSV point lists (one beacon per line, unified frame)
- JSON scanner tables (orientation, translation and position per scanner)
- Plain-text 4x4 transform matrices
"""

import json
from pathlib import Path
from typing import Dict, Union, TYPE_CHECKING

import numpy as np

from .coordinate_transform import RigidTransform
from .logging import setup_logger
from ..alignment.beacons import BeaconSet

if TYPE_CHECKING:
    from ..alignment.scanner_merge import MergeResult

logger = setup_logger(__name__)

PathLike = Union[str, Path]


def export_beacons_to_csv(beacons: BeaconSet, output_path: PathLike) -> Path:
    """
    Write beacons as ``x,y,z`` lines sorted lexicographically.

    Args:
        beacons: Beacon set to export
        output_path: Destination CSV path (parent directories are created)

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    np.savetxt(output_path, beacons.to_array(), fmt="%d", delimiter=",", header="x,y,z", comments="")
    logger.info(f"Exported {len(beacons)} beacons to {output_path}")
    return output_path


def export_scanner_transforms_to_json(result: "MergeResult", output_path: PathLike) -> Path:
    """
    Write each scanner's transform into the unified frame as JSON.

    The document also records the anchor scanner, the beacon count and the
    maximum Manhattan distance between scanners.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    document = {
        "anchor": result.anchor,
        "beacon_count": len(result.beacons),
        "max_scanner_distance": result.max_scanner_distance,
        "scanners": {
            str(scanner): {
                **transform.to_dict(),
                "position": list(transform.origin),
            }
            for scanner, transform in sorted(result.scanner_transforms.items())
        },
    }
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(document, f, indent=2)
    logger.info(f"Exported {len(result.scanner_transforms)} scanner transforms to {output_path}")
    return output_path


def load_scanner_transforms_from_json(input_path: PathLike) -> Dict[int, RigidTransform]:
    """Read scanner transforms written by ``export_scanner_transforms_to_json``."""
    with Path(input_path).open("r", encoding="utf-8") as f:
        document = json.load(f)
    return {int(k): RigidTransform.from_dict(v) for k, v in document["scanners"].items()}


def save_transform_matrix(transform: RigidTransform, output_file: PathLike) -> None:
    """Save a transform as a 4x4 homogeneous integer matrix in a text file."""
    np.savetxt(output_file, transform.to_matrix(), fmt="%d", header="4x4 transformation matrix")
    logger.info(f"Saved transformation matrix to {output_file}")


def load_transform_matrix(input_file: PathLike) -> RigidTransform:
    """
    Load a transform saved by ``save_transform_matrix``.

    Raises:
        ValueError: If the file does not hold a 4x4 axis-aligned rigid transform
    """
    matrix = np.loadtxt(input_file, dtype=np.int64)
    if matrix.shape != (4, 4):
        raise ValueError(f"Expected 4x4 matrix, got shape {matrix.shape}")
    logger.info(f"Loaded transformation matrix from {input_file}")
    return RigidTransform.from_matrix(matrix)
