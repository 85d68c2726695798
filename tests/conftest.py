"""
Shared fixtures: the five-scanner reference input and its expected results.
"""

from pathlib import Path

import numpy as np
import pytest

from beacon_mapping.alignment.beacons import BeaconSet
from beacon_mapping.preprocessing.loader import ScannerReportLoader

SAMPLE_DATA = Path(__file__).parent / "sample_data"


def read_point_list(path: Path) -> BeaconSet:
    """Read a headerless file of ``x,y,z`` lines."""
    return BeaconSet.from_array(np.loadtxt(path, delimiter=",", dtype=np.int64, ndmin=2))


@pytest.fixture(scope="session")
def five_reports():
    return ScannerReportLoader().load(SAMPLE_DATA / "five_scanners.txt")


@pytest.fixture(scope="session")
def expected_merged():
    return read_point_list(SAMPLE_DATA / "five_scanners_merged.txt")


@pytest.fixture(scope="session")
def overlap_in_frame_0():
    return read_point_list(SAMPLE_DATA / "overlap_0_1_in_frame_0.txt")


@pytest.fixture(scope="session")
def overlap_in_frame_1():
    return read_point_list(SAMPLE_DATA / "overlap_0_1_in_frame_1.txt")
