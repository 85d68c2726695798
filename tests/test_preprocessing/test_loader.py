"""
Test suite for the scanner report loader
"""

from pathlib import Path

import pytest

from beacon_mapping.alignment.beacons import BeaconSet, Coordinate
from beacon_mapping.preprocessing.loader import (
    MalformedInputError,
    ScannerReportLoader,
    parse_scanner_reports,
)

SAMPLE_DATA = Path(__file__).parent.parent / "sample_data"


class TestScannerReportLoader:
    """Test cases for the ScannerReportLoader class."""

    def test_load_five_scanners(self):
        reports = ScannerReportLoader().load(SAMPLE_DATA / "five_scanners.txt")

        assert [len(r) for r in reports] == [25, 25, 26, 25, 26]
        assert Coordinate(404, -588, -901) in reports[0]
        assert Coordinate(30, -46, -14) in reports[4]

    def test_parse_preserves_block_order(self):
        text = "--- scanner 0 ---\n1,2,3\n\n--- scanner 1 ---\n-4,-5,-6\n7,8,9\n"
        reports = parse_scanner_reports(text)

        assert reports == [
            BeaconSet.from_points([(1, 2, 3)]),
            BeaconSet.from_points([(-4, -5, -6), (7, 8, 9)]),
        ]

    def test_windows_newlines_and_extra_blank_lines(self):
        text = "\r\n--- scanner 0 ---\r\n1,2,3\r\n\r\n\r\n--- scanner 1 ---\r\n4,5,6\r\n"
        reports = parse_scanner_reports(text)

        assert len(reports) == 2
        assert Coordinate(4, 5, 6) in reports[1]

    def test_duplicate_coordinates_collapse(self):
        reports = parse_scanner_reports("--- scanner 0 ---\n1,2,3\n1,2,3\n")
        assert len(reports[0]) == 1

    def test_empty_input(self):
        assert parse_scanner_reports("") == []
        assert parse_scanner_reports("\n  \n") == []

    def test_header_only_block_is_empty_report(self):
        reports = parse_scanner_reports("--- scanner 0 ---\n")
        assert reports == [BeaconSet()]

    @pytest.mark.parametrize("bad", ["1,2", "1,2,3,4", "1, 2, 3", "a,b,c", "1.5,2,3"])
    def test_malformed_line_reports_line_number(self, bad):
        text = f"--- scanner 0 ---\n1,2,3\n{bad}\n"
        with pytest.raises(MalformedInputError) as excinfo:
            parse_scanner_reports(text)

        assert excinfo.value.line_number == 3
        assert isinstance(excinfo.value, ValueError)

    def test_explicit_plus_sign(self):
        reports = parse_scanner_reports("--- scanner 0 ---\n+5,-3,+0\n")
        assert reports == [BeaconSet.from_points([(5, -3, 0)])]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScannerReportLoader().load(tmp_path / "missing.txt")

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "reports.txt"
        path.write_text("--- scanner 0 ---\n-1,-2,-3\n", encoding="utf-8")

        reports = ScannerReportLoader().load(str(path))
        assert reports == [BeaconSet.from_points([(-1, -2, -3)])]
