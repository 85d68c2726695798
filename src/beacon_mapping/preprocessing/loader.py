"""
Scanner Report Loader

This module parses the plain-text scanner report format into beacon sets.

Format: one block per scanner, blocks separated by a blank line. The first
line of a block is a header such as ``--- scanner 0 ---``; every following
line is ``x,y,z`` with signed integers and no spaces.
"""

import re
from pathlib import Path
from typing import List, Union

from ..alignment.beacons import BeaconSet, Coordinate
from ..utils.logging import setup_logger

logger = setup_logger(__name__)

_COORDINATE_LINE = re.compile(r"^([+-]?\d+),([+-]?\d+),([+-]?\d+)$")


class MalformedInputError(ValueError):
    """Raised when a coordinate line is not three comma-separated integers."""

    def __init__(self, line_number: int, line: str):
        self.line_number = line_number
        self.line = line
        super().__init__(f"Line {line_number}: expected 'x,y,z' integers, got {line!r}")


class ScannerReportLoader:
    """
    A class for loading scanner reports from text.

    Features:
    - Header lines are skipped (kept only for log messages)
    - Duplicate coordinates within one report collapse
    - Report order follows input order
    """

    def load(self, file_path: Union[str, Path]) -> List[BeaconSet]:
        """
        Load scanner reports from a file.

        Args:
            file_path: Path to the text file

        Returns:
            List of beacon sets, one per scanner, in input order

        Raises:
            FileNotFoundError: If the file does not exist
            MalformedInputError: If a coordinate line cannot be parsed
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Loading scanner reports from {file_path}")
        reports = self.parse(file_path.read_text(encoding="utf-8"))
        logger.info(f"Loaded {len(reports)} scanner reports")
        return reports

    def parse(self, text: str) -> List[BeaconSet]:
        """
        Parse scanner reports from a string.

        Args:
            text: Input text in the scanner report format

        Returns:
            List of beacon sets in input order (empty for blank input)

        Raises:
            MalformedInputError: If a coordinate line cannot be parsed
        """
        reports: List[BeaconSet] = []
        header = None
        beacons: List[Coordinate] = []

        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line:
                if header is not None:
                    reports.append(self._finish_block(header, beacons))
                    header, beacons = None, []
                continue
            if header is None:
                header = line
                continue
            beacons.append(self._parse_line(line, line_number))

        if header is not None:
            reports.append(self._finish_block(header, beacons))
        return reports

    @staticmethod
    def _finish_block(header: str, beacons: List[Coordinate]) -> BeaconSet:
        report = BeaconSet(frozenset(beacons))
        logger.debug(f"Parsed '{header}' with {len(report)} beacons")
        return report

    @staticmethod
    def _parse_line(line: str, line_number: int) -> Coordinate:
        match = _COORDINATE_LINE.match(line.strip())
        if match is None:
            raise MalformedInputError(line_number, line)
        return Coordinate(*(int(v) for v in match.groups()))


def parse_scanner_reports(text: str) -> List[BeaconSet]:
    return ScannerReportLoader().parse(text)
