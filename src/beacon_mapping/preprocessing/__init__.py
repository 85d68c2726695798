"""
Preprocessing Module

This module turns raw scanner report text into beacon sets ready for merging.
"""

from .loader import ScannerReportLoader, MalformedInputError, parse_scanner_reports

__all__ = [
    "ScannerReportLoader",
    "MalformedInputError",
    "parse_scanner_reports",
]
