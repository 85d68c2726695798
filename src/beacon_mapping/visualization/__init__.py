"""
Visualization Module

This module provides an interactive Plotly view of merged beacon maps.
"""

from .beacon_map import BeaconMapVisualizer

__all__ = [
    "BeaconMapVisualizer",
]
