"""
Beacon Mapping Package

A Python package for reconstructing a unified beacon map from scanner reports
taken in unknown, axis-aligned rotated and translated local frames.
Pairwise alignment searches the 24 axis-aligned orientations and bounded
integer translations; reports are merged until one map remains.
"""

__version__ = "0.1.0"

from .alignment import *
from .preprocessing import *
from .analysis import *
from .utils import *
from .visualization import *

__all__ = [
    "alignment",
    "preprocessing",
    "analysis",
    "utils",
    "visualization",
]
