"""
Acceleration Module

Parallel evaluation of independent pairwise overlap searches.
"""

from .parallel_executor import PairParallelExecutor

__all__ = [
    "PairParallelExecutor",
]
