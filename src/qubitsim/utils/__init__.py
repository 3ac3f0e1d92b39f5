"""
Utility functions for qubitsim.

Includes logging setup, RNG management, and performance/memory utilities.
"""

from .logging_setup import setup_logger, get_logger, StructuredFormatter
from .rng import RNGManager
from .perf import PerformanceProfiler, estimate_memory_requirements

__all__ = [
    "setup_logger",
    "get_logger",
    "StructuredFormatter",
    "RNGManager",
    "PerformanceProfiler",
    "estimate_memory_requirements",
]
