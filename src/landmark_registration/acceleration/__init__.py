"""
Acceleration Module

Process-pool fan-out used by the pairwise matcher's per-landmark
correspondence search.
"""

from .parallel_executor import ParallelExecutor

__all__ = [
    "ParallelExecutor",
]
