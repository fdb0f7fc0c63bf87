"""
Unit tests for the parallel fan-out infrastructure.

Tests ParallelExecutor and the correspondence lookup worker for correctness,
ordering and error handling.
"""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).parent.parent / "src"))

from landmark_registration.acceleration import ParallelExecutor
from landmark_registration.acceleration.parallel_executor import _worker_wrapper
from landmark_registration.registration import Fingerprint, lookup_correspondence
from synthetic_scene import random_landmarks


# Module-level worker functions for pickling compatibility
def _scaling_worker(item, scale=1):
    """Worker that scales the item."""
    import time
    import random
    time.sleep(random.uniform(0.001, 0.01))
    return item * scale


def _error_worker(item):
    """Worker that raises an error."""
    raise ValueError(f"Intentional error on item {item}")


class TestParallelExecutor:
    """Test suite for ParallelExecutor."""

    def test_executor_initialization(self):
        """Test executor initializes with correct worker count."""
        executor = ParallelExecutor()
        assert executor.n_workers >= 1

        executor = ParallelExecutor(n_workers=4)
        assert executor.n_workers == 4
        assert executor.is_parallel

        # Minimum workers (should be at least 1)
        executor = ParallelExecutor(n_workers=0)
        assert executor.n_workers == 1
        assert not executor.is_parallel

    def test_empty_items(self):
        executor = ParallelExecutor(n_workers=2)
        assert executor.map_items([], _scaling_worker, {}) == []

    def test_sequential_fallback_one_worker(self):
        executor = ParallelExecutor(n_workers=1)
        results = executor.map_items(list(range(5)), _scaling_worker, {"scale": 1})
        assert results == [0, 1, 2, 3, 4]

    def test_sequential_fallback_one_item(self):
        executor = ParallelExecutor(n_workers=4)
        results = executor.map_items([7], _scaling_worker, {"scale": 2})
        assert results == [14]

    def test_parallel_processing_order_preserved(self):
        executor = ParallelExecutor(n_workers=2)
        results = executor.map_items(list(range(20)), _scaling_worker, {"scale": 3})
        assert results == [i * 3 for i in range(20)]

    def test_persistent_pool_reused_across_calls(self):
        with ParallelExecutor(n_workers=2) as executor:
            pool = executor._pool
            assert pool is not None
            first = executor.map_items(list(range(6)), _scaling_worker, {"scale": 2})
            second = executor.map_items(list(range(6)), _scaling_worker, {"scale": 5})
            assert executor._pool is pool

        assert executor._pool is None
        assert first == [i * 2 for i in range(6)]
        assert second == [i * 5 for i in range(6)]

    def test_worker_errors_raise(self):
        executor = ParallelExecutor(n_workers=2)
        with pytest.raises(RuntimeError, match="4 items failed out of 4"):
            executor.map_items(list(range(4)), _error_worker, {})

    def test_sequential_worker_errors_raise(self):
        executor = ParallelExecutor(n_workers=1)
        with pytest.raises(RuntimeError, match="Item processing failed"):
            executor.map_items([1, 2], _error_worker, {})

    def test_worker_wrapper_takes_bound_kwargs(self):
        """Fixed kwargs are bound once; each task carries only (index, item)."""
        assert _worker_wrapper((3, 2), worker_fn=_scaling_worker, worker_kwargs={"scale": 4}) == (3, 8, None)

    def test_worker_wrapper_reports_errors(self):
        idx, result, error = _worker_wrapper((5, 1), worker_fn=_error_worker, worker_kwargs={})
        assert (idx, result) == (5, None)
        assert error == "ValueError: Intentional error on item 1"


def test_lookup_correspondence_worker():
    world = random_landmarks(seed=501, n=14)
    reference = Fingerprint.from_landmarks(world)
    candidate = Fingerprint.from_landmarks(list(reversed(world)))

    items = list(enumerate(reference.distances))
    with ParallelExecutor(n_workers=2) as executor:
        results = executor.map_items(
            items, lookup_correspondence, {"candidate": candidate, "min_shared": 11}
        )

    assert results == [(i, 13 - i) for i in range(14)]
