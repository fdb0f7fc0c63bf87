"""
Parallel execution infrastructure for correspondence search.

Provides ParallelExecutor for fanning independent lookups out across
multiple CPU cores using multiprocessing, and collecting the results back
in input order.
"""

from __future__ import annotations

import logging
import time
from functools import partial
from multiprocessing import Pool, cpu_count
from multiprocessing.pool import Pool as PoolType
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _worker_wrapper(
    indexed_item: Tuple[int, Any],
    worker_fn: Callable,
    worker_kwargs: Dict[str, Any],
) -> Tuple[int, Any, Optional[str]]:
    """
    Worker wrapper function for parallel item processing.

    Must be at module level for pickling. The worker function and its fixed
    keyword arguments are bound once with functools.partial, so each task
    only carries the indexed item.

    Args:
        indexed_item: Tuple of (item_index, item)
        worker_fn: Function applied to the item
        worker_kwargs: Fixed keyword arguments for worker_fn

    Returns:
        Tuple of (item_index, result, error_message)
    """
    idx, item = indexed_item
    try:
        result = worker_fn(item, **worker_kwargs)
        return (idx, result, None)
    except Exception as e:
        error_msg = f"{type(e).__name__}: {str(e)}"
        logger.error(f"Worker error on item {idx}: {error_msg}")
        return (idx, None, error_msg)


class ParallelExecutor:
    """
    Fan-out/fan-in executor over independent work items.

    Workers only read the item and the fixed keyword arguments they are
    handed; results come back in the same order as the input items.

    Used as a context manager the executor keeps one process pool alive for
    every call made inside the block, which matters when the same executor
    serves hundreds of small sensor-pair comparisons. Outside a block each
    call opens and closes its own pool.

    Example:
        with ParallelExecutor(n_workers=4) as executor:
            results = executor.map_items(
                items=list(enumerate(reference.fingerprint.distances)),
                worker_fn=lookup_correspondence,
                worker_kwargs={'candidate': candidate.fingerprint, 'min_shared': 11},
            )
    """

    def __init__(self, n_workers: Optional[int] = None):
        """
        Initialize parallel executor.

        Args:
            n_workers: Number of worker processes. If None, uses cpu_count - 1
                to leave one core for the coordinating process. Minimum is 1.
        """
        if n_workers is None:
            n_workers = max(1, cpu_count() - 1)
        else:
            n_workers = max(1, int(n_workers))

        self.n_workers = n_workers
        self._pool: Optional[PoolType] = None

        logger.info(
            f"Initialized ParallelExecutor with {self.n_workers} workers "
            f"(total CPUs: {cpu_count()})"
        )

    @property
    def is_parallel(self) -> bool:
        return self.n_workers > 1

    def __enter__(self) -> "ParallelExecutor":
        if self.is_parallel and self._pool is None:
            self._pool = Pool(processes=self.n_workers)
            logger.debug(f"Opened persistent pool with {self.n_workers} workers")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
            self._pool = None
            logger.debug("Closed persistent pool")

    def map_items(
        self,
        items: List[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
    ) -> List[Any]:
        """
        Map worker function over items in parallel.

        Args:
            items: Work items; each is passed as the first positional argument
            worker_fn: Function to apply to each item. Must be picklable and
                have signature: worker_fn(item, **worker_kwargs) -> result
            worker_kwargs: Fixed keyword arguments passed to each worker call

        Returns:
            List of results in same order as input items

        Raises:
            RuntimeError: If any worker fails
        """
        n_items = len(items)

        if n_items == 0:
            return []

        # If only 1 worker or 1 item, use sequential processing (no pool overhead)
        if not self.is_parallel or n_items == 1:
            results = []
            for i, item in enumerate(items):
                try:
                    results.append(worker_fn(item, **worker_kwargs))
                except Exception as e:
                    logger.error(f"Error processing item {i}: {e}", exc_info=True)
                    raise RuntimeError(f"Item processing failed: {e}") from e
            return results

        start_time = time.time()
        try:
            if self._pool is not None:
                results = self._parallel_map(self._pool, items, worker_fn, worker_kwargs)
            else:
                with Pool(processes=self.n_workers) as pool:
                    results = self._parallel_map(pool, items, worker_fn, worker_kwargs)
        except RuntimeError:
            raise
        except Exception as e:
            logger.error(f"Parallel processing failed: {e}", exc_info=True)
            raise RuntimeError(f"Parallel item processing failed: {e}") from e

        logger.debug(
            f"Parallel map complete: {n_items} items in {time.time() - start_time:.3f}s "
            f"with {self.n_workers} workers"
        )
        return results

    def _parallel_map(
        self,
        pool: PoolType,
        items: List[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
    ) -> List[Any]:
        """
        Execute parallel mapping on the given pool.

        Uses imap_unordered for responsiveness, then reorders results to
        match input item order.
        """
        n_items = len(items)
        task = partial(_worker_wrapper, worker_fn=worker_fn, worker_kwargs=worker_kwargs)

        # Batch small items so each task carries a useful amount of work
        chunksize = max(1, n_items // (self.n_workers * 4))

        results_dict = {}
        errors = []
        for idx, result, error in pool.imap_unordered(task, enumerate(items), chunksize=chunksize):
            if error:
                errors.append((idx, error))
            else:
                results_dict[idx] = result

        if errors:
            error_msg = f"{len(errors)} items failed out of {n_items}"
            logger.error(error_msg)
            for idx, error in errors[:5]:  # Log first 5 errors
                logger.error(f"  Item {idx}: {error}")
            if len(errors) > 5:
                logger.error(f"  ... and {len(errors) - 5} more errors")
            raise RuntimeError(error_msg)

        return [results_dict[i] for i in range(n_items)]
