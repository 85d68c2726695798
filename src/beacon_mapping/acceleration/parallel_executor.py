"""
Parallel execution infrastructure for pairwise overlap searches.

Provides PairParallelExecutor for distributing independent overlap tests
across multiple CPU cores using multiprocessing.

Input errors raised by a worker (``ValueError`` and its subclasses, such as
an ambiguous overlap) reach the caller unchanged, whether the job ran in the
pool or in-process. Any other worker failure is reported as ``RuntimeError``.
"""

from __future__ import annotations

import logging
import time
from multiprocessing import Pool, cpu_count
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _worker_wrapper(
    args: Tuple[int, Any, Callable, Dict[str, Any]],
) -> Tuple[int, Any, Optional[str], Optional[ValueError]]:
    """
    Run one job in a worker process.

    Must be at module level for pickling on Windows.

    Args:
        args: Tuple of (job_index, job, worker_fn, worker_kwargs)

    Returns:
        Tuple of (job_index, result, error_message, input_error). The input
        error is sent back as-is so the parent can raise it again.
    """
    idx, job, worker_fn, worker_kwargs = args
    try:
        return (idx, worker_fn(job, **worker_kwargs), None, None)
    except ValueError as e:
        return (idx, None, f"{type(e).__name__}: {e}", e)
    except Exception as e:
        error_msg = f"{type(e).__name__}: {e}"
        logger.error(f"Worker error on job {idx}: {error_msg}")
        return (idx, None, error_msg, None)


class PairParallelExecutor:
    """
    Parallel executor for independent pairwise jobs.

    Collects results in input order so that callers can pick the first
    success deterministically. Used as a context manager, one worker pool
    serves every ``map_pairs`` call made inside the block; otherwise each
    call opens and closes its own pool.

    Example:
        with PairParallelExecutor(n_workers=4) as executor:
            results = executor.map_pairs(
                jobs=[(report_a, report_b), (report_a, report_c)],
                worker_fn=detect_pair_overlap,
                worker_kwargs={'threshold': 12},
            )
    """

    def __init__(self, n_workers: Optional[int] = None, batch_size: Optional[int] = None):
        """
        Args:
            n_workers: Number of worker processes. If None, uses cpu_count - 1
                to leave one core for coordination. Minimum is 1.
            batch_size: Number of jobs a caller should submit per round.
                Defaults to four jobs per worker.
        """
        if n_workers is None:
            n_workers = max(1, cpu_count() - 1)
        else:
            n_workers = max(1, int(n_workers))

        self.n_workers = n_workers
        self.batch_size = max(1, int(batch_size)) if batch_size else 4 * n_workers
        self._pool = None

        logger.info(
            f"Initialized PairParallelExecutor with {self.n_workers} workers "
            f"(total CPUs: {cpu_count()})"
        )

    def __enter__(self) -> "PairParallelExecutor":
        if self.n_workers > 1 and self._pool is None:
            self._pool = Pool(processes=self.n_workers)
            logger.debug(f"Started worker pool with {self.n_workers} processes")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the shared worker pool, if one is open."""
        if self._pool is not None:
            self._pool.terminate()
            self._pool.join()
            self._pool = None
            logger.debug("Worker pool closed")

    def map_pairs(
        self,
        jobs: List[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
    ) -> List[Any]:
        """
        Map worker function over jobs in parallel.

        Args:
            jobs: List of jobs to process (typically report pairs)
            worker_fn: Function to apply to each job. Must be picklable and
                have signature: worker_fn(job, **worker_kwargs) -> result
            worker_kwargs: Fixed keyword arguments passed to each worker call

        Returns:
            List of results in same order as input jobs

        Raises:
            ValueError: The input error of the lowest failing job, unchanged
            RuntimeError: If a job fails for any other reason
        """
        n_jobs = len(jobs)
        if n_jobs == 0:
            return []

        start_time = time.time()

        # If only 1 worker or 1 job, use sequential processing (no pool overhead)
        if self.n_workers == 1 or n_jobs == 1:
            results = []
            for i, job in enumerate(jobs):
                try:
                    results.append(worker_fn(job, **worker_kwargs))
                except ValueError:
                    raise
                except Exception as e:
                    logger.error(f"Error processing job {i}: {e}", exc_info=True)
                    raise RuntimeError(f"Pair processing failed: {e}") from e
            logger.debug(f"Sequential processing complete: {n_jobs} jobs in {time.time() - start_time:.2f}s")
            return results

        worker_args = [(i, job, worker_fn, worker_kwargs) for i, job in enumerate(jobs)]
        if self._pool is not None:
            outcomes = list(self._pool.imap_unordered(_worker_wrapper, worker_args))
        else:
            with Pool(processes=min(self.n_workers, n_jobs)) as pool:
                outcomes = list(pool.imap_unordered(_worker_wrapper, worker_args))

        results_dict = {}
        errors = []
        for idx, result, error, input_error in sorted(outcomes, key=lambda o: o[0]):
            if error:
                errors.append((idx, error, input_error))
            else:
                results_dict[idx] = result

        if errors:
            idx, error, input_error = errors[0]
            if input_error is not None:
                raise input_error
            error_msg = f"{len(errors)} jobs failed out of {n_jobs}"
            logger.error(error_msg)
            for idx, error, _ in errors[:5]:  # Log first 5 errors
                logger.error(f"  Job {idx}: {error}")
            if len(errors) > 5:
                logger.error(f"  ... and {len(errors) - 5} more errors")
            raise RuntimeError(error_msg)

        logger.debug(
            f"Parallel processing complete: {n_jobs} jobs in {time.time() - start_time:.2f}s "
            f"with {self.n_workers} workers"
        )
        return [results_dict[i] for i in range(n_jobs)]
