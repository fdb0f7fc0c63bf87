"""
Time repeated correlations of one sensor report.

Compares the sequential matcher with the process-pool fan-out for a given
worker count.

Usage:
    python scripts/benchmark_correlation.py tests/sample_data/example_report.txt --repeat 20 --workers 4
"""

import sys
import argparse
import logging
import time
from pathlib import Path

import numpy as np

sys.path.append(str(Path(__file__).parent.parent / "src"))

from landmark_registration.acceleration import ParallelExecutor
from landmark_registration.preprocessing.loader import SensorReportLoader
from landmark_registration.registration import FrameCorrelator
from landmark_registration.utils.logging import setup_logger, configure_package_logging

logger = setup_logger(__name__)


def _time_runs(correlator: FrameCorrelator, readings, repeat: int) -> np.ndarray:
    timings = []
    for _ in range(repeat):
        start = time.perf_counter()
        correlator.correlate(readings)
        timings.append(time.perf_counter() - start)
    return np.array(timings)


def _report(label: str, timings: np.ndarray) -> None:
    logger.info(
        f"{label:>12}: mean {timings.mean() * 1e3:8.2f} ms | "
        f"median {np.median(timings) * 1e3:8.2f} ms | "
        f"min {timings.min() * 1e3:8.2f} ms | runs {len(timings)}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark landmark correlation")
    parser.add_argument("input", type=str, help="Path to the sensor report")
    parser.add_argument("--repeat", type=int, default=10)
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker processes for the parallel run (default: cpu_count - 1)")
    parser.add_argument("--threshold", type=int, default=12)
    args = parser.parse_args()

    # Keep per-placement logging out of the timings
    configure_package_logging(logging.WARNING)

    readings = SensorReportLoader().load(args.input)
    logger.info(f"Benchmarking {len(readings)} sensors, {args.repeat} runs each")

    sequential = FrameCorrelator(threshold=args.threshold)
    result = sequential.correlate(readings)
    logger.info(f"Result: {result.landmark_count} landmarks, max distance {result.max_distance}")
    _report("sequential", _time_runs(sequential, readings, args.repeat))

    with ParallelExecutor(n_workers=args.workers) as executor:
        parallel = FrameCorrelator(threshold=args.threshold, executor=executor)
        _report(f"{executor.n_workers} workers", _time_runs(parallel, readings, args.repeat))


if __name__ == "__main__":
    main()
