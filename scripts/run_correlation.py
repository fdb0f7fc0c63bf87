"""
Correlate a sensor report from the command line.

Loads the report, places every sensor in the anchor's frame and prints the
number of distinct landmarks and the largest Manhattan distance between two
sensor origins.
"""

import sys
import argparse
import json
import logging
from pathlib import Path

# Add the src to the path to import modules
sys.path.append(str(Path(__file__).parent.parent / "src"))

from landmark_registration.preprocessing.loader import SensorReportLoader
from pydantic import ValidationError

from landmark_registration.registration import (
    FrameCorrelator,
    InvalidReadingsError,
    MalformedInputError,
    RegistrationError,
)
from landmark_registration.utils.config import (
    AppConfig,
    ParallelConfig,
    RegistrationConfig,
    build_executor,
    load_config,
)
from landmark_registration.utils.logging import setup_logger, configure_package_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Sensor landmark correlation")
    parser.add_argument("input", type=str, help="Path to the sensor report")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to config/default.yaml)",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        default=None,
        help="Override registration.overlap_threshold",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Fan correspondence lookups out to this many processes (overrides parallel.*)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as a JSON object",
    )
    args = parser.parse_args(argv)

    cfg: AppConfig = load_config(args.config)

    # stdout carries the result only; every log line goes to stderr
    log_level = getattr(logging, cfg.logging.level.upper(), logging.INFO)
    logger = setup_logger(__name__, level=log_level, log_file=cfg.logging.file)
    for handler in logger.handlers:
        if type(handler) is logging.StreamHandler:
            handler.setStream(sys.stderr)
    configure_package_logging(log_level, log_file=cfg.logging.file, stream=sys.stderr)

    try:
        if args.threshold is not None:
            cfg.registration = RegistrationConfig(
                overlap_threshold=args.threshold,
                anchor_id=cfg.registration.anchor_id,
            )
        if args.workers is not None:
            cfg.parallel = ParallelConfig(enabled=args.workers > 1, n_workers=args.workers)
    except ValidationError as e:
        logger.error(f"Invalid command-line override: {e}")
        return 1

    try:
        readings = SensorReportLoader().load(args.input)
    except (FileNotFoundError, MalformedInputError) as e:
        logger.error(f"Could not read sensor report: {e}")
        return 1

    try:
        executor = build_executor(cfg)
        correlator = FrameCorrelator.from_config(cfg, executor=executor)
        if executor is not None:
            with executor:
                result = correlator.correlate(readings)
        else:
            result = correlator.correlate(readings)
    except (RegistrationError, InvalidReadingsError) as e:
        logger.error(f"Correlation failed: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict()))
    else:
        print(f"landmarks: {result.landmark_count}")
        print(f"max distance: {result.max_distance}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
