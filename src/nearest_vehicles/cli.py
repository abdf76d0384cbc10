#!/usr/bin/env python3
"""
Nearest Vehicle Position Tool
This script decodes a binary vehicle position log and, for each reference
point, prints the vehicle positions nearest to it by great circle distance.
Optionally writes an interactive HTML map and a GPX file of the results.

"""

from itertools import groupby
import codecs
from typing import List, Sequence
import argparse
import logging
import sys

from . import __version__
from . import visualization
from .config import (
    DEFAULT_INPUT_FILENAME,
    NearestConfig,
    load_reference_points,
)
from .decoder import read_records
from .errors import DecodeError, NoRecordsError, ReferencePointError
from .file_utils import generate_output_filename
from .geometry import ReferencePoint
from .gpx_export import write_gpx
from .metrics import QueryMetrics, collect_metrics, log_metrics
from .nearest import QueryResult, find_nearest_for_all
from .records import DEFAULT_ENCODING

# Configure logging
logger = logging.getLogger("nearest_vehicles")

TABLE_ROW = "{:<10} {:<30} {:<15} {:<15} {:<30} {:<30}"
TABLE_HEADER = (
    "VehicleID",
    "Registration",
    "Latitude",
    "Longitude",
    "Recorded Time UTC",
    "Dis from Target",
)
RULE_WIDTH = 110


def positive_int(value: str) -> int:
    """argparse type for counts of at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def encoding_name(value: str) -> str:
    """argparse type for text encodings known to Python."""
    try:
        return codecs.lookup(value).name
    except LookupError:
        raise argparse.ArgumentTypeError(f"unknown encoding: {value}")


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Nearest vehicle position tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "filename",
        type=str,
        nargs="?",
        default=DEFAULT_INPUT_FILENAME,
        help=f"Binary position log to process (default: {DEFAULT_INPUT_FILENAME})",
    )
    parser.add_argument(
        "--references",
        type=str,
        default=None,
        help="CSV file of reference points with columns position,latitude,longitude "
        "(default: built-in reference points)",
    )
    parser.add_argument(
        "--count",
        type=positive_int,
        default=1,
        help="Number of nearest records to show per reference point (default: 1)",
    )
    parser.add_argument(
        "--encoding",
        type=encoding_name,
        default=DEFAULT_ENCODING,
        help=f"Text encoding of registration numbers (default: {DEFAULT_ENCODING})",
    )
    parser.add_argument(
        "--map",
        type=str,
        nargs="?",
        const="",
        default=None,
        help="Write an HTML map of the results (default name: auto-generated "
        "from the input filename)",
    )
    parser.add_argument(
        "--gpx",
        type=str,
        default=None,
        help="Write the results as GPX waypoints to this file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Output structured metrics after processing",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"nearest-vehicles {__version__}",
    )
    return parser


def setup_logging(args: argparse.Namespace) -> None:
    """Setup logging configuration."""
    if hasattr(sys.stdout, "reconfigure") and sys.stdout.encoding.lower() != "utf-8":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            if hasattr(sys.stderr, "reconfigure") and sys.stderr.encoding.lower() != "utf-8":
                sys.stderr.reconfigure(encoding="utf-8")
            logger.debug("Reconfigured stdout and stderr to UTF-8 encoding.")
        except (AttributeError, ValueError) as e:
            logger.debug(f"Could not reconfigure stdout/stderr to UTF-8: {e}")
    level = getattr(logging, args.log_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def build_config(args: argparse.Namespace) -> NearestConfig:
    """
    Build the run configuration from parsed arguments.

    Raises:
        ReferencePointError: If the reference point file is malformed
        OSError: If the reference point file cannot be read
    """
    config = NearestConfig(
        count=args.count,
        encoding=args.encoding,
        log_level=args.log_level,
        metrics=args.metrics,
    )
    if args.references is not None:
        config.reference_points = load_reference_points(args.references)
    return config


def format_result_row(result: QueryResult) -> str:
    record = result.record
    return TABLE_ROW.format(
        record.vehicle_id,
        record.registration,
        f"{record.latitude:.6f}",
        f"{record.longitude:.6f}",
        f"{record.recorded_at:%Y-%m-%d %H:%M:%S}",
        f"{round(result.distance)} meters",
    )


def print_results(results: List[QueryResult]) -> None:
    """
    Print one table of nearest records per reference point.

    Args:
        results: Results of find_nearest_for_all, grouped by reference point
    """
    for _, group in groupby(results, key=lambda result: result.index):
        group = list(group)
        print()
        print(f"{group[0].label} Nearest Records")
        print()
        print(TABLE_ROW.format(*TABLE_HEADER))
        print("-" * RULE_WIDTH)
        for result in group:
            print(format_result_row(result))


def write_outputs(
    args: argparse.Namespace,
    references: Sequence[ReferencePoint],
    results: List[QueryResult],
    metrics: QueryMetrics,
) -> None:
    """Write the optional map and GPX outputs requested on the command line."""
    if args.map is not None:
        output_filename = args.map or generate_output_filename(args.filename)
        visualization.create_results_map(references, results, output_filename, metrics)
        logger.info(f"Map written to {output_filename}")

    if args.gpx is not None:
        write_gpx(references, results, args.gpx)
        logger.info(f"GPX written to {args.gpx}")


def main(argv=None):
    """
    Parses command-line arguments, decodes the position log, and prints the
    nearest records for each reference point.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(args)

    try:
        config = build_config(args)
    except ReferencePointError as e:
        logger.error(f"Invalid reference point file: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Cannot read reference point file: {e}")
        sys.exit(1)

    try:
        records = read_records(args.filename, config.encoding)
    except DecodeError as e:
        logger.error(f"Cannot decode position log: {e}")
        sys.exit(1)
    logger.info(f"Decoded {len(records)} position records from {args.filename}")

    try:
        results = find_nearest_for_all(records, config.reference_points, config.count)
    except NoRecordsError as e:
        logger.error(f"{e}: {args.filename} is empty")
        sys.exit(1)

    print_results(results)

    metrics = collect_metrics(records, results)

    try:
        write_outputs(args, config.reference_points, results, metrics)
    except (OSError, RuntimeError, ValueError) as e:
        logger.error(f"Failed to write output: {e}")
        sys.exit(1)

    log_metrics(metrics, args)


if __name__ == "__main__":
    main()
