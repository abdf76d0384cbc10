"""
Module for collecting and logging metrics related to nearest searches.
"""

import argparse
import logging
from typing import List, NamedTuple, Optional, Sequence

from .nearest import QueryResult
from .records import PositionRecord

logger = logging.getLogger(__name__)


class QueryMetrics(NamedTuple):
    """Container for nearest search metrics data."""

    record_count: int
    vehicle_count: int
    query_count: int
    result_count: int
    min_distance: Optional[float]
    max_distance: Optional[float]
    mean_distance: Optional[float]


def collect_metrics(
    records: Sequence[PositionRecord], results: List[QueryResult]
) -> QueryMetrics:
    """
    Collect metrics from decoded records and search results.

    Only the nearest result of each reference point contributes to the
    distance statistics.

    Args:
        records: All decoded records
        results: Results of find_nearest_for_all

    Returns:
        QueryMetrics containing all collected metrics
    """
    nearest_distances = {}
    for result in results:
        # Results are ordered nearest first within each reference point
        nearest_distances.setdefault(result.index, result.distance)

    distances = list(nearest_distances.values())
    return QueryMetrics(
        record_count=len(records),
        vehicle_count=len({record.vehicle_id for record in records}),
        query_count=len(nearest_distances),
        result_count=len(results),
        min_distance=min(distances) if distances else None,
        max_distance=max(distances) if distances else None,
        mean_distance=sum(distances) / len(distances) if distances else None,
    )


def _format_distance(distance: Optional[float]) -> str:
    return "none" if distance is None else f"{distance:.1f}"


def log_metrics(metrics: QueryMetrics, args: argparse.Namespace) -> None:
    """
    Log detailed metrics after the search.

    Args:
        metrics: QueryMetrics containing collected metrics
        args: argparse.Namespace object containing settings like metrics flag
    """
    if not args.metrics:
        return

    logger.debug("=== NEAREST_METRICS ===")
    logger.debug(f"total_records={metrics.record_count}")
    logger.debug(f"distinct_vehicles={metrics.vehicle_count}")
    logger.debug(f"reference_points={metrics.query_count}")
    logger.debug(f"results={metrics.result_count}")
    logger.debug(f"min_nearest_distance_m={_format_distance(metrics.min_distance)}")
    logger.debug(f"max_nearest_distance_m={_format_distance(metrics.max_distance)}")
    logger.debug(f"mean_nearest_distance_m={_format_distance(metrics.mean_distance)}")
    logger.debug("=== END_NEAREST_METRICS ===")
