#!/usr/bin/env python3
"""
Nearest vehicle position search around reference points.
"""

from typing import List, NamedTuple, Sequence, Union

from .errors import NoRecordsError
from .geometry import ReferencePoint, haversine_distance
from .records import PositionRecord


class NearestResult(NamedTuple):
    """A record and its distance from a reference point."""

    record: PositionRecord
    distance: float  # meters


class QueryResult(NamedTuple):
    """A nearest record tagged with the reference point it was found for."""

    label: Union[int, str]
    record: PositionRecord
    distance: float  # meters
    index: int = 0  # position of the reference point in the query order


def find_nearest(
    records: Sequence[PositionRecord], reference: ReferencePoint, count: int = 1
) -> List[NearestResult]:
    """
    Find the records closest to a reference point.

    Every record is measured (linear scan) and the results are ordered by
    ascending distance. Records at equal distance keep their input order.

    Args:
        records: Decoded position records
        reference: Point to search around
        count: Maximum number of results to return

    Returns:
        Up to count results, nearest first

    Raises:
        NoRecordsError: If records is empty
        ValueError: If count is less than 1
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")
    if not records:
        raise NoRecordsError("No position records to search")

    target = reference.position
    measured = [
        NearestResult(record, haversine_distance(record.position, target))
        for record in records
    ]
    # sorted() is stable, so ties stay in input order
    measured = sorted(measured, key=lambda result: result.distance)
    return measured[:count]


def find_nearest_for_all(
    records: Sequence[PositionRecord],
    references: Sequence[ReferencePoint],
    count: int = 1,
) -> List[QueryResult]:
    """
    Run find_nearest for each reference point.

    Returns:
        Results grouped by reference point in the given order, nearest first
        within each group. Each result carries the index of its reference
        point, since labels need not be unique.

    Raises:
        NoRecordsError: If records is empty
        ValueError: If count is less than 1
    """
    if not records:
        raise NoRecordsError("No position records to search")

    results = []
    for index, reference in enumerate(references):
        for nearest in find_nearest(records, reference, count):
            results.append(
                QueryResult(reference.label, nearest.record, nearest.distance, index)
            )
    return results
