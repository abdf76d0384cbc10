"""
Export of nearest search results as GPX waypoints.
"""

import logging
from typing import List, Sequence

import gpxpy
import gpxpy.gpx

from .geometry import ReferencePoint
from .nearest import QueryResult

logger = logging.getLogger(__name__)


def results_to_gpx(
    references: Sequence[ReferencePoint], results: List[QueryResult]
) -> gpxpy.gpx.GPX:
    """
    Build a GPX document with one waypoint per reference point and one per
    nearest record.
    """
    gpx = gpxpy.gpx.GPX()
    gpx.creator = "nearest-vehicles"

    for point in references:
        gpx.waypoints.append(
            gpxpy.gpx.GPXWaypoint(
                latitude=point.latitude,
                longitude=point.longitude,
                name=f"Reference {point.label}",
                type="reference",
            )
        )

    for result in results:
        record = result.record
        gpx.waypoints.append(
            gpxpy.gpx.GPXWaypoint(
                latitude=record.latitude,
                longitude=record.longitude,
                time=record.recorded_at,
                name=record.registration,
                description=(
                    f"Vehicle {record.vehicle_id}, {result.distance:.0f} m "
                    f"from reference {result.label}"
                ),
                type="vehicle",
            )
        )

    return gpx


def write_gpx(
    references: Sequence[ReferencePoint],
    results: List[QueryResult],
    output_filename: str,
) -> None:
    """Write results as a GPX file."""
    gpx = results_to_gpx(references, results)
    with open(output_filename, "w", encoding="utf-8") as f:
        f.write(gpx.to_xml())
    logger.debug(f"Wrote {len(gpx.waypoints)} waypoints to {output_filename}")
