import csv
import logging
import os
from dataclasses import dataclass, field
from typing import List, Union

from .errors import ReferencePointError
from .geometry import ReferencePoint
from .records import DEFAULT_ENCODING, to_single

logger = logging.getLogger(__name__)

DEFAULT_INPUT_FILENAME = "VehiclePositions.dat"

# Stored as single precision, like the positions they are compared with
DEFAULT_REFERENCE_POINTS = tuple(
    ReferencePoint(label, to_single(latitude), to_single(longitude))
    for label, latitude, longitude in (
        (1, 34.544909, -102.100843),
        (2, 32.345544, -99.123124),
        (3, 33.234235, -100.214124),
        (4, 35.195739, -95.348899),
        (5, 31.895839, -97.789573),
        (6, 32.895839, -101.789573),
        (7, 34.115839, -100.225732),
        (8, 32.335839, -99.992232),
        (9, 33.535339, -94.792232),
        (10, 32.234235, -100.222222),
    )
)

REFERENCE_FIELDS = ("position", "latitude", "longitude")


@dataclass
class NearestConfig:
    """Configuration for the nearest-vehicles CLI."""

    count: int = 1
    encoding: str = DEFAULT_ENCODING
    log_level: str = "WARNING"
    metrics: bool = False
    reference_points: List[ReferencePoint] = field(
        default_factory=lambda: list(DEFAULT_REFERENCE_POINTS)
    )


def _parse_label(value: str) -> Union[int, str]:
    value = value.strip()
    return int(value) if value.isdigit() else value


def load_reference_points(path: Union[str, os.PathLike]) -> List[ReferencePoint]:
    """
    Load reference points from a CSV file.

    The file must have a header row naming the columns position, latitude
    and longitude. Numeric positions become int labels; anything else is
    kept as text.

    Args:
        path: Path to the CSV file

    Returns:
        Reference points in file order

    Raises:
        ReferencePointError: If the file is missing columns, has a malformed
            row, repeats a position or holds no points
        OSError: If the file cannot be read
    """
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = [name for name in REFERENCE_FIELDS if name not in (reader.fieldnames or [])]
        if missing:
            raise ReferencePointError(
                f"{path}: missing column(s) {', '.join(missing)}"
            )

        points = []
        seen_lines = {}
        for line_number, row in enumerate(reader, start=2):
            try:
                point = ReferencePoint(
                    label=_parse_label(row["position"] or ""),
                    latitude=float(row["latitude"]),
                    longitude=float(row["longitude"]),
                )
            except (TypeError, ValueError) as e:
                raise ReferencePointError(f"{path}:{line_number}: {e}") from e

            if point.label in seen_lines:
                raise ReferencePointError(
                    f"{path}:{line_number}: duplicate position {point.label!r} "
                    f"(first seen on line {seen_lines[point.label]})"
                )
            seen_lines[point.label] = line_number
            points.append(point)

    if not points:
        raise ReferencePointError(f"{path}: no reference points found")

    logger.debug(f"Loaded {len(points)} reference points from {path}")
    return points
