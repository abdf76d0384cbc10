#!/usr/bin/env python3
"""
Vehicle position records and their binary layout.

Each record in a position log is laid out little-endian with no padding:

    int32    vehicle id
    bytes    registration, terminated by a single NUL byte
    float32  latitude
    float32  longitude
    uint64   seconds since 1970-01-01T00:00:00Z

There is no header, footer or record count; the end of the input is the only
framing.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, NamedTuple, Optional
import struct

from .errors import TimestampRangeError
from .geometry import Position

# Single byte per character, never fails on arbitrary bytes
DEFAULT_ENCODING = "latin-1"

VEHICLE_ID = struct.Struct("<i")
COORDINATE = struct.Struct("<f")
TIMESTAMP = struct.Struct("<Q")
TERMINATOR = b"\x00"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_UINT64_RANGE = 1 << 64
_INT64_MAX = (1 << 63) - 1


class PositionRecord(NamedTuple):
    """A single decoded vehicle position report."""

    vehicle_id: int
    registration: str
    latitude: float
    longitude: float
    recorded_at: datetime
    timestamp: int  # raw unsigned value as stored

    @classmethod
    def create(
        cls,
        vehicle_id: int,
        registration: str,
        latitude: float,
        longitude: float,
        timestamp: int,
        record_index: Optional[int] = None,
    ) -> "PositionRecord":
        """
        Build a record, deriving recorded_at from the raw timestamp.

        record_index only labels a TimestampRangeError.
        """
        return cls(
            vehicle_id=vehicle_id,
            registration=registration,
            latitude=latitude,
            longitude=longitude,
            recorded_at=timestamp_to_datetime(timestamp, record_index),
            timestamp=timestamp,
        )

    @property
    def position(self) -> Position:
        return Position(self.latitude, self.longitude)


def to_single(value: float) -> float:
    """Round a value to the nearest single precision float."""
    (single,) = COORDINATE.unpack(COORDINATE.pack(value))
    return single


def timestamp_to_datetime(
    timestamp: int, record_index: Optional[int] = None
) -> datetime:
    """
    Convert a stored uint64 timestamp to a UTC datetime.

    The value is reinterpreted as a signed 64-bit integer first, so values
    above 2**63 - 1 land before the epoch (2**64 - 1 is one second before it).

    Raises:
        TimestampRangeError: If the signed value falls outside what datetime
            can represent
    """
    seconds = timestamp - _UINT64_RANGE if timestamp > _INT64_MAX else timestamp
    try:
        return EPOCH + timedelta(seconds=seconds)
    except OverflowError as e:
        raise TimestampRangeError(timestamp, seconds, record_index) from e


def encode_record(record: PositionRecord, encoding: str = DEFAULT_ENCODING) -> bytes:
    """
    Serialize a record using the position log layout.

    Raises:
        ValueError: If the registration contains a NUL byte or the timestamp
            does not fit in an unsigned 64-bit integer
    """
    registration = record.registration.encode(encoding)
    if TERMINATOR in registration:
        raise ValueError(
            f"Registration {record.registration!r} contains a NUL byte"
        )
    if not 0 <= record.timestamp < _UINT64_RANGE:
        raise ValueError(f"Timestamp {record.timestamp} does not fit in uint64")

    return b"".join(
        [
            VEHICLE_ID.pack(record.vehicle_id),
            registration,
            TERMINATOR,
            COORDINATE.pack(record.latitude),
            COORDINATE.pack(record.longitude),
            TIMESTAMP.pack(record.timestamp),
        ]
    )


def encode_records(
    records: Iterable[PositionRecord], encoding: str = DEFAULT_ENCODING
) -> bytes:
    """Serialize records back to back, in order."""
    return b"".join(encode_record(record, encoding) for record in records)
