"""
Exceptions raised while decoding position logs and searching them.
"""

from typing import Optional


class NearestVehiclesError(Exception):
    """Base class for all nearest-vehicles errors."""


class DecodeError(NearestVehiclesError):
    """Raised when a position log cannot be decoded."""


class SourceUnavailableError(DecodeError):
    """Raised when the position log cannot be opened or read."""


class TruncatedRecordError(DecodeError):
    """Raised when the input ends part way through a record."""

    def __init__(self, record_index: int, field: str, offset: int, length: int):
        self.record_index = record_index
        self.field = field
        self.offset = offset
        self.length = length
        super().__init__(
            f"Record {record_index} truncated in field '{field}' "
            f"at byte offset {offset} of {length}"
        )


class TimestampRangeError(DecodeError):
    """Raised when a record's timestamp cannot be represented as a datetime."""

    def __init__(self, timestamp: int, seconds: int, record_index: Optional[int] = None):
        self.timestamp = timestamp
        self.seconds = seconds
        self.record_index = record_index
        where = "" if record_index is None else f"Record {record_index}: "
        super().__init__(
            f"{where}timestamp {timestamp} ({seconds} s from epoch) is out of range"
        )


class NoRecordsError(NearestVehiclesError):
    """Raised when a nearest search is run against an empty record collection."""


class ReferencePointError(NearestVehiclesError, ValueError):
    """Raised when reference points cannot be loaded."""
