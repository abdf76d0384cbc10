#!/usr/bin/env python3
"""
Nearest Vehicles - find the vehicle positions closest to reference points.

This package decodes binary vehicle position logs and searches them for the
reports nearest to a set of fixed coordinates using great circle distance.
"""
import importlib.metadata

__version__ = importlib.metadata.version("nearest-vehicles")

# Import main classes for public API
from .errors import (
    DecodeError,
    NearestVehiclesError,
    NoRecordsError,
    SourceUnavailableError,
    TimestampRangeError,
    TruncatedRecordError,
)
from .geometry import Position, ReferencePoint, haversine_distance
from .records import PositionRecord, encode_record, encode_records
from .decoder import RecordDecoder, decode_records, read_records
from .nearest import NearestResult, QueryResult, find_nearest, find_nearest_for_all

__all__ = [
    "DecodeError",
    "NearestVehiclesError",
    "NoRecordsError",
    "SourceUnavailableError",
    "TimestampRangeError",
    "TruncatedRecordError",
    "Position",
    "ReferencePoint",
    "haversine_distance",
    "PositionRecord",
    "encode_record",
    "encode_records",
    "RecordDecoder",
    "decode_records",
    "read_records",
    "NearestResult",
    "QueryResult",
    "find_nearest",
    "find_nearest_for_all",
]
