#!/usr/bin/env python3
"""
Decoding of binary vehicle position logs.
"""

from typing import BinaryIO, List, Optional, Union
import io
import logging
import os

from .errors import DecodeError, SourceUnavailableError, TruncatedRecordError
from .records import (
    COORDINATE,
    DEFAULT_ENCODING,
    TERMINATOR,
    TIMESTAMP,
    VEHICLE_ID,
    PositionRecord,
)

logger = logging.getLogger(__name__)


class RecordDecoder:
    """Reads PositionRecords sequentially from a binary stream of known length."""

    def __init__(
        self,
        stream: BinaryIO,
        length: Optional[int] = None,
        encoding: str = DEFAULT_ENCODING,
    ):
        """Initializes a RecordDecoder.

        Args:
            stream: Readable binary stream positioned at the first record.
            length: Number of bytes to decode. If None, the stream must be
                seekable and everything from the current position to the end
                is decoded.
            encoding: Text encoding of registration numbers.

        Raises:
            SourceUnavailableError: If length is None and the stream cannot
                be measured.
        """
        self.stream = stream
        self.encoding = encoding
        self.length = self._measure_length() if length is None else length
        self.position = 0
        self.record_index = 0

    def _measure_length(self) -> int:
        try:
            start = self.stream.tell()
            end = self.stream.seek(0, io.SEEK_END)
            self.stream.seek(start)
        except OSError as e:
            raise SourceUnavailableError(f"Cannot determine stream length: {e}") from e
        return end - start

    def _read(self, size: int, field: str) -> bytes:
        if size > self.length - self.position:
            raise TruncatedRecordError(
                self.record_index, field, self.position, self.length
            )
        try:
            data = self.stream.read(size)
        except OSError as e:
            raise SourceUnavailableError(f"Cannot read stream: {e}") from e

        # Stream ended before the declared length
        if data is None or len(data) != size:
            raise TruncatedRecordError(
                self.record_index, field, self.position, self.length
            )
        self.position += size
        return data

    def _read_registration(self) -> str:
        raw = bytearray()
        while True:
            byte = self._read(1, "registration")
            if byte == TERMINATOR:
                break
            raw += byte
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DecodeError(
                f"Record {self.record_index}: registration is not valid {self.encoding}"
            ) from e

    def read_record(self) -> PositionRecord:
        """
        Read the next record from the stream.

        Raises:
            TruncatedRecordError: If the input ends before the record is complete
            TimestampRangeError: If the timestamp is not representable
        """
        (vehicle_id,) = VEHICLE_ID.unpack(self._read(VEHICLE_ID.size, "vehicle_id"))
        registration = self._read_registration()
        (latitude,) = COORDINATE.unpack(self._read(COORDINATE.size, "latitude"))
        (longitude,) = COORDINATE.unpack(self._read(COORDINATE.size, "longitude"))
        (timestamp,) = TIMESTAMP.unpack(self._read(TIMESTAMP.size, "timestamp"))

        record = PositionRecord.create(
            vehicle_id, registration, latitude, longitude, timestamp, self.record_index
        )
        self.record_index += 1
        return record

    def decode(self) -> List[PositionRecord]:
        """
        Decode every record until the read position reaches the stream length.

        Returns:
            Records in input order

        Raises:
            DecodeError: If any record cannot be decoded. No partial result is
                returned.
        """
        records = []
        while self.position != self.length:
            records.append(self.read_record())
        return records


def decode_records(
    data: bytes, encoding: str = DEFAULT_ENCODING
) -> List[PositionRecord]:
    """Decode an in-memory position log."""
    return RecordDecoder(io.BytesIO(data), len(data), encoding).decode()


def read_records(
    path: Union[str, os.PathLike], encoding: str = DEFAULT_ENCODING
) -> List[PositionRecord]:
    """
    Read and decode a position log file.

    Args:
        path: Path to the binary position log
        encoding: Text encoding of registration numbers

    Returns:
        Records in file order

    Raises:
        SourceUnavailableError: If the file cannot be opened or read
        TruncatedRecordError: If the file ends part way through a record
    """
    try:
        with open(path, "rb") as stream:
            length = os.fstat(stream.fileno()).st_size
            logger.debug(f"Decoding {length} bytes from {path}")
            records = RecordDecoder(stream, length, encoding).decode()
    except OSError as e:
        raise SourceUnavailableError(f"Cannot read position log {path}: {e}") from e

    logger.debug(f"Decoded {len(records)} records from {path}")
    return records
