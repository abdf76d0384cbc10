from datetime import datetime, timezone
import struct

import pytest

from nearest_vehicles.errors import TimestampRangeError
from nearest_vehicles.geometry import Position
from nearest_vehicles.records import (
    EPOCH,
    PositionRecord,
    encode_record,
    encode_records,
    timestamp_to_datetime,
    to_single,
)


def test_timestamp_zero_is_epoch():
    assert timestamp_to_datetime(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_timestamp_in_range():
    assert timestamp_to_datetime(1688947200) == datetime(
        2023, 7, 10, 0, 0, 0, tzinfo=timezone.utc
    )


def test_timestamp_is_reinterpreted_as_signed():
    # All bits set is -1 as a signed 64-bit value
    assert timestamp_to_datetime(2**64 - 1) == datetime(
        1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc
    )
    assert timestamp_to_datetime(2**64 - 86400) == datetime(
        1969, 12, 31, tzinfo=timezone.utc
    )


@pytest.mark.parametrize("timestamp", [2**63 - 1, 2**63, 10**12])
def test_timestamp_out_of_datetime_range(timestamp):
    with pytest.raises(TimestampRangeError) as excinfo:
        timestamp_to_datetime(timestamp, record_index=4)
    assert excinfo.value.timestamp == timestamp
    assert excinfo.value.record_index == 4
    assert "Record 4" in str(excinfo.value)


def test_create_derives_recorded_at():
    record = PositionRecord.create(7, "ABC 123", 34.5, -102.25, 60)
    assert record.recorded_at == datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc)
    assert record.timestamp == 60
    assert record.position == Position(34.5, -102.25)


def test_record_is_immutable():
    record = PositionRecord.create(7, "ABC 123", 34.5, -102.25, 60)
    with pytest.raises(AttributeError):
        record.latitude = 0.0


def test_encode_record_layout():
    record = PositionRecord.create(-2, "AB", 1.5, -2.5, 3)
    data = encode_record(record)

    assert data == (
        struct.pack("<i", -2)
        + b"AB\x00"
        + struct.pack("<f", 1.5)
        + struct.pack("<f", -2.5)
        + struct.pack("<Q", 3)
    )
    assert len(data) == 4 + 3 + 4 + 4 + 8


def test_encode_record_rejects_embedded_nul():
    record = PositionRecord(1, "A\x00B", 0.0, 0.0, EPOCH, 0)
    with pytest.raises(ValueError, match="NUL"):
        encode_record(record)


def test_encode_record_rejects_negative_timestamp():
    record = PositionRecord(1, "A", 0.0, 0.0, EPOCH, -1)
    with pytest.raises(ValueError, match="uint64"):
        encode_record(record)


def test_encode_records_concatenates_in_order(sample_records):
    data = encode_records(sample_records)
    assert data == b"".join(encode_record(record) for record in sample_records)
    assert encode_records([]) == b""


def test_create_reports_record_index_for_bad_timestamp():
    with pytest.raises(TimestampRangeError) as excinfo:
        PositionRecord.create(1, "A", 0.0, 0.0, 2**63 - 1, record_index=12)
    assert excinfo.value.record_index == 12


def test_to_single():
    assert to_single(1.5) == 1.5
    assert to_single(0.1) == struct.unpack("<f", struct.pack("<f", 0.1))[0]
    assert to_single(0.1) != 0.1
