import pytest

from nearest_vehicles.config import DEFAULT_REFERENCE_POINTS
from nearest_vehicles.errors import NoRecordsError
from nearest_vehicles.geometry import ReferencePoint, haversine_distance
from nearest_vehicles.nearest import (
    NearestResult,
    QueryResult,
    find_nearest,
    find_nearest_for_all,
)
from nearest_vehicles.records import PositionRecord


def make_record(vehicle_id, latitude, longitude):
    return PositionRecord.create(vehicle_id, f"REG {vehicle_id}", latitude, longitude, 0)


def test_nearest_of_one_scenario():
    near = make_record(1, 34.0, -102.0)
    far = make_record(2, 0.0, 0.0)
    reference = ReferencePoint(1, 34.544909, -102.100843)

    results = find_nearest([near, far], reference)

    assert len(results) == 1
    assert results[0].record is near
    assert results[0].distance == haversine_distance(near.position, reference.position)


def test_nearest_order_does_not_depend_on_input_order():
    near = make_record(1, 34.0, -102.0)
    far = make_record(2, 0.0, 0.0)
    reference = ReferencePoint(1, 34.544909, -102.100843)

    assert find_nearest([far, near], reference)[0].record is near


def test_count_limits_and_orders_results(sample_records):
    reference = ReferencePoint("depot", 34.5, -102.25)

    results = find_nearest(sample_records, reference, count=2)

    assert [r.record.vehicle_id for r in results] == [101, 102]
    assert results[0].distance == 0.0
    assert results[0].distance < results[1].distance
    assert all(isinstance(r, NearestResult) for r in results)


def test_count_larger_than_collection(sample_records):
    reference = ReferencePoint(1, 0.0, 0.0)
    results = find_nearest(sample_records, reference, count=10)
    assert len(results) == len(sample_records)


def test_ties_keep_input_order():
    records = [make_record(i, 10.0, 10.0) for i in range(5)]
    reference = ReferencePoint(1, 11.0, 11.0)

    results = find_nearest(records, reference, count=5)

    assert [r.record.vehicle_id for r in results] == [0, 1, 2, 3, 4]


def test_ties_keep_input_order_among_closer_records():
    records = [
        make_record(1, 5.0, 5.0),
        make_record(2, 1.0, 1.0),
        make_record(3, 5.0, 5.0),
        make_record(4, 1.0, 1.0),
    ]
    reference = ReferencePoint(1, 0.0, 0.0)

    results = find_nearest(records, reference, count=4)

    assert [r.record.vehicle_id for r in results] == [2, 4, 1, 3]


def test_record_is_origin_of_distance():
    record = make_record(1, 12.5, 45.25)
    reference = ReferencePoint(1, -33.0, 151.0)

    result = find_nearest([record], reference)[0]

    assert result.distance == haversine_distance(record.position, reference.position)


def test_empty_records_raise():
    with pytest.raises(NoRecordsError):
        find_nearest([], ReferencePoint(1, 0.0, 0.0))


@pytest.mark.parametrize("count", [0, -1])
def test_invalid_count(sample_records, count):
    with pytest.raises(ValueError):
        find_nearest(sample_records, ReferencePoint(1, 0.0, 0.0), count=count)


def test_find_nearest_for_all_groups_by_reference(sample_records):
    references = [
        ReferencePoint(1, 35.0, -95.5),
        ReferencePoint(2, 32.25, -99.125),
    ]

    results = find_nearest_for_all(sample_records, references, count=2)

    assert [r.label for r in results] == [1, 1, 2, 2]
    assert results[0] == QueryResult(1, sample_records[2], 0.0)
    assert results[2] == QueryResult(2, sample_records[1], 0.0, 1)
    assert [r.index for r in results] == [0, 0, 1, 1]


def test_find_nearest_for_all_default_references(sample_records):
    results = find_nearest_for_all(sample_records, DEFAULT_REFERENCE_POINTS)
    assert [r.label for r in results] == list(range(1, 11))


def test_find_nearest_for_all_no_references(sample_records):
    assert find_nearest_for_all(sample_records, []) == []


def test_find_nearest_for_all_empty_records():
    with pytest.raises(NoRecordsError):
        find_nearest_for_all([], DEFAULT_REFERENCE_POINTS)


def test_find_nearest_for_all_keeps_duplicate_labels_apart(sample_records):
    references = [
        ReferencePoint(1, 34.5, -102.25),
        ReferencePoint(1, 35.0, -95.5),
    ]

    results = find_nearest_for_all(sample_records, references)

    assert [r.label for r in results] == [1, 1]
    assert [r.index for r in results] == [0, 1]
    assert [r.record.vehicle_id for r in results] == [101, 103]
