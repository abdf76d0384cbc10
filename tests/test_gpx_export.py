import gpxpy

from nearest_vehicles.geometry import ReferencePoint
from nearest_vehicles.gpx_export import results_to_gpx, write_gpx
from nearest_vehicles.nearest import find_nearest_for_all


def test_results_to_gpx_waypoints(sample_records):
    references = [ReferencePoint(1, 34.5, -102.0), ReferencePoint(2, 35.0, -95.0)]
    results = find_nearest_for_all(sample_records, references)

    gpx = results_to_gpx(references, results)

    assert len(gpx.waypoints) == 4
    assert [w.name for w in gpx.waypoints[:2]] == ["Reference 1", "Reference 2"]
    vehicle = gpx.waypoints[2]
    assert vehicle.name == "ABC 123"
    assert vehicle.latitude == 34.5
    assert vehicle.longitude == -102.25
    assert vehicle.time == sample_records[0].recorded_at
    assert "Vehicle 101" in vehicle.description


def test_write_gpx_round_trips_through_gpxpy(tmp_path, sample_records):
    references = [ReferencePoint(1, 32.0, -99.0)]
    results = find_nearest_for_all(sample_records, references, count=3)
    path = tmp_path / "nearest.gpx"

    write_gpx(references, results, str(path))

    with open(path, encoding="utf-8") as f:
        parsed = gpxpy.parse(f)
    assert len(parsed.waypoints) == 4
    assert parsed.waypoints[1].name == "XYZ 987"
