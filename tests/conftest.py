import pytest

from nearest_vehicles.records import PositionRecord


@pytest.fixture
def sample_records():
    """Three records around Texas with float32-exact coordinates."""
    return [
        PositionRecord.create(101, "ABC 123", 34.5, -102.25, 1688947200),
        PositionRecord.create(102, "XYZ 987", 32.25, -99.125, 1688947260),
        PositionRecord.create(103, "LMN 555", 35.0, -95.5, 1688947320),
    ]
