# Why: every test runs offline; maps services are replaced with in-memory fakes.
import pytest
import structlog

from wscl_distance.config import Settings
from wscl_distance.models import BoundingBox, Coordinates, DistanceResult, GeoLocation


def geo(name, lat=47.0, lng=-120.0):
    return GeoLocation(lat=lat, lng=lng, formatted_address=name)


def drive(miles, minutes):
    return DistanceResult(
        distance_miles=miles,
        duration_minutes=minutes,
        distance_text=f"{miles:.0f} mi",
        duration_text=f"{minutes:.0f} mins",
    )


class FakeMaps:
    """Geocoder + distance resolver backed by dicts.

    Geocoding looks up the exact address string. Distances are keyed by
    (origin city, destination city).
    """

    def __init__(self, addresses=None, distances=None):
        self.addresses = addresses or {}
        self.distances = distances or {}
        self.geocode_calls = []
        self.distance_calls = []

    def geocode(self, address, bounds):
        self.geocode_calls.append(address)
        return self.addresses.get(address)

    def driving_distance(self, origin, destination):
        key = (origin.city, destination.city)
        self.distance_calls.append(key)
        return self.distances.get(key)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    structlog.reset_defaults()


@pytest.fixture
def bounds():
    return BoundingBox(
        southwest=Coordinates(lat=41.9, lng=-125.0),
        northeast=Coordinates(lat=49.0, lng=-116.0),
    )


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides):
        values = dict(
            google_maps_api_key="test-key",
            teams_csv=tmp_path / "Team_Names_and_Locations.csv",
            events_csv=tmp_path / "Event_Names_and_IDs.csv",
            attendance_csv=tmp_path / "Team_Attendance_By_Date.csv",
            output_path=tmp_path / "wscl_distance_data.json",
            log_level="WARNING",
        )
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def write_inputs(tmp_path):
    """Write the three input CSVs into tmp_path."""

    def _write(teams, events, attendance):
        (tmp_path / "Team_Names_and_Locations.csv").write_text(teams)
        (tmp_path / "Event_Names_and_IDs.csv").write_text(events)
        (tmp_path / "Team_Attendance_By_Date.csv").write_text(attendance)
        return tmp_path

    return _write
