"""Pydantic data models for the WSCL distance calculator.

Input rows, geocoded locations, distances and the travel records built from
them. Derived travel figures are computed fields so they can never drift from
the one-way values they come from.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field


class TeamRecord(BaseModel):
    """A row of Team_Names_and_Locations.csv."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    team: str = Field(description="Team name, unique and case-sensitive")
    city: str | None = None
    state: str | None = None
    zip: str | int | None = Field(default=None, description="Postal code as read from the CSV")


class EventRecord(BaseModel):
    """A row of Event_Names_and_IDs.csv."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    event_id: int | str
    event_date: str = Field(description="ISO calendar date (YYYY-MM-DD)")
    venue: str
    city: str
    state: str


class AttendanceRecord(BaseModel):
    """A row of Team_Attendance_By_Date.csv."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    team: str
    race_date_iso: str = Field(description="Date the team raced (YYYY-MM-DD)")
    riders: int = Field(ge=0)


class Coordinates(BaseModel):
    """A latitude/longitude pair."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

    def as_param(self) -> str:
        return f"{self.lat},{self.lng}"


class BoundingBox(BaseModel):
    """Viewport used to bias geocoding results."""

    model_config = ConfigDict(frozen=True)

    southwest: Coordinates
    northeast: Coordinates

    def as_param(self) -> str:
        """Render as the Geocoding API ``bounds`` parameter."""
        return f"{self.southwest.as_param()}|{self.northeast.as_param()}"


class GeoLocation(Coordinates):
    """A geocoding result."""

    formatted_address: str


class TeamLocation(GeoLocation):
    """A team's geocoded home base."""

    city: str | None = None
    state: str | None = None
    zip: str | int | None = None


class EventLocation(GeoLocation):
    """A geocoded event venue (or its city when the venue could not be found)."""

    venue: str
    city: str
    state: str
    event_id: int | str


class UniqueVenueLocation(EventLocation):
    """One physical location shared by every event date in ``dates``.

    Locations are keyed on city and state only, so two venues in the same
    city are treated as one place for distance purposes.
    """

    dates: list[str] = Field(default_factory=list)

    @staticmethod
    def key_for(location: EventLocation) -> str:
        return f"{location.city}_{location.state}"


class DistanceResult(BaseModel):
    """Driving distance and duration between two points."""

    distance_miles: float
    duration_minutes: float
    distance_text: str
    duration_text: str


class DistanceEntry(BaseModel):
    """Distance from a team's home base to an event, one way and round trip."""

    one_way_miles: float
    one_way_minutes: float
    distance_text: str
    duration_text: str

    @computed_field
    @property
    def round_trip_miles(self) -> float:
        return self.one_way_miles * 2

    @computed_field
    @property
    def round_trip_minutes(self) -> float:
        return self.one_way_minutes * 2

    @classmethod
    def from_result(cls, result: DistanceResult) -> "DistanceEntry":
        return cls(
            one_way_miles=result.distance_miles,
            one_way_minutes=result.duration_minutes,
            distance_text=result.distance_text,
            duration_text=result.duration_text,
        )


class TravelRecord(BaseModel):
    """Travel for one team's attendance at one event."""

    team: str
    date: str = Field(description="Attendance date as recorded")
    event_date: str = Field(description="Event date the attendance was matched to")
    riders: int
    vehicles: int = Field(description="Vehicles needed to carry the riders")
    one_way_miles: float
    one_way_minutes: float
    venue: str
    city: str
    season: str

    @computed_field
    @property
    def round_trip_miles(self) -> float:
        return self.one_way_miles * 2

    @computed_field
    @property
    def total_miles_traveled(self) -> float:
        return self.round_trip_miles * self.vehicles

    @computed_field
    @property
    def round_trip_minutes(self) -> float:
        return self.one_way_minutes * 2

    @computed_field
    @property
    def total_minutes_traveled(self) -> float:
        return self.round_trip_minutes * self.vehicles


class IndependentRecord(BaseModel):
    """Attendance by independent riders. No travel is calculated for these."""

    date: str
    event_date: str
    riders: int
    venue: str
    city: str
    season: str


class UnmatchedRecord(BaseModel):
    """Attendance that could not be tied to an event or a known distance."""

    team: str
    date: str
    riders: int


class AttendanceJoin(BaseModel):
    """Result of joining attendance to events and distances."""

    travel: list[TravelRecord] = Field(default_factory=list)
    independent: list[IndependentRecord] = Field(default_factory=list)
    unmatched: list[UnmatchedRecord] = Field(default_factory=list)


class ReportMetadata(BaseModel):
    """Run metadata written at the top of the report."""

    generated_at: datetime
    riders_per_vehicle: int
    total_teams: int
    total_events: int
    total_attendance_records: int = Field(description="Number of travel records")
    independent_records: int


class DistanceReport(BaseModel):
    """The JSON document produced by a run."""

    metadata: ReportMetadata
    team_locations: dict[str, TeamLocation]
    event_locations: dict[str, EventLocation]
    distances: dict[str, dict[str, DistanceEntry]]
    travel_data: list[TravelRecord]
    independent_data: list[IndependentRecord]
