import pytest

from conftest import FakeMaps, drive, geo
from wscl_distance.aggregator import (
    compute_distances,
    geocode_events,
    geocode_teams,
    group_venues,
    join_attendance,
    vehicles_needed,
)
from wscl_distance.models import (
    AttendanceRecord,
    DistanceEntry,
    EventLocation,
    EventRecord,
    TeamLocation,
    TeamRecord,
)
from wscl_distance.scheduler import SerialScheduler


def scheduler():
    return SerialScheduler(0.1, sleep=lambda seconds: None)


def team_loc(city, lat=47.6, lng=-122.3):
    return TeamLocation(
        lat=lat, lng=lng, formatted_address=f"{city}, WA", city=city, state="WA", zip=98000
    )


def event_loc(venue, city, event_id=1, state="WA"):
    return EventLocation(
        lat=47.0,
        lng=-118.0,
        formatted_address=f"{venue}, {city}",
        venue=venue,
        city=city,
        state=state,
        event_id=event_id,
    )


def entry(miles=100.0, minutes=90.0):
    return DistanceEntry(
        one_way_miles=miles, one_way_minutes=minutes, distance_text="", duration_text=""
    )


def test_geocode_teams_skips_independent_and_failures(bounds):
    maps = FakeMaps(addresses={"Seattle, WA 98101": geo("Seattle, WA 98101, USA")})
    teams = [
        TeamRecord(team="Seattle", city="Seattle", state="WA", zip=98101),
        TeamRecord(team="Independent", city="Anywhere", state="WA", zip=99999),
        TeamRecord(team="Ghost", city="Nowhere", state="WA", zip=11111),
    ]
    sched = scheduler()

    locations = geocode_teams(teams, maps, sched, bounds)

    assert list(locations) == ["Seattle"]
    assert locations["Seattle"].zip == 98101
    assert locations["Seattle"].formatted_address == "Seattle, WA 98101, USA"
    assert maps.geocode_calls == ["Seattle, WA 98101", "Nowhere, WA 11111"]
    assert sched.calls == 2


def test_geocode_events_falls_back_to_city(bounds):
    maps = FakeMaps(
        addresses={
            "X Track, Spokane, WA": geo("X Track"),
            "Walla Walla, WA": geo("Walla Walla, WA, USA"),
        }
    )
    events = [
        EventRecord(event_id=1, event_date="2024-04-06", venue="X Track", city="Spokane", state="WA"),
        EventRecord(event_id=2, event_date="2024-04-20", venue="Mystery Hill", city="Walla Walla", state="WA"),
        EventRecord(event_id=3, event_date="2024-05-04", venue="Lost", city="Atlantis", state="WA"),
    ]
    sched = scheduler()

    locations = geocode_events(events, maps, sched, bounds)

    assert set(locations) == {"2024-04-06", "2024-04-20"}
    fallback = locations["2024-04-20"]
    assert fallback.formatted_address == "Walla Walla, WA, USA"
    assert fallback.venue == "Mystery Hill"
    assert fallback.event_id == 2
    assert maps.geocode_calls == [
        "X Track, Spokane, WA",
        "Mystery Hill, Walla Walla, WA",
        "Walla Walla, WA",
        "Lost, Atlantis, WA",
        "Atlantis, WA",
    ]
    # the fallback request is rate limited like any other call
    assert sched.calls == 5


def test_group_venues_keys_on_city_and_state_only():
    venues = group_venues(
        {
            "2024-04-06": event_loc("X Track", "Spokane", event_id=1),
            "2024-04-20": event_loc("Riverside State Park", "Spokane", event_id=2),
            "2024-05-04": event_loc("Ski Hill", "Leavenworth", event_id=3),
            "2024-05-11": event_loc("Moscow Mountain", "Spokane", event_id=4, state="ID"),
        }
    )

    assert set(venues) == {"Spokane_WA", "Leavenworth_WA", "Spokane_ID"}
    assert venues["Spokane_WA"].dates == ["2024-04-06", "2024-04-20"]
    assert venues["Spokane_WA"].venue == "X Track"
    assert venues["Spokane_ID"].dates == ["2024-05-11"]


def test_shared_venue_gets_one_lookup_and_identical_entries():
    maps = FakeMaps(distances={("Seattle", "Spokane"): drive(280.0, 270.0)})
    venues = group_venues(
        {
            "2024-04-06": event_loc("X Track", "Spokane", event_id=1),
            "2024-04-20": event_loc("Y Park", "Spokane", event_id=2),
        }
    )

    distances = compute_distances({"Seattle": team_loc("Seattle")}, venues, maps, scheduler())

    assert maps.distance_calls == [("Seattle", "Spokane")]
    first = distances["Seattle"]["2024-04-06"]
    second = distances["Seattle"]["2024-04-20"]
    assert first == second
    assert first is not second
    assert first.one_way_miles == 280.0
    assert first.round_trip_miles == 560.0
    assert first.round_trip_minutes == 540.0


def test_failed_distance_leaves_dates_absent():
    maps = FakeMaps(distances={("Seattle", "Spokane"): drive(280.0, 270.0)})
    venues = group_venues(
        {
            "2024-04-06": event_loc("X Track", "Spokane"),
            "2024-05-04": event_loc("Island", "Friday Harbor"),
        }
    )
    teams = {"Seattle": team_loc("Seattle"), "Tacoma": team_loc("Tacoma")}

    distances = compute_distances(teams, venues, maps, scheduler())

    assert set(distances["Seattle"]) == {"2024-04-06"}
    assert distances["Tacoma"] == {}
    assert len(maps.distance_calls) == 4


@pytest.mark.parametrize("riders, expected", [(1, 1), (2, 1), (3, 2), (5, 3), (0, 0)])
def test_vehicles_needed(riders, expected):
    assert vehicles_needed(riders, 2) == expected


def test_join_builds_travel_with_derived_totals():
    events = {"2024-04-06": event_loc("X Track", "Spokane")}
    distances = {"Seattle": {"2024-04-06": entry(280.0, 270.0)}}
    attendance = [AttendanceRecord(team="Seattle", race_date_iso="2024-04-07", riders=5)]

    joined = join_attendance(attendance, events, distances, riders_per_vehicle=2)

    assert joined.unmatched == []
    (record,) = joined.travel
    assert record.date == "2024-04-07"
    assert record.event_date == "2024-04-06"
    assert record.vehicles == 3
    assert record.round_trip_miles == 2 * record.one_way_miles
    assert record.total_miles_traveled == record.round_trip_miles * record.vehicles == 1680.0
    assert record.total_minutes_traveled == 540.0 * 3
    assert record.venue == "X Track"
    assert record.city == "Spokane"
    assert record.season == "Spring 2024"


def test_join_respects_riders_per_vehicle():
    events = {"2024-04-06": event_loc("X Track", "Spokane")}
    distances = {"Seattle": {"2024-04-06": entry()}}
    attendance = [AttendanceRecord(team="Seattle", race_date_iso="2024-04-06", riders=7)]

    joined = join_attendance(attendance, events, distances, riders_per_vehicle=4)

    assert joined.travel[0].vehicles == 2


def test_independent_riders_never_get_travel():
    events = {"2024-04-06": event_loc("X Track", "Spokane")}
    distances = {"Seattle": {"2024-04-06": entry()}}
    attendance = [
        AttendanceRecord(team="Independent", race_date_iso="2024-04-05", riders=4),
        AttendanceRecord(team="Independent", race_date_iso="2024-06-01", riders=2),
    ]

    joined = join_attendance(attendance, events, distances, riders_per_vehicle=2)

    assert joined.travel == []
    assert joined.unmatched == []
    (record,) = joined.independent
    assert record.event_date == "2024-04-06"
    assert record.riders == 4
    assert record.venue == "X Track"
    assert record.season == "Spring 2024"
    assert "one_way_miles" not in record.model_dump()


def test_custom_independent_team_name():
    events = {"2024-04-06": event_loc("X Track", "Spokane")}
    attendance = [AttendanceRecord(team="Unattached", race_date_iso="2024-04-06", riders=3)]

    joined = join_attendance(
        attendance, events, {}, riders_per_vehicle=2, independent_team="Unattached"
    )

    assert len(joined.independent) == 1
    assert joined.unmatched == []


def test_unmatched_attendance_is_collected():
    events = {"2024-04-06": event_loc("X Track", "Spokane")}
    distances = {"Seattle": {"2024-04-06": entry()}}
    attendance = [
        # no event within two days
        AttendanceRecord(team="Seattle", race_date_iso="2024-05-20", riders=3),
        # team never geocoded
        AttendanceRecord(team="Ghost", race_date_iso="2024-04-06", riders=2),
    ]

    joined = join_attendance(attendance, events, distances, riders_per_vehicle=2)

    assert joined.travel == []
    assert [(r.team, r.date, r.riders) for r in joined.unmatched] == [
        ("Seattle", "2024-05-20", 3),
        ("Ghost", "2024-04-06", 2),
    ]


def test_team_without_attendance_produces_nothing():
    events = {"2024-04-06": event_loc("X Track", "Spokane")}
    distances = {"Seattle": {"2024-04-06": entry()}, "Tacoma": {"2024-04-06": entry()}}
    attendance = [AttendanceRecord(team="Seattle", race_date_iso="2024-04-06", riders=2)]

    joined = join_attendance(attendance, events, distances, riders_per_vehicle=2)

    assert [r.team for r in joined.travel] == ["Seattle"]
