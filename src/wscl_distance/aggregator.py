"""Aggregation of teams, events, distances and attendance.

Steps, in the order the pipeline runs them:
1. Geocode team home bases (independent riders have none)
2. Geocode event venues, falling back to the venue's city
3. Group events into unique (city, state) locations
4. Measure each team to each unique location once and share the result
5. Join attendance onto events and distances
"""

import math
from collections.abc import Iterable, Mapping

from .logging import get_logger
from .maps import DistanceResolver, Geocoder
from .matching import match_event_date, season_label
from .models import (
    AttendanceJoin,
    AttendanceRecord,
    BoundingBox,
    DistanceEntry,
    EventLocation,
    EventRecord,
    IndependentRecord,
    TeamLocation,
    TeamRecord,
    TravelRecord,
    UniqueVenueLocation,
    UnmatchedRecord,
)
from .scheduler import SerialScheduler

logger = get_logger(__name__)

DistanceTable = dict[str, dict[str, DistanceEntry]]


def geocode_teams(
    teams: Iterable[TeamRecord],
    geocoder: Geocoder,
    scheduler: SerialScheduler,
    bounds: BoundingBox,
    independent_team: str = "Independent",
) -> dict[str, TeamLocation]:
    """Geocode every team's home base, keyed by team name.

    Teams that cannot be geocoded are left out.
    """
    locations: dict[str, TeamLocation] = {}

    for team in teams:
        if team.team == independent_team:
            logger.info("skipping_team", team=team.team, reason="no fixed location")
            continue

        address = f"{team.city}, {team.state} {team.zip or ''}".rstrip()
        logger.info("geocoding_team", team=team.team, address=address)

        location = scheduler.call(geocoder.geocode, address, bounds)
        if location:
            locations[team.team] = TeamLocation(
                **location.model_dump(),
                city=team.city,
                state=team.state,
                zip=team.zip,
            )

    return locations


def geocode_events(
    events: Iterable[EventRecord],
    geocoder: Geocoder,
    scheduler: SerialScheduler,
    bounds: BoundingBox,
) -> dict[str, EventLocation]:
    """Geocode every event venue, keyed by event date.

    The venue name is tried first and the city is used when the venue is not
    found. Events where both fail are left out.
    """
    locations: dict[str, EventLocation] = {}

    for event in events:
        logger.info("geocoding_event", venue=event.venue, city=event.city, state=event.state)

        location = scheduler.call(
            geocoder.geocode, f"{event.venue}, {event.city}, {event.state}", bounds
        )
        if not location:
            logger.info("geocoding_event_city_fallback", venue=event.venue, city=event.city)
            location = scheduler.call(geocoder.geocode, f"{event.city}, {event.state}", bounds)

        if location:
            locations[event.event_date] = EventLocation(
                **location.model_dump(),
                venue=event.venue,
                city=event.city,
                state=event.state,
                event_id=event.event_id,
            )

    return locations


def group_venues(event_locations: Mapping[str, EventLocation]) -> dict[str, UniqueVenueLocation]:
    """Collapse events that share a city and state into one location.

    The first event seen for a location supplies its coordinates.
    """
    venues: dict[str, UniqueVenueLocation] = {}

    for event_date, location in event_locations.items():
        key = UniqueVenueLocation.key_for(location)
        if key in venues:
            venues[key].dates.append(event_date)
        else:
            venues[key] = UniqueVenueLocation(**location.model_dump(), dates=[event_date])

    logger.info(
        "venues_grouped",
        unique_locations=len(venues),
        events=len(event_locations),
    )
    return venues


def compute_distances(
    team_locations: Mapping[str, TeamLocation],
    venues: Mapping[str, UniqueVenueLocation],
    resolver: DistanceResolver,
    scheduler: SerialScheduler,
) -> DistanceTable:
    """Measure every team to every unique venue location.

    One request is made per (team, location) pair and the result is copied to
    each event date at that location. Pairs the service cannot route are
    absent from the table.
    """
    distances: DistanceTable = {}

    for team_name, team_location in team_locations.items():
        distances[team_name] = {}

        for venue in venues.values():
            logger.info(
                "measuring_distance",
                team=team_name,
                city=venue.city,
                events=len(venue.dates),
            )

            result = scheduler.call(resolver.driving_distance, team_location, venue)
            if not result:
                continue

            entry = DistanceEntry.from_result(result)
            for event_date in venue.dates:
                distances[team_name][event_date] = entry.model_copy()

    return distances


def vehicles_needed(riders: int, riders_per_vehicle: int) -> int:
    return math.ceil(riders / riders_per_vehicle)


def join_attendance(
    attendance: Iterable[AttendanceRecord],
    event_locations: Mapping[str, EventLocation],
    distances: DistanceTable,
    riders_per_vehicle: int,
    independent_team: str = "Independent",
) -> AttendanceJoin:
    """Turn attendance into travel records.

    Independent riders are counted per event but never given travel.
    Attendance with no event within two days, or with no distance for the
    team, is collected as unmatched.
    """
    joined = AttendanceJoin()
    event_dates = set(event_locations)

    for record in attendance:
        matched_date = match_event_date(record.race_date_iso, event_dates)

        if record.team == independent_team:
            if matched_date:
                event = event_locations[matched_date]
                joined.independent.append(
                    IndependentRecord(
                        date=record.race_date_iso,
                        event_date=matched_date,
                        riders=record.riders,
                        venue=event.venue,
                        city=event.city,
                        season=season_label(record.race_date_iso),
                    )
                )
            continue

        distance = distances.get(record.team, {}).get(matched_date) if matched_date else None
        if distance is None:
            joined.unmatched.append(
                UnmatchedRecord(team=record.team, date=record.race_date_iso, riders=record.riders)
            )
            continue

        event = event_locations[matched_date]
        joined.travel.append(
            TravelRecord(
                team=record.team,
                date=record.race_date_iso,
                event_date=matched_date,
                riders=record.riders,
                vehicles=vehicles_needed(record.riders, riders_per_vehicle),
                one_way_miles=distance.one_way_miles,
                one_way_minutes=distance.one_way_minutes,
                venue=event.venue,
                city=event.city,
                season=season_label(record.race_date_iso),
            )
        )

        if record.race_date_iso != matched_date:
            logger.info(
                "attendance_matched_nearby",
                team=record.team,
                attendance_date=record.race_date_iso,
                event_date=matched_date,
            )

    return joined
