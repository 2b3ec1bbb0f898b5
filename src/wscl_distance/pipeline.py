"""Pipeline orchestrator for the WSCL distance calculator.

Coordinates the full flow:
1. Load teams, events and attendance CSVs
2. Geocode team home bases
3. Geocode event venues
4. Calculate distances between teams and unique venue locations
5. Join with attendance to calculate actual travel
6. Write the JSON report
"""

import time
from collections.abc import Callable

from .aggregator import (
    compute_distances,
    geocode_events,
    geocode_teams,
    group_venues,
    join_attendance,
)
from .config import Settings, get_settings
from .loader import load_attendance, load_events, load_teams
from .logging import configure_logging, get_logger
from .maps import DistanceResolver, Geocoder, GoogleMapsClient
from .models import DistanceReport
from .report import build_report, write_report
from .scheduler import SerialScheduler

logger = get_logger(__name__)


class Pipeline:
    """Main pipeline orchestrator."""

    def __init__(
        self,
        settings: Settings | None = None,
        geocoder: Geocoder | None = None,
        resolver: DistanceResolver | None = None,
        sleep: Callable[[float], None] | None = None,
    ):
        """Initialize the pipeline.

        Args:
            settings: Optional settings override
            geocoder: Optional geocoder (defaults to Google Maps)
            resolver: Optional distance resolver (defaults to Google Maps)
            sleep: Optional sleep function for the rate limiter
        """
        self.settings = settings or get_settings()

        # Configure logging
        configure_logging(
            level=self.settings.log_level,
            format=self.settings.log_format,
        )

        self.scheduler = SerialScheduler(self.settings.rate_limit_delay, sleep=sleep or time.sleep)

        # Google client (only created when a service was not supplied)
        self._maps: GoogleMapsClient | None = None
        if geocoder is None or resolver is None:
            self._maps = GoogleMapsClient(api_key=self.settings.google_maps_api_key)
        self.geocoder: Geocoder = geocoder or self._maps
        self.resolver: DistanceResolver = resolver or self._maps

    def run(self) -> DistanceReport:
        """Run the full pipeline and write the report.

        Returns:
            The report that was written to ``settings.output_path``
        """
        settings = self.settings
        logger.info("pipeline_start", riders_per_vehicle=settings.riders_per_vehicle)

        # Step 1: Load data files
        teams = load_teams(settings.teams_csv)
        events = load_events(settings.events_csv)
        attendance = load_attendance(settings.attendance_csv)
        logger.info(
            "data_loaded",
            teams=len(teams),
            events=len(events),
            attendance=len(attendance),
        )

        # Step 2: Geocode team home bases
        team_locations = geocode_teams(
            teams,
            self.geocoder,
            self.scheduler,
            settings.bounds,
            independent_team=settings.independent_team,
        )
        logger.info("teams_geocoded", count=len(team_locations))

        # Step 3: Geocode event venues
        event_locations = geocode_events(events, self.geocoder, self.scheduler, settings.bounds)
        logger.info("events_geocoded", count=len(event_locations))

        # Step 4: Distances to each unique venue location
        venues = group_venues(event_locations)
        distances = compute_distances(team_locations, venues, self.resolver, self.scheduler)

        # Step 5: Actual travel based on attendance
        joined = join_attendance(
            attendance,
            event_locations,
            distances,
            riders_per_vehicle=settings.riders_per_vehicle,
            independent_team=settings.independent_team,
        )

        for record in joined.unmatched:
            logger.warning(
                "attendance_unmatched",
                team=record.team,
                date=record.date,
                riders=record.riders,
            )
        logger.info(
            "attendance_joined",
            travel=len(joined.travel),
            independent=len(joined.independent),
            unmatched=len(joined.unmatched),
        )

        # Step 6: Save
        report = build_report(
            team_locations,
            event_locations,
            distances,
            joined,
            riders_per_vehicle=settings.riders_per_vehicle,
        )
        write_report(report, settings.output_path)

        logger.info("pipeline_complete", api_calls=self.scheduler.calls)
        return report

    def close(self) -> None:
        if self._maps:
            self._maps.close()

    def __enter__(self) -> "Pipeline":
        return self

    def __exit__(self, *args) -> None:
        self.close()
