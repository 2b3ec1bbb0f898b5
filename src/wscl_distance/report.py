"""Report assembly, JSON output and run summary."""

import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .aggregator import DistanceTable
from .logging import get_logger
from .models import (
    AttendanceJoin,
    DistanceReport,
    EventLocation,
    ReportMetadata,
    TeamLocation,
)

logger = get_logger(__name__)


@dataclass
class ReportSummary:
    """Headline numbers printed at the end of a run."""

    teams_geocoded: int
    events_geocoded: int
    travel_records: int
    independent_records: int
    total_miles: float
    total_independent_riders: int


def build_report(
    team_locations: dict[str, TeamLocation],
    event_locations: dict[str, EventLocation],
    distances: DistanceTable,
    joined: AttendanceJoin,
    riders_per_vehicle: int,
    generated_at: datetime | None = None,
) -> DistanceReport:
    """Assemble the output document from a run's collections."""
    metadata = ReportMetadata(
        generated_at=generated_at or datetime.now(timezone.utc),
        riders_per_vehicle=riders_per_vehicle,
        total_teams=len(team_locations),
        total_events=len(event_locations),
        total_attendance_records=len(joined.travel),
        independent_records=len(joined.independent),
    )
    return DistanceReport(
        metadata=metadata,
        team_locations=team_locations,
        event_locations=event_locations,
        distances=distances,
        travel_data=joined.travel,
        independent_data=joined.independent,
    )


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_report(report: DistanceReport, path: Path) -> None:
    """Write the report as indented UTF-8 JSON, replacing ``path`` atomically."""
    path = Path(path)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(report.model_dump_json(indent=2))
        # mkstemp creates 0600; give the report the usual umask-based mode
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("report_written", path=str(path))


def summarize(report: DistanceReport) -> ReportSummary:
    return ReportSummary(
        teams_geocoded=len(report.team_locations),
        events_geocoded=len(report.event_locations),
        travel_records=len(report.travel_data),
        independent_records=len(report.independent_data),
        total_miles=sum(r.total_miles_traveled for r in report.travel_data),
        total_independent_riders=sum(r.riders for r in report.independent_data),
    )
