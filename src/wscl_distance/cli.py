"""wscl-distance CLI using Typer.

Running ``wscl-distance`` with no arguments reads the three CSV files from the
working directory, writes wscl_distance_data.json and prints a summary.
Settings come from the environment or a .env file (see config.py).
"""

import typer

from .config import get_settings
from .logging import configure_logging, get_logger
from .pipeline import Pipeline
from .report import summarize

app = typer.Typer(
    name="wscl-distance",
    help="Calculate WSCL team travel distances from attendance records.",
    add_completion=False,
)


@app.command()
def run() -> None:
    """Geocode teams and venues, measure travel, and write the distance report."""
    logger = get_logger(__name__)

    try:
        settings = get_settings()
        configure_logging(level=settings.log_level, format=settings.log_format)
        typer.echo("Starting WSCL Distance Calculator...")
        with Pipeline(settings) as pipeline:
            report = pipeline.run()
    except Exception as e:
        logger.exception("pipeline_failed", error=str(e))
        typer.echo(f"Error: Pipeline failed - {e}", err=True)
        raise typer.Exit(1)

    summary = summarize(report)

    typer.echo()
    typer.echo(f"Data saved to {settings.output_path}")
    typer.echo()
    typer.echo("=== SUMMARY ===")
    typer.echo(f"Teams geocoded: {summary.teams_geocoded}")
    typer.echo(f"Events geocoded: {summary.events_geocoded}")
    typer.echo(f"Travel records: {summary.travel_records}")
    typer.echo(f"Independent rider records: {summary.independent_records}")
    typer.echo(f"Total miles traveled: {summary.total_miles:.0f} miles")
    typer.echo(f"Total independent riders: {summary.total_independent_riders}")


def main() -> None:
    """CLI entry point."""
    app()
