"""Configuration settings using pydantic-settings for environment variable loading."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import BoundingBox, Coordinates


def default_bounds() -> BoundingBox:
    """Washington, Idaho and Oregon."""
    return BoundingBox(
        southwest=Coordinates(lat=41.9, lng=-125.0),
        northeast=Coordinates(lat=49.0, lng=-116.0),
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Automatically reads from .env file and environment variables.
    Environment variables take precedence over .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Google Maps (Geocoding + Distance Matrix)
    google_maps_api_key: str

    # Travel model
    riders_per_vehicle: int = Field(default=2, ge=1)
    independent_team: str = "Independent"

    # Geocoding viewport bias
    bounds: BoundingBox = Field(default_factory=default_bounds)

    # Pause after every external call
    rate_limit_delay_ms: int = Field(default=100, ge=0)

    # Paths
    teams_csv: Path = Path("Team_Names_and_Locations.csv")
    events_csv: Path = Path("Event_Names_and_IDs.csv")
    attendance_csv: Path = Path("Team_Attendance_By_Date.csv")
    output_path: Path = Path("wscl_distance_data.json")

    # Logging
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    @property
    def rate_limit_delay(self) -> float:
        """Rate limit delay in seconds."""
        return self.rate_limit_delay_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
