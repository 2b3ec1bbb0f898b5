"""Mapping service interfaces.

The aggregation steps only depend on these protocols, so any provider (or a
test double) that can geocode an address and measure a drive can be used.
"""

from typing import Protocol, runtime_checkable

from ..models import BoundingBox, Coordinates, DistanceResult, GeoLocation


@runtime_checkable
class Geocoder(Protocol):
    """Resolves free-text addresses to coordinates."""

    def geocode(self, address: str, bounds: BoundingBox) -> GeoLocation | None:
        """Geocode an address, biased towards a viewport.

        Args:
            address: Free-text address
            bounds: Viewport bias (results outside it are still allowed)

        Returns:
            First matching location, or None if nothing was found or the
            service could not be reached
        """
        ...


@runtime_checkable
class DistanceResolver(Protocol):
    """Measures driving distance and time between two points."""

    def driving_distance(
        self, origin: Coordinates, destination: Coordinates
    ) -> DistanceResult | None:
        """Get the driving distance from origin to destination.

        Returns:
            Distance in miles and duration in minutes, or None on failure
        """
        ...


from .google import GoogleMapsClient

__all__ = [
    "Geocoder",
    "DistanceResolver",
    "GoogleMapsClient",
]
