"""Google Maps Geocoding and Distance Matrix client.

API documentation:
- https://developers.google.com/maps/documentation/geocoding/requests-geocoding
- https://developers.google.com/maps/documentation/distance-matrix/distance-matrix
"""

import httpx

from ..logging import get_logger
from ..models import BoundingBox, Coordinates, DistanceResult, GeoLocation

logger = get_logger(__name__)

METERS_TO_MILES = 0.000621371


class GoogleMapsClient:
    """Google Maps web service client.

    Every failure (non-OK status, empty results, HTTP or network errors,
    bodies that are not the expected JSON) is logged and reported as None.
    Callers are responsible for pacing requests.
    """

    BASE_URL = "https://maps.googleapis.com/maps/api"

    def __init__(self, api_key: str, transport: httpx.BaseTransport | None = None):
        """Initialize the Google Maps client.

        Args:
            api_key: Google Maps API key
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.api_key = api_key
        self._client = httpx.Client(
            base_url=self.BASE_URL,
            headers={"Accept": "application/json"},
            timeout=30.0,
            transport=transport,
        )

    def _get(self, path: str, params: dict[str, str]) -> dict:
        response = self._client.get(path, params={**params, "key": self.api_key})
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected response body: {type(data).__name__}")
        return data

    def geocode(self, address: str, bounds: BoundingBox) -> GeoLocation | None:
        """Geocode an address, returning the first result."""
        try:
            data = self._get(
                "/geocode/json",
                {"address": address, "bounds": bounds.as_param()},
            )
            return self._parse_geocode(address, data)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error("geocoding_error", error=str(e), address=address)
            return None

    def _parse_geocode(self, address: str, data: dict) -> GeoLocation | None:
        status = data.get("status")
        results = data.get("results") or []
        if status != "OK" or not results:
            logger.warning("geocoding_failed", address=address, status=status)
            return None

        result = results[0]
        location = result["geometry"]["location"]
        geo = GeoLocation(
            lat=location["lat"],
            lng=location["lng"],
            formatted_address=result["formatted_address"],
        )
        logger.info(
            "geocoded",
            address=address,
            formatted_address=geo.formatted_address,
            lat=geo.lat,
            lng=geo.lng,
        )
        return geo

    def driving_distance(
        self, origin: Coordinates, destination: Coordinates
    ) -> DistanceResult | None:
        """Get driving distance and time with the Distance Matrix API."""
        try:
            data = self._get(
                "/distancematrix/json",
                {
                    "origins": origin.as_param(),
                    "destinations": destination.as_param(),
                    "mode": "driving",
                    "units": "imperial",
                },
            )
            return self._parse_distance(origin, destination, data)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(
                "distance_error",
                error=str(e),
                origin=origin.as_param(),
                destination=destination.as_param(),
            )
            return None

    def _parse_distance(
        self, origin: Coordinates, destination: Coordinates, data: dict
    ) -> DistanceResult | None:
        status = data.get("status")
        element = None
        if status == "OK":
            rows = data.get("rows") or [{}]
            elements = rows[0].get("elements") or [{}]
            element = elements[0]

        if element is None or element.get("status") != "OK":
            logger.warning(
                "distance_failed",
                status=status,
                element_status=element.get("status") if element else None,
                origin=origin.as_param(),
                destination=destination.as_param(),
            )
            return None

        return DistanceResult(
            distance_miles=element["distance"]["value"] * METERS_TO_MILES,
            duration_minutes=element["duration"]["value"] / 60,
            distance_text=element["distance"]["text"],
            duration_text=element["duration"]["text"],
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "GoogleMapsClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
