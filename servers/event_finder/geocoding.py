"""
Postal code geocoding via Nominatim (OpenStreetMap).

Providers that filter or rank by distance resolve the search origin
here. Results are cached per (postal code, country) for the lifetime
of the geocoder, and concurrent lookups of the same key share one
request, since several providers resolve the same origin during one
aggregated fan-out.
"""

import asyncio
import math
from typing import Optional

import httpx
import structlog
from pydantic import BaseModel

from .resilience.retry import retry_once

logger = structlog.get_logger()

EARTH_RADIUS_MILES = 3958.8


class GeocodingError(Exception):
    """Base class for geocoding failures."""


class PostalCodeNotFoundError(GeocodingError):
    """The geocoder has no match for the postal code."""

    def __init__(self, postal_code: str):
        super().__init__(f"No results found for postal code: {postal_code}")
        self.postal_code = postal_code


class GeocodingUnavailableError(GeocodingError):
    """The geocoding service could not be reached or answered with an error."""


class Coordinates(BaseModel):
    latitude: float
    longitude: float


class GeocodingResult(BaseModel):
    coordinates: Coordinates
    formatted_address: str = ""
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


def haversine_miles(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in miles."""
    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(h))


class NominatimGeocoder:
    """Resolve postal codes to coordinates."""

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "EventFinderApp/1.0",
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent  # Required by Nominatim usage policy
        self.timeout = timeout
        self._cache: dict[tuple[str, str], GeocodingResult] = {}
        self._pending: dict[tuple[str, str], asyncio.Task] = {}

    async def resolve(self, postal_code: str, country_code: str = "US") -> GeocodingResult:
        """
        Geocode a postal code.

        Raises:
            PostalCodeNotFoundError: No match for the postal code
            GeocodingUnavailableError: Transport or HTTP failure
        """
        key = (postal_code, country_code)
        if key in self._cache:
            return self._cache[key]

        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._lookup(key))
            self._pending[key] = task
            task.add_done_callback(lambda done: self._finish_lookup(key, done))

        # A cancelled caller must not cancel the lookup other callers await
        return await asyncio.shield(task)

    def _finish_lookup(self, key: tuple[str, str], task: asyncio.Task) -> None:
        self._pending.pop(key, None)
        if not task.cancelled():
            task.exception()  # Mark retrieved; callers already got it

    async def _lookup(self, key: tuple[str, str]) -> GeocodingResult:
        postal_code, country_code = key
        try:
            data = await retry_once(
                self._search,
                postal_code,
                country_code,
                max_attempts=2,
                retryable_exceptions=(httpx.TransportError,),
            )
        except httpx.HTTPStatusError as e:
            raise GeocodingUnavailableError(
                f"Geocoding failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GeocodingUnavailableError(f"Geocoding failed: {e}") from e

        if not data:
            raise PostalCodeNotFoundError(postal_code)

        try:
            result = _parse_result(data[0])
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingUnavailableError(f"Malformed geocoding response: {e}") from e

        self._cache[key] = result
        logger.debug(
            "postal_code_resolved",
            postal_code=postal_code,
            latitude=result.coordinates.latitude,
            longitude=result.coordinates.longitude,
        )
        return result

    async def _search(self, postal_code: str, country_code: str) -> list[dict]:
        params = {
            "q": f"{postal_code}, {country_code}",
            "format": "json",
            "limit": "1",
            "addressdetails": "1",
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                f"{self.base_url}/search",
                params=params,
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
            return response.json()


def _parse_result(item: dict) -> GeocodingResult:
    address = item.get("address") or {}
    return GeocodingResult(
        coordinates=Coordinates(
            latitude=float(item["lat"]),
            longitude=float(item["lon"]),
        ),
        formatted_address=item.get("display_name", ""),
        city=address.get("city") or address.get("town") or address.get("village"),
        state=address.get("state"),
        country=address.get("country"),
    )
