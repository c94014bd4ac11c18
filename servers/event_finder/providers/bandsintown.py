"""
Bandsintown API integration.

Bandsintown only lists events per artist, so live data comes from a
configured artist list; concerts outside the search radius or date
window are dropped locally.
"""

from collections.abc import Sequence
from typing import Optional
from urllib.parse import quote

import httpx
import structlog

from ..dates import normalize_event_date, parse_event_date
from ..dedup import deduplicate_events
from ..geocoding import Coordinates, NominatimGeocoder, haversine_miles
from ..models import Event, ProviderCapabilities, SearchParams, SearchResult
from .base import HttpEventProvider

logger = structlog.get_logger()

BANDSINTOWN_API_BASE = "https://rest.bandsintown.com"
MAX_ARTISTS = 20  # Caps upstream calls per search


class BandsintownProvider(HttpEventProvider):
    name = "Bandsintown"
    priority = 75
    capabilities = ProviderCapabilities(
        location_search=True,
        category_filter=True,
        date_range=True,
        pagination=False,
    )

    def __init__(
        self,
        app_id: str = "",
        artists: Sequence[str] = (),
        geocoder: Optional[NominatimGeocoder] = None,
    ):
        super().__init__(geocoder)
        self.app_id = app_id
        self.artists = list(artists)

    def is_available(self) -> bool:
        return bool(self.app_id and self.artists)

    async def search_upstream(self, params: SearchParams) -> SearchResult:
        origin = await self.resolve_origin(params)
        events: list[Event] = []

        for artist in self.artists[:MAX_ARTISTS]:
            try:
                items = await self.fetch_artist_events(artist)
            except httpx.HTTPError as e:
                logger.warning("bandsintown_artist_failed", artist=artist, error=str(e))
                continue

            for item in items:
                event = _parse_bandsintown_event(item, artist, origin)
                if event and _matches(event, item, origin, params):
                    events.append(event)

        events = deduplicate_events(events)
        return SearchResult(
            events=events,
            total_count=len(events),
            has_more=False,
            source=self.name,
        )

    async def fetch_artist_events(self, artist: str) -> list[dict]:
        """Upcoming events for one artist. Unknown artists have no events."""
        try:
            data = await self.request_json(
                "GET",
                f"{BANDSINTOWN_API_BASE}/artists/{quote(artist, safe='')}/events",
                params={"app_id": self.app_id},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return []
            raise

        return data if isinstance(data, list) else []


def _venue_coordinates(item: dict) -> Optional[Coordinates]:
    venue = item.get("venue") or {}
    try:
        return Coordinates(latitude=float(venue["latitude"]), longitude=float(venue["longitude"]))
    except (KeyError, TypeError, ValueError):
        return None


def _matches(event: Event, item: dict, origin: Coordinates, params: SearchParams) -> bool:
    venue = _venue_coordinates(item)
    if venue and haversine_miles(origin, venue) > params.radius:
        return False

    when = parse_event_date(event.date)
    start = parse_event_date(params.start_date_time)
    end = parse_event_date(params.end_date_time)
    if start and when < start:
        return False
    if end and when > end:
        return False
    return True


def _parse_bandsintown_event(item: dict, artist: str, origin: Coordinates) -> Optional[Event]:
    date = normalize_event_date(item.get("datetime"))
    if not item.get("id") or date is None:
        return None

    venue = item.get("venue") or {}
    coordinates = _venue_coordinates(item)
    distance = haversine_miles(origin, coordinates) if coordinates else 0.0
    address_parts = [venue.get("city"), venue.get("region"), venue.get("country")]

    return Event(
        id=f"bt_{item['id']}",
        title=f"{artist} Live",
        description=_describe(item, artist),
        date=date,
        venue=venue.get("name") or "Venue TBA",
        address=", ".join(p for p in address_parts if p),
        category="Music",
        distance=round(distance, 1),
    )


def _describe(item: dict, artist: str) -> str:
    parts = [(item.get("description") or "").strip() or f"Live concert featuring {artist}"]

    others = [name for name in item.get("lineup") or [] if name != artist]
    if others:
        parts.append(f"Also featuring: {', '.join(others[:2])}")

    offers = item.get("offers") or []
    if any(o.get("type") == "Tickets" and o.get("status") == "available" for o in offers):
        parts.append("Tickets available")

    return " • ".join(parts)
