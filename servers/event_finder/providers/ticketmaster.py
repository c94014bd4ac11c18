"""
Ticketmaster Discovery API integration.

Free tier: 5000 calls/day, 5 requests/second
Reliable commercial listings (concerts, sports, theater); highest priority.
"""

from typing import Optional

import structlog

from ..dates import normalize_event_date
from ..geocoding import NominatimGeocoder
from ..models import Event, ProviderCapabilities, SearchParams, SearchResult
from .base import HttpEventProvider

logger = structlog.get_logger()

TICKETMASTER_EVENTS_URL = "https://app.ticketmaster.com/discovery/v2/events"
DEFAULT_PAGE_SIZE = 20

CLASSIFICATIONS = {
    "music": "Music",
    "sports": "Sports",
    "theater": "Arts & Theatre",
    "comedy": "Arts & Theatre",
}


class TicketmasterProvider(HttpEventProvider):
    name = "Ticketmaster"
    priority = 100
    capabilities = ProviderCapabilities(
        location_search=True,
        category_filter=True,
        date_range=True,
        pagination=True,
    )

    def __init__(self, api_key: str = "", geocoder: Optional[NominatimGeocoder] = None):
        super().__init__(geocoder)
        self.api_key = api_key

    def is_available(self) -> bool:
        return bool(self.api_key)

    def build_query(self, params: SearchParams) -> dict[str, str]:
        query = {
            "apikey": self.api_key,
            "radius": f"{params.radius:g}",
            "unit": "miles",
            "size": str(params.size or DEFAULT_PAGE_SIZE),
            "page": str(params.page or 0),
            "sort": "date,asc",
        }

        if params.postal_code:
            query["postalCode"] = params.postal_code
        else:
            query["latlong"] = f"{params.latitude},{params.longitude}"

        if params.start_date_time:
            query["startDateTime"] = params.start_date_time
        if params.end_date_time:
            query["endDateTime"] = params.end_date_time

        if params.category:
            classification = CLASSIFICATIONS.get(params.category.lower())
            if classification:
                query["classificationName"] = classification

        return query

    async def search_upstream(self, params: SearchParams) -> SearchResult:
        data = await self.request_json(
            "GET",
            TICKETMASTER_EVENTS_URL,
            params=self.build_query(params),
            headers={"Accept": "application/json"},
        )

        items = (data.get("_embedded") or {}).get("events", [])
        events = [e for e in (_parse_ticketmaster_event(item) for item in items) if e]

        page = data.get("page") or {}
        total_pages = page.get("totalPages", 0)
        return SearchResult(
            events=events,
            total_count=page.get("totalElements", len(events)),
            has_more=page.get("number", 0) < total_pages - 1,
            source=self.name,
        )


def _parse_ticketmaster_event(item: dict) -> Optional[Event]:
    """Parse a Discovery API event into our Event model."""
    start = (item.get("dates") or {}).get("start") or {}
    if start.get("dateTime"):
        date = normalize_event_date(start["dateTime"])
    else:
        local = start.get("localDate", "")
        if start.get("localTime"):
            local = f"{local}T{start['localTime']}"
        date = normalize_event_date(local)

    if not item.get("id") or not item.get("name") or date is None:
        logger.debug("ticketmaster_event_skipped", event_id=item.get("id"))
        return None

    venues = (item.get("_embedded") or {}).get("venues") or []
    venue = venues[0] if venues else None
    classifications = item.get("classifications") or []
    classification = classifications[0] if classifications else {}

    category = (
        (classification.get("segment") or {}).get("name")
        or (classification.get("genre") or {}).get("name")
        or "General"
    )

    return Event(
        id=f"tm_{item['id']}",
        title=item["name"],
        description=_describe(item, classification),
        date=date,
        venue=(venue or {}).get("name") or "Venue TBA",
        address=_format_address(venue),
        category=category,
        distance=item.get("distance") or 0,
    )


def _describe(item: dict, classification: dict) -> str:
    parts = [text for text in (item.get("info"), item.get("pleaseNote")) if text]
    if not parts:
        genre = (classification.get("genre") or {}).get("name")
        parts.append(f"{genre} event" if genre else "Event details available on Ticketmaster")
    return " • ".join(parts)


def _format_address(venue: Optional[dict]) -> str:
    if not venue:
        return "Location TBA"

    address = venue.get("address") or {}
    parts = [
        address.get("line1"),
        address.get("line2"),
        (venue.get("city") or {}).get("name"),
        (venue.get("state") or {}).get("stateCode"),
        venue.get("postalCode"),
    ]
    return ", ".join(p for p in parts if p)
