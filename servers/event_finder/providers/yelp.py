"""
Yelp Fusion Events API integration.

Local community events (markets, gallery openings, tastings) around the
resolved search origin.
"""

from typing import Optional

from ..dates import normalize_event_date, parse_event_date
from ..geocoding import Coordinates, NominatimGeocoder, haversine_miles
from ..models import Event, ProviderCapabilities, SearchParams, SearchResult
from .base import HttpEventProvider

YELP_EVENTS_URL = "https://api.yelp.com/v3/events"
DEFAULT_PAGE_SIZE = 20
METERS_PER_MILE = 1609
MAX_RADIUS_METERS = 40000  # Yelp API limit


class YelpProvider(HttpEventProvider):
    name = "Yelp"
    priority = 70
    capabilities = ProviderCapabilities(
        location_search=True,
        category_filter=False,
        date_range=True,
        pagination=True,
    )

    def __init__(self, api_key: str = "", geocoder: Optional[NominatimGeocoder] = None):
        super().__init__(geocoder)
        self.api_key = api_key

    def is_available(self) -> bool:
        return bool(self.api_key)

    def build_query(self, params: SearchParams, origin: Coordinates) -> dict[str, str]:
        limit = params.size or DEFAULT_PAGE_SIZE
        query = {
            "latitude": str(origin.latitude),
            "longitude": str(origin.longitude),
            "radius": str(int(min(params.radius * METERS_PER_MILE, MAX_RADIUS_METERS))),
            "limit": str(limit),
            "sort_by": "asc",
            "sort_on": "time_start",
        }
        if params.page:
            query["offset"] = str(params.page * limit)

        start = parse_event_date(params.start_date_time)
        if start:
            query["start_date"] = str(int(start.timestamp()))
        end = parse_event_date(params.end_date_time)
        if end:
            query["end_date"] = str(int(end.timestamp()))

        return query

    async def search_upstream(self, params: SearchParams) -> SearchResult:
        origin = await self.resolve_origin(params)
        data = await self.request_json(
            "GET",
            YELP_EVENTS_URL,
            params=self.build_query(params, origin),
            headers={"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"},
        )

        items = data.get("events") or []
        events = []
        for item in items:
            event = _parse_yelp_event(item, origin)
            if event and event.distance <= params.radius:
                events.append(event)

        return SearchResult(
            events=events,
            total_count=data.get("total", len(events)),
            has_more=len(items) == (params.size or DEFAULT_PAGE_SIZE),
            source=self.name,
        )


def _parse_yelp_event(item: dict, origin: Coordinates) -> Optional[Event]:
    date = normalize_event_date(item.get("time_start"))
    if not item.get("id") or not item.get("name") or date is None or item.get("is_canceled"):
        return None

    try:
        location = Coordinates(latitude=float(item["latitude"]), longitude=float(item["longitude"]))
    except (KeyError, TypeError, ValueError):
        return None

    address = item.get("location") or {}
    display = address.get("display_address") or []

    return Event(
        id=f"yelp_{item['id']}",
        title=item["name"],
        description=_describe(item),
        date=date,
        venue=_venue_name(item, display),
        address=", ".join(display),
        category=item.get("category") or "Local Event",
        distance=round(haversine_miles(origin, location), 1),
    )


def _venue_name(item: dict, display: list[str]) -> str:
    if item.get("business_id"):
        return "Local Business Venue"
    # A first address line that doesn't start with a street number is usually the venue
    if display and not display[0][:1].isdigit():
        return display[0]
    city = (item.get("location") or {}).get("city")
    return f"Venue in {city}" if city else "Venue TBA"


def _describe(item: dict) -> str:
    parts = []
    if (item.get("description") or "").strip():
        parts.append(item["description"].strip())

    if item.get("is_free"):
        parts.append("Free admission")
    elif item.get("cost"):
        cost, cost_max = item["cost"], item.get("cost_max")
        parts.append(f"${cost} - ${cost_max}" if cost_max and cost_max != cost else f"${cost}")

    if item.get("interested_count"):
        parts.append(f"{item['interested_count']} interested")
    if item.get("attending_count"):
        parts.append(f"{item['attending_count']} attending")
    if item.get("tickets_url"):
        parts.append("Tickets available online")

    return " • ".join(parts) or "Local event discovered on Yelp"
