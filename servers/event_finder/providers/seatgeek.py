"""
SeatGeek Platform API integration.

Free with a client id. Ticketed concerts, sports and theater.
"""

from datetime import timezone
from typing import Optional

from ..dates import normalize_event_date
from ..geocoding import NominatimGeocoder
from ..models import Event, ProviderCapabilities, SearchParams, SearchResult
from .base import HttpEventProvider

SEATGEEK_EVENTS_URL = "https://api.seatgeek.com/2/events"
DEFAULT_PAGE_SIZE = 20

EVENT_TYPES = {
    "music": "concert",
    "sports": "sports",
    "theater": "theater",
    "comedy": "comedy",
}


class SeatGeekProvider(HttpEventProvider):
    name = "SeatGeek"
    priority = 85
    capabilities = ProviderCapabilities(
        location_search=True,
        category_filter=True,
        date_range=True,
        pagination=True,
    )

    def __init__(self, client_id: str = "", geocoder: Optional[NominatimGeocoder] = None):
        super().__init__(geocoder)
        self.client_id = client_id

    def is_available(self) -> bool:
        return bool(self.client_id)

    def build_query(self, params: SearchParams) -> dict[str, str]:
        query = {
            "client_id": self.client_id,
            "per_page": str(params.size or DEFAULT_PAGE_SIZE),
            "page": str((params.page or 0) + 1),  # 1-based
            "range": f"{params.radius:g}mi",
        }

        if params.postal_code:
            query["postal_code"] = params.postal_code
        else:
            query["lat"] = str(params.latitude)
            query["lon"] = str(params.longitude)

        if params.start_date_time:
            query["datetime_utc.gte"] = params.start_date_time
        if params.end_date_time:
            query["datetime_utc.lte"] = params.end_date_time

        if params.category:
            event_type = EVENT_TYPES.get(params.category.lower())
            if event_type:
                query["type"] = event_type

        return query

    async def search_upstream(self, params: SearchParams) -> SearchResult:
        data = await self.request_json("GET", SEATGEEK_EVENTS_URL, params=self.build_query(params))

        items = data.get("events") or []
        events = [e for e in (_parse_seatgeek_event(item) for item in items) if e]

        meta = data.get("meta") or {}
        total = meta.get("total", len(events))
        return SearchResult(
            events=events,
            total_count=total,
            has_more=meta.get("page", 1) * meta.get("per_page", len(items)) < total,
            source=self.name,
        )


def _parse_seatgeek_event(item: dict) -> Optional[Event]:
    # datetime_utc carries no offset
    date = normalize_event_date(item.get("datetime_utc"), default_tz=timezone.utc)
    if not item.get("id") or not item.get("title") or date is None:
        return None

    performers = item.get("performers") or []
    category = (
        _category_from_taxonomies(item.get("taxonomies") or [])
        or (performers[0].get("category") if performers else None)
        or item.get("type")
        or "Entertainment"
    )
    venue = item.get("venue") or {}
    address_parts = [venue.get("address"), venue.get("city"), venue.get("state"), venue.get("postal_code")]

    return Event(
        id=f"sg_{item['id']}",
        title=item["title"],
        description=_describe(item, performers),
        date=date,
        venue=venue.get("name") or "Venue TBA",
        address=", ".join(p for p in address_parts if p),
        category=_format_category(category),
        distance=0,
    )


def _category_from_taxonomies(taxonomies: list[dict]) -> Optional[str]:
    """Most specific taxonomy (one with a parent), else the first."""
    for taxonomy in taxonomies:
        if taxonomy.get("parent_id") is not None:
            return taxonomy.get("name")
    return taxonomies[0].get("name") if taxonomies else None


def _format_category(category: str) -> str:
    return " ".join(word.capitalize() for word in category.split("_"))


def _describe(item: dict, performers: list[dict]) -> str:
    if item.get("description"):
        return item["description"]

    parts = []
    if performers:
        parts.append("Featuring " + ", ".join(p.get("name", "") for p in performers))
    stats = item.get("stats") or {}
    if stats.get("listing_count") and stats.get("lowest_price") is not None:
        parts.append(f"Tickets starting at ${stats['lowest_price']}")

    return " • ".join(parts) or "Live event - get your tickets on SeatGeek!"
