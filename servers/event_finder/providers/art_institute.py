"""
Art Institute of Chicago public API integration.

Keyless. The museum is a single fixed location, so exhibitions are only
returned when it falls inside the search radius.
"""

from datetime import datetime, timezone

import structlog

from ..dates import format_event_date, parse_event_date
from ..geocoding import Coordinates, haversine_miles
from ..models import Event, ProviderCapabilities, SearchParams, SearchResult
from ..resilience import with_default
from .base import HttpEventProvider

logger = structlog.get_logger()

ART_INSTITUTE_EXHIBITIONS_URL = "https://api.artic.edu/api/v1/exhibitions"
EXHIBITION_FIELDS = (
    "id,title,status,aic_start_at,aic_end_at,gallery_title,web_url,"
    "short_description,description,is_featured,image_url"
)
MUSEUM_LOCATION = Coordinates(latitude=41.8796, longitude=-87.6237)
MUSEUM_ADDRESS = "111 S Michigan Ave, Chicago, IL 60603"
MAX_DESCRIPTION_LENGTH = 200


class ArtInstituteProvider(HttpEventProvider):
    name = "Art Institute of Chicago"
    priority = 65
    capabilities = ProviderCapabilities(
        location_search=False,  # single location
        category_filter=False,
        date_range=True,
        pagination=True,
    )

    def is_available(self) -> bool:
        return True

    async def distance_to_museum(self, params: SearchParams) -> float:
        origin = await self.resolve_origin(params)
        return haversine_miles(origin, MUSEUM_LOCATION)

    async def search_upstream(self, params: SearchParams) -> SearchResult:
        # Unknown distance keeps the museum in the results
        distance = await with_default(self.distance_to_museum, 0.0, params)
        if distance > params.radius:
            logger.debug("museum_out_of_range", provider=self.name, distance=round(distance, 1))
            return self.empty_result()

        data = await self.request_json(
            "GET",
            ART_INSTITUTE_EXHIBITIONS_URL,
            params={"limit": "50", "fields": EXHIBITION_FIELDS},
        )

        now = datetime.now(timezone.utc)
        window_start = parse_event_date(params.start_date_time)
        window_end = parse_event_date(params.end_date_time)

        events = []
        for item in data.get("data") or []:
            start = parse_event_date(item.get("aic_start_at"))
            end = parse_event_date(item.get("aic_end_at"))
            if not item.get("id") or start is None or end is None or end < now:
                continue
            if window_start and end < window_start:
                continue
            if window_end and start > window_end:
                continue
            events.append(_exhibition_to_event(item, max(start, now), start, end, distance))

        return SearchResult(
            events=events,
            total_count=len(events),
            has_more=False,
            source=self.name,
        )


def _exhibition_to_event(
    item: dict,
    date: datetime,
    start: datetime,
    end: datetime,
    distance: float,
) -> Event:
    gallery = item.get("gallery_title")
    return Event(
        id=f"aic_{item['id']}",
        title=item.get("title") or "Exhibition",
        description=_describe(item, start, end),
        date=format_event_date(date),
        venue=f"Art Institute - {gallery}" if gallery else "Art Institute of Chicago",
        address=MUSEUM_ADDRESS,
        category="Arts & Culture",
        distance=round(distance, 1),
    )


def _describe(item: dict, start: datetime, end: datetime) -> str:
    parts = []
    if item.get("short_description"):
        parts.append(item["short_description"].strip())
    elif item.get("description"):
        text = item["description"]
        if len(text) > MAX_DESCRIPTION_LENGTH:
            text = text[:MAX_DESCRIPTION_LENGTH] + "..."
        parts.append(text.strip())

    parts.append(f"Exhibition runs {start:%b %d, %Y} - {end:%b %d, %Y}")
    if item.get("is_featured"):
        parts.append("Featured exhibition")
    parts.append("Free admission to museum collection")
    if item.get("web_url"):
        parts.append("More details available online")

    return " • ".join(parts)
