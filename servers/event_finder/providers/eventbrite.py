"""
Eventbrite integration.

Eventbrite's public API no longer offers location search, so live data
comes from the events of a configured list of organizations. Workshops,
conferences and professional meetups.
"""

from collections.abc import Sequence
from typing import Optional

import httpx
import structlog

from ..dates import normalize_event_date, parse_event_date
from ..geocoding import NominatimGeocoder
from ..models import Event, ProviderCapabilities, SearchParams, SearchResult
from .base import HttpEventProvider

logger = structlog.get_logger()

EVENTBRITE_API_BASE = "https://www.eventbriteapi.com/v3"


class EventbriteProvider(HttpEventProvider):
    name = "Eventbrite"
    priority = 90
    capabilities = ProviderCapabilities(
        location_search=True,
        category_filter=False,
        date_range=True,
        pagination=True,
    )

    def __init__(
        self,
        api_token: str = "",
        organization_ids: Sequence[str] = (),
        geocoder: Optional[NominatimGeocoder] = None,
    ):
        super().__init__(geocoder)
        self.api_token = api_token
        self.organization_ids = list(organization_ids)

    def is_available(self) -> bool:
        return bool(self.api_token)

    def has_live_access(self) -> bool:
        return self.is_available() and bool(self.organization_ids)

    async def search_upstream(self, params: SearchParams) -> SearchResult:
        events: list[Event] = []

        for org_id in self.organization_ids:
            try:
                events.extend(await self.fetch_organization_events(org_id))
            except httpx.HTTPError as e:
                logger.warning(
                    "eventbrite_organization_failed",
                    organization_id=org_id,
                    error=str(e),
                )

        events = [e for e in events if _within_window(e, params)]
        if not events:
            logger.warning("provider_using_fixtures", provider=self.name, reason="no_live_events")
            return self.fixture_result()

        return SearchResult(
            events=events,
            total_count=len(events),
            has_more=False,
            source=self.name,
        )

    async def fetch_organization_events(self, org_id: str) -> list[Event]:
        data = await self.request_json(
            "GET",
            f"{EVENTBRITE_API_BASE}/organizations/{org_id}/events/",
            params={"status": "live", "expand": "venue"},
            headers={"Authorization": f"Bearer {self.api_token}"},
        )
        items = data.get("events") or []
        return [e for e in (_parse_eventbrite_event(item) for item in items) if e]


def _within_window(event: Event, params: SearchParams) -> bool:
    when = parse_event_date(event.date)
    start = parse_event_date(params.start_date_time)
    end = parse_event_date(params.end_date_time)

    if when is None:
        return False
    if start and when < start:
        return False
    if end and when > end:
        return False
    return True


def _parse_eventbrite_event(item: dict) -> Optional[Event]:
    start = item.get("start") or {}
    date = normalize_event_date(start.get("utc") or start.get("local"))
    title = (item.get("name") or {}).get("text")
    if not item.get("id") or not title or date is None:
        return None

    venue = item.get("venue") or {}
    address = venue.get("address") or {}
    address_parts = [
        address.get("address_1"),
        address.get("city"),
        address.get("region"),
        address.get("postal_code"),
    ]

    return Event(
        id=f"eb_{item['id']}",
        title=title,
        description=(item.get("description") or {}).get("text") or "",
        date=date,
        venue=venue.get("name") or "Venue TBA",
        address=", ".join(p for p in address_parts if p) or "Location TBA",
        category="Professional",
        distance=0,
    )
