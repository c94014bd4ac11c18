"""
Meetup GraphQL API integration.

Community events. Live search needs a user OAuth token in the
credential store; without one the provider still answers with its
fixture listings, so it always counts as available.
"""

from typing import Optional

from ..credentials import CredentialStore
from ..dates import normalize_event_date
from ..geocoding import NominatimGeocoder
from ..models import Event, ProviderCapabilities, SearchParams, SearchResult
from .base import HttpEventProvider

MEETUP_GRAPHQL_URL = "https://api.meetup.com/gql"
CREDENTIAL_NAME = "meetup"

KEYWORD_SEARCH_QUERY = """
query($filter: SearchConnectionFilter!) {
  keywordSearch(filter: $filter) {
    count
    edges {
      node {
        id
        result {
          ... on Event {
            id
            title
            eventUrl
            description
            dateTime
            venue { name address city state postalCode lat lon }
            group { name urlname }
          }
        }
      }
    }
    pageInfo { hasNextPage endCursor }
  }
}
"""


class MeetupProvider(HttpEventProvider):
    name = "Meetup"
    priority = 80
    capabilities = ProviderCapabilities(
        location_search=True,
        category_filter=False,  # keyword search only
        date_range=False,
        pagination=True,
    )

    def __init__(
        self,
        credentials: Optional[CredentialStore] = None,
        geocoder: Optional[NominatimGeocoder] = None,
    ):
        super().__init__(geocoder)
        self.credentials = credentials or CredentialStore()

    def is_available(self) -> bool:
        return True

    def has_live_access(self) -> bool:
        return self.credentials.is_connected(CREDENTIAL_NAME)

    async def search_upstream(self, params: SearchParams) -> SearchResult:
        token = self.credentials.get_token(CREDENTIAL_NAME)
        if token is None:
            raise PermissionError("Meetup token is missing or expired")

        origin = await self.resolve_origin(params)
        variables = {
            "filter": {
                "query": params.category or "events",
                "lat": origin.latitude,
                "lon": origin.longitude,
                "radius": params.radius,
                "source": "EVENTS",
            }
        }

        data = await self.request_json(
            "POST",
            MEETUP_GRAPHQL_URL,
            json={"query": KEYWORD_SEARCH_QUERY, "variables": variables},
            headers={"Authorization": f"{token.token_type} {token.access_token}"},
        )

        search = (data.get("data") or {}).get("keywordSearch") or {}
        edges = search.get("edges") or []
        events = [
            e for e in (_parse_meetup_event((edge.get("node") or {}).get("result") or {}) for edge in edges) if e
        ]

        return SearchResult(
            events=events,
            total_count=search.get("count", len(events)),
            has_more=bool((search.get("pageInfo") or {}).get("hasNextPage")),
            source=self.name,
        )


def _parse_meetup_event(item: dict) -> Optional[Event]:
    date = normalize_event_date(item.get("dateTime"))
    if not item.get("id") or not item.get("title") or date is None:
        return None

    group = item.get("group") or {}
    venue = item.get("venue")
    if venue:
        parts = [venue.get("address"), venue.get("city"), venue.get("state"), venue.get("postalCode")]
        address = ", ".join(p for p in parts if p)
    else:
        address = "Location TBA"

    return Event(
        id=f"meetup_{item['id']}",
        title=item["title"],
        description=item.get("description") or f"{group.get('name', 'Meetup')} event",
        date=date,
        venue=(venue or {}).get("name") or group.get("name", ""),
        address=address,
        category="Community",
        distance=0,
    )
