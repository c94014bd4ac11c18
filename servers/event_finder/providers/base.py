"""
Provider contract and shared upstream plumbing.

Every event catalog is an EventProvider. Providers backed by an HTTP API
extend HttpEventProvider, which supplies:
- httpx transport with retry on transport errors
- a per-provider circuit breaker
- a live -> fixture fallback chain, so a configured provider always
  answers with a well-formed SearchResult
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog

from ..geocoding import Coordinates, GeocodingError, NominatimGeocoder
from ..models import ProviderCapabilities, SearchParams, SearchResult
from ..resilience import CircuitBreaker, FallbackChain, retry_with_backoff
from .fixtures import fixture_events

logger = structlog.get_logger()


class EventProvider(ABC):
    """Contract for one upstream event catalog.

    Subclasses declare `name`, `priority` and `capabilities`; these are
    fixed for the provider's lifetime.
    """

    name: str = ""
    priority: int = 0  # Higher sorts first in the registry
    capabilities: ProviderCapabilities = ProviderCapabilities(
        location_search=False,
        category_filter=False,
        date_range=False,
        pagination=False,
    )

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider can serve live requests. Must not do I/O."""

    @abstractmethod
    async def search_events(self, params: SearchParams) -> SearchResult:
        """Search the catalog. Returns an empty result for "no events"."""

    def empty_result(self) -> SearchResult:
        return SearchResult.empty(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"


class HttpEventProvider(EventProvider):
    """Base for providers that query an HTTP API and fall back to fixtures."""

    timeout: float = 30.0

    def __init__(self, geocoder: Optional[NominatimGeocoder] = None):
        self.geocoder = geocoder
        self.circuit_breaker = CircuitBreaker(name=self.name)

    def has_live_access(self) -> bool:
        """Whether live upstream calls are possible right now."""
        return self.is_available()

    async def search_events(self, params: SearchParams) -> SearchResult:
        if not self.has_live_access():
            logger.warning("provider_using_fixtures", provider=self.name, reason="not_configured")
            return self.fixture_result()

        chain = FallbackChain(self.search_live, self.search_fixtures, name=self.name)
        return await chain.execute(params)

    async def search_live(self, params: SearchParams) -> SearchResult:
        result = await self.circuit_breaker.call(self.search_upstream(params))
        logger.debug("provider_live_results", provider=self.name, count=len(result.events))
        return result

    async def search_fixtures(self, params: SearchParams) -> SearchResult:
        return self.fixture_result()

    @abstractmethod
    async def search_upstream(self, params: SearchParams) -> SearchResult:
        """Query the live upstream and transform its payload."""

    def fixture_result(self) -> SearchResult:
        events = fixture_events(self.name)
        return SearchResult(
            events=events,
            total_count=len(events),
            has_more=False,
            source=self.name,
        )

    @retry_with_backoff(
        max_attempts=2,
        base_delay=0.5,
        retryable_exceptions=(httpx.TransportError,),
    )
    async def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Perform one upstream request and decode the JSON body.

        Raises:
            httpx.HTTPStatusError: Non-2xx response
            httpx.TransportError: Network failure (after retry)
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()

    async def resolve_origin(self, params: SearchParams) -> Coordinates:
        """Search origin as coordinates, geocoding the postal code if needed."""
        if params.has_coordinates:
            return Coordinates(latitude=params.latitude, longitude=params.longitude)
        if self.geocoder is None:
            raise GeocodingError(f"{self.name} needs a geocoder to resolve postal codes")
        result = await self.geocoder.resolve(params.postal_code)
        return result.coordinates
