"""
Multi-provider event aggregation.

One search fans out to every available provider, then:
1. Each provider's failure is isolated to an empty contribution
2. Results are concatenated in registry (priority) order
3. Duplicates are dropped, first occurrence wins
4. The merged set is sorted by date, unparseable dates last
"""

import asyncio
import time
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import BaseModel, Field

from .dates import parse_event_date
from .dedup import deduplicate
from .models import (
    AGGREGATED_SOURCE,
    Event,
    FetchReport,
    FetchStats,
    ProviderCapabilities,
    SearchParams,
    SearchResult,
)
from .providers.base import EventProvider
from .registry import ProviderRegistry
from .resilience import HealthMonitor
from .timeframe import get_events_by_timeframe

logger = structlog.get_logger()


class NoProvidersAvailableError(Exception):
    """Raised when a search finds no available provider to ask."""

    def __init__(self, registered: Optional[list[str]] = None):
        super().__init__("No event providers are available")
        self.registered = registered or []


class AggregatorConfig(BaseModel):
    max_results_per_provider: int = Field(default=50, gt=0)
    enable_deduplication: bool = True
    parallel_requests: bool = True
    provider_timeout: Optional[float] = Field(default=None, gt=0)  # seconds; None waits forever


def _sort_key(event: Event) -> tuple[bool, float]:
    when = parse_event_date(event.date)
    if when is None:
        return (True, 0.0)
    return (False, when.timestamp())


def sort_by_date(events: list[Event]) -> list[Event]:
    """Stable ascending sort by parsed date; unparseable dates go last."""
    return sorted(events, key=_sort_key)


class EventAggregator:
    """
    Fan out searches to registered providers and merge the results.

    The registry is fixed at construction and never mutated by a search,
    so concurrent searches share no mutable state apart from health
    bookkeeping.

    Usage:
        aggregator = EventAggregator([TicketmasterProvider(key), YelpProvider(key)])
        result = await aggregator.search_events(SearchParams(postal_code="90210", radius=10))
    """

    def __init__(
        self,
        providers: Iterable[EventProvider],
        config: Optional[AggregatorConfig] = None,
        health: Optional[HealthMonitor] = None,
    ):
        self.registry = ProviderRegistry(providers)
        self.config = config or AggregatorConfig()
        self.health = health or HealthMonitor()

    async def search_events(self, params: SearchParams) -> SearchResult:
        """
        Search every available provider and return the merged result.

        Raises:
            NoProvidersAvailableError: No registered provider is available
        """
        report = await self.search_events_with_report(params)
        return report.result

    async def search_events_with_report(self, params: SearchParams) -> FetchReport:
        """Like search_events, plus one FetchStats per provider in registry order."""
        providers = self.registry.available()
        if not providers:
            logger.error("no_providers_available", registered=self.registry.names())
            raise NoProvidersAvailableError(self.registry.names())

        request = params.model_copy(update={"size": self.config.max_results_per_provider})

        if self.config.parallel_requests:
            outcomes = await asyncio.gather(
                *(self._search_provider(p, request) for p in providers)
            )
        else:
            outcomes = [await self._search_provider(p, request) for p in providers]

        # gather() keeps argument order, so this is registry order
        events: list[Event] = []
        for result, _ in outcomes:
            events.extend(result.events)

        if self.config.enable_deduplication:
            dedupe = deduplicate(events)
            events = dedupe.events
            duplicates_removed = dedupe.duplicates_removed
        else:
            duplicates_removed = 0

        events = sort_by_date(events)
        stats = [s for _, s in outcomes]

        merged = SearchResult(
            events=events,
            total_count=len(events),
            has_more=any(result.has_more for result, _ in outcomes),
            source=AGGREGATED_SOURCE,
        )
        logger.info(
            "aggregated_search_complete",
            providers=len(providers),
            failed=[s.source for s in stats if s.status != "success"],
            events=len(events),
            duplicates_removed=duplicates_removed,
        )
        return FetchReport(result=merged, stats=stats)

    async def _search_provider(
        self, provider: EventProvider, params: SearchParams
    ) -> tuple[SearchResult, FetchStats]:
        """Run one provider search. Never raises."""
        start = time.monotonic()

        try:
            if self.config.provider_timeout is None:
                result = await provider.search_events(params)
            else:
                result = await asyncio.wait_for(
                    provider.search_events(params), timeout=self.config.provider_timeout
                )
        except asyncio.TimeoutError:
            duration_ms = int((time.monotonic() - start) * 1000)
            message = f"timed out after {self.config.provider_timeout}s"
            logger.warning(
                "provider_search_timeout",
                provider=provider.name,
                timeout=self.config.provider_timeout,
            )
            self.health.record_failure(provider.name, message, duration_ms)
            return provider.empty_result(), FetchStats(
                source=provider.name,
                count=0,
                status="timeout",
                duration_ms=duration_ms,
                error_message=message,
            )
        except Exception as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            message = str(e) or type(e).__name__
            logger.warning("provider_search_failed", provider=provider.name, error=message)
            self.health.record_failure(provider.name, message, duration_ms)
            return provider.empty_result(), FetchStats(
                source=provider.name,
                count=0,
                status="error",
                duration_ms=duration_ms,
                error_message=message,
            )

        duration_ms = int((time.monotonic() - start) * 1000)
        self.health.record_success(provider.name, len(result.events), duration_ms)
        return result, FetchStats(
            source=provider.name,
            count=len(result.events),
            status="success",
            duration_ms=duration_ms,
        )

    def get_events_by_timeframe(
        self,
        events: list[Event],
        timeframe: Optional[str],
        now: Optional[datetime] = None,
    ) -> list[Event]:
        return get_events_by_timeframe(events, timeframe, now)

    def get_available_providers(self) -> list[str]:
        """Names of currently available providers, priority descending."""
        return [p.name for p in self.registry.available()]

    def get_provider_capabilities(self) -> dict[str, ProviderCapabilities]:
        """Capabilities of every registered provider, available or not."""
        return {p.name: p.capabilities for p in self.registry}

    def get_provider(self, name: str) -> Optional[EventProvider]:
        return self.registry.get(name)

    def get_provider_health(self) -> dict[str, Any]:
        return self.health.get_status()
