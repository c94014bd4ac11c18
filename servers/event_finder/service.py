"""
Search façade used by the server entry point.

Fixes the provider set and aggregation limits in one place and forwards
everything else to the EventAggregator.
"""

from datetime import datetime
from typing import Any, Optional

import structlog

from .aggregator import AggregatorConfig, EventAggregator
from .config import Settings, get_settings
from .credentials import CredentialStore, OAuthToken
from .geocoding import NominatimGeocoder
from .models import Event, FetchReport, ProviderCapabilities, SearchParams, SearchResult
from .providers import (
    ArtInstituteProvider,
    BandsintownProvider,
    EventbriteProvider,
    EventProvider,
    MeetupProvider,
    SeatGeekProvider,
    TicketmasterProvider,
    YelpProvider,
)

logger = structlog.get_logger()


def build_default_providers(
    settings: Settings,
    geocoder: NominatimGeocoder,
    credentials: CredentialStore,
) -> list[EventProvider]:
    """The fixed provider set, highest priority first."""
    return [
        TicketmasterProvider(settings.ticketmaster_api_key, geocoder=geocoder),
        EventbriteProvider(
            settings.eventbrite_api_token,
            settings.eventbrite_organization_id_list,
            geocoder=geocoder,
        ),
        SeatGeekProvider(settings.seatgeek_client_id, geocoder=geocoder),
        MeetupProvider(credentials, geocoder=geocoder),
        BandsintownProvider(
            settings.bandsintown_app_id,
            settings.bandsintown_artist_list,
            geocoder=geocoder,
        ),
        YelpProvider(settings.yelp_api_key, geocoder=geocoder),
        ArtInstituteProvider(geocoder=geocoder),
    ]


class EventService:
    """Entry point for event searches."""

    def __init__(self, aggregator: EventAggregator):
        self.aggregator = aggregator

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        credentials: Optional[CredentialStore] = None,
        geocoder: Optional[NominatimGeocoder] = None,
    ) -> "EventService":
        """Build the service with the default providers."""
        settings = settings or get_settings()
        credentials = credentials or CredentialStore()
        geocoder = geocoder or NominatimGeocoder(
            base_url=settings.geocoder_base_url,
            user_agent=settings.geocoder_user_agent,
        )

        if settings.meetup_access_token and not credentials.is_connected("meetup"):
            credentials.set_token("meetup", OAuthToken(access_token=settings.meetup_access_token))

        config = AggregatorConfig(
            max_results_per_provider=settings.max_results_per_provider,
            enable_deduplication=settings.enable_deduplication,
            parallel_requests=settings.parallel_requests,
            provider_timeout=settings.provider_timeout_seconds,
        )
        providers = build_default_providers(settings, geocoder, credentials)
        service = cls(EventAggregator(providers, config))

        logger.info(
            "event_service_ready",
            providers=service.aggregator.registry.names(),
            available=service.list_available_providers(),
        )
        return service

    async def search(self, params: SearchParams) -> SearchResult:
        return await self.aggregator.search_events(params)

    async def search_with_report(self, params: SearchParams) -> FetchReport:
        return await self.aggregator.search_events_with_report(params)

    def filter_by_timeframe(
        self,
        events: list[Event],
        timeframe: Optional[str],
        now: Optional[datetime] = None,
    ) -> list[Event]:
        return self.aggregator.get_events_by_timeframe(events, timeframe, now)

    def list_available_providers(self) -> list[str]:
        return self.aggregator.get_available_providers()

    def list_provider_capabilities(self) -> dict[str, ProviderCapabilities]:
        return self.aggregator.get_provider_capabilities()

    def provider_health(self) -> dict[str, Any]:
        return self.aggregator.get_provider_health()
