"""Tests for the search façade and default provider wiring."""

import pytest

from servers.event_finder.aggregator import EventAggregator
from servers.event_finder.config import Settings
from servers.event_finder.credentials import CredentialStore, OAuthToken
from servers.event_finder.service import EventService

UNCONFIGURED = {
    "ticketmaster_api_key": "",
    "eventbrite_api_token": "",
    "eventbrite_organization_ids": "",
    "seatgeek_client_id": "",
    "bandsintown_app_id": "",
    "bandsintown_artists": "",
    "yelp_api_key": "",
    "meetup_access_token": "",
}


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **{**UNCONFIGURED, **overrides})


class TestFromSettings:
    def test_registry_in_priority_order(self):
        service = EventService.from_settings(make_settings())
        assert service.aggregator.registry.names() == [
            "Ticketmaster",
            "Eventbrite",
            "SeatGeek",
            "Meetup",
            "Bandsintown",
            "Yelp",
            "Art Institute of Chicago",
        ]

    def test_unconfigured_availability(self):
        service = EventService.from_settings(make_settings())
        assert service.list_available_providers() == ["Meetup", "Art Institute of Chicago"]

    def test_configured_availability(self):
        settings = make_settings(
            ticketmaster_api_key="tm",
            eventbrite_api_token="eb",
            seatgeek_client_id="sg",
            bandsintown_app_id="bt",
            bandsintown_artists="Artist One",
            yelp_api_key="yelp",
        )
        service = EventService.from_settings(settings)
        assert len(service.list_available_providers()) == 7

    def test_bandsintown_needs_artists(self):
        service = EventService.from_settings(make_settings(bandsintown_app_id="bt"))
        assert "Bandsintown" not in service.list_available_providers()

    def test_meetup_token_seeded_from_settings(self):
        credentials = CredentialStore()
        EventService.from_settings(make_settings(meetup_access_token="mt"), credentials=credentials)
        assert credentials.get_token("meetup").access_token == "mt"

    def test_existing_meetup_token_kept(self):
        credentials = CredentialStore()
        credentials.set_token("meetup", OAuthToken(access_token="existing"))
        EventService.from_settings(make_settings(meetup_access_token="mt"), credentials=credentials)
        assert credentials.get_token("meetup").access_token == "existing"

    def test_aggregation_settings_applied(self):
        settings = make_settings(
            max_results_per_provider=10,
            enable_deduplication=False,
            parallel_requests=False,
            provider_timeout_seconds=3.0,
        )
        config = EventService.from_settings(settings).aggregator.config
        assert config.max_results_per_provider == 10
        assert config.enable_deduplication is False
        assert config.parallel_requests is False
        assert config.provider_timeout == 3.0

    def test_capabilities_for_every_provider(self):
        capabilities = EventService.from_settings(make_settings()).list_provider_capabilities()
        assert len(capabilities) == 7
        assert capabilities["Art Institute of Chicago"].location_search is False
        assert capabilities["Meetup"].category_filter is False


class TestDelegation:
    @pytest.mark.asyncio
    async def test_search_and_report(self, scenario_providers, postal_params):
        service = EventService(EventAggregator(scenario_providers))

        result = await service.search(postal_params)
        report = await service.search_with_report(postal_params)

        assert result == report.result
        assert [s.source for s in report.stats] == ["ProviderA", "ProviderB", "ProviderC"]

    def test_filter_by_timeframe_passthrough(self, scenario_providers, make_event):
        service = EventService(EventAggregator(scenario_providers))
        events = [make_event()]
        assert service.filter_by_timeframe(events, None) == events

    @pytest.mark.asyncio
    async def test_provider_health(self, scenario_providers, postal_params):
        service = EventService(EventAggregator(scenario_providers))
        await service.search(postal_params)
        assert service.provider_health()["summary"]["total"] == 3
