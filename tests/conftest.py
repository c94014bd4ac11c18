"""Shared pytest fixtures for event finder tests."""

import asyncio
import os
import time
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from servers.event_finder.models import Event, ProviderCapabilities, SearchParams, SearchResult
from servers.event_finder.providers.base import EventProvider


def build_event(
    id: str = "test_1",
    title: str = "Concert A",
    date: str = "2024-07-15T19:00:00Z",
    venue: str = "Arena 1",
    **kwargs,
) -> Event:
    """Build an event with sensible defaults."""
    fields = {
        "description": "",
        "address": "",
        "category": "Music",
        "distance": 0,
    }
    fields.update(kwargs)
    return Event(id=id, title=title, date=date, venue=venue, **fields)


class MockProvider(EventProvider):
    """In-memory provider returning fixed events, or raising."""

    capabilities = ProviderCapabilities(
        location_search=True,
        category_filter=False,
        date_range=True,
        pagination=False,
    )

    def __init__(
        self,
        name: str,
        priority: int,
        events: Optional[list[Event]] = None,
        available: bool = True,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        has_more: bool = False,
    ):
        self.name = name
        self.priority = priority
        self.events = events or []
        self.available = available
        self.error = error
        self.delay = delay
        self.has_more = has_more
        self.calls: list[SearchParams] = []

    def is_available(self) -> bool:
        return self.available

    async def search_events(self, params: SearchParams) -> SearchResult:
        self.calls.append(params)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SearchResult(
            events=list(self.events),
            total_count=len(self.events),
            has_more=self.has_more,
            source=self.name,
        )


def wire_httpx_client(mock_client_class: MagicMock, json_data=None, status_code: int = 200) -> AsyncMock:
    """Wire a patched httpx.AsyncClient to answer every request with one response."""
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.json.return_value = json_data
    mock_response.raise_for_status = MagicMock()
    if status_code >= 400:
        request = httpx.Request("GET", "https://upstream.test")
        mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}",
            request=request,
            response=httpx.Response(status_code, request=request),
        )

    mock_client = AsyncMock()
    mock_client.request.return_value = mock_response
    mock_client.get.return_value = mock_response
    mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client_class.return_value.__aexit__ = AsyncMock(return_value=None)
    return mock_client


@pytest.fixture
def local_timezone():
    """Pin the host time zone to a POSIX TZ string for the test."""
    original = os.environ.get("TZ")

    def pin(zone: str) -> None:
        os.environ["TZ"] = zone
        time.tzset()

    yield pin

    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()


@pytest.fixture
def search_params() -> SearchParams:
    """Coordinates-based search, so providers never need a geocoder."""
    return SearchParams(latitude=34.0901, longitude=-118.4065, radius=25)


@pytest.fixture
def postal_params() -> SearchParams:
    return SearchParams(postal_code="90210", radius=25)


@pytest.fixture
def scenario_providers() -> list[MockProvider]:
    """Three providers, the lowest one duplicating the highest."""
    return [
        MockProvider(
            "ProviderC",
            80,
            [build_event(id="c_999", title="Concert A", date="2024-07-15T19:00:00Z", venue="Arena 1")],
        ),
        MockProvider(
            "ProviderA",
            100,
            [build_event(id="a_1", title="Concert A", date="2024-07-15T19:00:00Z", venue="Arena 1")],
        ),
        MockProvider(
            "ProviderB",
            90,
            [build_event(id="b_1", title="Workshop A", date="2024-07-17T14:00:00Z", venue="Conference Center")],
        ),
    ]


@pytest.fixture
def make_event():
    """Factory fixture for events."""
    return build_event


@pytest.fixture
def make_provider():
    """Factory fixture for MockProvider instances."""
    return MockProvider


@pytest.fixture
def wire_httpx():
    """Factory fixture wiring a patched httpx.AsyncClient to a canned response."""
    return wire_httpx_client
