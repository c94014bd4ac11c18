"""Tests for live-to-fixture fallback."""

import pytest

from servers.event_finder.models import SearchResult
from servers.event_finder.resilience.fallback import FallbackChain, with_default


async def search_live(params):
    raise ConnectionError("upstream down")


async def search_fixtures(params):
    return SearchResult(source="Yelp", total_count=0)


class TestFallbackChain:
    @pytest.mark.asyncio
    async def test_first_step_serves_when_it_works(self):
        async def live(params):
            return SearchResult(source="Yelp", total_count=3)

        chain = FallbackChain(live, search_fixtures, name="Yelp")
        result = await chain.execute({"radius": 10})

        assert result.total_count == 3
        assert chain.served_by == "live"

    @pytest.mark.asyncio
    async def test_degrades_to_fixtures(self):
        chain = FallbackChain(search_live, search_fixtures, name="Yelp")
        result = await chain.execute({"radius": 10})

        assert result.source == "Yelp"
        assert chain.served_by == "search_fixtures"

    @pytest.mark.asyncio
    async def test_same_arguments_for_every_step(self):
        seen = []

        async def record(params):
            seen.append(params)
            raise RuntimeError("nope")

        async def finish(params):
            seen.append(params)
            return "ok"

        await FallbackChain(record, record, finish).execute("query")
        assert seen == ["query", "query", "query"]

    @pytest.mark.asyncio
    async def test_last_error_propagates(self):
        async def broken_fixtures(params):
            raise KeyError("no fixtures")

        chain = FallbackChain(search_live, broken_fixtures, name="Yelp")
        with pytest.raises(KeyError):
            await chain.execute(None)
        assert chain.served_by is None

    def test_needs_a_step(self):
        with pytest.raises(ValueError):
            FallbackChain(name="empty")


class TestWithDefault:
    @pytest.mark.asyncio
    async def test_result_when_call_succeeds(self):
        async def distance(origin, destination):
            return 12.5

        assert await with_default(distance, 0.0, "a", destination="b") == 12.5

    @pytest.mark.asyncio
    async def test_default_when_call_fails(self):
        assert await with_default(search_live, 0.0, None) == 0.0

    @pytest.mark.asyncio
    async def test_default_can_be_none(self):
        assert await with_default(search_live, None, None) is None
