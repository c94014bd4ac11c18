"""
Server entry point for the Local Event Finder.

This server provides tools for:
- Searching events across all available providers
- Filtering fetched events by timeframe
- Listing providers, their capabilities and their health

Run with: python -m servers.event_finder 90210 --radius 25 --timeframe week
"""

import argparse
import asyncio
import sys
from typing import Optional

from pydantic import ValidationError

from .aggregator import NoProvidersAvailableError
from .config import configure_logging, get_settings
from .models import Event, SearchParams
from .service import EventService


class EventFinderServer:
    """Tool table over an EventService."""

    def __init__(self, service: Optional[EventService] = None):
        self.service = service or EventService.from_settings()
        self.tools = {
            "search_events": self.search_events,
            "filter_by_timeframe": self.filter_by_timeframe,
            "list_providers": self.list_providers,
            "provider_capabilities": self.provider_capabilities,
            "provider_health": self.provider_health,
        }

    async def search_events(
        self,
        postal_code: Optional[str] = None,
        radius: float = 25,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        start_date_time: Optional[str] = None,
        end_date_time: Optional[str] = None,
        category: Optional[str] = None,
        timeframe: Optional[str] = None,
    ) -> dict:
        """
        Search all available providers.

        Args:
            postal_code: 5-digit postal code (or give latitude/longitude)
            radius: Search radius in miles
            start_date_time: Inclusive ISO-8601 lower bound
            end_date_time: Inclusive ISO-8601 upper bound
            category: Optional category hint for providers
            timeframe: Optional post-filter (today, week, month, 3months)

        Returns:
            Merged result plus per-provider stats, or an error payload
            for invalid parameters or when no provider is available
        """
        try:
            params = SearchParams(
                postal_code=postal_code,
                latitude=latitude,
                longitude=longitude,
                radius=radius,
                start_date_time=start_date_time,
                end_date_time=end_date_time,
                category=category,
            )
        except ValidationError as e:
            message = e.errors()[0]["msg"]
            return {"error": f"Invalid search: {message}", "events": [], "total_count": 0}

        try:
            report = await self.service.search_with_report(params)
        except NoProvidersAvailableError as e:
            return {"error": f"Can't fetch events right now: {e}", "events": [], "total_count": 0}

        payload = report.model_dump()
        if timeframe:
            events = self.service.filter_by_timeframe(report.result.events, timeframe)
            payload["result"]["events"] = [e.model_dump() for e in events]
            payload["result"]["total_count"] = len(events)
        return payload

    async def filter_by_timeframe(self, events: list[dict], timeframe: str) -> dict:
        """Filter already-fetched events to a timeframe."""
        event_objects = [Event(**e) for e in events]
        filtered = self.service.filter_by_timeframe(event_objects, timeframe)
        return {"events": [e.model_dump() for e in filtered], "total": len(filtered)}

    async def list_providers(self) -> dict:
        return {"available": self.service.list_available_providers()}

    async def provider_capabilities(self) -> dict:
        return {
            name: capabilities.model_dump()
            for name, capabilities in self.service.list_provider_capabilities().items()
        }

    async def provider_health(self) -> dict:
        return self.service.provider_health()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m servers.event_finder",
        description="Find events near a postal code across several event catalogs.",
    )
    parser.add_argument("postal_code", help="5-digit postal code")
    parser.add_argument("--radius", type=float, default=25, help="Search radius in miles")
    parser.add_argument("--timeframe", help="today, week, month or 3months")
    parser.add_argument("--category", help="Category hint, e.g. music or sports")
    parser.add_argument("--start", help="ISO-8601 start of the date window")
    parser.add_argument("--end", help="ISO-8601 end of the date window")
    parser.add_argument("--no-dedup", action="store_true", help="Keep cross-provider duplicates")
    parser.add_argument("--sequential", action="store_true", help="Query providers one at a time")
    parser.add_argument("--timeout", type=float, help="Per-provider timeout in seconds")
    return parser


async def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the event finder server."""
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.no_dedup:
        overrides["enable_deduplication"] = False
    if args.sequential:
        overrides["parallel_requests"] = False
    if args.timeout:
        overrides["provider_timeout_seconds"] = args.timeout
    settings = get_settings().model_copy(update=overrides)
    configure_logging(settings)

    server = EventFinderServer(EventService.from_settings(settings))

    print("Local Event Finder Server")
    print("Available tools:", list(server.tools.keys()))
    print("Available providers:", ", ".join(server.service.list_available_providers()) or "none")

    result = await server.search_events(
        postal_code=args.postal_code,
        radius=args.radius,
        start_date_time=args.start,
        end_date_time=args.end,
        category=args.category,
        timeframe=args.timeframe,
    )
    if "error" in result:
        print(f"\n{result['error']}")
        return 1

    print(f"\nFound {result['result']['total_count']} events")
    for stat in result["stats"]:
        print(f"  {stat['source']}: {stat['count']} events ({stat['status']})")

    print()
    for event in result["result"]["events"]:
        print(f"{event['date'][:16].replace('T', ' ')}  {event['title']}")
        print(f"    {event['venue']} • {event['category']} • {event['distance']} mi")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
