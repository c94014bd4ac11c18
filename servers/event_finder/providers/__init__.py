"""
Event provider adapters.

Each provider implements:
- is_available() -> bool (no I/O)
- search_events(params) -> SearchResult
- Provider-specific query mapping, payload parsing and fixture fallback
"""

from .base import EventProvider, HttpEventProvider
from .ticketmaster import TicketmasterProvider
from .eventbrite import EventbriteProvider
from .seatgeek import SeatGeekProvider
from .meetup import MeetupProvider
from .bandsintown import BandsintownProvider
from .yelp import YelpProvider
from .art_institute import ArtInstituteProvider
from .fixtures import fixture_events

__all__ = [
    "EventProvider",
    "HttpEventProvider",
    "TicketmasterProvider",
    "EventbriteProvider",
    "SeatGeekProvider",
    "MeetupProvider",
    "BandsintownProvider",
    "YelpProvider",
    "ArtInstituteProvider",
    "fixture_events",
]
