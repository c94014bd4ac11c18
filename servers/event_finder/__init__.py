"""
Local Event Finder Server

This server provides tools for:
- Searching events near a postal code across several event catalogs
  (Ticketmaster, Eventbrite, SeatGeek, Meetup, Bandsintown, Yelp,
  Art Institute of Chicago)
- Deduplicating events reported by more than one catalog
- Filtering events by relative timeframe (today, week, month, 3months)
"""

__version__ = "1.0.0"
