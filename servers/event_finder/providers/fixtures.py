"""
Fixture events served when a provider has no live upstream.

Dates are relative to the time of the call so fixture listings always
look upcoming.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..dates import format_event_date
from ..models import Event


FIXTURES: dict[str, list[dict[str, Any]]] = {
    "Ticketmaster": [
        {
            "id": "tm_mock_1",
            "days_ahead": 6,
            "title": "LA Lakers vs Golden State Warriors",
            "description": "NBA Regular Season game at Crypto.com Arena • Premium seats available",
            "venue": "Crypto.com Arena",
            "address": "1111 S Figueroa St, Los Angeles, CA 90015",
            "category": "Sports",
            "distance": 8.2,
        },
        {
            "id": "tm_mock_2",
            "days_ahead": 18,
            "title": "Imagine Dragons - Mercury World Tour",
            "description": "Alternative rock concert • Special guest OneRepublic",
            "venue": "Hollywood Bowl",
            "address": "2301 N Highland Ave, Los Angeles, CA 90068",
            "category": "Music",
            "distance": 5.4,
        },
        {
            "id": "tm_mock_3",
            "days_ahead": 25,
            "title": "The Lion King - Broadway Musical",
            "description": "Disney's award-winning Broadway musical • Evening performance",
            "venue": "Pantages Theatre",
            "address": "6233 Hollywood Blvd, Los Angeles, CA 90028",
            "category": "Theater",
            "distance": 7.1,
        },
    ],
    "Eventbrite": [
        {
            "id": "eb_workshop_1",
            "days_ahead": 3,
            "title": "Digital Marketing Workshop",
            "description": "Social media, SEO, content marketing and analytics from industry experts.",
            "venue": "Business Innovation Center",
            "address": "567 Commerce Blvd, Business District",
            "category": "Business",
            "distance": 4.2,
        },
        {
            "id": "eb_conference_1",
            "days_ahead": 12,
            "title": "Tech Innovation Summit",
            "description": "Entrepreneurs, investors and technology leaders. Keynotes, panels and networking.",
            "venue": "Convention Center Hall A",
            "address": "890 Convention Dr, Downtown",
            "category": "Technology",
            "distance": 6.8,
        },
    ],
    "SeatGeek": [
        {
            "id": "sg_mock_1",
            "days_ahead": 4,
            "title": "Lakers vs Warriors",
            "description": "NBA Basketball game at Crypto.com Arena. Premium seats available starting at $89.",
            "venue": "Crypto.com Arena",
            "address": "1111 S Figueroa St, Los Angeles, CA 90015",
            "category": "Sports",
            "distance": 3.2,
        },
        {
            "id": "sg_mock_2",
            "days_ahead": 8,
            "title": "Taylor Swift - The Eras Tour",
            "description": "Pop superstar Taylor Swift brings her record-breaking Eras Tour.",
            "venue": "SoFi Stadium",
            "address": "1001 Stadium Dr, Inglewood, CA 90301",
            "category": "Music",
            "distance": 5.7,
        },
        {
            "id": "sg_mock_3",
            "days_ahead": 15,
            "title": "Hamilton",
            "description": "The award-winning Broadway musical. Evening show with orchestra seating.",
            "venue": "Hollywood Pantages Theatre",
            "address": "6233 Hollywood Blvd, Los Angeles, CA 90028",
            "category": "Theater",
            "distance": 4.1,
        },
    ],
    "Meetup": [
        {
            "id": "meetup_tech_1",
            "days_ahead": 2,
            "title": "JavaScript Developers Meetup",
            "description": "Monthly gathering of JavaScript developers to share knowledge and network.",
            "venue": "TechHub Coworking Space",
            "address": "123 Tech St, Innovation District",
            "category": "Technology",
            "distance": 2.3,
        },
        {
            "id": "meetup_hiking_1",
            "days_ahead": 5,
            "title": "Weekend Nature Hike",
            "description": "A scenic 5-mile trail walk. All skill levels welcome.",
            "venue": "Sunset Trail Parking",
            "address": "456 Nature Way, Mountain View",
            "category": "Outdoors",
            "distance": 8.1,
        },
        {
            "id": "meetup_book_1",
            "days_ahead": 10,
            "title": "Monthly Book Club Discussion",
            "description": "New members always welcome!",
            "venue": "Corner Coffee Shop",
            "address": "789 Reading Ave, Downtown",
            "category": "Literature",
            "distance": 1.7,
        },
    ],
    "Bandsintown": [
        {
            "id": "bt_mock_1",
            "days_ahead": 7,
            "title": "The Weeknd Live",
            "description": "Live concert featuring The Weeknd • VIP packages available",
            "venue": "Madison Square Garden",
            "address": "New York, NY, United States",
            "category": "Pop",
            "distance": 8.5,
        },
        {
            "id": "bt_mock_2",
            "days_ahead": 14,
            "title": "Arctic Monkeys Live",
            "description": "Live concert featuring Arctic Monkeys • Also featuring: The Strokes",
            "venue": "Red Rocks Amphitheatre",
            "address": "Morrison, CO, United States",
            "category": "Rock",
            "distance": 12.3,
        },
        {
            "id": "bt_mock_3",
            "days_ahead": 21,
            "title": "Bad Bunny Live",
            "description": "Live concert featuring Bad Bunny • Special guest appearances",
            "venue": "MetLife Stadium",
            "address": "East Rutherford, NJ, United States",
            "category": "Hip-Hop",
            "distance": 6.7,
        },
    ],
    "Yelp": [
        {
            "id": "yelp_mock_1",
            "days_ahead": 5,
            "title": "Local Art Gallery Opening",
            "description": "Contemporary art exhibition featuring local artists • Free admission",
            "venue": "Downtown Art Gallery",
            "address": "456 Arts District Blvd, Beverly Hills, CA 90210",
            "category": "Arts & Culture",
            "distance": 2.1,
        },
        {
            "id": "yelp_mock_2",
            "days_ahead": 9,
            "title": "Farmers Market & Live Music",
            "description": "Weekly farmers market with fresh local produce • Live acoustic music",
            "venue": "City Park Pavilion",
            "address": "789 Park Ave, Beverly Hills, CA 90210",
            "category": "Community",
            "distance": 1.8,
        },
        {
            "id": "yelp_mock_3",
            "days_ahead": 16,
            "title": "Wine Tasting & Food Pairing",
            "description": "California vintages with cheese and charcuterie pairings • $45 per person",
            "venue": "Beverly Hills Wine Bar",
            "address": "321 Rodeo Dr, Beverly Hills, CA 90210",
            "category": "Food & Drink",
            "distance": 3.7,
        },
    ],
    "Art Institute of Chicago": [
        {
            "id": "aic_mock_1",
            "days_ahead": 10,
            "title": "Monet and Chicago",
            "description": "Claude Monet's relationship with Chicago • Featured exhibition",
            "venue": "Art Institute - Modern Wing",
            "address": "111 S Michigan Ave, Chicago, IL 60603",
            "category": "Arts & Culture",
            "distance": 850.2,
        },
        {
            "id": "aic_mock_2",
            "days_ahead": 30,
            "title": "Contemporary Perspectives: African Art Now",
            "description": "Contemporary African artists reimagine traditional forms and themes",
            "venue": "Art Institute - Contemporary Galleries",
            "address": "111 S Michigan Ave, Chicago, IL 60603",
            "category": "Arts & Culture",
            "distance": 850.2,
        },
    ],
}


def fixture_events(provider_name: str, now: Optional[datetime] = None) -> list[Event]:
    """Fixture events for a provider, dated relative to `now`."""
    if now is None:
        now = datetime.now(timezone.utc)

    events = []
    for entry in FIXTURES.get(provider_name, []):
        fields = {k: v for k, v in entry.items() if k != "days_ahead"}
        fields["date"] = format_event_date(now + timedelta(days=entry["days_ahead"]))
        events.append(Event(**fields))
    return events
