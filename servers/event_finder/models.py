"""
Pydantic models for event search data structures.

These models define the core data types shared by every provider:
- Event: Provider-agnostic event record
- SearchParams: Location/date/category query passed to providers
- SearchResult: Events returned by one provider, or the merged set
- ProviderCapabilities: Advisory feature flags declared by a provider
- FetchStats / FetchReport: Per-provider outcome of an aggregated search
- DedupeResult: Result of deduplication with audit trail
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


POSTAL_CODE_PATTERN = re.compile(r"^\d{5}$")

AGGREGATED_SOURCE = "Aggregated"


class Event(BaseModel):
    """A single event, normalized from any provider."""

    id: str  # {providerPrefix}_{providerNativeId}
    title: str
    description: str = ""
    date: str  # ISO-8601 instant
    venue: str = ""
    address: str = ""
    category: str = ""
    distance: float = Field(default=0.0, ge=0)  # miles; 0 means unknown


class SearchParams(BaseModel):
    """Search request shared by the aggregator and every provider."""

    postal_code: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    radius: float = Field(gt=0)  # miles

    # Inclusive ISO-8601 bounds
    start_date_time: Optional[str] = None
    end_date_time: Optional[str] = None

    category: Optional[str] = None

    # Advisory for providers, not enforced across the merged result
    size: Optional[int] = Field(default=None, ge=0)
    page: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_location(self) -> "SearchParams":
        has_postal = self.postal_code is not None
        has_lat = self.latitude is not None
        has_lon = self.longitude is not None

        if has_lat != has_lon:
            raise ValueError("latitude and longitude must be given together")
        if has_postal == has_lat:
            raise ValueError("provide either postal_code or latitude/longitude")
        if has_postal and not POSTAL_CODE_PATTERN.match(self.postal_code):
            raise ValueError(f"postal_code must be 5 digits, got {self.postal_code!r}")
        return self

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class SearchResult(BaseModel):
    """Events from one provider, or the merged result of a search."""

    events: list[Event] = Field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    source: str

    @classmethod
    def empty(cls, source: str) -> "SearchResult":
        return cls(events=[], total_count=0, has_more=False, source=source)


class ProviderCapabilities(BaseModel):
    """Static, informational feature flags of a provider."""

    model_config = ConfigDict(frozen=True)

    location_search: bool
    category_filter: bool
    date_range: bool
    pagination: bool


class FetchStats(BaseModel):
    """Outcome of one provider call during an aggregated search."""

    source: str
    count: int
    status: str  # success, error, timeout
    duration_ms: Optional[int] = None
    error_message: Optional[str] = None


class FetchReport(BaseModel):
    """Merged search result plus per-provider stats in registry order."""

    result: SearchResult
    stats: list[FetchStats]

    @computed_field
    @property
    def failed_sources(self) -> list[str]:
        return [s.source for s in self.stats if s.status != "success"]


class DuplicateMatch(BaseModel):
    """Records a dropped duplicate for audit trail."""

    kept_event_id: str
    dropped_event_id: str
    key: tuple[str, str, str]  # (title, day, venue)
    reason: str


class DedupeResult(BaseModel):
    """Result of deduplication with audit trail."""

    events: list[Event]
    original_count: int
    duplicates_removed: int
    audit_trail: list[DuplicateMatch] = Field(default_factory=list)

    @computed_field
    @property
    def dedup_rate(self) -> float:
        """Percentage of events that were duplicates."""
        if self.original_count == 0:
            return 0.0
        return self.duplicates_removed / self.original_count * 100
