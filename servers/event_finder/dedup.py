"""
Cross-provider deduplication of events.

Two events are duplicates when they share the composite key
(title, calendar day, venue):
- Title and venue: trimmed, lowercased, exact text (no fuzzy matching)
- Date: truncated to the local calendar day

The first occurrence wins. Callers control precedence through input
order, which the aggregator keeps in provider priority order.
"""

from datetime import tzinfo
from typing import Optional

from .dates import event_day
from .models import DedupeResult, DuplicateMatch, Event

DedupKey = tuple[str, str, str]  # (title, day, venue)


def normalize_text(text: str) -> str:
    """Normalize text for key comparison."""
    if not text:
        return ""
    return text.strip().lower()


def dedup_key(event: Event, zone: Optional[tzinfo] = None) -> DedupKey:
    """Build the (title, day, venue) key for an event, days taken in `zone`."""
    return (
        normalize_text(event.title),
        event_day(event.date, zone),
        normalize_text(event.venue),
    )


def deduplicate(events: list[Event], zone: Optional[tzinfo] = None) -> DedupeResult:
    """
    Drop later events whose key matches an earlier one.

    Args:
        events: Events in precedence order
        zone: Zone whose calendar days are compared, host local time if None

    Returns:
        DedupeResult with surviving events (input order kept) and audit trail
    """
    if not events:
        return DedupeResult(events=[], original_count=0, duplicates_removed=0)

    kept: dict[DedupKey, Event] = {}
    result_events: list[Event] = []
    audit_trail: list[DuplicateMatch] = []

    for event in events:
        key = dedup_key(event, zone)
        first = kept.get(key)

        if first is None:
            kept[key] = event
            result_events.append(event)
            continue

        audit_trail.append(DuplicateMatch(
            kept_event_id=first.id,
            dropped_event_id=event.id,
            key=key,
            reason=f"Dropped '{event.title}' ({event.id}), already listed as {first.id}"
        ))

    return DedupeResult(
        events=result_events,
        original_count=len(events),
        duplicates_removed=len(events) - len(result_events),
        audit_trail=audit_trail
    )


def deduplicate_events(events: list[Event], zone: Optional[tzinfo] = None) -> list[Event]:
    """Convenience wrapper returning only the surviving events."""
    return deduplicate(events, zone).events


def format_audit_summary(result: DedupeResult) -> str:
    """Format audit trail as human-readable summary."""
    if not result.audit_trail:
        return "No duplicates found."

    lines = [
        "Deduplication Summary:",
        f"  Original events: {result.original_count}",
        f"  Duplicates removed: {result.duplicates_removed}",
        f"  Final events: {len(result.events)}",
        f"  Dedup rate: {result.dedup_rate:.1f}%",
        "",
        "Dropped events:"
    ]

    for match in result.audit_trail:
        lines.append(f"  - {match.reason}")

    return "\n".join(lines)
