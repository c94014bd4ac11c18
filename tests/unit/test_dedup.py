"""Tests for event deduplication logic."""

from datetime import timezone

from dateutil import tz

from servers.event_finder.dedup import (
    dedup_key,
    deduplicate,
    deduplicate_events,
    format_audit_summary,
    normalize_text,
)


class TestNormalization:
    def test_lowercases_and_trims(self):
        assert normalize_text("  Concert A  ") == "concert a"

    def test_empty_string(self):
        assert normalize_text("") == ""

    def test_none_handling(self):
        assert normalize_text(None) == ""


class TestDedupKey:
    """Tests for the (title, day, venue) key."""

    def test_same_day_same_key(self, make_event):
        morning = make_event(id="a", date="2024-07-15T10:00:00Z")
        evening = make_event(id="b", date="2024-07-15T21:00:00Z")
        assert dedup_key(morning, timezone.utc) == dedup_key(evening, timezone.utc)

    def test_case_and_whitespace_ignored(self, make_event):
        a = make_event(id="a", title="Concert A", venue="Arena 1")
        b = make_event(id="b", title="  CONCERT a ", venue="arena 1  ")
        assert dedup_key(a) == dedup_key(b)

    def test_different_day_different_key(self, make_event):
        a = make_event(id="a", date="2024-07-15T19:00:00Z")
        b = make_event(id="b", date="2024-07-16T19:00:00Z")
        assert dedup_key(a, timezone.utc) != dedup_key(b, timezone.utc)

    def test_no_fuzzy_matching(self, make_event):
        a = make_event(id="a", title="Concert A")
        b = make_event(id="b", title="Concert A!")
        assert dedup_key(a) != dedup_key(b)

    def test_key_format(self, make_event):
        event = make_event(title="Concert A", date="2024-07-15T19:00:00Z", venue="Arena 1")
        assert dedup_key(event, timezone.utc) == ("concert a", "2024-07-15", "arena 1")

    def test_separator_text_in_fields_does_not_collide(self, make_event):
        a = make_event(id="a", title="a|2024-07-15", venue="c")
        b = make_event(id="b", title="a", venue="2024-07-15|c")
        assert dedup_key(a) != dedup_key(b)
        assert [e.id for e in deduplicate_events([a, b])] == ["a", "b"]

    def test_day_taken_in_given_zone(self, make_event):
        late = make_event(id="a", date="2024-07-15T23:00:00Z")
        after_midnight_utc = make_event(id="b", date="2024-07-16T01:00:00Z")
        pacific = tz.tzoffset(None, -7 * 3600)
        assert dedup_key(late, pacific) == dedup_key(after_midnight_utc, pacific)
        assert dedup_key(late, timezone.utc) != dedup_key(after_midnight_utc, timezone.utc)


class TestDeduplicate:
    """Tests for the deduplicate function."""

    def test_empty_list(self):
        result = deduplicate([])
        assert result.events == []
        assert result.original_count == 0
        assert result.duplicates_removed == 0
        assert result.dedup_rate == 0.0

    def test_first_occurrence_wins(self, make_event):
        first = make_event(id="tm_1")
        second = make_event(id="sg_1")

        result = deduplicate([first, second])

        assert [e.id for e in result.events] == ["tm_1"]
        assert result.duplicates_removed == 1
        assert result.audit_trail[0].kept_event_id == "tm_1"
        assert result.audit_trail[0].dropped_event_id == "sg_1"

    def test_keeps_distinct_events_in_order(self, make_event):
        events = [
            make_event(id="a", title="Workshop A", date="2024-07-17T14:00:00Z"),
            make_event(id="b", title="Concert A", date="2024-07-15T19:00:00Z"),
        ]
        result = deduplicate(events)
        assert [e.id for e in result.events] == ["a", "b"]

    def test_idempotent(self, make_event):
        events = [
            make_event(id="a"),
            make_event(id="b"),
            make_event(id="c", title="Other"),
        ]
        once = deduplicate_events(events)
        twice = deduplicate_events(once)
        assert twice == once

    def test_distinct_events_with_same_key_collapse(self, make_event):
        """Two shows at the same venue on the same day share a key."""
        matinee = make_event(id="a", title="Hamilton", date="2024-07-15T14:00:00Z", venue="Pantages")
        evening = make_event(id="b", title="Hamilton", date="2024-07-15T20:00:00Z", venue="Pantages")
        assert len(deduplicate_events([matinee, evening], timezone.utc)) == 1

    def test_same_local_evening_collapses(self, make_event, local_timezone):
        """23:00Z and 01:00Z next day are one Pacific evening."""
        local_timezone("PST8PDT,M3.2.0,M11.1.0")
        first = make_event(id="a", date="2024-07-15T23:00:00Z")
        second = make_event(id="b", date="2024-07-16T01:00:00Z")

        result = deduplicate([first, second])

        assert [e.id for e in result.events] == ["a"]
        assert result.audit_trail[0].key == ("concert a", "2024-07-15", "arena 1")

    def test_unparseable_dates_compared_as_text(self, make_event):
        a = make_event(id="a", date="TBA")
        b = make_event(id="b", date=" tba ")
        c = make_event(id="c", date="Soon")
        assert [e.id for e in deduplicate_events([a, b, c])] == ["a", "c"]

    def test_dedup_rate(self, make_event):
        events = [make_event(id=str(i)) for i in range(4)]
        result = deduplicate(events)
        assert result.dedup_rate == 75.0


class TestAuditSummary:
    def test_no_duplicates(self, make_event):
        result = deduplicate([make_event()])
        assert format_audit_summary(result) == "No duplicates found."

    def test_lists_dropped_events(self, make_event):
        result = deduplicate([make_event(id="tm_1"), make_event(id="sg_1")])
        summary = format_audit_summary(result)
        assert "Duplicates removed: 1" in summary
        assert "sg_1" in summary
