"""Tests for the provider registry."""

import pytest

from servers.event_finder.registry import ProviderRegistry


class TestProviderRegistry:
    def test_sorted_by_priority_descending(self, scenario_providers):
        registry = ProviderRegistry(scenario_providers)
        assert registry.names() == ["ProviderA", "ProviderB", "ProviderC"]

    def test_equal_priorities_keep_given_order(self, make_provider):
        registry = ProviderRegistry([make_provider("First", 50), make_provider("Second", 50)])
        assert registry.names() == ["First", "Second"]

    def test_duplicate_names_rejected_case_insensitively(self, make_provider):
        with pytest.raises(ValueError, match="already registered"):
            ProviderRegistry([make_provider("Yelp", 70), make_provider("YELP", 10)])

    def test_get_ignores_case(self, scenario_providers):
        registry = ProviderRegistry(scenario_providers)
        assert registry.get("providera").name == "ProviderA"
        assert registry.get("missing") is None
        assert "PROVIDERB" in registry

    def test_available_filters_and_keeps_order(self, make_provider):
        registry = ProviderRegistry([
            make_provider("Low", 10),
            make_provider("Off", 90, available=False),
            make_provider("High", 100),
        ])
        assert [p.name for p in registry.available()] == ["High", "Low"]
        assert len(registry) == 3

    def test_iteration_is_priority_order(self, scenario_providers):
        registry = ProviderRegistry(scenario_providers)
        assert [p.priority for p in registry] == [100, 90, 80]
        assert [p.name for p in registry.all()] == registry.names()
