"""Priority-ordered registry of event providers."""

from collections.abc import Iterable, Iterator
from typing import Optional

import structlog

from .providers.base import EventProvider

logger = structlog.get_logger()


class ProviderRegistry:
    """
    Immutable, priority-ordered set of providers.

    Providers are sorted by descending priority once, at construction;
    equal priorities keep their given order. Names are unique and
    looked up case-insensitively.

    Usage:
        registry = ProviderRegistry([TicketmasterProvider(...), YelpProvider(...)])
        for provider in registry.available():
            ...
    """

    def __init__(self, providers: Iterable[EventProvider]):
        ordered = sorted(providers, key=lambda p: p.priority, reverse=True)

        by_name: dict[str, EventProvider] = {}
        for provider in ordered:
            key = provider.name.lower()
            if key in by_name:
                raise ValueError(f"Event provider '{provider.name}' is already registered")
            by_name[key] = provider

        self._providers: tuple[EventProvider, ...] = tuple(ordered)
        self._by_name = by_name
        logger.debug("providers_registered", providers=self.names())

    def get(self, name: str) -> Optional[EventProvider]:
        """Get a provider by name, ignoring case."""
        return self._by_name.get(name.lower())

    def all(self) -> list[EventProvider]:
        """All providers, priority descending."""
        return list(self._providers)

    def available(self) -> list[EventProvider]:
        """Providers whose is_available() is currently true, priority descending."""
        return [p for p in self._providers if p.is_available()]

    def names(self) -> list[str]:
        return [p.name for p in self._providers]

    def __iter__(self) -> Iterator[EventProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._by_name
