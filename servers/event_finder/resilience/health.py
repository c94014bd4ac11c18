"""Health bookkeeping for event providers."""

from datetime import datetime
from typing import Any, Optional

import structlog

logger = structlog.get_logger()


class HealthMonitor:
    """Track the outcome of each provider's most recent search.

    The aggregator records every fan-out result here. Because merged
    search results carry no per-provider errors, this is where callers
    look to see which sources were degraded.
    """

    def __init__(self):
        self.status: dict[str, dict[str, Any]] = {}

    def record_success(
        self, provider: str, event_count: int, duration_ms: Optional[int] = None
    ) -> None:
        """Record a successful provider search."""
        self.status[provider] = {
            "healthy": True,
            "last_check": datetime.now().isoformat(),
            "event_count": event_count,
            "duration_ms": duration_ms,
            "consecutive_failures": 0,
            "last_error": None,
        }
        logger.debug("provider_healthy", provider=provider, event_count=event_count)

    def record_failure(
        self, provider: str, error: str, duration_ms: Optional[int] = None
    ) -> None:
        """Record a failed or timed-out provider search."""
        previous = self.status.get(provider, {})
        consecutive = previous.get("consecutive_failures", 0) + 1

        self.status[provider] = {
            "healthy": False,
            "last_check": datetime.now().isoformat(),
            "event_count": 0,
            "duration_ms": duration_ms,
            "consecutive_failures": consecutive,
            "last_error": error,
        }
        logger.warning(
            "provider_unhealthy",
            provider=provider,
            consecutive_failures=consecutive,
            error=error,
        )

    def is_healthy(self, provider: str) -> bool:
        """True if the provider's last search succeeded or it was never searched."""
        return self.status.get(provider, {}).get("healthy", True)

    def get_provider_status(self, provider: str) -> Optional[dict[str, Any]]:
        return self.status.get(provider)

    def get_status(self) -> dict[str, Any]:
        """Full health report with summary counts."""
        healthy_count = sum(1 for s in self.status.values() if s["healthy"])
        total_count = len(self.status)

        return {
            "timestamp": datetime.now().isoformat(),
            "summary": {
                "healthy": healthy_count,
                "unhealthy": total_count - healthy_count,
                "total": total_count,
            },
            "providers": dict(self.status),
        }

    def get_unhealthy_providers(self) -> list[str]:
        return [name for name, s in self.status.items() if not s["healthy"]]

    def reset(self, provider: Optional[str] = None) -> None:
        """Forget one provider's status, or all of them."""
        if provider is None:
            self.status.clear()
        else:
            self.status.pop(provider, None)
