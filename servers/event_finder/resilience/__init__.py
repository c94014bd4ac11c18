"""Resilience patterns for provider upstream calls."""

from .circuit_breaker import CircuitBreaker, CircuitBreakerOpenError, CircuitState
from .fallback import FallbackChain, with_default
from .health import HealthMonitor
from .retry import retry_once, retry_with_backoff

__all__ = [
    "retry_with_backoff",
    "retry_once",
    "CircuitBreaker",
    "CircuitState",
    "CircuitBreakerOpenError",
    "FallbackChain",
    "with_default",
    "HealthMonitor",
]
