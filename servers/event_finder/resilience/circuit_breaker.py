"""Circuit breaker guarding a provider's upstream API."""

import time
from enum import Enum
from typing import Any, Coroutine, Optional, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class CircuitState(Enum):
    """States for the circuit breaker."""

    CLOSED = "closed"  # Upstream calls allowed
    OPEN = "open"  # Upstream calls short-circuited
    HALF_OPEN = "half_open"  # Probing for recovery


class CircuitBreakerOpenError(Exception):
    """Raised when an upstream call is short-circuited."""

    def __init__(self, circuit_name: str, retry_after: float = 0.0):
        super().__init__(
            f"Circuit breaker '{circuit_name}' is open (retry in {retry_after:.0f}s)"
        )
        self.circuit_name = circuit_name
        self.retry_after = retry_after


class CircuitBreaker:
    """Stop calling an upstream that keeps failing.

    After `failure_threshold` consecutive failures the circuit opens and
    calls fail fast with CircuitBreakerOpenError. Once `recovery_timeout`
    seconds have passed, probe calls are let through; `half_open_successes`
    successful probes close the circuit again, a failed probe reopens it.
    """

    def __init__(
        self,
        name: str = "upstream",
        failure_threshold: int = 3,
        recovery_timeout: float = 300.0,
        half_open_successes: int = 2,
    ):
        """Initialize circuit breaker.

        Args:
            name: Provider name for logging and error messages
            failure_threshold: Consecutive failures before opening
            recovery_timeout: Seconds to stay open before probing
            half_open_successes: Probe successes needed to close
        """
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.half_open_successes = half_open_successes
        self.failure_count = 0
        self.probe_successes = 0
        self.state = CircuitState.CLOSED
        self.opened_at: Optional[float] = None

    async def call(self, coro: Coroutine[Any, Any, T]) -> T:
        """Await an upstream coroutine under circuit protection.

        Raises:
            CircuitBreakerOpenError: If the circuit is open (the coroutine
                is closed without running)
            Exception: Whatever the coroutine raised, after recording it
        """
        if self.state == CircuitState.OPEN:
            if self.retry_after() > 0:
                coro.close()
                raise CircuitBreakerOpenError(self.name, self.retry_after())
            self._half_open()

        try:
            result = await coro
        except Exception as e:
            self._record_failure(e)
            raise

        self._record_success()
        return result

    def retry_after(self) -> float:
        """Seconds until the open circuit will allow a probe."""
        if self.state != CircuitState.OPEN or self.opened_at is None:
            return 0.0
        elapsed = time.monotonic() - self.opened_at
        return max(0.0, self.recovery_timeout - elapsed)

    def _half_open(self) -> None:
        self.state = CircuitState.HALF_OPEN
        self.probe_successes = 0
        logger.info("circuit_half_open", circuit=self.name)

    def _record_success(self) -> None:
        if self.state == CircuitState.HALF_OPEN:
            self.probe_successes += 1
            if self.probe_successes >= self.half_open_successes:
                self._close()
        else:
            self.failure_count = 0

    def _close(self) -> None:
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at = None
        logger.info("circuit_closed", circuit=self.name)

    def _record_failure(self, error: Exception) -> None:
        self.failure_count += 1
        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self._open(error)

    def _open(self, error: Exception) -> None:
        self.state = CircuitState.OPEN
        self.opened_at = time.monotonic()
        logger.warning(
            "circuit_opened",
            circuit=self.name,
            failure_count=self.failure_count,
            recovery_timeout=self.recovery_timeout,
            error=str(error),
        )

    def reset(self) -> None:
        """Manually close the circuit and clear counters."""
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.probe_successes = 0
        self.opened_at = None

    @property
    def is_open(self) -> bool:
        return self.state == CircuitState.OPEN

    @property
    def is_closed(self) -> bool:
        return self.state == CircuitState.CLOSED

    def get_status(self) -> dict[str, Any]:
        """Current circuit breaker status."""
        return {
            "name": self.name,
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "retry_after": round(self.retry_after(), 1),
        }
