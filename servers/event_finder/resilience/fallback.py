"""Live-to-fixture degradation for provider searches."""

from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class FallbackChain:
    """Ordered search strategies for one provider.

    Each step is awaited with the same arguments; the first one that
    returns wins. `served_by` names the step that produced the last
    answer, so callers can tell live data from fixtures.

    Usage:
        chain = FallbackChain(provider.search_live, provider.search_fixtures, name="Yelp")
        result = await chain.execute(params)
    """

    def __init__(self, *steps: Callable[..., Awaitable[T]], name: str = ""):
        if not steps:
            raise ValueError("FallbackChain needs at least one step")
        self.steps = steps
        self.name = name
        self.served_by: Optional[str] = None

    async def execute(self, *args: Any, **kwargs: Any) -> T:
        """Await each step until one returns.

        Raises:
            The last step's exception if every step fails
        """
        self.served_by = None
        errors: list[Exception] = []

        for position, step in enumerate(self.steps, start=1):
            try:
                result = await step(*args, **kwargs)
            except Exception as e:
                errors.append(e)
                logger.warning(
                    "fallback_step_failed",
                    provider=self.name,
                    step=step.__name__,
                    position=position,
                    error=str(e) or type(e).__name__,
                )
                continue

            self.served_by = step.__name__
            if errors:
                logger.warning("fallback_used", provider=self.name, step=step.__name__)
            return result

        logger.error(
            "fallback_chain_exhausted",
            provider=self.name,
            steps=[s.__name__ for s in self.steps],
        )
        raise errors[-1]


async def with_default(
    func: Callable[..., Awaitable[T]],
    default: T,
    *args: Any,
    **kwargs: Any,
) -> T:
    """Await `func`, returning `default` if it raises."""
    try:
        return await func(*args, **kwargs)
    except Exception as e:
        logger.info("using_default_value", function=func.__name__, error=str(e))
        return default
