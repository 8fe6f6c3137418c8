"""
Retry policy with exponential backoff

Wraps any async operation that raises `CastEngineError`. Only retryable
kinds are retried; the error that finally escapes is always the last one
the operation raised, never a wrapper.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from castengine.core import get_logger
from castengine.core.exceptions import CastEngineError

logger = get_logger(__name__, component="retry")

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry configuration, safe to share across concurrent runs.

    Attributes:
        max_retries: Additional attempts after the first call
        base_delay_ms: Delay before the first retry
        max_delay_ms: Upper bound for any single delay
        sleep: Awaitable used for backoff; tests inject a virtual clock
    """
    max_retries: int = 3
    base_delay_ms: int = 500
    max_delay_ms: int = 30_000
    sleep: SleepFn = field(default=asyncio.sleep, repr=False, compare=False)

    def delay_ms(self, attempt: int) -> int:
        """Backoff before retry number `attempt + 1` (attempt is zero-indexed)"""
        return min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run `operation`, retrying retryable failures.

        The operation is called once, then up to `max_retries` more times while
        it keeps raising a retryable error. Non-retryable errors propagate after
        the first call. Total calls on persistent failure = max_retries + 1.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per call

        Returns:
            The operation's result

        Raises:
            CastEngineError: The last error raised by the operation, unchanged
        """
        attempt = 0
        while True:
            try:
                return await operation()
            except CastEngineError as exc:
                if not exc.is_retryable or attempt >= self.max_retries:
                    if attempt:
                        logger.warning(
                            "Giving up after retries",
                            extra={"attempts": attempt + 1, "error_kind": exc.kind.value},
                        )
                    raise

                delay = self.delay_ms(attempt)
                logger.info(
                    f"Retryable failure, retrying in {delay}ms",
                    extra={
                        "attempt": attempt + 1,
                        "max_retries": self.max_retries,
                        "error_kind": exc.kind.value,
                    },
                )
                await self.sleep(delay / 1000)
                attempt += 1
