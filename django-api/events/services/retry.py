"""Retry policy for optimistic concurrency conflicts."""

import time
from collections.abc import Callable
from typing import Self, TypeVar

import structlog
from django.conf import settings

from events.domain.errors import ConcurrentModificationError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ConcurrencyRetry:
    """Re-run a load/transition/save cycle when the document moved underneath it.

    The operation must reload its document on every attempt; a retry with a
    stale snapshot would only fail again. Errors not listed in ``retry_on``
    propagate immediately.

    Attributes:
        max_attempts: Total attempts (initial + retries). Must be positive.
        retry_delay: Seconds to sleep between attempts. Must be non-negative.
        retry_on: Exception types that trigger another attempt.
    """

    __slots__ = ("max_attempts", "retry_delay", "retry_on")

    def __init__(
        self,
        max_attempts: int = 5,
        retry_delay: float = 0.0,
        retry_on: tuple[type[Exception], ...] = (ConcurrentModificationError,),
    ) -> None:
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if retry_delay < 0:
            raise ValueError("retry_delay must be non-negative")
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.retry_on = retry_on

    @classmethod
    def from_settings(cls) -> Self:
        return cls(
            max_attempts=settings.EVENTS_RETRY_MAX_ATTEMPTS,
            retry_delay=settings.EVENTS_RETRY_DELAY,
        )

    def run(self, operation: Callable[[], T]) -> T:
        for attempt in range(1, self.max_attempts):
            try:
                return operation()
            except self.retry_on as exc:
                logger.warning(
                    "store_write_retry",
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(exc),
                )
                if self.retry_delay:
                    time.sleep(self.retry_delay)
        # last attempt lets the error propagate
        return operation()
