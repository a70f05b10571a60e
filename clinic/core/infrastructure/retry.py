"""
Retry Pattern Implementation

Provides configurable retry logic with exponential backoff and jitter
for transient failure recovery.
"""

import asyncio
import inspect
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_attempts: int = 3
    initial_delay: float = 0.5  # seconds
    max_delay: float = 5.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True  # Add randomness to delays
    jitter_factor: float = 0.1  # 10% jitter
    retryable_exceptions: tuple = (Exception,)
    non_retryable_exceptions: tuple = ()

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must not be negative")

    def max_total_delay(self) -> float:
        """Upper bound of the time spent sleeping between all attempts."""
        total = 0.0
        for attempt in range(1, self.max_attempts):
            delay = min(self.initial_delay * (self.exponential_base ** (attempt - 1)), self.max_delay)
            if self.jitter:
                delay *= 1 + self.jitter_factor
            total += delay
        return total


@dataclass
class RetryStats:
    """Statistics for retry operations."""

    total_attempts: int = 0
    successful_attempts: int = 0
    failed_attempts: int = 0
    total_delay_seconds: float = 0.0
    last_exception: Exception | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_attempts": self.total_attempts,
            "successful_attempts": self.successful_attempts,
            "failed_attempts": self.failed_attempts,
            "total_delay_seconds": round(self.total_delay_seconds, 3),
            "last_exception": str(self.last_exception) if self.last_exception else None,
        }


class RetryExhaustedError(Exception):
    """Raised when all retry attempts have been exhausted."""

    def __init__(self, message: str, last_exception: Exception | None = None, attempts: int = 0):
        super().__init__(message)
        self.last_exception = last_exception
        self.attempts = attempts


class Retryer:
    """
    Configurable retry mechanism with exponential backoff.

    Only exceptions matching ``retryable_exceptions`` (and not
    ``non_retryable_exceptions``) are retried; anything else propagates
    unchanged on the attempt that raised it.

    Example:
        ```python
        retryer = Retryer(max_attempts=3, retryable_exceptions=(TransientLookupError,))
        result = await retryer.execute(breaker.execute, client.lookup_patient_by_document, "123")
        ```
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 0.5,
        max_delay: float = 5.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        retryable_exceptions: tuple | None = None,
        non_retryable_exceptions: tuple | None = None,
        on_retry: Callable[[int, Exception, float], None] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize retryer.

        Args:
            max_attempts: Maximum number of attempts, the first one included
            initial_delay: Delay before the second attempt
            max_delay: Maximum delay between retries
            exponential_base: Base for exponential backoff
            jitter: Whether to add random jitter
            retryable_exceptions: Exceptions that trigger retry
            non_retryable_exceptions: Exceptions that never retry
            on_retry: Callback called before each retry
            sleep: Coroutine used to wait between attempts
        """
        self.config = RetryConfig(
            max_attempts=max_attempts,
            initial_delay=initial_delay,
            max_delay=max_delay,
            exponential_base=exponential_base,
            jitter=jitter,
            retryable_exceptions=retryable_exceptions or (Exception,),
            non_retryable_exceptions=non_retryable_exceptions or (),
        )
        self.on_retry = on_retry
        self._sleep = sleep
        self._stats = RetryStats()

    @property
    def stats(self) -> RetryStats:
        """Get retry statistics."""
        return self._stats

    def _calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay after the given attempt number.

        Uses exponential backoff with optional jitter.
        """
        delay = self.config.initial_delay * (self.config.exponential_base ** (attempt - 1))
        delay = min(delay, self.config.max_delay)

        if self.config.jitter:
            jitter_range = delay * self.config.jitter_factor
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0, delay)

    def _should_retry(self, exception: Exception) -> bool:
        """Check if the exception should trigger a retry."""
        if isinstance(exception, self.config.non_retryable_exceptions):
            return False
        return isinstance(exception, self.config.retryable_exceptions)

    async def execute(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Execute a function with retry logic.

        Args:
            func: Function to execute
            *args: Positional arguments
            **kwargs: Keyword arguments

        Returns:
            Result of the function

        Raises:
            RetryExhaustedError: If all retries exhausted
            Exception: Non-retryable exception
        """
        for attempt in range(1, self.config.max_attempts + 1):
            self._stats.total_attempts += 1

            try:
                result = func(*args, **kwargs)
                if inspect.isawaitable(result):
                    result = await result

                self._stats.successful_attempts += 1
                return result

            except Exception as e:
                self._stats.last_exception = e

                if not self._should_retry(e):
                    self._stats.failed_attempts += 1
                    raise

                if attempt >= self.config.max_attempts:
                    self._stats.failed_attempts += 1
                    raise RetryExhaustedError(
                        f"All {self.config.max_attempts} retry attempts exhausted",
                        last_exception=e,
                        attempts=attempt,
                    ) from e

                delay = self._calculate_delay(attempt)
                self._stats.total_delay_seconds += delay

                logger.warning(
                    f"Retry attempt {attempt}/{self.config.max_attempts} failed: {e}. "
                    f"Retrying in {delay:.2f}s",
                    extra={
                        "attempt": attempt,
                        "max_attempts": self.config.max_attempts,
                        "delay": delay,
                        "exception": str(e),
                    },
                )

                if self.on_retry:
                    self.on_retry(attempt, e, delay)

                await self._sleep(delay)

        # Unreachable while max_attempts >= 1
        raise RetryExhaustedError(
            f"Retry logic error after {self.config.max_attempts} attempts",
            last_exception=self._stats.last_exception,
            attempts=self.config.max_attempts,
        )

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = RetryStats()
