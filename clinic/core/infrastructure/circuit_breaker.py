"""
Circuit Breaker Pattern Implementation

Prevents cascading failures by tracking the outcome of recent calls to a
dependency and temporarily blocking requests while it is failing.

The failure model is count based: the breaker keeps the outcomes of the
last ``sliding_window_size`` calls and opens when, with at least
``minimum_number_of_calls`` outcomes recorded, the failure rate reaches
``failure_rate_threshold`` percent.
"""

import asyncio
import inspect
import logging
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Normal operation, requests pass through
    OPEN = "open"  # Failure rate exceeded, requests blocked
    HALF_OPEN = "half_open"  # Probing whether the dependency recovered


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker."""

    failure_rate_threshold: float = 50.0  # Percent of failures in the window that opens the circuit
    sliding_window_size: int = 10  # Outcomes kept in the rolling window
    minimum_number_of_calls: int = 5  # Outcomes needed before the rate is evaluated
    wait_duration_in_open_state: float = 30.0  # Seconds before probing recovery
    permitted_calls_in_half_open_state: int = 1  # Concurrent probes allowed in HALF_OPEN
    excluded_exceptions: tuple = ()  # Exceptions that don't count as outcomes

    def __post_init__(self) -> None:
        if not 0 < self.failure_rate_threshold <= 100:
            raise ValueError("failure_rate_threshold must be in (0, 100]")
        if self.sliding_window_size < 1:
            raise ValueError("sliding_window_size must be at least 1")
        if self.minimum_number_of_calls < 1:
            raise ValueError("minimum_number_of_calls must be at least 1")
        if self.permitted_calls_in_half_open_state < 1:
            raise ValueError("permitted_calls_in_half_open_state must be at least 1")
        if self.wait_duration_in_open_state < 0:
            raise ValueError("wait_duration_in_open_state must not be negative")
        # The rate can never be evaluated on more calls than the window holds
        self.minimum_number_of_calls = min(self.minimum_number_of_calls, self.sliding_window_size)


@dataclass
class CircuitBreakerStats:
    """Statistics for circuit breaker."""

    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    rejected_requests: int = 0
    state_changes: int = 0
    last_failure_time: datetime | None = None
    last_success_time: datetime | None = None
    consecutive_failures: int = 0
    consecutive_successes: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "rejected_requests": self.rejected_requests,
            "state_changes": self.state_changes,
            "last_failure_time": self.last_failure_time.isoformat() if self.last_failure_time else None,
            "last_success_time": self.last_success_time.isoformat() if self.last_success_time else None,
            "consecutive_failures": self.consecutive_failures,
            "consecutive_successes": self.consecutive_successes,
        }


class CircuitBreakerError(Exception):
    """Raised when the circuit breaker rejects a call."""

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class CircuitBreaker:
    """
    Circuit breaker implementation for fault tolerance.

    States:
    - CLOSED: all requests pass through; outcomes feed the rolling window
    - OPEN: all requests rejected until the wait duration elapses
    - HALF_OPEN: a limited number of probe requests are let through;
      one failed probe reopens the circuit, enough successful probes close it

    Every mutation of the state, the window and the counters happens under a
    single ``asyncio.Lock``. Outcomes of calls admitted before the last state
    change are counted in the stats but do not drive transitions.

    Example:
        ```python
        breaker = CircuitBreaker(name="patients")
        result = await breaker.execute(client.lookup_patient_by_document, "123")
        ```
    """

    def __init__(
        self,
        name: str,
        config: CircuitBreakerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize circuit breaker.

        Args:
            name: Identifier for this circuit breaker
            config: Configuration options
            clock: Monotonic time source, in seconds
        """
        self.name = name
        self.config = config or CircuitBreakerConfig()
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._stats = CircuitBreakerStats()
        self._window: deque[bool] = deque(maxlen=self.config.sliding_window_size)
        self._opened_at: float | None = None
        self._epoch = 0
        self._half_open_in_flight = 0
        self._half_open_successes = 0
        self._lock = asyncio.Lock()

    @property
    def state(self) -> CircuitState:
        """Get current state."""
        return self._state

    @property
    def stats(self) -> CircuitBreakerStats:
        """Get statistics."""
        return self._stats

    @property
    def is_open(self) -> bool:
        return self._state == CircuitState.OPEN

    @property
    def is_closed(self) -> bool:
        return self._state == CircuitState.CLOSED

    @property
    def failure_rate(self) -> float:
        """Failure percentage over the current rolling window."""
        if not self._window:
            return 0.0
        return sum(self._window) * 100.0 / len(self._window)

    @property
    def is_available(self) -> bool:
        """Check, without side effects, whether a call would be admitted."""
        if self._state == CircuitState.CLOSED:
            return True
        if self._state == CircuitState.OPEN:
            return self._retry_after() <= 0
        return self._half_open_in_flight < self.config.permitted_calls_in_half_open_state

    def _retry_after(self) -> float:
        if self._opened_at is None:
            return 0.0
        return max(0.0, self.config.wait_duration_in_open_state - (self._clock() - self._opened_at))

    def _transition_to(self, new_state: CircuitState, reason: str) -> None:
        """Transition to a new state. Caller must hold the lock."""
        if self._state == new_state:
            return

        old_state = self._state
        self._state = new_state
        self._epoch += 1
        self._stats.state_changes += 1

        if new_state == CircuitState.OPEN:
            self._opened_at = self._clock()
        elif new_state == CircuitState.HALF_OPEN:
            self._half_open_in_flight = 0
            self._half_open_successes = 0
        elif new_state == CircuitState.CLOSED:
            self._opened_at = None
            self._window.clear()
            self._stats.consecutive_failures = 0

        level = logging.WARNING if new_state == CircuitState.OPEN else logging.INFO
        logger.log(
            level,
            f"Circuit breaker '{self.name}' state change: {old_state.value} -> {new_state.value} ({reason})",
            extra={
                "circuit_breaker": self.name,
                "old_state": old_state.value,
                "new_state": new_state.value,
                "stats": self._stats.to_dict(),
            },
        )

    async def _before_request(self) -> int:
        """Admit or reject a call. Returns the epoch the call was admitted in."""
        async with self._lock:
            self._stats.total_requests += 1

            if self._state == CircuitState.OPEN:
                retry_after = self._retry_after()
                if retry_after > 0:
                    self._stats.rejected_requests += 1
                    raise CircuitBreakerError(
                        f"Circuit breaker '{self.name}' is open. Retry after {retry_after:.1f}s",
                        retry_after=retry_after,
                    )
                self._transition_to(CircuitState.HALF_OPEN, "wait duration elapsed")

            if self._state == CircuitState.HALF_OPEN:
                if self._half_open_in_flight >= self.config.permitted_calls_in_half_open_state:
                    self._stats.rejected_requests += 1
                    raise CircuitBreakerError(
                        f"Circuit breaker '{self.name}' is half-open and all probe calls are in flight",
                        retry_after=0.0,
                    )
                self._half_open_in_flight += 1

            return self._epoch

    async def _record_success(self, epoch: int) -> None:
        """Record a successful request."""
        async with self._lock:
            self._stats.successful_requests += 1
            self._stats.consecutive_successes += 1
            self._stats.consecutive_failures = 0
            self._stats.last_success_time = datetime.now()

            if epoch != self._epoch:
                return

            if self._state == CircuitState.CLOSED:
                self._window.append(False)
            elif self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight -= 1
                self._half_open_successes += 1
                if self._half_open_successes >= self.config.permitted_calls_in_half_open_state:
                    self._transition_to(CircuitState.CLOSED, "probe calls succeeded")

    async def _record_failure(self, exception: BaseException, epoch: int) -> None:
        """Record a failed request."""
        if isinstance(exception, self.config.excluded_exceptions):
            await self._release(epoch)
            return

        async with self._lock:
            self._stats.failed_requests += 1
            self._stats.consecutive_failures += 1
            self._stats.consecutive_successes = 0
            self._stats.last_failure_time = datetime.now()

            if epoch != self._epoch:
                return

            if self._state == CircuitState.CLOSED:
                self._window.append(True)
                if (
                    len(self._window) >= self.config.minimum_number_of_calls
                    and self.failure_rate >= self.config.failure_rate_threshold
                ):
                    self._transition_to(
                        CircuitState.OPEN,
                        f"failure rate {self.failure_rate:.1f}% over {len(self._window)} calls",
                    )
            elif self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight -= 1
                self._transition_to(CircuitState.OPEN, f"probe call failed: {exception!r}")

    async def _release(self, epoch: int) -> None:
        """Free a half-open probe slot without recording an outcome."""
        async with self._lock:
            if epoch == self._epoch and self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight -= 1

    async def execute(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Execute a function through the circuit breaker.

        Args:
            func: Function to execute
            *args: Positional arguments
            **kwargs: Keyword arguments

        Returns:
            Result of the function

        Raises:
            CircuitBreakerError: If the circuit rejects the call
            Exception: Original exception from function
        """
        epoch = await self._before_request()

        try:
            result = func(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
        except asyncio.CancelledError:
            await self._release(epoch)
            raise
        except Exception as e:
            await self._record_failure(e, epoch)
            raise

        await self._record_success(epoch)
        return result

    def reset(self) -> None:
        """Reset circuit breaker to initial state."""
        self._state = CircuitState.CLOSED
        self._opened_at = None
        self._epoch += 1
        self._window.clear()
        self._half_open_in_flight = 0
        self._half_open_successes = 0
        self._stats = CircuitBreakerStats()
        logger.info(f"Circuit breaker '{self.name}' reset")

    def get_status(self) -> dict[str, Any]:
        """Get current status."""
        return {
            "name": self.name,
            "state": self._state.value,
            "is_available": self.is_available,
            "failure_rate": round(self.failure_rate, 2),
            "window_calls": len(self._window),
            "retry_after": round(self._retry_after(), 1) if self._state == CircuitState.OPEN else None,
            "stats": self._stats.to_dict(),
            "config": {
                "failure_rate_threshold": self.config.failure_rate_threshold,
                "sliding_window_size": self.config.sliding_window_size,
                "minimum_number_of_calls": self.config.minimum_number_of_calls,
                "wait_duration_in_open_state": self.config.wait_duration_in_open_state,
                "permitted_calls_in_half_open_state": self.config.permitted_calls_in_half_open_state,
            },
        }
