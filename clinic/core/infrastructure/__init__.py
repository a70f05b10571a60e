"""
Core Infrastructure - Resilience primitives for remote calls
"""

from clinic.core.infrastructure.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerError,
    CircuitBreakerStats,
    CircuitState,
)
from clinic.core.infrastructure.retry import (
    RetryConfig,
    RetryExhaustedError,
    Retryer,
    RetryStats,
)

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitBreakerError",
    "CircuitBreakerStats",
    "CircuitState",
    "RetryConfig",
    "RetryExhaustedError",
    "Retryer",
    "RetryStats",
]
