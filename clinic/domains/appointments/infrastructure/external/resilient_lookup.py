"""Resilient patient lookup.

Wraps the patients service client with retry, circuit breaker and a
fallback, plus an optional caller-side time budget:

    retry( circuit_breaker( client.lookup_patient_by_document ) ) -> fallback

Every retry attempt passes through the breaker, so an open circuit stops
the retry loop without touching the network. Found and not-found answers
are returned as-is and never retried.
"""

import asyncio
import logging
from typing import Any, NoReturn

from clinic.config.settings import Settings
from clinic.core.domain import DependencyUnavailableException, PatientLookupTimeoutException
from clinic.core.infrastructure import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerError,
    RetryExhaustedError,
    Retryer,
)
from clinic.domains.appointments.application.ports import IPatientLookup
from clinic.domains.appointments.domain.value_objects import PatientRef
from clinic.domains.appointments.infrastructure.external.patients_client import (
    PatientsServiceClient,
    TransientLookupError,
)

logger = logging.getLogger(__name__)


class ResilientPatientLookup(IPatientLookup):
    """Patient lookup with retry, circuit breaker, fallback and time budget.

    Example:
        ```python
        lookup = ResilientPatientLookup.from_settings(get_settings())
        patient = await lookup.lookup_patient_by_document("123456789")
        ```
    """

    def __init__(
        self,
        client: IPatientLookup,
        circuit_breaker: CircuitBreaker | None = None,
        retryer: Retryer | None = None,
        lookup_timeout: float | None = None,
    ):
        """Initialize resilient lookup.

        Args:
            client: Underlying lookup (normally PatientsServiceClient).
            circuit_breaker: Breaker shared by every lookup of this process.
            retryer: Retry policy; only TransientLookupError is retried.
            lookup_timeout: Overall seconds for one lookup, retries included.
                None disables the budget.
        """
        self.client = client
        self.circuit_breaker = circuit_breaker or CircuitBreaker(name="patients-service")
        self.retryer = retryer or Retryer(
            retryable_exceptions=(TransientLookupError,),
            non_retryable_exceptions=(CircuitBreakerError,),
        )
        self.lookup_timeout = lookup_timeout
        self._abandoned: set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings, client: IPatientLookup | None = None) -> "ResilientPatientLookup":
        """Build the lookup chain from configuration."""
        client = client or PatientsServiceClient(
            base_url=settings.PATIENTS_SERVICE_URL,
            lookup_path=settings.PATIENTS_LOOKUP_PATH,
            timeout=settings.PATIENTS_REQUEST_TIMEOUT,
        )
        circuit_breaker = CircuitBreaker(
            name="patients-service",
            config=CircuitBreakerConfig(
                failure_rate_threshold=settings.PATIENTS_CB_FAILURE_RATE_THRESHOLD,
                sliding_window_size=settings.PATIENTS_CB_SLIDING_WINDOW_SIZE,
                minimum_number_of_calls=settings.PATIENTS_CB_MINIMUM_CALLS,
                wait_duration_in_open_state=settings.PATIENTS_CB_WAIT_DURATION_OPEN,
                permitted_calls_in_half_open_state=settings.PATIENTS_CB_HALF_OPEN_CALLS,
            ),
        )
        retryer = Retryer(
            max_attempts=settings.PATIENTS_RETRY_MAX_ATTEMPTS,
            initial_delay=settings.PATIENTS_RETRY_INITIAL_DELAY,
            max_delay=settings.PATIENTS_RETRY_MAX_DELAY,
            exponential_base=settings.PATIENTS_RETRY_EXPONENTIAL_BASE,
            jitter=settings.PATIENTS_RETRY_JITTER,
            retryable_exceptions=(TransientLookupError,),
            non_retryable_exceptions=(CircuitBreakerError,),
        )
        return cls(
            client=client,
            circuit_breaker=circuit_breaker,
            retryer=retryer,
            lookup_timeout=settings.PATIENTS_LOOKUP_TIMEOUT,
        )

    async def lookup_patient_by_document(self, document_number: str) -> PatientRef | None:
        """Resolve a patient, falling back to DependencyUnavailableException.

        Raises:
            DependencyUnavailableException: If retries are exhausted, the
                client fails with a non-retryable error or the circuit is open.
            PatientLookupTimeoutException: If the time budget runs out first.
        """
        if self.lookup_timeout is None:
            return await self._lookup_with_resilience(document_number)

        task = asyncio.ensure_future(self._lookup_with_resilience(document_number))
        try:
            # shield keeps the in-flight call running after the budget expires
            return await asyncio.wait_for(asyncio.shield(task), timeout=self.lookup_timeout)
        except TimeoutError:
            self._abandon(task, document_number)
            logger.warning(
                f"Patient lookup for document {document_number} exceeded {self.lookup_timeout:.1f}s; abandoning it"
            )
            raise PatientLookupTimeoutException(document_number, self.lookup_timeout) from None

    async def _lookup_with_resilience(self, document_number: str) -> PatientRef | None:
        try:
            return await self.retryer.execute(
                self.circuit_breaker.execute,
                self.client.lookup_patient_by_document,
                document_number,
            )
        except RetryExhaustedError as e:
            self._fallback(document_number, e.last_exception or e)
        except CircuitBreakerError as e:
            self._fallback(document_number, e, retry_after=e.retry_after)
        except Exception as e:
            self._fallback(document_number, e)

    def _fallback(
        self,
        document_number: str,
        cause: BaseException,
        retry_after: float | None = None,
    ) -> NoReturn:
        """Turn a failed lookup into DependencyUnavailableException. Never calls the client."""
        logger.warning(
            f"Patients service unavailable for document {document_number}: {cause!r}",
            extra={
                "document_number": document_number,
                "circuit_state": self.circuit_breaker.state.value,
            },
        )
        raise DependencyUnavailableException(
            document_number,
            cause=cause,
            retry_after=retry_after,
        ) from cause

    def _abandon(self, task: asyncio.Task, document_number: str) -> None:
        """Keep a reference to an abandoned lookup and log how it ends."""
        self._abandoned.add(task)

        def _on_done(finished: asyncio.Task) -> None:
            self._abandoned.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                logger.info(f"Abandoned lookup for document {document_number} finished with {exc!r}")
            else:
                logger.info(f"Abandoned lookup for document {document_number} finished; result discarded")

        task.add_done_callback(_on_done)

    async def close(self) -> None:
        """Release the underlying client."""
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()

    def get_status(self) -> dict[str, Any]:
        """Breaker status plus retry counters, for the health endpoint."""
        return {
            "circuit_breaker": self.circuit_breaker.get_status(),
            "retry": self.retryer.stats.to_dict(),
            "lookup_timeout": self.lookup_timeout,
            "abandoned_in_flight": len(self._abandoned),
        }
