"""Patients service HTTP client.

Async client used by the appointments service to resolve patients by
document number. Classifies every failure so the resilience layer can
decide what to retry:

- 404: the patient does not exist (returns None, not an error)
- transport errors, 5xx and 429: TransientLookupError (retryable)
- any other unexpected response: PatientLookupError (not retryable)
"""

import logging
from urllib.parse import quote

import httpx

from clinic.core.shared.logger import get_correlation_id
from clinic.domains.appointments.application.ports import IPatientLookup
from clinic.domains.appointments.domain.value_objects import PatientRef

logger = logging.getLogger(__name__)


class PatientLookupError(Exception):
    """The patients service gave an unusable answer."""

    def __init__(self, message: str, document_number: str, status_code: int | None = None):
        super().__init__(message)
        self.document_number = document_number
        self.status_code = status_code


class TransientLookupError(PatientLookupError):
    """The patients service could not be reached or failed temporarily."""


class PatientsServiceClient(IPatientLookup):
    """Async HTTP client for the patients service.

    Implements IPatientLookup without any resilience of its own; wrap it in
    ResilientPatientLookup for retries, circuit breaking and fallback.
    """

    def __init__(
        self,
        base_url: str,
        lookup_path: str = "/pacientes/traer/documento/{document}",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: Patients service (or gateway) base URL.
            lookup_path: Path template with a ``{document}`` placeholder.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.lookup_path = lookup_path
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def lookup_patient_by_document(self, document_number: str) -> PatientRef | None:
        """Fetch a patient by document number.

        Args:
            document_number: National identification number.

        Returns:
            PatientRef if found, None if the service answered 404.

        Raises:
            TransientLookupError: On transport errors, 5xx or 429.
            PatientLookupError: On any other unexpected response.
        """
        client = await self._get_client()
        path = self.lookup_path.format(document=quote(document_number, safe=""))

        # Same correlation id on both sides of the call
        correlation_id = get_correlation_id()
        headers = {"X-Correlation-ID": correlation_id} if correlation_id else None

        try:
            response = await client.get(path, headers=headers)
        except httpx.TransportError as e:
            logger.warning(f"Patients service unreachable for document {document_number}: {e!r}")
            raise TransientLookupError(
                f"Patients service unreachable: {e!r}", document_number=document_number
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Request error looking up document {document_number}: {e!r}")
            raise PatientLookupError(f"Request error: {e!r}", document_number=document_number) from e

        if response.status_code == 404:
            logger.debug(f"Patients service has no patient with document {document_number}")
            return None

        if response.status_code >= 500 or response.status_code == 429:
            logger.warning(f"Patients service returned {response.status_code} for document {document_number}")
            raise TransientLookupError(
                f"Patients service returned {response.status_code}",
                document_number=document_number,
                status_code=response.status_code,
            )

        if not response.is_success:
            logger.error(f"Unexpected status {response.status_code} looking up document {document_number}")
            raise PatientLookupError(
                f"Unexpected status {response.status_code} from patients service",
                document_number=document_number,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
            return PatientRef.from_payload(payload)
        except ValueError as e:
            logger.error(f"Invalid patient payload for document {document_number}: {e}")
            raise PatientLookupError(
                f"Invalid patient payload: {e}",
                document_number=document_number,
                status_code=response.status_code,
            ) from e
