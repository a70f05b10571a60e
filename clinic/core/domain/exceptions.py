"""
Domain Exceptions

These exceptions represent business rule violations and dependency failures.
They are caught and translated to HTTP responses in the API layer
(see clinic.api.exception_handlers).
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PATIENT_NOT_FOUND")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for missing or blank required fields and invalid entity states.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class EntityNotFoundException(DomainException):
    """
    Raised when a local entity is not found by its identifier.
    """

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        message: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} with ID {entity_id} not found"
        super().__init__(
            msg,
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class PatientNotFoundException(DomainException):
    """
    Raised when the patients service affirmatively reports that no patient
    has the given document number.

    This is a definitive answer from a healthy dependency, never a failure
    to reach it.
    """

    def __init__(self, document_number: str):
        self.document_number = document_number
        super().__init__(
            f"No se encontró el paciente con documento {document_number}",
            "PATIENT_NOT_FOUND",
            {"document_number": document_number},
        )


class DuplicateEntityException(DomainException):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: Any):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(
            f"{entity_type} with {field}='{value}' already exists",
            "DUPLICATE_ENTITY",
            {
                "entity_type": entity_type,
                "field": field,
                "value": str(value),
            },
        )


class IntegrationException(DomainException):
    """Raised when an external integration fails."""

    def __init__(
        self,
        service: str,
        message: str,
        original_error: BaseException | None = None,
        code: str = "INTEGRATION_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.service = service
        self.original_error = original_error
        details = {"service": service, **(details or {})}
        if original_error:
            details["original_error"] = str(original_error) or original_error.__class__.__name__
        super().__init__(message, code, details)


class DependencyUnavailableException(IntegrationException):
    """
    Raised by the lookup fallback when the patients service cannot answer.

    Carries the document number being resolved and the triggering cause
    (exhausted retries, a non-retryable lookup error or an open circuit).
    """

    def __init__(
        self,
        document_number: str,
        cause: BaseException | None = None,
        retry_after: float | None = None,
        message: str | None = None,
        code: str = "DEPENDENCY_UNAVAILABLE",
    ):
        self.document_number = document_number
        self.cause = cause
        self.retry_after = retry_after
        details: dict[str, Any] = {"document_number": document_number}
        if retry_after is not None:
            details["retry_after"] = round(retry_after, 1)
        msg = message or (
            "No fue posible registrar el turno porque el servicio de pacientes no está disponible. "
            f"Documento afectado: {document_number}"
        )
        super().__init__("patients", msg, original_error=cause, code=code, details=details)


class PatientLookupTimeoutException(DependencyUnavailableException):
    """Raised when the whole patient lookup exceeds its time budget."""

    def __init__(self, document_number: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            document_number,
            cause=TimeoutError(f"patient lookup exceeded {timeout:.1f}s"),
            message=f"El servicio de pacientes no respondió en {timeout:.1f}s. Documento afectado: {document_number}",
            code="PATIENT_LOOKUP_TIMEOUT",
        )
        self.details["timeout"] = timeout
