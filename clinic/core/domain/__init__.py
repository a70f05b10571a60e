"""
Domain Layer - Core building blocks

- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from clinic.core.domain.entities import Entity
from clinic.core.domain.exceptions import (
    DependencyUnavailableException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    IntegrationException,
    PatientLookupTimeoutException,
    PatientNotFoundException,
    ValidationException,
)
from clinic.core.domain.value_objects import ValueObject

__all__ = [
    "Entity",
    "DependencyUnavailableException",
    "DomainException",
    "DuplicateEntityException",
    "EntityNotFoundException",
    "IntegrationException",
    "PatientLookupTimeoutException",
    "PatientNotFoundException",
    "ValidationException",
    "ValueObject",
]
