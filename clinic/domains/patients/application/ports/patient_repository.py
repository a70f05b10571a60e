"""
Patient Repository Port

Interface for patient data access.
"""

from typing import Protocol, runtime_checkable

from clinic.domains.patients.domain.entities import Patient


@runtime_checkable
class IPatientRepository(Protocol):
    """
    Patient repository interface.

    Defines the contract for patient data access operations.
    """

    async def find_all(self) -> list[Patient]:
        """
        Get every registered patient.

        Returns:
            List of patients, possibly empty
        """
        ...

    async def find_by_id(self, patient_id: int) -> Patient | None:
        """
        Find patient by ID.

        Args:
            patient_id: Unique patient identifier

        Returns:
            Patient if found, None otherwise
        """
        ...

    async def find_by_document_number(self, document_number: str) -> Patient | None:
        """
        Find patient by document number.

        Args:
            document_number: National identification number

        Returns:
            Patient if found, None otherwise
        """
        ...

    async def save(self, patient: Patient) -> Patient:
        """
        Save or update patient.

        Args:
            patient: Patient to save

        Returns:
            Saved patient with ID
        """
        ...

    async def delete(self, patient_id: int) -> bool:
        """
        Delete patient by ID.

        Args:
            patient_id: Patient ID to delete

        Returns:
            True if deleted, False if not found
        """
        ...
