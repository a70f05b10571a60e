"""
Patient Lookup Port

Interface for resolving a patient by document number from the patients
service.
"""

from typing import Protocol, runtime_checkable

from clinic.domains.appointments.domain.value_objects import PatientRef


@runtime_checkable
class IPatientLookup(Protocol):
    """
    Patient lookup interface.

    The plain HTTP client and its resilient wrapper both satisfy it, so the
    workflow does not know which one it talks to.
    """

    async def lookup_patient_by_document(self, document_number: str) -> PatientRef | None:
        """
        Resolve a patient by document number.

        Args:
            document_number: National identification number

        Returns:
            PatientRef if the patient exists, None if the patients service
            reports that it does not

        Raises:
            DependencyUnavailableException: From the resilient wrapper, when
                the patients service cannot give an answer
        """
        ...
