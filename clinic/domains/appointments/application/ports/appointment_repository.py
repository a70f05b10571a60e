"""
Appointment Repository Port

Interface for appointment data access.
"""

from typing import Protocol, runtime_checkable

from clinic.domains.appointments.domain.entities import Appointment


@runtime_checkable
class IAppointmentRepository(Protocol):
    """
    Appointment repository interface.

    Defines the contract for appointment data access operations.
    """

    async def find_all(self) -> list[Appointment]:
        """
        Get every appointment.

        Returns:
            List of appointments, possibly empty
        """
        ...

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        """
        Find appointment by ID.

        Args:
            appointment_id: Appointment ID

        Returns:
            Appointment if found, None otherwise
        """
        ...

    async def save(self, appointment: Appointment) -> Appointment:
        """
        Save or update appointment.

        Args:
            appointment: Appointment to save

        Returns:
            Saved appointment with ID
        """
        ...

    async def delete(self, appointment_id: int) -> bool:
        """
        Delete appointment by ID.

        Args:
            appointment_id: Appointment ID to delete

        Returns:
            True if deleted, False if not found
        """
        ...
