"""
Appointment Service

Read, update and delete operations for appointments. Creation goes through
CreateAppointmentUseCase since it needs the patients service.
"""

import logging

from clinic.core.domain import EntityNotFoundException
from clinic.domains.appointments.application.dto import AppointmentUpdateRequest
from clinic.domains.appointments.application.ports import IAppointmentRepository
from clinic.domains.appointments.domain.entities import Appointment

logger = logging.getLogger(__name__)


class AppointmentService:
    """Application service for appointment records."""

    def __init__(self, appointment_repository: IAppointmentRepository):
        self.appointment_repo = appointment_repository

    async def list_appointments(self) -> list[Appointment]:
        return await self.appointment_repo.find_all()

    async def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = await self.appointment_repo.find_by_id(appointment_id)
        if not appointment:
            raise EntityNotFoundException(
                "Appointment",
                appointment_id,
                message=f"No se encontró el turno con id {appointment_id}",
            )
        return appointment

    async def update_appointment(self, appointment_id: int, request: AppointmentUpdateRequest) -> Appointment:
        """Apply a partial update; the patient name is never touched."""
        appointment = await self.get_appointment(appointment_id)
        appointment.apply_update(
            appointment_date=request.appointment_date,
            treatment=request.treatment,
        )
        saved = await self.appointment_repo.save(appointment)
        logger.info(f"Appointment updated: {saved.id}")
        return saved

    async def delete_appointment(self, appointment_id: int) -> None:
        deleted = await self.appointment_repo.delete(appointment_id)
        if not deleted:
            raise EntityNotFoundException(
                "Appointment",
                appointment_id,
                message=f"No se encontró el turno con id {appointment_id}",
            )
        logger.info(f"Appointment deleted: {appointment_id}")
