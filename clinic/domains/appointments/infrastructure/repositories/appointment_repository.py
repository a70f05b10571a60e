"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.domains.appointments.application.ports import IAppointmentRepository
from clinic.domains.appointments.domain.entities import Appointment
from clinic.domains.appointments.infrastructure.persistence.sqlalchemy.models import AppointmentModel

logger = logging.getLogger(__name__)


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """SQLAlchemy implementation of appointment repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> list[Appointment]:
        result = await self.session.execute(select(AppointmentModel).order_by(AppointmentModel.id))
        models = result.scalars().all()
        return [self._to_entity(m) for m in models]

    async def find_by_id(self, appointment_id: int) -> Appointment | None:
        result = await self.session.execute(select(AppointmentModel).where(AppointmentModel.id == appointment_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, appointment: Appointment) -> Appointment:
        """Save or update appointment."""
        model = None
        if appointment.id:
            result = await self.session.execute(
                select(AppointmentModel).where(AppointmentModel.id == appointment.id)
            )
            model = result.scalar_one_or_none()

        if model:
            # patient_name is a creation-time snapshot and stays as stored
            model.appointment_date = appointment.appointment_date
            model.treatment = appointment.treatment
        else:
            model = self._to_model(appointment)
            self.session.add(model)

        await self.session.commit()
        await self.session.refresh(model)

        return self._to_entity(model)

    async def delete(self, appointment_id: int) -> bool:
        result = await self.session.execute(select(AppointmentModel).where(AppointmentModel.id == appointment_id))
        model = result.scalar_one_or_none()
        if model:
            await self.session.delete(model)
            await self.session.commit()
            return True
        return False

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Convert model to entity."""
        return Appointment(
            id=model.id,
            appointment_date=model.appointment_date,
            treatment=model.treatment,
            patient_name=model.patient_name,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, appointment: Appointment) -> AppointmentModel:
        """Convert entity to model."""
        return AppointmentModel(
            id=appointment.id,
            appointment_date=appointment.appointment_date,
            treatment=appointment.treatment,
            patient_name=appointment.patient_name,
        )
