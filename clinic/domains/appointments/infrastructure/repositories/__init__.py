from clinic.domains.appointments.infrastructure.repositories.appointment_repository import (
    SQLAlchemyAppointmentRepository,
)

__all__ = ["SQLAlchemyAppointmentRepository"]
