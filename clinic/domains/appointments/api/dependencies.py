"""
Appointments API Dependencies

FastAPI dependencies for the appointments service.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.database.async_db import get_async_db
from clinic.domains.appointments.application.ports import IPatientLookup
from clinic.domains.appointments.application.services import AppointmentService
from clinic.domains.appointments.application.use_cases import CreateAppointmentUseCase
from clinic.domains.appointments.infrastructure.repositories import SQLAlchemyAppointmentRepository

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_async_db)]


def get_patient_lookup(request: Request) -> IPatientLookup:
    """Get the process-wide resilient patient lookup built at startup."""
    return request.app.state.patient_lookup


PatientLookupDep = Annotated[IPatientLookup, Depends(get_patient_lookup)]


def get_create_appointment_use_case(db: DbSession, patient_lookup: PatientLookupDep) -> CreateAppointmentUseCase:
    """Get CreateAppointmentUseCase instance with database session."""
    return CreateAppointmentUseCase(
        patient_lookup=patient_lookup,
        appointment_repository=SQLAlchemyAppointmentRepository(db),
    )


def get_appointment_service(db: DbSession) -> AppointmentService:
    """Get AppointmentService instance with database session."""
    return AppointmentService(SQLAlchemyAppointmentRepository(db))


__all__ = [
    "DbSession",
    "get_appointment_service",
    "get_create_appointment_use_case",
    "get_patient_lookup",
]
