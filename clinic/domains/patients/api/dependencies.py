"""
Patients API Dependencies

FastAPI dependencies for the patients service.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.database.async_db import get_async_db
from clinic.domains.patients.application.services import PatientService
from clinic.domains.patients.infrastructure.repositories import SQLAlchemyPatientRepository

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_async_db)]


def get_patient_service(db: DbSession) -> PatientService:
    """Get PatientService instance with database session."""
    return PatientService(SQLAlchemyPatientRepository(db))


__all__ = ["DbSession", "get_patient_service"]
