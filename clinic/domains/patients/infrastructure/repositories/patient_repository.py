"""
Patient Repository Implementation

SQLAlchemy implementation of IPatientRepository.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.core.domain import DuplicateEntityException
from clinic.domains.patients.application.ports import IPatientRepository
from clinic.domains.patients.domain.entities import Patient
from clinic.domains.patients.infrastructure.persistence.sqlalchemy.models import PatientModel

logger = logging.getLogger(__name__)


class SQLAlchemyPatientRepository(IPatientRepository):
    """
    SQLAlchemy implementation of patient repository.

    Handles all patient data persistence operations.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_all(self) -> list[Patient]:
        result = await self.session.execute(select(PatientModel).order_by(PatientModel.id))
        models = result.scalars().all()
        return [self._to_entity(m) for m in models]

    async def find_by_id(self, patient_id: int) -> Patient | None:
        """Find patient by ID."""
        result = await self.session.execute(select(PatientModel).where(PatientModel.id == patient_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_document_number(self, document_number: str) -> Patient | None:
        """Find patient by document number."""
        result = await self.session.execute(
            select(PatientModel).where(PatientModel.document_number == document_number)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def save(self, patient: Patient) -> Patient:
        """Save or update patient."""
        model = None
        if patient.id:
            result = await self.session.execute(select(PatientModel).where(PatientModel.id == patient.id))
            model = result.scalar_one_or_none()

        if model:
            self._update_model(model, patient)
        else:
            model = self._to_model(patient)
            self.session.add(model)

        try:
            await self.session.commit()
        except IntegrityError as e:
            # Another request stored the same document number first
            await self.session.rollback()
            logger.info(f"Duplicate document number on save: {patient.document_number}")
            raise DuplicateEntityException("Patient", "document_number", patient.document_number) from e
        await self.session.refresh(model)

        return self._to_entity(model)

    async def delete(self, patient_id: int) -> bool:
        """Delete patient."""
        result = await self.session.execute(select(PatientModel).where(PatientModel.id == patient_id))
        model = result.scalar_one_or_none()
        if model:
            await self.session.delete(model)
            await self.session.commit()
            return True
        return False

    def _to_entity(self, model: PatientModel) -> Patient:
        """Convert model to entity."""
        return Patient(
            id=model.id,
            document_number=model.document_number,
            first_name=model.first_name,
            last_name=model.last_name,
            birth_date=model.birth_date,
            phone=model.phone,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, patient: Patient) -> PatientModel:
        """Convert entity to model."""
        return PatientModel(
            id=patient.id,
            document_number=patient.document_number,
            first_name=patient.first_name,
            last_name=patient.last_name,
            birth_date=patient.birth_date,
            phone=patient.phone,
        )

    def _update_model(self, model: PatientModel, patient: Patient) -> None:
        """Update model from entity."""
        model.first_name = patient.first_name
        model.last_name = patient.last_name
        model.phone = patient.phone
