"""
Patient Service

CRUD operations for the patients service.
"""

import logging

from clinic.core.domain import DuplicateEntityException, EntityNotFoundException
from clinic.domains.patients.application.dto import CreatePatientRequest, PatientUpdateRequest
from clinic.domains.patients.application.ports import IPatientRepository
from clinic.domains.patients.domain.entities import Patient

logger = logging.getLogger(__name__)


class PatientService:
    """
    Application service for patient records.

    Depends on the repository interface only; the document number is the
    business key and must stay unique.
    """

    def __init__(self, patient_repository: IPatientRepository):
        self.patient_repo = patient_repository

    async def create_patient(self, request: CreatePatientRequest) -> Patient:
        """
        Register a new patient.

        Raises:
            ValidationException: If any field is missing or out of range
            DuplicateEntityException: If the document number is already registered
        """
        patient = Patient(
            document_number=request.document_number.strip() if request.document_number else "",
            first_name=request.first_name,
            last_name=request.last_name,
            birth_date=request.birth_date,
            phone=request.phone,
        )

        existing = await self.patient_repo.find_by_document_number(patient.document_number)
        if existing:
            raise DuplicateEntityException("Patient", "document_number", patient.document_number)

        saved = await self.patient_repo.save(patient)
        logger.info(f"Patient created: {saved.id} (document {saved.document_number})")
        return saved

    async def list_patients(self) -> list[Patient]:
        return await self.patient_repo.find_all()

    async def get_patient(self, patient_id: int) -> Patient:
        patient = await self.patient_repo.find_by_id(patient_id)
        if not patient:
            raise EntityNotFoundException(
                "Patient", patient_id, message=f"No se encontró el paciente con id {patient_id}"
            )
        return patient

    async def get_patient_by_document(self, document_number: str) -> Patient:
        patient = await self.patient_repo.find_by_document_number(document_number)
        if not patient:
            raise EntityNotFoundException(
                "Patient",
                document_number,
                message=f"No se encontró el paciente con documento {document_number}",
            )
        return patient

    async def update_patient(self, patient_id: int, request: PatientUpdateRequest) -> Patient:
        """Apply a partial update; blank fields are ignored."""
        patient = await self.get_patient(patient_id)
        patient.apply_update(
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
        )
        saved = await self.patient_repo.save(patient)
        logger.info(f"Patient updated: {saved.id}")
        return saved

    async def delete_patient(self, patient_id: int) -> None:
        deleted = await self.patient_repo.delete(patient_id)
        if not deleted:
            raise EntityNotFoundException(
                "Patient", patient_id, message=f"No se encontró el paciente con id {patient_id}"
            )
        logger.info(f"Patient deleted: {patient_id}")
