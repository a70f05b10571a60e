"""
Patients API Routes

FastAPI router for the patients service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from clinic.domains.patients.api.dependencies import get_patient_service
from clinic.domains.patients.api.schemas import MessageResponse, PatientCreate, PatientResponse, PatientUpdate
from clinic.domains.patients.application.dto import CreatePatientRequest, PatientUpdateRequest
from clinic.domains.patients.application.services import PatientService

router = APIRouter(prefix="/pacientes", tags=["Patients"])

PatientServiceDep = Annotated[PatientService, Depends(get_patient_service)]


@router.post("/crear", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def create_patient(request: PatientCreate, service: PatientServiceDep):
    """Register a new patient."""
    patient = await service.create_patient(
        CreatePatientRequest(
            document_number=request.document_number,
            first_name=request.first_name,
            last_name=request.last_name,
            birth_date=request.birth_date,
            phone=request.phone,
        )
    )
    return PatientResponse.from_entity(patient)


@router.get("/traer", response_model=list[PatientResponse])
async def list_patients(service: PatientServiceDep):
    """List every registered patient."""
    patients = await service.list_patients()
    if not patients:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No se encontraron registros")
    return [PatientResponse.from_entity(p) for p in patients]


@router.get("/traer/documento/{document_number}", response_model=PatientResponse)
async def get_patient_by_document(document_number: str, service: PatientServiceDep):
    """Find a patient by document number."""
    patient = await service.get_patient_by_document(document_number)
    return PatientResponse.from_entity(patient)


@router.get("/traer/{patient_id}", response_model=PatientResponse)
async def get_patient(patient_id: int, service: PatientServiceDep):
    """Get a patient by ID."""
    patient = await service.get_patient(patient_id)
    return PatientResponse.from_entity(patient)


@router.put("/editar/{patient_id}", response_model=PatientResponse)
async def update_patient(patient_id: int, request: PatientUpdate, service: PatientServiceDep):
    """Partially update a patient."""
    patient = await service.update_patient(
        patient_id,
        PatientUpdateRequest(
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
        ),
    )
    return PatientResponse.from_entity(patient)


@router.delete("/eliminar/{patient_id}", response_model=MessageResponse)
async def delete_patient(patient_id: int, service: PatientServiceDep):
    """Delete a patient."""
    await service.delete_patient(patient_id)
    return MessageResponse(message="Paciente eliminado correctamente")
