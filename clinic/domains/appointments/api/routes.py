"""
Appointments API Routes

FastAPI router for the appointments service.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from clinic.domains.appointments.api.dependencies import get_appointment_service, get_create_appointment_use_case
from clinic.domains.appointments.api.schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    MessageResponse,
)
from clinic.domains.appointments.application.dto import AppointmentUpdateRequest, CreateAppointmentRequest
from clinic.domains.appointments.application.services import AppointmentService
from clinic.domains.appointments.application.use_cases import CreateAppointmentUseCase

router = APIRouter(prefix="/turnos", tags=["Appointments"])

# Type aliases for use case dependencies
CreateAppointmentUseCaseDep = Annotated[CreateAppointmentUseCase, Depends(get_create_appointment_use_case)]
AppointmentServiceDep = Annotated[AppointmentService, Depends(get_appointment_service)]


@router.post("/crear", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(request: AppointmentCreate, use_case: CreateAppointmentUseCaseDep):
    """Book an appointment for the patient with the given document number."""
    appointment = await use_case.execute(
        CreateAppointmentRequest(
            appointment_date=request.appointment_date,
            treatment=request.treatment,
            document_number=request.document_number,
        )
    )
    return AppointmentResponse.from_entity(appointment)


@router.get("/traer", response_model=list[AppointmentResponse])
async def list_appointments(service: AppointmentServiceDep):
    """List every appointment."""
    appointments = await service.list_appointments()
    if not appointments:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No se encontraron registros")
    return [AppointmentResponse.from_entity(a) for a in appointments]


@router.get("/traer/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: int, service: AppointmentServiceDep):
    """Get an appointment by ID."""
    appointment = await service.get_appointment(appointment_id)
    return AppointmentResponse.from_entity(appointment)


@router.put("/editar/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(appointment_id: int, request: AppointmentUpdate, service: AppointmentServiceDep):
    """Partially update an appointment."""
    appointment = await service.update_appointment(
        appointment_id,
        AppointmentUpdateRequest(
            appointment_date=request.appointment_date,
            treatment=request.treatment,
        ),
    )
    return AppointmentResponse.from_entity(appointment)


@router.delete("/eliminar/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(appointment_id: int, service: AppointmentServiceDep):
    """Delete an appointment."""
    await service.delete_appointment(appointment_id)
    return MessageResponse(message="Turno eliminado correctamente")
