"""
Appointments API Schemas

Pydantic schemas for API request/response validation. Field aliases are
the JSON names the appointments service has always exposed; snake_case
names are accepted on input too.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from clinic.domains.appointments.domain.entities import Appointment


class AppointmentCreate(BaseModel):
    """Appointment creation request schema."""

    model_config = ConfigDict(populate_by_name=True)

    appointment_date: date | None = Field(default=None, alias="fecha")
    treatment: str | None = Field(default=None, alias="tratamiento")
    document_number: str | None = Field(default=None, alias="numDocumento")


class AppointmentUpdate(BaseModel):
    """Partial appointment update schema. Missing or blank fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    appointment_date: date | None = Field(default=None, alias="fecha")
    treatment: str | None = Field(default=None, alias="tratamiento")


class AppointmentResponse(BaseModel):
    """Appointment response schema."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., alias="idTurno")
    appointment_date: date = Field(..., alias="fecha")
    treatment: str = Field(..., alias="tratamiento")
    patient_name: str = Field(..., alias="nombrePaciente")

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id or 0,
            appointment_date=appointment.appointment_date,
            treatment=appointment.treatment,
            patient_name=appointment.patient_name,
        )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
