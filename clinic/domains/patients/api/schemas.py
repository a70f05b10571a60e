"""
Patients API Schemas

Pydantic schemas for API request/response validation. Field aliases are
the JSON names the patients service has always exposed; snake_case names
are accepted on input too.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from clinic.domains.patients.domain.entities import Patient


class PatientCreate(BaseModel):
    """Patient creation request schema."""

    model_config = ConfigDict(populate_by_name=True)

    document_number: str = Field(..., alias="numDocumento")
    first_name: str = Field(..., alias="nombre")
    last_name: str = Field(..., alias="apellido")
    birth_date: date = Field(..., alias="fechaNac")
    phone: str = Field(..., alias="telefono")


class PatientUpdate(BaseModel):
    """Partial patient update schema. Missing or blank fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(default=None, alias="nombre")
    last_name: str | None = Field(default=None, alias="apellido")
    phone: str | None = Field(default=None, alias="telefono")


class PatientResponse(BaseModel):
    """Patient response schema."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., alias="idPaciente")
    document_number: str = Field(..., alias="numDocumento")
    first_name: str = Field(..., alias="nombre")
    last_name: str = Field(..., alias="apellido")
    birth_date: date = Field(..., alias="fechaNac")
    phone: str = Field(..., alias="telefono")

    @classmethod
    def from_entity(cls, patient: Patient) -> "PatientResponse":
        return cls(
            id=patient.id or 0,
            document_number=patient.document_number,
            first_name=patient.first_name,
            last_name=patient.last_name,
            birth_date=patient.birth_date,
            phone=patient.phone,
        )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
