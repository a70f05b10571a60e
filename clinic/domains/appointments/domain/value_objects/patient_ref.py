"""
Patient reference as seen by the appointments service.

A transient, read-only copy of the patient data returned by the patients
service. It is never persisted; only the full name is copied into the
appointment.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from clinic.core.domain import ValueObject


@dataclass(frozen=True)
class PatientRef(ValueObject):
    """Patient data resolved from the patients service."""

    document_number: str
    first_name: str
    last_name: str
    id: int | None = None
    birth_date: date | None = None
    phone: str | None = None

    def _validate(self) -> None:
        if not self.document_number or not self.document_number.strip():
            raise ValueError("Patient reference requires a document number")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PatientRef":
        """
        Build from the patients service JSON body.

        Raises:
            ValueError: If the payload lacks the document number or names,
                or carries an unparseable birth date
        """
        document_number = payload.get("numDocumento", payload.get("document_number"))
        first_name = payload.get("nombre", payload.get("first_name"))
        last_name = payload.get("apellido", payload.get("last_name"))
        if not isinstance(document_number, str) or not isinstance(first_name, str) or not isinstance(last_name, str):
            raise ValueError("Patient payload is missing numDocumento, nombre or apellido")

        birth_date = payload.get("fechaNac", payload.get("birth_date"))
        if isinstance(birth_date, str):
            birth_date = date.fromisoformat(birth_date)

        patient_id = payload.get("idPaciente", payload.get("id"))
        phone = payload.get("telefono", payload.get("phone"))
        return cls(
            document_number=document_number,
            first_name=first_name,
            last_name=last_name,
            id=int(patient_id) if patient_id is not None else None,
            birth_date=birth_date,
            phone=str(phone) if phone is not None else None,
        )
