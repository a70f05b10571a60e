"""
Patients Application DTOs
"""

from dataclasses import dataclass
from datetime import date


@dataclass
class CreatePatientRequest:
    """Request to register a patient"""

    document_number: str
    first_name: str
    last_name: str
    birth_date: date
    phone: str


@dataclass
class PatientUpdateRequest:
    """Partial update of a patient; None or blank means unchanged"""

    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
