"""
Appointments Application DTOs
"""

from dataclasses import dataclass
from datetime import date


@dataclass
class CreateAppointmentRequest:
    """Request to book an appointment for the patient with the given document"""

    appointment_date: date | None
    treatment: str | None
    document_number: str | None


@dataclass
class AppointmentUpdateRequest:
    """Partial update of an appointment; None or blank means unchanged"""

    appointment_date: date | None = None
    treatment: str | None = None
