"""
Appointment Entity for Appointments Domain

Represents a booked appointment. The patient's name is a snapshot taken
when the appointment is created.
"""

from dataclasses import dataclass
from datetime import date

from clinic.core.domain import Entity, ValidationException
from clinic.domains.appointments.domain.value_objects import PatientRef

TREATMENT_MAX_LENGTH = 60
PATIENT_NAME_MAX_LENGTH = 40


@dataclass(eq=False)
class Appointment(Entity[int]):
    """
    Appointment entity.

    Example:
        ```python
        appointment = Appointment.for_patient(
            patient=patient_ref,
            appointment_date=date(2025, 10, 20),
            treatment="Medicina General",
        )
        ```
    """

    appointment_date: date | None = None
    treatment: str = ""
    patient_name: str = ""

    def __post_init__(self) -> None:
        """Validate appointment after initialization."""
        self.validate()

    def validate(self) -> None:
        if self.appointment_date is None:
            raise ValidationException("La fecha es obligatoria", field="appointment_date")
        if not self.treatment or not self.treatment.strip():
            raise ValidationException("Indicar el tratamiento es obligatorio", field="treatment")
        if len(self.treatment) > TREATMENT_MAX_LENGTH:
            raise ValidationException(
                f"El tratamiento no puede superar los {TREATMENT_MAX_LENGTH} caracteres", field="treatment"
            )
        if not self.patient_name or not self.patient_name.strip():
            raise ValidationException("El nombre del paciente es obligatorio", field="patient_name")
        if len(self.patient_name) > PATIENT_NAME_MAX_LENGTH:
            raise ValidationException(
                f"El nombre del paciente no puede superar los {PATIENT_NAME_MAX_LENGTH} caracteres",
                field="patient_name",
            )

    @classmethod
    def for_patient(cls, patient: PatientRef, appointment_date: date, treatment: str) -> "Appointment":
        """Create a new appointment for a resolved patient."""
        return cls(appointment_date=appointment_date, treatment=treatment.strip(), patient_name=patient.full_name)

    def apply_update(self, appointment_date: date | None = None, treatment: str | None = None) -> None:
        """Apply a partial update; None or blank values leave the field unchanged."""
        if appointment_date is not None:
            self.appointment_date = appointment_date
        if treatment and treatment.strip():
            self.treatment = treatment.strip()
        self.validate()
        self.touch()
