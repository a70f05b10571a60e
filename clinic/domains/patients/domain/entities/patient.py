"""
Patient Entity for Patients Domain

Represents a registered patient, identified by a unique document number.
"""

from dataclasses import dataclass
from datetime import date

from clinic.core.domain import Entity, ValidationException

NAME_MAX_LENGTH = 40


@dataclass(eq=False)
class Patient(Entity[int]):
    """
    Patient entity for the patients domain.

    Example:
        ```python
        patient = Patient(
            document_number="123456789",
            first_name="Alejandra",
            last_name="Martinez",
            birth_date=date(1997, 6, 24),
            phone="3104698520",
        )
        ```
    """

    document_number: str = ""
    first_name: str = ""
    last_name: str = ""
    birth_date: date | None = None
    phone: str = ""

    def __post_init__(self) -> None:
        """Validate patient after initialization."""
        self.validate()

    def validate(self) -> None:
        if not self.document_number or not self.document_number.strip():
            raise ValidationException("El número de documento es obligatorio", field="document_number")
        if not self.first_name or not self.first_name.strip():
            raise ValidationException("El nombre es obligatorio", field="first_name")
        if len(self.first_name) > NAME_MAX_LENGTH:
            raise ValidationException(
                f"El nombre no puede superar los {NAME_MAX_LENGTH} caracteres", field="first_name"
            )
        if not self.last_name or not self.last_name.strip():
            raise ValidationException("El apellido es obligatorio", field="last_name")
        if len(self.last_name) > NAME_MAX_LENGTH:
            raise ValidationException(
                f"El apellido no puede superar los {NAME_MAX_LENGTH} caracteres", field="last_name"
            )
        if self.birth_date is None:
            raise ValidationException("La fecha de nacimiento es obligatoria", field="birth_date")
        if self.birth_date >= date.today():
            raise ValidationException(
                "La fecha de nacimiento debe ser anterior a la fecha actual", field="birth_date"
            )
        if not self.phone or not self.phone.strip():
            raise ValidationException("El teléfono es obligatorio", field="phone")

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"

    def apply_update(
        self,
        first_name: str | None = None,
        last_name: str | None = None,
        phone: str | None = None,
    ) -> None:
        """Apply a partial update; None or blank values leave the field unchanged."""
        if first_name and first_name.strip():
            self.first_name = first_name
        if last_name and last_name.strip():
            self.last_name = last_name
        if phone and phone.strip():
            self.phone = phone
        self.validate()
        self.touch()
