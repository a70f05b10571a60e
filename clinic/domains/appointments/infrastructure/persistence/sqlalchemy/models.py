"""
Appointments SQLAlchemy Models
"""

from typing import Any

from sqlalchemy import Column, Date, Integer, String

from clinic.models.db.base import Base, TimestampMixin


class AppointmentModel(Base, TimestampMixin):
    """SQLAlchemy model for Appointment entity."""

    __tablename__ = "turnos"

    id = Column(Integer, primary_key=True, index=True)
    appointment_date = Column(Date, nullable=False, index=True)
    treatment = Column(String(60), nullable=False)
    # Snapshot of the patient's full name taken at creation time
    patient_name = Column(String(40), nullable=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "appointment_date": self.appointment_date.isoformat() if self.appointment_date else None,
            "treatment": self.treatment,
            "patient_name": self.patient_name,
        }
