"""
Patients SQLAlchemy Models
"""

from typing import Any

from sqlalchemy import Column, Date, Integer, String, UniqueConstraint

from clinic.models.db.base import Base, TimestampMixin


class PatientModel(Base, TimestampMixin):
    """SQLAlchemy model for Patient entity."""

    __tablename__ = "pacientes"
    __table_args__ = (UniqueConstraint("document_number"),)

    id = Column(Integer, primary_key=True, index=True)
    document_number = Column(String(20), nullable=False)
    first_name = Column(String(40), nullable=False)
    last_name = Column(String(40), nullable=False)
    birth_date = Column(Date, nullable=False)
    phone = Column(String(30), nullable=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "document_number": self.document_number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "phone": self.phone,
        }
