"""
Patients Domain Entities
"""

from clinic.domains.patients.domain.entities.patient import Patient

__all__ = ["Patient"]
