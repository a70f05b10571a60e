"""
Appointments Domain Value Objects
"""

from clinic.domains.appointments.domain.value_objects.patient_ref import PatientRef

__all__ = ["PatientRef"]
