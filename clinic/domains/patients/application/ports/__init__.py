"""
Patients Application Ports
"""

from clinic.domains.patients.application.ports.patient_repository import IPatientRepository

__all__ = ["IPatientRepository"]
