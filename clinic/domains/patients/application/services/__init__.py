from clinic.domains.patients.application.services.patient_service import PatientService

__all__ = ["PatientService"]
