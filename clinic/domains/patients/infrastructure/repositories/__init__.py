from clinic.domains.patients.infrastructure.repositories.patient_repository import SQLAlchemyPatientRepository

__all__ = ["SQLAlchemyPatientRepository"]
