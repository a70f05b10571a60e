from clinic.domains.appointments.infrastructure.external.patients_client import (
    PatientLookupError,
    PatientsServiceClient,
    TransientLookupError,
)
from clinic.domains.appointments.infrastructure.external.resilient_lookup import ResilientPatientLookup

__all__ = [
    "PatientLookupError",
    "PatientsServiceClient",
    "ResilientPatientLookup",
    "TransientLookupError",
]
