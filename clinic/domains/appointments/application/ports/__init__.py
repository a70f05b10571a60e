"""
Appointments Application Ports
"""

from clinic.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from clinic.domains.appointments.application.ports.patient_lookup import IPatientLookup

__all__ = ["IAppointmentRepository", "IPatientLookup"]
