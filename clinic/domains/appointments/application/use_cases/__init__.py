"""
Appointments Use Cases
"""

from clinic.domains.appointments.application.use_cases.create_appointment import CreateAppointmentUseCase

__all__ = ["CreateAppointmentUseCase"]
