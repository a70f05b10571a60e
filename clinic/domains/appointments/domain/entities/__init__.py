"""
Appointments Domain Entities
"""

from clinic.domains.appointments.domain.entities.appointment import Appointment

__all__ = ["Appointment"]
