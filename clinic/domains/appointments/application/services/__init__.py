from clinic.domains.appointments.application.services.appointment_service import AppointmentService

__all__ = ["AppointmentService"]
