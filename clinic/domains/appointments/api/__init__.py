from clinic.domains.appointments.api.routes import router

__all__ = ["router"]
