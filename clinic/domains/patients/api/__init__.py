from clinic.domains.patients.api.routes import router

__all__ = ["router"]
