"""
Application factory for FastAPI.

Builds the app for the service selected by SERVICE_NAME: patients or
appointments share middleware, error handling and health checks, and
differ only in their routers.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request

from clinic.api.exception_handlers import register_exception_handlers
from clinic.api.middleware.logging_middleware import RequestLoggingMiddleware
from clinic.config.settings import Settings, get_settings
from clinic.core.infrastructure import CircuitState
from clinic.core.lifecycle import lifespan
from clinic.domains.appointments.api import router as appointments_router
from clinic.domains.patients.api import router as patients_router

logger = logging.getLogger(__name__)


class AppFactory:
    """
    Factory for creating and configuring FastAPI applications.

    Each configuration step is handled by a dedicated method.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize app factory.

        Args:
            settings: Application settings (uses default if not provided)
        """
        self._settings = settings or get_settings()

    def create_app(self) -> FastAPI:
        """
        Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application instance.
        """
        app = self._create_base_app()

        self._configure_middleware(app)
        self._configure_exception_handlers(app)
        self._configure_routes(app)
        self._configure_health_endpoint(app)

        logger.info(f"Application created: {self._settings.PROJECT_NAME} ({self._settings.SERVICE_NAME})")
        return app

    def _create_base_app(self) -> FastAPI:
        """Create the base FastAPI application with lifespan."""
        app = FastAPI(
            title=f"{self._settings.PROJECT_NAME} - {self._settings.SERVICE_NAME}",
            description=self._settings.PROJECT_DESCRIPTION,
            version=self._settings.VERSION,
            docs_url="/docs" if self._settings.DEBUG else None,
            redoc_url="/redoc" if self._settings.DEBUG else None,
            lifespan=lifespan,
        )
        app.state.settings = self._settings
        return app

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        # Request logging middleware (binds the correlation id)
        app.add_middleware(RequestLoggingMiddleware)

    def _configure_exception_handlers(self, app: FastAPI) -> None:
        """Register exception handlers."""
        register_exception_handlers(app)

    def _configure_routes(self, app: FastAPI) -> None:
        """Mount the routers of the configured service."""
        # One service per process
        if self._settings.SERVICE_NAME == "patients":
            app.include_router(patients_router, prefix=self._settings.API_PREFIX)
        else:
            app.include_router(appointments_router, prefix=self._settings.API_PREFIX)

        logger.info(f"Routes configured for {self._settings.SERVICE_NAME} service")

    def _configure_health_endpoint(self, app: FastAPI) -> None:
        """Add health check endpoint."""
        settings = self._settings

        @app.get("/health", tags=["health"])
        async def health_check(request: Request) -> dict[str, Any]:
            """
            Verify application health status.

            For the appointments service, includes the state of the patients
            service circuit breaker.
            """
            body: dict[str, Any] = {
                "status": "ok",
                "service": settings.SERVICE_NAME,
                "environment": settings.ENVIRONMENT,
            }

            patient_lookup = getattr(request.app.state, "patient_lookup", None)
            get_status = getattr(patient_lookup, "get_status", None)
            if get_status is not None:
                lookup_status = get_status()
                body["patients_service"] = lookup_status
                if lookup_status["circuit_breaker"]["state"] != CircuitState.CLOSED.value:
                    body["status"] = "degraded"

            return body


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create FastAPI application using the factory.

    Args:
        settings: Optional settings override

    Returns:
        Configured FastAPI application
    """
    factory = AppFactory(settings)
    return factory.create_app()
