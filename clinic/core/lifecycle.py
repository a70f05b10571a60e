"""
Application lifecycle management using the FastAPI lifespan pattern.

Handles startup (tables, patients lookup chain) and graceful shutdown
(HTTP client, database pool).
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import Table

from clinic.config.settings import Settings, get_settings
from clinic.database.async_db import create_tables, dispose_engine, init_engine
from clinic.domains.appointments.infrastructure.external import ResilientPatientLookup
from clinic.domains.appointments.infrastructure.persistence.sqlalchemy.models import AppointmentModel
from clinic.domains.patients.infrastructure.persistence.sqlalchemy.models import PatientModel

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Manages application lifecycle events.

    Each process serves one service and only owns that service's tables.
    """

    def __init__(self, app: FastAPI, settings: Settings) -> None:
        self._app = app
        self._settings = settings
        self._initialized = False

    async def startup(self) -> None:
        """Execute startup tasks."""
        if self._initialized:
            logger.warning("Lifecycle already initialized, skipping startup")
            return

        logger.info(f"Starting {self._settings.SERVICE_NAME} service lifecycle...")

        # Database engine and this service's tables
        init_engine(self._settings)
        if self._settings.DB_CREATE_TABLES:
            await create_tables(tables=self._service_tables())

        # Patients lookup chain (appointments only)
        if self._settings.SERVICE_NAME == "appointments":
            self._initialize_patient_lookup()

        self._initialized = True
        logger.info("Application lifecycle startup completed")

    async def shutdown(self) -> None:
        """Execute shutdown tasks."""
        if not self._initialized:
            logger.warning("Lifecycle not initialized, skipping shutdown")
            return

        logger.info("Stopping application lifecycle...")

        patient_lookup = getattr(self._app.state, "patient_lookup", None)
        if isinstance(patient_lookup, ResilientPatientLookup):
            await patient_lookup.close()
            logger.info("Patients service client closed")

        # Close database connections
        await dispose_engine()

        self._initialized = False
        logger.info("Application lifecycle shutdown completed")

    def _service_tables(self) -> list[Table]:
        if self._settings.SERVICE_NAME == "patients":
            return [PatientModel.__table__]
        return [AppointmentModel.__table__]

    def _initialize_patient_lookup(self) -> None:
        """Build the process-wide lookup chain unless one was already provided."""
        if getattr(self._app.state, "patient_lookup", None) is not None:
            logger.info("Using preconfigured patient lookup")
            return

        self._app.state.patient_lookup = ResilientPatientLookup.from_settings(self._settings)
        logger.info(
            f"Patient lookup ready: {self._settings.PATIENTS_SERVICE_URL} "
            f"(retries={self._settings.PATIENTS_RETRY_MAX_ATTEMPTS}, "
            f"timeout={self._settings.PATIENTS_LOOKUP_TIMEOUT})"
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Args:
        app: FastAPI application instance

    Yields:
        None during application lifetime
    """
    settings = getattr(app.state, "settings", None) or get_settings()
    manager = LifecycleManager(app, settings)

    await manager.startup()
    try:
        yield
    finally:
        await manager.shutdown()
