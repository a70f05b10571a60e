"""
Shared pytest fixtures for all tests.

Provides in-memory SQLite sessions, patient fixtures matching the sample
data used across the suite, and mocks for the lookup and repositories.
"""

import os
from datetime import date
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from clinic.domains.appointments.domain.value_objects import PatientRef
from clinic.domains.appointments.infrastructure.persistence.sqlalchemy.models import AppointmentModel  # noqa: F401
from clinic.domains.patients.infrastructure.persistence.sqlalchemy.models import PatientModel  # noqa: F401
from clinic.models.db.base import Base

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def async_engine():
    """Create an in-memory SQLite engine with every table."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    session_factory = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


# ============================================================================
# DOMAIN FIXTURES
# ============================================================================


@pytest.fixture
def alejandra() -> PatientRef:
    """Patient resolved for document 123456789."""
    return PatientRef(
        id=1,
        document_number="123456789",
        first_name="Alejandra",
        last_name="Martinez",
        birth_date=date(1997, 6, 24),
        phone="3104698520",
    )


@pytest.fixture
def alejandra_payload() -> dict:
    """JSON body the patients service returns for document 123456789."""
    return {
        "idPaciente": 1,
        "numDocumento": "123456789",
        "nombre": "Alejandra",
        "apellido": "Martinez",
        "fechaNac": "1997-06-24",
        "telefono": "3104698520",
    }


# ============================================================================
# MOCK FIXTURES
# ============================================================================


@pytest.fixture
def mock_patient_lookup() -> AsyncMock:
    """Create a mock patient lookup."""
    mock = AsyncMock()
    mock.lookup_patient_by_document = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_appointment_repository() -> AsyncMock:
    """Create a mock appointment repository that echoes saves with an ID."""
    mock = AsyncMock()

    async def save(appointment):
        appointment.id = appointment.id or 1
        return appointment

    mock.save = AsyncMock(side_effect=save)
    mock.find_by_id = AsyncMock(return_value=None)
    mock.find_all = AsyncMock(return_value=[])
    mock.delete = AsyncMock(return_value=False)
    return mock


@pytest.fixture
def mock_patient_repository() -> AsyncMock:
    """Create a mock patient repository."""
    mock = AsyncMock()

    async def save(patient):
        patient.id = patient.id or 1
        return patient

    mock.save = AsyncMock(side_effect=save)
    mock.find_by_id = AsyncMock(return_value=None)
    mock.find_by_document_number = AsyncMock(return_value=None)
    mock.find_all = AsyncMock(return_value=[])
    mock.delete = AsyncMock(return_value=False)
    return mock
