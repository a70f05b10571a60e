# ============================================================================
# Tests for SQLAlchemy repositories
# ============================================================================
"""Repository tests against an in-memory SQLite database.

Each test gets a fresh schema from the ``db_session`` fixture.
"""

from datetime import date

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from clinic.core.domain import DuplicateEntityException
from clinic.domains.appointments.domain.entities import Appointment
from clinic.domains.appointments.infrastructure.repositories import SQLAlchemyAppointmentRepository
from clinic.domains.patients.domain.entities import Patient
from clinic.domains.patients.infrastructure.repositories import SQLAlchemyPatientRepository
from clinic.models.db.base import utcnow


def make_patient(document_number: str = "123456789", first_name: str = "Alejandra") -> Patient:
    return Patient(
        document_number=document_number,
        first_name=first_name,
        last_name="Martinez",
        birth_date=date(1997, 6, 24),
        phone="3104698520",
    )


def make_appointment(treatment: str = "Medicina General") -> Appointment:
    return Appointment(
        appointment_date=date(2025, 10, 20),
        treatment=treatment,
        patient_name="Alejandra Martinez",
    )


class TestSQLAlchemyPatientRepository:
    """Tests for SQLAlchemyPatientRepository."""

    @pytest.mark.asyncio
    async def test_save_assigns_id(self, db_session: AsyncSession) -> None:
        """Should insert a new patient and assign its id."""
        repo = SQLAlchemyPatientRepository(db_session)

        saved = await repo.save(make_patient())

        assert saved.id is not None
        assert saved.birth_date == date(1997, 6, 24)

    @pytest.mark.asyncio
    async def test_find_by_document_number(self, db_session: AsyncSession) -> None:
        """Should find a patient by its business key."""
        repo = SQLAlchemyPatientRepository(db_session)
        saved = await repo.save(make_patient())

        found = await repo.find_by_document_number("123456789")

        assert found == saved
        assert await repo.find_by_document_number("999") is None

    @pytest.mark.asyncio
    async def test_find_all_in_id_order(self, db_session: AsyncSession) -> None:
        """Should list patients ordered by id."""
        repo = SQLAlchemyPatientRepository(db_session)
        first = await repo.save(make_patient("1"))
        second = await repo.save(make_patient("2"))

        assert [p.id for p in await repo.find_all()] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_update_keeps_document_number(self, db_session: AsyncSession) -> None:
        """Should update names and phone but not the document number."""
        repo = SQLAlchemyPatientRepository(db_session)
        saved = await repo.save(make_patient())
        saved.first_name = "Sofia"
        saved.document_number = "000"

        await repo.save(saved)
        reloaded = await repo.find_by_id(saved.id)

        assert reloaded.first_name == "Sofia"
        assert reloaded.document_number == "123456789"

    @pytest.mark.asyncio
    async def test_document_number_is_unique(self, db_session: AsyncSession) -> None:
        """Should turn the unique violation into DuplicateEntityException and roll back."""
        repo = SQLAlchemyPatientRepository(db_session)
        await repo.save(make_patient())

        with pytest.raises(DuplicateEntityException) as exc_info:
            await repo.save(make_patient(first_name="Otra"))

        assert exc_info.value.code == "DUPLICATE_ENTITY"
        assert exc_info.value.value == "123456789"
        # the session is usable again after the rollback
        patients = await repo.find_all()
        assert [p.first_name for p in patients] == ["Alejandra"]

    @pytest.mark.asyncio
    async def test_delete(self, db_session: AsyncSession) -> None:
        """Should report whether a row was deleted."""
        repo = SQLAlchemyPatientRepository(db_session)
        saved = await repo.save(make_patient())

        assert await repo.delete(saved.id) is True
        assert await repo.delete(saved.id) is False
        assert await repo.find_by_id(saved.id) is None


class TestSQLAlchemyAppointmentRepository:
    """Tests for SQLAlchemyAppointmentRepository."""

    @pytest.mark.asyncio
    async def test_save_and_find(self, db_session: AsyncSession) -> None:
        """Should round-trip an appointment."""
        repo = SQLAlchemyAppointmentRepository(db_session)

        saved = await repo.save(make_appointment())
        found = await repo.find_by_id(saved.id)

        assert found.appointment_date == date(2025, 10, 20)
        assert found.treatment == "Medicina General"
        assert found.patient_name == "Alejandra Martinez"

    @pytest.mark.asyncio
    async def test_update_keeps_patient_name(self, db_session: AsyncSession) -> None:
        """Should never rewrite the patient name snapshot."""
        repo = SQLAlchemyAppointmentRepository(db_session)
        saved = await repo.save(make_appointment())
        saved.treatment = "Control"
        saved.patient_name = "Otro Paciente"

        updated = await repo.save(saved)

        assert updated.treatment == "Control"
        assert updated.patient_name == "Alejandra Martinez"

    @pytest.mark.asyncio
    async def test_find_all_and_delete(self, db_session: AsyncSession) -> None:
        """Should list stored appointments and delete by id."""
        repo = SQLAlchemyAppointmentRepository(db_session)
        first = await repo.save(make_appointment())
        await repo.save(make_appointment("Odontología"))

        assert len(await repo.find_all()) == 2
        assert await repo.delete(first.id) is True
        assert [a.treatment for a in await repo.find_all()] == ["Odontología"]
        assert await repo.delete(999) is False


class TestSchema:
    """Tests for the tables built from the shared metadata."""

    @pytest.mark.asyncio
    async def test_constraint_names_follow_convention(self, async_engine: AsyncEngine) -> None:
        """Should name the document number constraint and the date index predictably."""
        async with async_engine.connect() as conn:
            unique = await conn.run_sync(lambda c: inspect(c).get_unique_constraints("pacientes"))
            indexes = await conn.run_sync(lambda c: inspect(c).get_indexes("turnos"))

        assert [(u["name"], u["column_names"]) for u in unique] == [
            ("uq_pacientes_document_number", ["document_number"])
        ]
        assert "ix_turnos_appointment_date" in {index["name"] for index in indexes}

    def test_utcnow_is_timezone_aware(self) -> None:
        assert utcnow().utcoffset().total_seconds() == 0
