# ============================================================================
# Tests for AppointmentService
# ============================================================================
"""Unit tests for appointment read, update and delete operations."""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from clinic.core.domain import EntityNotFoundException, ValidationException
from clinic.domains.appointments.application.dto import AppointmentUpdateRequest
from clinic.domains.appointments.application.services import AppointmentService
from clinic.domains.appointments.domain.entities import Appointment


@pytest.fixture
def appointment() -> Appointment:
    return Appointment(
        id=7,
        appointment_date=date(2025, 10, 20),
        treatment="Medicina General",
        patient_name="Alejandra Martinez",
    )


@pytest.fixture
def service(mock_appointment_repository: AsyncMock) -> AppointmentService:
    return AppointmentService(mock_appointment_repository)


class TestAppointmentServiceQueries:
    """Tests for list and get."""

    @pytest.mark.asyncio
    async def test_list_appointments(
        self, service: AppointmentService, mock_appointment_repository: AsyncMock, appointment: Appointment
    ) -> None:
        """Should return every stored appointment."""
        mock_appointment_repository.find_all.return_value = [appointment]

        assert await service.list_appointments() == [appointment]

    @pytest.mark.asyncio
    async def test_get_missing_appointment(self, service: AppointmentService) -> None:
        """Should raise EntityNotFoundException with the id in the message."""
        with pytest.raises(EntityNotFoundException) as exc_info:
            await service.get_appointment(42)

        assert exc_info.value.message == "No se encontró el turno con id 42"


class TestAppointmentServiceUpdate:
    """Tests for partial updates."""

    @pytest.mark.asyncio
    async def test_updates_date_and_treatment(
        self, service: AppointmentService, mock_appointment_repository: AsyncMock, appointment: Appointment
    ) -> None:
        """Should apply provided fields and keep the patient name."""
        mock_appointment_repository.find_by_id.return_value = appointment

        updated = await service.update_appointment(
            7, AppointmentUpdateRequest(appointment_date=date(2025, 11, 3), treatment="Control")
        )

        assert updated.appointment_date == date(2025, 11, 3)
        assert updated.treatment == "Control"
        assert updated.patient_name == "Alejandra Martinez"
        mock_appointment_repository.save.assert_awaited_once_with(appointment)

    @pytest.mark.asyncio
    async def test_blank_values_leave_fields_unchanged(
        self, service: AppointmentService, mock_appointment_repository: AsyncMock, appointment: Appointment
    ) -> None:
        """Should ignore None and blank values."""
        mock_appointment_repository.find_by_id.return_value = appointment

        updated = await service.update_appointment(7, AppointmentUpdateRequest(treatment="  "))

        assert updated.appointment_date == date(2025, 10, 20)
        assert updated.treatment == "Medicina General"

    @pytest.mark.asyncio
    async def test_rejects_overlong_treatment(
        self, service: AppointmentService, mock_appointment_repository: AsyncMock, appointment: Appointment
    ) -> None:
        """Should validate the updated entity before saving."""
        mock_appointment_repository.find_by_id.return_value = appointment

        with pytest.raises(ValidationException):
            await service.update_appointment(7, AppointmentUpdateRequest(treatment="x" * 61))

        mock_appointment_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_missing_appointment(
        self, service: AppointmentService, mock_appointment_repository: AsyncMock
    ) -> None:
        """Should raise EntityNotFoundException without saving."""
        with pytest.raises(EntityNotFoundException):
            await service.update_appointment(42, AppointmentUpdateRequest(treatment="Control"))

        mock_appointment_repository.save.assert_not_awaited()


class TestAppointmentServiceDelete:
    """Tests for delete."""

    @pytest.mark.asyncio
    async def test_deletes_existing(self, service: AppointmentService, mock_appointment_repository: AsyncMock) -> None:
        """Should delegate to the repository."""
        mock_appointment_repository.delete.return_value = True

        await service.delete_appointment(7)

        mock_appointment_repository.delete.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    async def test_delete_missing(self, service: AppointmentService) -> None:
        """Should raise EntityNotFoundException when nothing was deleted."""
        with pytest.raises(EntityNotFoundException):
            await service.delete_appointment(42)
