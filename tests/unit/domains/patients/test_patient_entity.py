# ============================================================================
# Tests for Patient entity
# ============================================================================
"""Unit tests for Patient validation rules."""

from datetime import date, timedelta

import pytest

from clinic.core.domain import ValidationException
from clinic.domains.patients.domain.entities import Patient


def make_patient(**overrides) -> Patient:
    values = {
        "document_number": "123456789",
        "first_name": "Alejandra",
        "last_name": "Martinez",
        "birth_date": date(1997, 6, 24),
        "phone": "3104698520",
    }
    values.update(overrides)
    return Patient(**values)


class TestPatientValidation:
    """Tests for Patient.validate."""

    def test_valid_patient(self) -> None:
        """Should build a new patient without id."""
        patient = make_patient()
        assert patient.is_new() is True
        assert patient.full_name == "Alejandra Martinez"

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"document_number": ""}, "document_number"),
            ({"first_name": "  "}, "first_name"),
            ({"last_name": ""}, "last_name"),
            ({"first_name": "A" * 41}, "first_name"),
            ({"last_name": "B" * 41}, "last_name"),
            ({"birth_date": None}, "birth_date"),
            ({"phone": ""}, "phone"),
        ],
    )
    def test_rejects_invalid_fields(self, overrides: dict, field: str) -> None:
        """Should name the offending field."""
        with pytest.raises(ValidationException) as exc_info:
            make_patient(**overrides)

        assert exc_info.value.field == field

    def test_birth_date_must_be_in_the_past(self) -> None:
        """Should reject today as a birth date."""
        with pytest.raises(ValidationException):
            make_patient(birth_date=date.today())

    def test_yesterday_is_accepted(self) -> None:
        """Should accept any date before today."""
        assert make_patient(birth_date=date.today() - timedelta(days=1)).birth_date < date.today()


class TestPatientUpdate:
    """Tests for Patient.apply_update."""

    def test_rejects_overlong_update(self) -> None:
        """Should validate after applying changes."""
        patient = make_patient()

        with pytest.raises(ValidationException):
            patient.apply_update(last_name="B" * 41)
