# ============================================================================
# Integration tests for the patients service HTTP API
# ============================================================================
"""End-to-end tests for /pacientes through the FastAPI app.

Each test runs the real app (lifespan included) against its own SQLite
file, so tables are created exactly as in production startup.
"""

import pytest
from fastapi.testclient import TestClient

from clinic.config.settings import Settings
from clinic.core.app_factory import create_app
from clinic.domains.patients.infrastructure.repositories import SQLAlchemyPatientRepository

ALEJANDRA = {
    "numDocumento": "123456789",
    "nombre": "Alejandra",
    "apellido": "Martinez",
    "fechaNac": "1997-06-24",
    "telefono": "3104698520",
}


@pytest.fixture
def client(tmp_path):
    settings = Settings(
        _env_file=None,
        SERVICE_NAME="patients",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'patients.db'}",
    )
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.mark.integration
class TestPatientsApi:
    """Tests for the patients CRUD endpoints."""

    def test_create_and_fetch_by_document(self, client: TestClient) -> None:
        """Should create a patient and find it by document number."""
        created = client.post("/pacientes/crear", json=ALEJANDRA)

        assert created.status_code == 201
        body = created.json()
        assert body["idPaciente"] >= 1
        assert body["nombre"] == "Alejandra"

        fetched = client.get("/pacientes/traer/documento/123456789")
        assert fetched.status_code == 200
        assert fetched.json() == body

    def test_duplicate_document_conflicts(self, client: TestClient) -> None:
        """Should answer 409 for a second patient with the same document."""
        client.post("/pacientes/crear", json=ALEJANDRA)

        response = client.post("/pacientes/crear", json={**ALEJANDRA, "nombre": "Otra"})

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_ENTITY"

    def test_concurrent_duplicate_conflicts(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should answer 409, not 500, when the row appears after the existence check."""
        client.post("/pacientes/crear", json=ALEJANDRA)

        async def not_yet_visible(self, document_number: str):
            return None

        monkeypatch.setattr(SQLAlchemyPatientRepository, "find_by_document_number", not_yet_visible)

        response = client.post("/pacientes/crear", json={**ALEJANDRA, "nombre": "Otra"})

        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_ENTITY"
        assert response.json()["details"]["value"] == ALEJANDRA["numDocumento"]

    def test_unknown_document_is_404(self, client: TestClient) -> None:
        """Should answer 404 for an unknown document number."""
        response = client.get("/pacientes/traer/documento/999")

        assert response.status_code == 404
        assert response.json()["code"] == "ENTITY_NOT_FOUND"

    def test_empty_list_is_404(self, client: TestClient) -> None:
        """Should answer 404 when there are no patients."""
        response = client.get("/pacientes/traer")

        assert response.status_code == 404
        assert response.json()["message"] == "No se encontraron registros"

    def test_list_patients(self, client: TestClient) -> None:
        """Should list created patients."""
        client.post("/pacientes/crear", json=ALEJANDRA)
        client.post("/pacientes/crear", json={**ALEJANDRA, "numDocumento": "555"})

        response = client.get("/pacientes/traer")

        assert response.status_code == 200
        assert [p["numDocumento"] for p in response.json()] == ["123456789", "555"]

    def test_missing_field_is_400(self, client: TestClient) -> None:
        """Should reject a body without required fields."""
        payload = {k: v for k, v in ALEJANDRA.items() if k != "telefono"}

        response = client.post("/pacientes/crear", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["field"].endswith("telefono")

    def test_future_birth_date_is_400(self, client: TestClient) -> None:
        """Should enforce domain validation on create."""
        response = client.post("/pacientes/crear", json={**ALEJANDRA, "fechaNac": "2999-01-01"})

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "birth_date"

    def test_update_patient(self, client: TestClient) -> None:
        """Should apply a partial update and keep other fields."""
        patient_id = client.post("/pacientes/crear", json=ALEJANDRA).json()["idPaciente"]

        response = client.put(f"/pacientes/editar/{patient_id}", json={"telefono": "3000000000", "nombre": ""})

        assert response.status_code == 200
        assert response.json()["telefono"] == "3000000000"
        assert response.json()["nombre"] == "Alejandra"

    def test_delete_patient(self, client: TestClient) -> None:
        """Should delete once and then answer 404."""
        patient_id = client.post("/pacientes/crear", json=ALEJANDRA).json()["idPaciente"]

        first = client.delete(f"/pacientes/eliminar/{patient_id}")
        second = client.delete(f"/pacientes/eliminar/{patient_id}")

        assert first.status_code == 200
        assert first.json() == {"message": "Paciente eliminado correctamente"}
        assert second.status_code == 404

    def test_get_unknown_id(self, client: TestClient) -> None:
        """Should answer 404 with the id in the message."""
        response = client.get("/pacientes/traer/77")

        assert response.status_code == 404
        assert response.json()["message"] == "No se encontró el paciente con id 77"

    def test_health(self, client: TestClient) -> None:
        """Should report the service without a patients lookup section."""
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["service"] == "patients"
        assert "patients_service" not in body

    def test_unknown_route_uses_error_shape(self, client: TestClient) -> None:
        """Should wrap framework 404s in the standard error body."""
        response = client.get("/turnos/traer")

        assert response.status_code == 404
        assert response.json()["code"] == "HTTP_404"
