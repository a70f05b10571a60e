"""
Create Appointment Use Case

Books an appointment for a patient identified by document number. The
patient is resolved through the patients service; only the full name is
copied into the appointment.
"""

import logging

from clinic.core.domain import PatientNotFoundException, ValidationException
from clinic.domains.appointments.application.dto import CreateAppointmentRequest
from clinic.domains.appointments.application.ports import IAppointmentRepository, IPatientLookup
from clinic.domains.appointments.domain.entities import Appointment

logger = logging.getLogger(__name__)


class CreateAppointmentUseCase:
    """
    Use case for creating appointments.

    The appointment is saved at most once, and only after the patient was
    resolved. Dependency failures raised by the lookup propagate untouched.
    """

    def __init__(
        self,
        patient_lookup: IPatientLookup,
        appointment_repository: IAppointmentRepository,
    ):
        """
        Initialize use case with dependencies.

        Args:
            patient_lookup: Resolves patients by document number
            appointment_repository: Repository for appointment data access
        """
        self.patient_lookup = patient_lookup
        self.appointment_repo = appointment_repository

    async def execute(self, request: CreateAppointmentRequest) -> Appointment:
        """
        Execute appointment creation.

        Args:
            request: Date, treatment and patient document number

        Returns:
            The persisted appointment

        Raises:
            ValidationException: If a required field is missing or blank
            PatientNotFoundException: If no patient has the document number
            DependencyUnavailableException: If the patients service cannot answer
        """
        # 1. Validate input before any remote call
        if request.appointment_date is None:
            raise ValidationException("La fecha es obligatoria", field="appointment_date")
        if not request.treatment or not request.treatment.strip():
            raise ValidationException("Indicar el tratamiento es obligatorio", field="treatment")
        if not request.document_number or not request.document_number.strip():
            raise ValidationException("El número de documento es obligatorio", field="document_number")

        document_number = request.document_number.strip()

        # 2. Resolve the patient
        patient = await self.patient_lookup.lookup_patient_by_document(document_number)
        if patient is None:
            logger.info(f"Appointment rejected: no patient with document {document_number}")
            raise PatientNotFoundException(document_number)

        # 3. Build and persist
        appointment = Appointment.for_patient(
            patient=patient,
            appointment_date=request.appointment_date,
            treatment=request.treatment,
        )
        saved = await self.appointment_repo.save(appointment)

        logger.info(
            f"Appointment created: {saved.id} for patient {saved.patient_name} "
            f"on {saved.appointment_date}"
        )
        return saved
