from abc import ABC, abstractmethod
from typing import Any

from clinic.domain.models import Appointment, AppointmentDraft, Patient, PatientDraft


class AbstractEntityStore(ABC):
    """Persistence for patients and the appointments they own.

    Lookups by id signal a missing record by returning ``None`` (or ``False``
    for deletes). Anything else that goes wrong is raised.
    """

    @abstractmethod
    async def create_patient(self, draft: PatientDraft) -> Patient:
        """Persist a new patient and return it with its assigned id."""

    @abstractmethod
    async def get_patient(self, patient_id: int) -> Patient | None:
        """Return the patient, with its current appointment ids, or None."""

    @abstractmethod
    async def update_patient(self, patient_id: int, fields: dict[str, Any]) -> Patient | None:
        """Replace the given scalar fields of a patient.

        Args:
            patient_id: The patient to update.
            fields: Attribute name to new value. ``id`` is never accepted.

        Returns:
            The updated patient, or None if it does not exist.
        """

    @abstractmethod
    async def delete_patient(self, patient_id: int) -> bool:
        """Delete a patient together with all of its appointments.

        The patient and its appointments disappear in one step: no reader can
        observe one without the other.

        Returns:
            True if the patient existed.
        """

    @abstractmethod
    async def list_patients(self) -> list[Patient]:
        """Return every patient, ordered by id."""

    @abstractmethod
    async def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        """Persist a new appointment.

        Raises:
            PatientNotFoundError: If ``draft.patient_id`` does not exist. Nothing
                is persisted in that case.
        """

    @abstractmethod
    async def get_appointment(self, appointment_id: int) -> Appointment | None:
        """Return the appointment, or None."""

    @abstractmethod
    async def update_appointment(
        self, appointment_id: int, fields: dict[str, Any]
    ) -> Appointment | None:
        """Replace the given scalar fields of an appointment.

        Returns:
            The updated appointment, or None if it does not exist.

        Raises:
            PatientNotFoundError: If ``fields`` moves the appointment to a
                patient that does not exist.
        """

    @abstractmethod
    async def delete_appointment(self, appointment_id: int) -> bool:
        """Delete an appointment. Returns True if it existed."""

    @abstractmethod
    async def list_appointments(self) -> list[Appointment]:
        """Return every appointment, ordered by id."""

    @abstractmethod
    async def count_appointments(self) -> int:
        """Return the number of stored appointments."""

    async def initialize(self) -> None:
        """Prepare the backend (create tables, open pools). No-op by default."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if the store is healthy, False otherwise.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release resources held by this store."""
