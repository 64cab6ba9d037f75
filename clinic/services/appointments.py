from loguru import logger

from clinic.domain.exceptions import PatientNotFoundError, StoreUnavailableError
from clinic.domain.models import Appointment, AppointmentInput
from clinic.domain.results import Invalid, NotFound, Result, Success
from clinic.domain.validation import validate_appointment
from clinic.store.ports import AbstractEntityStore


class AppointmentService:
    """Appointment lifecycle. Every appointment belongs to exactly one existing patient."""

    def __init__(self, store: AbstractEntityStore) -> None:
        self._store = store

    async def create_appointment(self, data: AppointmentInput) -> Result[Appointment]:
        logger.info("Creating appointment")

        errors = validate_appointment(data, creating=True)
        if errors:
            logger.info("Appointment rejected: invalid fields {}", sorted(errors))
            return Invalid(errors)

        try:
            appointment = await self._store.create_appointment(data.to_draft())
        except PatientNotFoundError as exc:
            logger.warning("Cannot create appointment: patient {} not found", exc.patient_id)
            return NotFound("patient", exc.patient_id)
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Appointment creation failed: {exc}") from exc

        logger.info(
            "Appointment created: id={}, patient={}", appointment.id, appointment.patient_id
        )
        return Success(appointment)

    async def get_appointment(self, appointment_id: int) -> Result[Appointment]:
        logger.info("Fetching appointment {}", appointment_id)

        try:
            appointment = await self._store.get_appointment(appointment_id)
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Appointment lookup failed: {exc}") from exc

        if appointment is None:
            logger.warning("Appointment {} not found", appointment_id)
            return NotFound("appointment", appointment_id)
        return Success(appointment)

    async def update_appointment(
        self, appointment_id: int, data: AppointmentInput
    ) -> Result[Appointment]:
        """Replace an appointment's fields.

        ``status`` and ``patientId`` keep their stored values when omitted. Moving
        the appointment to a patient that does not exist yields ``NotFound``.
        """
        logger.info("Updating appointment {}", appointment_id)

        errors = validate_appointment(data, creating=False)
        if errors:
            logger.info(
                "Appointment {} update rejected: invalid fields {}", appointment_id, sorted(errors)
            )
            return Invalid(errors)

        try:
            appointment = await self._store.update_appointment(appointment_id, data.to_fields())
        except PatientNotFoundError as exc:
            logger.warning(
                "Cannot move appointment {}: patient {} not found", appointment_id, exc.patient_id
            )
            return NotFound("patient", exc.patient_id)
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Appointment update failed: {exc}") from exc

        if appointment is None:
            logger.warning("Appointment {} not found for update", appointment_id)
            return NotFound("appointment", appointment_id)

        logger.info("Appointment updated: id={}", appointment.id)
        return Success(appointment)

    async def delete_appointment(self, appointment_id: int) -> Result[None]:
        logger.info("Deleting appointment {}", appointment_id)

        try:
            deleted = await self._store.delete_appointment(appointment_id)
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Appointment deletion failed: {exc}") from exc

        if not deleted:
            logger.warning("Appointment {} not found for deletion", appointment_id)
            return NotFound("appointment", appointment_id)

        logger.info("Appointment deleted: id={}", appointment_id)
        return Success(None)

    async def list_appointments(self) -> list[Appointment]:
        logger.info("Listing appointments")

        try:
            appointments = await self._store.list_appointments()
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Appointment listing failed: {exc}") from exc

        logger.info("Found {} appointment(s)", len(appointments))
        return appointments
