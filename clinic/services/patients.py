import datetime as dt
from typing import Callable

from loguru import logger

from clinic.domain.exceptions import StoreUnavailableError
from clinic.domain.models import Patient, PatientInput
from clinic.domain.results import Invalid, NotFound, Result, Success
from clinic.domain.validation import validate_patient
from clinic.store.ports import AbstractEntityStore


class PatientService:
    """Patient lifecycle: validates input, then delegates to the entity store.

    Validation failures and missing records come back as result values. Only an
    unexpected store failure is raised, as ``StoreUnavailableError``.
    """

    def __init__(
        self,
        store: AbstractEntityStore,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self._store = store
        self._today = today

    async def create_patient(self, data: PatientInput) -> Result[Patient]:
        logger.info("Creating patient")

        errors = validate_patient(data, self._today())
        if errors:
            logger.info("Patient rejected: invalid fields {}", sorted(errors))
            return Invalid(errors)

        try:
            patient = await self._store.create_patient(data.to_draft())
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Patient creation failed: {exc}") from exc

        logger.info("Patient created: id={}", patient.id)
        return Success(patient)

    async def get_patient(self, patient_id: int) -> Result[Patient]:
        logger.info("Fetching patient {}", patient_id)

        try:
            patient = await self._store.get_patient(patient_id)
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Patient lookup failed: {exc}") from exc

        if patient is None:
            logger.warning("Patient {} not found", patient_id)
            return NotFound("patient", patient_id)
        return Success(patient)

    async def update_patient(self, patient_id: int, data: PatientInput) -> Result[Patient]:
        logger.info("Updating patient {}", patient_id)

        errors = validate_patient(data, self._today())
        if errors:
            logger.info("Patient {} update rejected: invalid fields {}", patient_id, sorted(errors))
            return Invalid(errors)

        try:
            patient = await self._store.update_patient(patient_id, data.model_dump())
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Patient update failed: {exc}") from exc

        if patient is None:
            logger.warning("Patient {} not found for update", patient_id)
            return NotFound("patient", patient_id)

        logger.info("Patient updated: id={}", patient.id)
        return Success(patient)

    async def delete_patient(self, patient_id: int) -> Result[None]:
        logger.info("Deleting patient {}", patient_id)

        try:
            deleted = await self._store.delete_patient(patient_id)
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Patient deletion failed: {exc}") from exc

        if not deleted:
            logger.warning("Patient {} not found for deletion", patient_id)
            return NotFound("patient", patient_id)

        logger.info("Patient deleted: id={}", patient_id)
        return Success(None)

    async def list_patients(self) -> list[Patient]:
        logger.info("Listing patients")

        try:
            patients = await self._store.list_patients()
        except StoreUnavailableError:
            raise
        except Exception as exc:
            raise StoreUnavailableError(f"Patient listing failed: {exc}") from exc

        logger.info("Found {} patient(s)", len(patients))
        return patients
