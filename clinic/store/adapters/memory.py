import asyncio
import itertools
from typing import Any

from loguru import logger

from clinic.domain.exceptions import PatientNotFoundError
from clinic.domain.models import Appointment, AppointmentDraft, Patient, PatientDraft
from clinic.store.ports import AbstractEntityStore


class InMemoryEntityStore(AbstractEntityStore):
    """Entity store kept in process memory.

    Every mutation runs under a single lock and never awaits while holding
    partially applied state, so coroutines sharing the event loop observe each
    write, including a cascading patient delete, as one step.

    Ids come from per-kind counters and are never handed out twice, even after
    the record they identified has been deleted.
    """

    def __init__(self) -> None:
        self._patients: dict[int, PatientDraft] = {}
        self._appointments: dict[int, AppointmentDraft] = {}
        # patient id -> appointment ids, in creation order
        self._owned: dict[int, list[int]] = {}
        self._patient_ids = itertools.count(1)
        self._appointment_ids = itertools.count(1)
        self._lock = asyncio.Lock()
        self.closed: bool = False

    def _patient(self, patient_id: int) -> Patient | None:
        draft = self._patients.get(patient_id)
        if draft is None:
            return None
        return Patient(
            id=patient_id,
            appointments=list(self._owned.get(patient_id, [])),
            **draft.model_dump(),
        )

    def _appointment(self, appointment_id: int) -> Appointment | None:
        draft = self._appointments.get(appointment_id)
        if draft is None:
            return None
        return Appointment(id=appointment_id, **draft.model_dump())

    async def create_patient(self, draft: PatientDraft) -> Patient:
        async with self._lock:
            patient_id = next(self._patient_ids)
            self._patients[patient_id] = draft
            self._owned[patient_id] = []
            return Patient(id=patient_id, **draft.model_dump())

    async def get_patient(self, patient_id: int) -> Patient | None:
        return self._patient(patient_id)

    async def update_patient(self, patient_id: int, fields: dict[str, Any]) -> Patient | None:
        async with self._lock:
            current = self._patients.get(patient_id)
            if current is None:
                return None
            self._patients[patient_id] = current.model_copy(update=fields)
            return self._patient(patient_id)

    async def delete_patient(self, patient_id: int) -> bool:
        async with self._lock:
            if patient_id not in self._patients:
                return False
            owned = self._owned.pop(patient_id, [])
            for appointment_id in owned:
                del self._appointments[appointment_id]
            del self._patients[patient_id]
        logger.debug("Removed patient {} and {} appointment(s)", patient_id, len(owned))
        return True

    async def list_patients(self) -> list[Patient]:
        return [p for p in map(self._patient, sorted(self._patients)) if p is not None]

    async def create_appointment(self, draft: AppointmentDraft) -> Appointment:
        async with self._lock:
            if draft.patient_id not in self._patients:
                raise PatientNotFoundError(draft.patient_id)
            appointment_id = next(self._appointment_ids)
            self._appointments[appointment_id] = draft
            self._owned[draft.patient_id].append(appointment_id)
            return Appointment(id=appointment_id, **draft.model_dump())

    async def get_appointment(self, appointment_id: int) -> Appointment | None:
        return self._appointment(appointment_id)

    async def update_appointment(
        self, appointment_id: int, fields: dict[str, Any]
    ) -> Appointment | None:
        async with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                return None
            new_owner = fields.get("patient_id", current.patient_id)
            if new_owner not in self._patients:
                raise PatientNotFoundError(new_owner)
            if new_owner != current.patient_id:
                self._owned[current.patient_id].remove(appointment_id)
                self._owned[new_owner].append(appointment_id)
            self._appointments[appointment_id] = current.model_copy(update=fields)
            return self._appointment(appointment_id)

    async def delete_appointment(self, appointment_id: int) -> bool:
        async with self._lock:
            draft = self._appointments.pop(appointment_id, None)
            if draft is None:
                return False
            self._owned[draft.patient_id].remove(appointment_id)
            return True

    async def list_appointments(self) -> list[Appointment]:
        return [a for a in map(self._appointment, sorted(self._appointments)) if a is not None]

    async def count_appointments(self) -> int:
        return len(self._appointments)

    async def health_check(self) -> bool:
        return not self.closed

    async def close(self) -> None:
        self.closed = True
