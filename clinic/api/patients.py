from fastapi import APIRouter, status

from clinic.api.responses import NOT_FOUND_RESPONSE, VALIDATION_ERROR_RESPONSE, to_response
from clinic.domain.models import Patient, PatientInput
from clinic.services.patients import PatientService


def build_patient_router(service: PatientService) -> APIRouter:
    """Build the ``/api/patients`` routes on top of ``service``."""
    router = APIRouter(prefix="/api/patients", tags=["Patients"])

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        response_model=Patient,
        responses=VALIDATION_ERROR_RESPONSE,
    )
    async def create_patient(payload: PatientInput):
        """Register a new patient."""
        return to_response(await service.create_patient(payload), status.HTTP_201_CREATED)

    @router.get("", response_model=list[Patient])
    async def list_patients():
        """List every patient with the ids of their appointments."""
        return await service.list_patients()

    @router.get("/{patient_id}", response_model=Patient, responses=NOT_FOUND_RESPONSE)
    async def get_patient(patient_id: int):
        return to_response(await service.get_patient(patient_id))

    @router.put(
        "/{patient_id}",
        response_model=Patient,
        responses={**VALIDATION_ERROR_RESPONSE, **NOT_FOUND_RESPONSE},
    )
    async def update_patient(patient_id: int, payload: PatientInput):
        """Replace a patient's details. Appointments are unaffected."""
        return to_response(await service.update_patient(patient_id, payload))

    @router.delete(
        "/{patient_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        responses=NOT_FOUND_RESPONSE,
    )
    async def delete_patient(patient_id: int):
        """Delete a patient and every appointment they own."""
        return to_response(await service.delete_patient(patient_id), status.HTTP_204_NO_CONTENT)

    return router
