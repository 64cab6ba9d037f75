from fastapi import APIRouter, status

from clinic.api.responses import NOT_FOUND_RESPONSE, VALIDATION_ERROR_RESPONSE, to_response
from clinic.domain.models import Appointment, AppointmentInput
from clinic.domain.results import Success
from clinic.notifications.dispatcher import ConfirmationDispatcher
from clinic.services.appointments import AppointmentService


def build_appointment_router(
    service: AppointmentService, dispatcher: ConfirmationDispatcher
) -> APIRouter:
    """Build the ``/api/appointments`` routes.

    A successful booking queues a confirmation on ``dispatcher``; the response
    does not wait for it.
    """
    router = APIRouter(prefix="/api/appointments", tags=["Appointments"])

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        response_model=Appointment,
        responses={
            **VALIDATION_ERROR_RESPONSE,
            status.HTTP_404_NOT_FOUND: {"description": "The referenced patient does not exist."},
        },
    )
    async def create_appointment(payload: AppointmentInput):
        """Book an appointment for an existing patient."""
        result = await service.create_appointment(payload)
        if isinstance(result, Success):
            dispatcher.submit(result.value)
        return to_response(result, status.HTTP_201_CREATED)

    @router.get("", response_model=list[Appointment])
    async def list_appointments():
        return await service.list_appointments()

    @router.get("/{appointment_id}", response_model=Appointment, responses=NOT_FOUND_RESPONSE)
    async def get_appointment(appointment_id: int):
        return to_response(await service.get_appointment(appointment_id))

    @router.put(
        "/{appointment_id}",
        response_model=Appointment,
        responses={**VALIDATION_ERROR_RESPONSE, **NOT_FOUND_RESPONSE},
    )
    async def update_appointment(appointment_id: int, payload: AppointmentInput):
        """Replace an appointment's details.

        ``status`` and ``patientId`` keep their current values when omitted.
        """
        return to_response(await service.update_appointment(appointment_id, payload))

    @router.delete(
        "/{appointment_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        responses=NOT_FOUND_RESPONSE,
    )
    async def delete_appointment(appointment_id: int):
        return to_response(
            await service.delete_appointment(appointment_id), status.HTTP_204_NO_CONTENT
        )

    return router
