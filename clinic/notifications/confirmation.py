import asyncio

from loguru import logger

from clinic.domain.models import Appointment

# Placeholder for real delivery latency (email/SMS gateway round trip).
DEFAULT_DELAY_SECONDS: float = 2.0


class ConfirmationNotifier:
    """Sends the confirmation for a newly booked appointment.

    Delivery is not implemented: the notifier waits ``delay_seconds`` and logs.
    ``sent`` records the ids it has confirmed, in order.
    """

    def __init__(self, delay_seconds: float = DEFAULT_DELAY_SECONDS) -> None:
        self._delay = delay_seconds
        self.sent: list[int] = []

    async def __call__(self, appointment: Appointment) -> None:
        logger.debug("Preparing confirmation for appointment {}", appointment.id)
        await asyncio.sleep(self._delay)
        self.sent.append(appointment.id)
        logger.info(
            "Confirmation sent for appointment {} (patient {}, {})",
            appointment.id,
            appointment.patient_id,
            appointment.appointment_date_time.isoformat(),
        )
