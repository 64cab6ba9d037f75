class ClinicError(Exception):
    """Base exception for all clinic record errors."""


class PatientNotFoundError(ClinicError):
    """Raised by a store when an appointment references a patient that does not exist."""

    def __init__(self, patient_id: int) -> None:
        self.patient_id = patient_id
        super().__init__(f"Patient {patient_id} does not exist")


class StoreUnavailableError(ClinicError):
    """Raised when the entity store fails in a way the caller cannot recover from."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Entity store unavailable: {reason}")
