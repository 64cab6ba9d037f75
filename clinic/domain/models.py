import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
)
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class AppointmentStatus(str, Enum):
    """Possible states of an appointment. Any transition between them is allowed."""

    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatientDraft(_CamelModel):
    """Validated patient fields, ready to be persisted."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str
    date_of_birth: dt.date
    contact_number: str


class Patient(PatientDraft):
    """A stored patient.

    ``appointments`` is derived from the appointments that reference this
    patient each time the record is read; it is never written directly.
    """

    id: int
    appointments: list[int] = Field(default_factory=list)


class AppointmentDraft(_CamelModel):
    """Validated appointment fields, ready to be persisted."""

    model_config = ConfigDict(frozen=True)

    appointment_date_time: dt.datetime
    reason_for_visit: str
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    patient_id: int


class Appointment(AppointmentDraft):
    """A stored appointment."""

    id: int


@dataclass(frozen=True)
class Unparsed:
    """A request value that could not be read as its field's type."""

    value: Any
    reason: str


def _keep_unparsed(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError as exc:
        return Unparsed(value, exc.errors()[0]["msg"])


# Parse failures are left for the field rules to report alongside every other violation.
Lenient = Annotated[T, WrapValidator(_keep_unparsed)]


class PatientInput(_CamelModel):
    """Patient payload as received from a client.

    Every field is optional at parse time, and a value of the wrong type is
    kept as ``Unparsed``, so that missing or unreadable values are reported by
    the validation rules together with any other violation.
    """

    first_name: Lenient[str | None] = None
    last_name: Lenient[str | None] = None
    date_of_birth: Lenient[dt.date | None] = None
    contact_number: Lenient[str | None] = None

    def to_draft(self) -> PatientDraft:
        return PatientDraft.model_validate(self.model_dump())


class AppointmentInput(_CamelModel):
    """Appointment payload as received from a client."""

    appointment_date_time: Lenient[dt.datetime | None] = None
    reason_for_visit: Lenient[str | None] = None
    status: Lenient[str | None] = None
    patient_id: Lenient[int | None] = None

    def to_draft(self) -> AppointmentDraft:
        return AppointmentDraft.model_validate(self.model_dump(exclude_none=True))

    def to_fields(self) -> dict[str, object]:
        """Return the supplied fields as store updates, keyed by attribute name."""
        fields: dict[str, object] = self.model_dump(exclude_none=True)
        if "status" in fields:
            fields["status"] = AppointmentStatus(fields["status"])
        return fields
