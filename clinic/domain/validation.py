"""Field rules for patients and appointments.

Each rule returns ``None`` when the value is acceptable, or a message
describing the problem. The entity validators run every rule and collect all
messages, keyed by the field's wire name, so a client sees every problem with
its request at once. A value of the wrong type reaches its rule as
``Unparsed`` and is reported the same way.
"""

import datetime as dt

from clinic.domain.models import AppointmentInput, AppointmentStatus, PatientInput, Unparsed

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50


def validate_name(value: str | Unparsed | None, field: str) -> str | None:
    if isinstance(value, Unparsed):
        return f"{field} must be text"
    if value is None or not value.strip():
        return f"{field} must not be blank"
    length = len(value.strip())
    if not NAME_MIN_LENGTH <= length <= NAME_MAX_LENGTH:
        return f"{field} must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
    return None


def validate_date_of_birth(
    value: dt.date | Unparsed | None, today: dt.date | None = None
) -> str | None:
    if isinstance(value, Unparsed):
        return "dateOfBirth must be a valid date (YYYY-MM-DD)"
    if value is None:
        return "dateOfBirth is required"
    if value > (today or dt.date.today()):
        return "dateOfBirth must not be in the future"
    return None


def validate_contact_number(value: str | Unparsed | None) -> str | None:
    if isinstance(value, Unparsed):
        return "contactNumber must be text"
    if value is None or not value.strip():
        return "contactNumber is required"
    return None


def validate_appointment_date_time(value: dt.datetime | Unparsed | None) -> str | None:
    # Past and future values are both accepted.
    if isinstance(value, Unparsed):
        return "appointmentDateTime must be a valid ISO 8601 date-time"
    if value is None:
        return "appointmentDateTime is required"
    return None


def validate_reason_for_visit(value: str | Unparsed | None) -> str | None:
    if isinstance(value, Unparsed):
        return "reasonForVisit must be text"
    if value is None or not value.strip():
        return "reasonForVisit must not be blank"
    return None


def validate_status(value: str | Unparsed | None) -> str | None:
    allowed = [s.value for s in AppointmentStatus]
    if value not in allowed:
        return f"status must be one of {', '.join(allowed)}"
    return None


def validate_patient_id(value: int | Unparsed | None) -> str | None:
    if isinstance(value, Unparsed):
        return "patientId must be an integer"
    if value is None:
        return "patientId is required"
    return None


def _collect(checks: dict[str, str | None]) -> dict[str, str]:
    return {field: message for field, message in checks.items() if message is not None}


def validate_patient(data: PatientInput, today: dt.date | None = None) -> dict[str, str]:
    """Return every violation in ``data``; an empty dict means it may be persisted."""
    return _collect(
        {
            "firstName": validate_name(data.first_name, "firstName"),
            "lastName": validate_name(data.last_name, "lastName"),
            "dateOfBirth": validate_date_of_birth(data.date_of_birth, today),
            "contactNumber": validate_contact_number(data.contact_number),
        }
    )


def validate_appointment(data: AppointmentInput, *, creating: bool = True) -> dict[str, str]:
    """Return every violation in ``data``.

    On update (``creating=False``) ``status`` and ``patientId`` may be left out,
    in which case the stored values are kept.
    """
    checks: dict[str, str | None] = {
        "appointmentDateTime": validate_appointment_date_time(data.appointment_date_time),
        "reasonForVisit": validate_reason_for_visit(data.reason_for_visit),
    }
    # A missing status means SCHEDULED on create and "unchanged" on update.
    if data.status is not None:
        checks["status"] = validate_status(data.status)
    if creating:
        checks["patientId"] = validate_patient_id(data.patient_id)
    return _collect(checks)
