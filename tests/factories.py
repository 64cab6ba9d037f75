"""Builders for valid request payloads; override any field per test."""

import datetime as dt

from clinic.domain.models import AppointmentInput, PatientInput

TODAY = dt.date(2026, 10, 19)


def make_patient_input(**overrides: object) -> PatientInput:
    fields: dict[str, object] = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "date_of_birth": dt.date(1990, 12, 10),
        "contact_number": "+44 20 7946 0000",
    }
    fields.update(overrides)
    return PatientInput(**fields)  # type: ignore[arg-type]


def make_appointment_input(patient_id: int | None, **overrides: object) -> AppointmentInput:
    fields: dict[str, object] = {
        "appointment_date_time": dt.datetime(2026, 11, 3, 9, 30),
        "reason_for_visit": "Annual check-up",
        "patient_id": patient_id,
    }
    fields.update(overrides)
    return AppointmentInput(**fields)  # type: ignore[arg-type]


def patient_json(**overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "dateOfBirth": "1990-12-10",
        "contactNumber": "+44 20 7946 0000",
    }
    body.update(overrides)
    return body


def appointment_json(patient_id: int, **overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "appointmentDateTime": "2026-11-03T09:30:00",
        "reasonForVisit": "Annual check-up",
        "status": "SCHEDULED",
        "patientId": patient_id,
    }
    body.update(overrides)
    return body
