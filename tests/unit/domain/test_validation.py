import datetime as dt

import pytest

from clinic.domain.models import AppointmentInput, PatientInput, Unparsed
from clinic.domain.validation import (
    validate_appointment,
    validate_date_of_birth,
    validate_name,
    validate_patient,
    validate_status,
)
from tests.factories import TODAY, make_appointment_input, make_patient_input


class TestValidateName:
    @pytest.mark.parametrize(
        "value",
        ["Al", "Ada", "  Bo  ", "x" * 50, "Jean-Luc", "O'Brien"],
        ids=["two-chars", "short", "padded", "fifty-chars", "hyphen", "apostrophe"],
    )
    def test_accepts(self, value: str) -> None:
        assert validate_name(value, "firstName") is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "must not be blank"),
            ("", "must not be blank"),
            ("   ", "must not be blank"),
            ("A", "between 2 and 50"),
            (" A ", "between 2 and 50"),
            ("x" * 51, "between 2 and 50"),
        ],
        ids=["missing", "empty", "whitespace", "one-char", "one-char-padded", "too-long"],
    )
    def test_rejects(self, value: str | None, expected: str) -> None:
        message = validate_name(value, "lastName")

        assert message is not None
        assert message.startswith("lastName")
        assert expected in message


class TestValidateDateOfBirth:
    def test_today_is_allowed(self) -> None:
        assert validate_date_of_birth(TODAY, TODAY) is None

    def test_tomorrow_is_rejected(self) -> None:
        message = validate_date_of_birth(TODAY + dt.timedelta(days=1), TODAY)

        assert message == "dateOfBirth must not be in the future"

    def test_missing_is_rejected(self) -> None:
        assert validate_date_of_birth(None, TODAY) == "dateOfBirth is required"

    def test_defaults_to_the_real_date(self) -> None:
        assert validate_date_of_birth(dt.date(1900, 1, 1)) is None
        assert validate_date_of_birth(dt.date(9999, 1, 1)) is not None


class TestValidateStatus:
    @pytest.mark.parametrize("value", ["SCHEDULED", "COMPLETED", "CANCELLED"])
    def test_accepts_known_statuses(self, value: str) -> None:
        assert validate_status(value) is None

    @pytest.mark.parametrize("value", ["scheduled", "NO_SHOW", ""])
    def test_rejects_anything_else(self, value: str) -> None:
        message = validate_status(value)

        assert message is not None
        assert "SCHEDULED, COMPLETED, CANCELLED" in message


class TestValidatePatient:
    def test_valid_patient_has_no_errors(self) -> None:
        assert validate_patient(make_patient_input(), TODAY) == {}

    def test_reports_blank_name_and_future_birth_date_together(self) -> None:
        data = make_patient_input(first_name="", date_of_birth=dt.date(2030, 1, 1))

        errors = validate_patient(data, TODAY)

        assert set(errors) == {"firstName", "dateOfBirth"}

    def test_reports_every_missing_field(self) -> None:
        errors = validate_patient(
            make_patient_input(
                first_name=None, last_name=None, date_of_birth=None, contact_number=None
            ),
            TODAY,
        )

        assert set(errors) == {"firstName", "lastName", "dateOfBirth", "contactNumber"}

    def test_contact_number_format_is_not_checked(self) -> None:
        assert validate_patient(make_patient_input(contact_number="call reception"), TODAY) == {}

    def test_unparseable_values_are_reported_with_other_errors(self) -> None:
        data = PatientInput.model_validate(
            {
                "firstName": "",
                "lastName": 42,
                "dateOfBirth": "not-a-date",
                "contactNumber": "555-0100",
            }
        )

        errors = validate_patient(data, TODAY)

        assert errors == {
            "firstName": "firstName must not be blank",
            "lastName": "lastName must be text",
            "dateOfBirth": "dateOfBirth must be a valid date (YYYY-MM-DD)",
        }

    def test_wrong_type_is_kept_as_unparsed(self) -> None:
        data = PatientInput.model_validate({"dateOfBirth": "yesterday"})

        assert isinstance(data.date_of_birth, Unparsed)
        assert data.date_of_birth.value == "yesterday"


class TestValidateAppointment:
    def test_valid_appointment_has_no_errors(self) -> None:
        assert validate_appointment(make_appointment_input(1)) == {}

    def test_status_may_be_omitted(self) -> None:
        assert validate_appointment(make_appointment_input(1, status=None)) == {}

    def test_past_date_time_is_accepted(self) -> None:
        data = make_appointment_input(1, appointment_date_time=dt.datetime(2001, 1, 1, 8, 0))

        assert validate_appointment(data) == {}

    def test_collects_all_errors(self) -> None:
        data = make_appointment_input(
            None, appointment_date_time=None, reason_for_visit=" ", status="LATE"
        )

        errors = validate_appointment(data)

        assert set(errors) == {"appointmentDateTime", "reasonForVisit", "status", "patientId"}

    def test_patient_id_optional_on_update(self) -> None:
        assert validate_appointment(make_appointment_input(None), creating=False) == {}

    def test_status_still_checked_on_update(self) -> None:
        errors = validate_appointment(make_appointment_input(None, status="DONE"), creating=False)

        assert set(errors) == {"status"}

    def test_unparseable_values_are_reported_with_other_errors(self) -> None:
        data = AppointmentInput.model_validate(
            {
                "appointmentDateTime": "next tuesday",
                "reasonForVisit": "",
                "status": 3,
                "patientId": "abc",
            }
        )

        errors = validate_appointment(data)

        assert errors == {
            "appointmentDateTime": "appointmentDateTime must be a valid ISO 8601 date-time",
            "reasonForVisit": "reasonForVisit must not be blank",
            "status": "status must be one of SCHEDULED, COMPLETED, CANCELLED",
            "patientId": "patientId must be an integer",
        }
