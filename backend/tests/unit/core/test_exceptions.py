"""
Unit Tests for the portal exception hierarchy
"""
import pytest

from app.core.exceptions import (
    AppointmentNotFoundError,
    ConflictError,
    InvalidCredentialsError,
    InvalidIdentifierError,
    InvalidTransitionError,
    MissingFieldsError,
    PortalError,
    ValidationError,
    require_fields,
)


class TestStatusCodes:

    @pytest.mark.parametrize("error, status_code", [
        (InvalidCredentialsError(), 401),
        (AppointmentNotFoundError("abc"), 404),
        (ConflictError("exists"), 409),
        (ValidationError("bad"), 400),
        (InvalidIdentifierError("Appointment", "xyz"), 400),
        (InvalidTransitionError("Ticket", "closed", "start"), 400),
        (PortalError("boom"), 500),
    ])
    def test_status_code(self, error, status_code):
        assert error.status_code == status_code

    def test_not_found_payload(self):
        data = AppointmentNotFoundError("abc").to_dict()

        assert data["detail"] == "Appointment not found"
        assert data["code"] == "APPOINTMENT_NOT_FOUND"
        assert data["details"]["resource_id"] == "abc"

    def test_payload_without_details(self):
        assert ConflictError("User already exists with this email").to_dict() == {
            "detail": "User already exists with this email",
            "code": "CONFLICT",
        }


class TestRequireFields:

    def test_all_present(self):
        assert require_fields(title="t", tags=["x"], count=0) is None

    def test_lists_every_missing_field(self):
        with pytest.raises(MissingFieldsError) as exc_info:
            require_fields(title="  ", description=None, category="it", audience=[])

        assert exc_info.value.details["fields"] == ["title", "description", "audience"]
        assert exc_info.value.status_code == 400
        assert exc_info.value.message.startswith("Missing required fields")
