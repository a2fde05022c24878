"""Error hierarchy tests — HTTP status, code and response envelope per error."""

import pytest

from blood_center.core.errors import (
    DatabaseError,
    DuplicateUserError,
    ForbiddenError,
    InvalidInputError,
    InvalidTransitionError,
    PaymentProviderError,
    ResourceNotFoundError,
    UnauthenticatedError,
    UpstreamTimeoutError,
)


@pytest.mark.parametrize("error, status, code", [
    (InvalidInputError("Missing required fields"), 400, "INVALID_INPUT"),
    (UnauthenticatedError(), 401, "UNAUTHENTICATED"),
    (ForbiddenError("nope", "ROLE_REQUIRED"), 403, "ROLE_REQUIRED"),
    (ResourceNotFoundError("User", "x@y.com"), 404, "RESOURCE_NOT_FOUND"),
    (DuplicateUserError("x@y.com"), 409, "USER_EXISTS"),
    (InvalidTransitionError("already done"), 409, "INVALID_TRANSITION"),
    (DatabaseError("boom", "commit"), 500, "DATABASE_ERROR"),
    (PaymentProviderError("card declined"), 502, "PAYMENT_PROVIDER_ERROR"),
    (UpstreamTimeoutError("Identity verification", 10.0), 504, "UPSTREAM_TIMEOUT"),
])
def test_status_and_code(error, status, code):
    assert error.http_status == status
    assert error.code == code


def test_response_envelope_has_message_and_error():
    body = DuplicateUserError("x@y.com").to_response()
    assert body["message"] == "User already exists"
    assert body["error"]["code"] == "USER_EXISTS"
    assert body["error"]["category"] == "conflict"
    assert body["error"]["severity"] == "warning"
    assert "timestamp" in body["error"]


def test_invalid_input_keeps_field_names():
    error = InvalidInputError("Missing required fields", fields=["name", "photo"])
    assert error.fields == ["name", "photo"]
