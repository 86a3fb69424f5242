"""Error Hierarchy — verifies codes, HTTP statuses and response envelopes."""

import pytest

from mentorlink.core.errors import (
    AlreadyConnectedError,
    AlreadyRequestedError,
    EmptyMessageError,
    ErrorContext,
    ErrorSeverity,
    ForbiddenError,
    InvalidRoleError,
    MentorLinkError,
    NotFoundError,
    StorageFailureError,
    UnauthorizedError,
)


@pytest.mark.parametrize("error,code,status", [
    (InvalidRoleError("x"), "INVALID_ROLE", 403),
    (AlreadyRequestedError(), "ALREADY_REQUESTED", 409),
    (AlreadyConnectedError(), "ALREADY_CONNECTED", 409),
    (NotFoundError("User", "42"), "NOT_FOUND", 404),
    (ForbiddenError("x"), "FORBIDDEN", 403),
    (UnauthorizedError(), "NOT_CONNECTED", 403),
    (EmptyMessageError(), "EMPTY_MESSAGE", 400),
    (StorageFailureError("boom", "commit"), "STORAGE_FAILURE", 503),
])
def test_taxonomy_codes_and_statuses(error, code, status):
    assert isinstance(error, MentorLinkError)
    assert error.code == code
    assert error.http_status == status


def test_storage_failure_is_critical():
    assert StorageFailureError("boom", "commit").severity == ErrorSeverity.CRITICAL


def test_to_response_envelope():
    body = NotFoundError("User", "42").to_response()
    assert body["error"]["code"] == "NOT_FOUND"
    assert body["error"]["message"] == "User '42' not found"
    assert body["error"]["category"] == "resource_not_found"
    assert "timestamp" in body["error"]


def test_to_response_does_not_leak_context_ids():
    err = UnauthorizedError(ErrorContext(user_id="user-a", counterpart_id="user-b"))
    rendered = str(err.to_response())
    assert "user-a" not in rendered
    assert "user-b" not in rendered


def test_ws_event_prefers_user_message():
    err = ForbiddenError("internal", ErrorContext(user_message="nope"))
    event = err.to_ws_event()
    assert event["type"] == "error"
    assert event["data"]["message"] == "nope"
    assert event["data"]["code"] == "FORBIDDEN"
