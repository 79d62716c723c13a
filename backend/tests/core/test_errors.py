"""Error Hierarchy — tests for codes, statuses and the REST envelope.

Tests cover:
    - Each error maps to its HTTP status and code
    - to_response() shape, user_message override
    - InvalidTokenError gives one message for unknown and used tokens
"""

import pytest

from taskshare.core.errors import (
    DuplicateIdentityError, DuplicateShareError, ErrorCategory, ErrorContext,
    ForbiddenError, InvalidCredentialsError, InvalidInputError, InvalidRoleError,
    InvalidTokenError, InviteeExistsError, NotSharedError, PaymentGatewayError,
    PaymentVerificationError, QuotaExceededError, ResourceNotFoundError,
    SelfShareError, StorageUnavailableError, TaskShareError, UnauthenticatedError,
    UpgradeRequiredError,
)


@pytest.mark.parametrize("error, status, code", [
    (UnauthenticatedError(), 401, "UNAUTHENTICATED"),
    (InvalidCredentialsError(), 401, "INVALID_CREDENTIALS"),
    (ForbiddenError("edit", "viewer"), 403, "FORBIDDEN"),
    (InvalidInputError("bad", "email"), 400, "INVALID_INPUT"),
    (InvalidRoleError("owner"), 400, "INVALID_ROLE"),
    (SelfShareError(), 400, "SELF_SHARE"),
    (InvalidTokenError(), 400, "INVALID_TOKEN"),
    (PaymentVerificationError(), 400, "PAYMENT_VERIFICATION_FAILED"),
    (ResourceNotFoundError("Task", "x"), 404, "RESOURCE_NOT_FOUND"),
    (NotSharedError("a@b.co"), 404, "NOT_SHARED"),
    (DuplicateIdentityError("a@b.co"), 409, "EMAIL_ALREADY_REGISTERED"),
    (DuplicateShareError("a@b.co"), 409, "DUPLICATE_SHARE"),
    (InviteeExistsError("a@b.co"), 409, "INVITEE_ALREADY_EXISTS"),
    (QuotaExceededError(3), 402, "QUOTA_EXCEEDED"),
    (UpgradeRequiredError("share_as_editor"), 402, "UPGRADE_REQUIRED"),
    (StorageUnavailableError("down", "execute"), 503, "STORAGE_UNAVAILABLE"),
    (PaymentGatewayError("timeout"), 502, "PAYMENT_GATEWAY_ERROR"),
])
def test_error_status_and_code(error, status, code):
    assert isinstance(error, TaskShareError)
    assert error.http_status == status
    assert error.code == code


def test_to_response_envelope():
    err = ForbiddenError("edit", "viewer", ErrorContext(task_id="t-1"))
    body = err.to_response()["error"]
    assert body["code"] == "FORBIDDEN"
    assert body["category"] == ErrorCategory.AUTHORIZATION.value
    assert body["severity"] == "warning"
    assert body["context"] == {"task_id": "t-1"}
    assert "timestamp" in body


def test_user_message_overrides_message():
    err = StorageUnavailableError(
        "pool exhausted", "execute", ErrorContext(user_message="Try again shortly"),
    )
    assert err.to_response()["error"]["message"] == "Try again shortly"


def test_storage_error_is_not_a_domain_category():
    assert StorageUnavailableError("x", "y").category is ErrorCategory.DATABASE


def test_invalid_token_message_is_uniform():
    assert InvalidTokenError().message == "Invalid or expired invite link"
