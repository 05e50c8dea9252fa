import re

import pytest
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError

from attendguard.core.exceptions import AdmissionDenied, AlreadyMarked, TokenRejected
from attendguard.schemas.errors import ErrorCategory, ErrorSeverity
from attendguard.services.errors import (
    build_app_error,
    classify,
    is_retryable,
    next_attempt,
    retry_delay,
    should_retry,
)


class _Payload(BaseModel):
    capacity: int


def _pydantic_error():
    with pytest.raises(ValidationError) as info:
        _Payload(capacity="many")
    return info.value


@pytest.mark.parametrize("exc,category,severity", [
    (ConnectionError("connection reset by peer"), ErrorCategory.network, ErrorSeverity.error),
    (TimeoutError("read timed out"), ErrorCategory.network, ErrorSeverity.error),
    (OperationalError("SELECT 1", {}, Exception("could not connect to server")),
     ErrorCategory.network, ErrorSeverity.error),
    (IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")),
     ErrorCategory.database, ErrorSeverity.error),
    (ValueError("JWT signature has expired"), ErrorCategory.authentication, ErrorSeverity.critical),
    (PermissionError("permission denied for table attendance_records"),
     ErrorCategory.authorization, ErrorSeverity.error),
    (LookupError("Course not found"), ErrorCategory.not_found, ErrorSeverity.warning),
    (RuntimeError("boom"), ErrorCategory.unknown, ErrorSeverity.error),
])
def test_classify_structural_hints(exc, category, severity):
    assert classify(exc) == (category, severity)


def test_pydantic_errors_are_validation():
    assert classify(_pydantic_error()) == (ErrorCategory.validation, ErrorSeverity.warning)


def test_domain_errors_keep_their_category():
    denied = AdmissionDenied("Session not found or cancelled", category=ErrorCategory.not_found)
    assert classify(denied) == (ErrorCategory.not_found, ErrorSeverity.warning)
    assert classify(AlreadyMarked()) == (ErrorCategory.validation, ErrorSeverity.warning)


@pytest.mark.parametrize("message,category,expected", [
    ("Attendance has already been marked for this session.", ErrorCategory.validation, False),
    ("Student is not enrolled in this section", ErrorCategory.authorization, False),
    ("QR code expired (300s old)", ErrorCategory.validation, False),
    ("permission denied", ErrorCategory.authorization, False),
    ("network unreachable", ErrorCategory.unknown, True),
    ("Session not found or cancelled", ErrorCategory.not_found, True),
    ("statement timeout", ErrorCategory.database, True),
    # nenhuma lista casa: vale o padrão da categoria
    ("Session has not started yet", ErrorCategory.validation, False),
    ("deadlock detected", ErrorCategory.database, True),
])
def test_retry_policy(message, category, expected):
    assert is_retryable(message, category) is expected


def test_non_retryable_list_wins_over_retryable_list():
    assert is_retryable("connection ok but attendance already marked", ErrorCategory.network) is False


def test_app_error_record():
    error = build_app_error(AlreadyMarked(), context={"session_id": "s-1"})
    assert re.match(r"^err_\d+_[a-z0-9]{7}$", error.id)
    assert error.code == "ALREADY_MARKED"
    assert error.message == "Attendance has already been marked for this session."
    assert error.retryable is False
    assert error.retry_count == 0
    assert error.context == {"session_id": "s-1"}
    assert error.suggested_action == "View your attendance record"


def test_technical_messages_fall_back_to_category_template():
    error = build_app_error(OperationalError("SELECT 1", {}, Exception("x" * 150)))
    assert error.category == ErrorCategory.database
    assert error.message == "Failed to load data from the database. Please try again."
    assert "x" * 150 in error.details

    tagged = build_app_error(RuntimeError("ValueError: bad thing"))
    assert tagged.message == "An unexpected error occurred. Please try again."


def test_token_rejection_code():
    error = build_app_error(TokenRejected("QR code expired (200s old)", "expired"))
    assert error.code == "TOKEN_EXPIRED"
    assert error.retryable is False


def test_backoff_for_network_errors_only():
    network = build_app_error(ConnectionError("connection refused"))
    assert [retry_delay(network, n) for n in range(6)] == [1, 2, 4, 8, 10, 10]
    other = build_app_error(RuntimeError("boom"))
    assert retry_delay(other, 5) == 1


def test_retry_budget():
    error = build_app_error(ConnectionError("connection refused"))
    for _ in range(3):
        assert should_retry(error)
        error = next_attempt(error)
    assert error.retry_count == 3
    assert not should_retry(error)
    assert not should_retry(build_app_error(AlreadyMarked()))
