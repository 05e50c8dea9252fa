# attendguard/services/errors.py
"""Classificação de falhas em AppError e política de retry."""
from __future__ import annotations

import logging
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy.exc import DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from attendguard.core.config import settings
from attendguard.core.exceptions import AttendanceError
from attendguard.schemas.errors import AppError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)

NON_RETRYABLE = (
    "already marked",
    "attendance has already been marked",
    "duplicate",
    "not enrolled",
    "invalid token",
    "qr code expired",
    "permission denied",
)

RETRYABLE = (
    "network",
    "connection",
    "timeout",
    "server error",
    "temporary",
    "session not found",
)

CATEGORY_SEVERITY: Dict[ErrorCategory, ErrorSeverity] = {
    ErrorCategory.network: ErrorSeverity.error,
    ErrorCategory.database: ErrorSeverity.error,
    ErrorCategory.validation: ErrorSeverity.warning,
    ErrorCategory.authentication: ErrorSeverity.critical,
    ErrorCategory.authorization: ErrorSeverity.error,
    ErrorCategory.not_found: ErrorSeverity.warning,
    ErrorCategory.unknown: ErrorSeverity.error,
}

CATEGORY_RETRYABLE: Dict[ErrorCategory, bool] = {
    ErrorCategory.network: True,
    ErrorCategory.database: True,
    ErrorCategory.validation: False,
    ErrorCategory.authentication: False,
    ErrorCategory.authorization: False,
    ErrorCategory.not_found: False,
    ErrorCategory.unknown: True,
}

CATEGORY_MESSAGES: Dict[ErrorCategory, str] = {
    ErrorCategory.network: "Unable to connect to the server. Please check your internet connection.",
    ErrorCategory.database: "Failed to load data from the database. Please try again.",
    ErrorCategory.validation: "The information provided is invalid. Please check your input.",
    ErrorCategory.authentication: "Your session has expired. Please log in again.",
    ErrorCategory.authorization: "You do not have permission to perform this action.",
    ErrorCategory.not_found: "The requested resource was not found.",
    ErrorCategory.unknown: "An unexpected error occurred. Please try again.",
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def extract_message(exc: Any) -> str:
    if isinstance(exc, AttendanceError):
        return exc.message
    if isinstance(exc, str):
        return exc
    if isinstance(exc, BaseException) and str(exc):
        return str(exc)
    detail = getattr(exc, "detail", None)
    if isinstance(detail, str) and detail:
        return detail
    return "An unexpected error occurred"


def _is_network(exc: Any, lowered: str) -> bool:
    if isinstance(exc, (ConnectionError, TimeoutError, DisconnectionError, PoolTimeoutError)):
        return True
    if isinstance(exc, OperationalError):
        return any(hint in lowered for hint in ("connect", "timeout", "timed out", "network"))
    return False


def classify(exc: Any) -> Tuple[ErrorCategory, ErrorSeverity]:
    lowered = extract_message(exc).lower()

    if isinstance(exc, AttendanceError):
        category = exc.category
    elif isinstance(exc, ValidationError):
        category = ErrorCategory.validation
    elif _is_network(exc, lowered):
        category = ErrorCategory.network
    elif isinstance(exc, SQLAlchemyError):
        category = ErrorCategory.database
    elif "jwt" in lowered or "authentication" in lowered:
        category = ErrorCategory.authentication
    elif isinstance(exc, PermissionError) or "permission" in lowered or "authorized" in lowered:
        category = ErrorCategory.authorization
    elif getattr(exc, "status_code", None) == 404 or "not found" in lowered:
        category = ErrorCategory.not_found
    else:
        category = ErrorCategory.unknown
    return category, CATEGORY_SEVERITY[category]


def is_retryable(message: str, category: ErrorCategory) -> bool:
    lowered = message.lower()
    if any(hint in lowered for hint in NON_RETRYABLE):
        return False
    if any(hint in lowered for hint in RETRYABLE):
        return True
    return CATEGORY_RETRYABLE[category]


def user_message(category: ErrorCategory, technical: str) -> str:
    # mensagem crua só quando é curta e não parece stack/driver
    if len(technical) < 100 and "Error:" not in technical:
        return technical
    return CATEGORY_MESSAGES[category]


def new_error_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"err_{int(time.time() * 1000)}_{suffix}"


def build_app_error(exc: Any, *, context: Optional[Dict[str, Any]] = None,
                    message: Optional[str] = None) -> AppError:
    category, severity = classify(exc)
    technical = extract_message(exc)
    error = AppError(
        id=new_error_id(),
        code=getattr(exc, "code", None) or category.value.upper(),
        category=category,
        severity=severity,
        message=message or user_message(category, technical),
        details=technical,
        context=dict(context or {}),
        timestamp=datetime.now(timezone.utc),
        retryable=is_retryable(technical, category),
        retry_count=0,
        suggested_action=getattr(exc, "suggested_action", None),
    )
    if severity in (ErrorSeverity.error, ErrorSeverity.critical):
        logger.error("%s [%s/%s] %s", error.id, category.value, severity.value, technical)
    else:
        logger.warning("%s [%s/%s] %s", error.id, category.value, severity.value, technical)
    return error


def retry_delay(error: AppError, attempt: int) -> float:
    """Segundos até a próxima tentativa: backoff exponencial só para rede."""
    if error.category == ErrorCategory.network:
        return min(settings.RETRY_BASE_SECONDS * (2 ** attempt), settings.RETRY_MAX_SECONDS)
    return settings.RETRY_BASE_SECONDS


def should_retry(error: AppError, max_retries: int = 3) -> bool:
    return error.retryable and error.retry_count < max_retries


def next_attempt(error: AppError) -> AppError:
    return error.model_copy(update={"retry_count": error.retry_count + 1})
