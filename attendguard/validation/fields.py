# attendguard/validation/fields.py
"""Validadores atômicos de campo. Funções puras; o "hoje" vem do chamador."""
from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Any, Optional

from attendguard.core.config import settings
from attendguard.schemas.validation import ValidationResult

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^(0[0-9]|1[0-9]|2[0-3]):[0-5][0-9]$")

# fevereiro fixo em 28 dias: anos bissextos não são tratados (limitação conhecida)
DAYS_IN_MONTH = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def _missing(value: Any) -> bool:
    return value is None or value == ""


def validate_identifier(value: Any, field: str) -> ValidationResult:
    if _missing(value):
        return ValidationResult.fail(f"{field} is required")
    if not isinstance(value, str) or not UUID_RE.match(value):
        return ValidationResult.fail(f"{field} must be a valid UUID format")
    return ValidationResult.ok()


def validate_calendar_date(value: Any, field: str, today: Optional[date] = None) -> ValidationResult:
    if _missing(value):
        return ValidationResult.fail(f"{field} is required")
    if not isinstance(value, str) or not DATE_RE.match(value):
        return ValidationResult.fail(f"{field} must be in YYYY-MM-DD format")

    year, month, day = int(value[0:4]), int(value[5:7]), int(value[8:10])
    if month < 1 or month > 12:
        return ValidationResult.fail(f"{field} has invalid month")
    if day < 1 or day > DAYS_IN_MONTH[month - 1]:
        return ValidationResult.fail(f"{field} has invalid day for the month")
    try:
        parsed = date(year, month, day)
    except ValueError:
        return ValidationResult.fail(f"{field} is not a valid date")

    today = today or date.today()
    if parsed > today + timedelta(days=settings.MAX_FUTURE_DAYS):
        return ValidationResult.fail(f"{field} cannot be more than 1 year in the future")
    return ValidationResult.ok()


def validate_clock_time(value: Any, field: str) -> ValidationResult:
    if _missing(value):
        return ValidationResult.fail(f"{field} is required")
    if not isinstance(value, str) or not TIME_RE.match(value):
        return ValidationResult.fail(f"{field} must be in HH:MM format (24-hour) with leading zeros")
    return ValidationResult.ok()


def minutes_of_day(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def validate_time_range(start: Any, end: Any, session_date: Any, today: Optional[date] = None) -> ValidationResult:
    start_result = validate_clock_time(start, "Start time")
    end_result = validate_clock_time(end, "End time")
    date_result = validate_calendar_date(session_date, "Session date", today)
    result = start_result.merge(end_result, date_result)
    if not (start_result.is_valid and end_result.is_valid):
        return result

    duration = minutes_of_day(end) - minutes_of_day(start)
    if duration <= 0:
        return result.merge(ValidationResult.fail("End time must be after start time"))
    if duration > settings.MAX_SESSION_MINUTES:
        return result.merge(ValidationResult.fail("Session duration cannot exceed 8 hours"))
    if duration < settings.MIN_SESSION_MINUTES:
        return result.merge(ValidationResult.fail("Session duration must be at least 15 minutes"))
    return result
