# attendguard/validation/composite.py
from __future__ import annotations

from datetime import date
from typing import Optional

from attendguard.core.config import settings
from attendguard.schemas.attendance import AttendanceMark, AttendanceMethod
from attendguard.schemas.enrollment import EnrollmentCreate, EnrollmentStatus
from attendguard.schemas.session import SessionCreate, SessionStatus
from attendguard.schemas.validation import ValidationResult
from attendguard.services.qr import token_format_ok
from attendguard.validation.fields import (
    validate_calendar_date,
    validate_identifier,
    validate_time_range,
)

MAX_NAME_LENGTH = 100
MAX_LOCATION_LENGTH = 100

SESSION_STATUSES = [s.value for s in SessionStatus]
ENROLLMENT_STATUSES = [s.value for s in EnrollmentStatus]
ATTENDANCE_METHODS = [m.value for m in AttendanceMethod]


def validate_session(data: SessionCreate, today: Optional[date] = None) -> ValidationResult:
    result = validate_identifier(data.course_id, "Course ID").merge(
        validate_identifier(data.section_id, "Section ID"),
        validate_time_range(data.start_time, data.end_time, data.session_date, today),
    )
    errors: list[str] = []
    warnings: list[str] = []

    name = data.session_name or ""
    if not name.strip():
        errors.append("Session name is required")
    elif len(name) > MAX_NAME_LENGTH:
        errors.append(f"Session name cannot exceed {MAX_NAME_LENGTH} characters")

    if data.capacity is not None:
        if data.capacity < 1:
            errors.append("Capacity must be a positive number")
        elif data.capacity > settings.CAPACITY_WARNING_THRESHOLD:
            warnings.append(f"Very large capacity ({data.capacity}) - consider if this is realistic")

    if data.location and len(data.location) > MAX_LOCATION_LENGTH:
        errors.append(f"Location cannot exceed {MAX_LOCATION_LENGTH} characters")

    if data.status and data.status not in SESSION_STATUSES:
        errors.append("Status must be scheduled, active, completed, or cancelled")

    return result.merge(ValidationResult(is_valid=not errors, errors=errors, warnings=warnings))


def validate_enrollment(data: EnrollmentCreate, today: Optional[date] = None) -> ValidationResult:
    today = today or date.today()
    result = validate_identifier(data.student_id, "Student ID").merge(
        validate_identifier(data.section_id, "Section ID"),
    )

    if data.enrollment_date:
        date_result = validate_calendar_date(data.enrollment_date, "Enrollment date", today)
        result = result.merge(date_result)
        if date_result.is_valid and date.fromisoformat(data.enrollment_date) > today:
            result = result.merge(ValidationResult.ok(["Enrollment date is in the future"]))

    if data.status and data.status not in ENROLLMENT_STATUSES:
        result = result.merge(ValidationResult.fail("Status must be active, inactive, or withdrawn"))
    return result


def validate_attendance(data: AttendanceMark) -> ValidationResult:
    result = validate_identifier(data.session_id, "Session ID").merge(
        validate_identifier(data.student_id, "Student ID"),
    )
    if data.method not in ATTENDANCE_METHODS:
        result = result.merge(ValidationResult.fail("Method must be qr_code or facial_recognition"))
    # frescor do token é responsabilidade do codec; aqui só o formato
    if data.token and not token_format_ok(data.token):
        result = result.merge(ValidationResult.fail("Invalid QR token format - should be session_id:timestamp"))
    return result
