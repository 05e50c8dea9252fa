# attendguard/core/exceptions.py
from __future__ import annotations
from typing import List, Optional

from attendguard.schemas.errors import ErrorCategory


class AttendanceError(Exception):
    """Falha de domínio; carrega a própria categoria e um código estável."""

    category: ErrorCategory = ErrorCategory.unknown
    code: str = "ATTENDANCE_ERROR"

    def __init__(self, message: str, *, suggested_action: Optional[str] = None,
                 category: Optional[ErrorCategory] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.suggested_action = suggested_action
        if category is not None:
            self.category = category
        if code is not None:
            self.code = code


class InvalidInput(AttendanceError):
    category = ErrorCategory.validation
    code = "INVALID_INPUT"

    def __init__(self, errors: List[str], warnings: Optional[List[str]] = None):
        super().__init__("; ".join(errors) or "Invalid input",
                         suggested_action="Correct the highlighted fields and submit again")
        self.errors = list(errors)
        self.warnings = list(warnings or [])


class TokenRejected(AttendanceError):
    category = ErrorCategory.validation

    def __init__(self, message: str, reason: str):
        super().__init__(message, suggested_action="Scan the code currently shown on the lecturer screen",
                         code=f"TOKEN_{reason.upper()}")
        self.reason = reason


class AdmissionDenied(AttendanceError):
    """Pré-condição de estado (sessão, matrícula, horário, conflito)."""
    code = "ADMISSION_DENIED"


class AlreadyMarked(AttendanceError):
    category = ErrorCategory.validation
    code = "ALREADY_MARKED"

    def __init__(self, message: str = "Attendance has already been marked for this session."):
        super().__init__(message, suggested_action="View your attendance record")


class NotAuthorized(AttendanceError):
    category = ErrorCategory.authorization
    code = "NOT_AUTHORIZED"
