# attendguard/services/attendance.py
"""Pipeline de admissão: token -> guarda -> validação -> gravação.

Toda falha vira AppError (categoria, severidade, retryable) em vez de subir
como exceção, para que a camada de apresentação decida entre "tentar de
novo" e uma explicação definitiva.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Optional

from attendguard.core.clock import Clock, FixedClock
from attendguard.core.config import settings
from attendguard.core.exceptions import (
    AdmissionDenied,
    AlreadyMarked,
    AttendanceError,
    InvalidInput,
    TokenRejected,
)
from attendguard.crud.store import AttendanceStore
from attendguard.models.attendance import AttendanceOrigin
from attendguard.models.session import AttendanceSession
from attendguard.schemas.attendance import (
    AttendanceEventOut,
    AttendanceMark,
    AttendanceMethod,
    AttendanceResult,
    AttendanceStatus,
)
from attendguard.schemas.audit import ConsistencyCheckResult
from attendguard.schemas.enrollment import EnrollmentCreate, EnrollmentOut, EnrollmentResult
from attendguard.schemas.errors import AppError, ErrorCategory
from attendguard.schemas.session import (
    SessionCreate,
    SessionOut,
    SessionResult,
    SessionStatus,
    StatusChangeResult,
)
from attendguard.services.audit import ConsistencyAuditor
from attendguard.services.errors import build_app_error
from attendguard.services.guard import EdgeCaseGuard, session_window
from attendguard.services.qr import TokenFailure, verify_token
from attendguard.validation import validate_attendance, validate_enrollment, validate_session

logger = logging.getLogger(__name__)

# transições permitidas; completed e cancelled são terminais
TRANSITIONS = {
    SessionStatus.scheduled.value: {SessionStatus.active.value, SessionStatus.cancelled.value},
    SessionStatus.active.value: {SessionStatus.completed.value, SessionStatus.cancelled.value},
    SessionStatus.completed.value: set(),
    SessionStatus.cancelled.value: set(),
}


def _token_message(reason: TokenFailure, age: Optional[int]) -> str:
    if reason == TokenFailure.expired:
        return (f"QR code expired ({age}s old). "
                "Please scan the current QR code from the lecturer screen.")
    if reason == TokenFailure.session_mismatch:
        return "Invalid QR code - session mismatch"
    return "Invalid QR code format - expected session_id:timestamp"


def _fail(exc: Exception, context: Dict[str, Any]) -> AppError:
    if not isinstance(exc, AttendanceError):
        logger.exception("%s failed unexpectedly", context.get("action"))
    return build_app_error(exc, context=context)


def attendance_status_for(session: AttendanceSession, now: datetime) -> AttendanceStatus:
    start, _ = session_window(session)
    if now > start + timedelta(minutes=settings.LATE_AFTER_MINUTES):
        return AttendanceStatus.late
    return AttendanceStatus.present


def mark_attendance(store: AttendanceStore, session_id: str, student_id: str,
                    presented_token: Optional[str], method: str, now: datetime) -> AttendanceResult:
    # instante ingênuo vira UTC, uma vez só: token, guarda e status usam o mesmo valor
    now = FixedClock(now).now()
    context = {"action": "mark_attendance", "session_id": session_id,
               "student_id": student_id, "method": method}
    mark = AttendanceMark(session_id=session_id, student_id=student_id, method=method, token=presented_token)
    try:
        if presented_token or method == AttendanceMethod.qr_code.value:
            if not presented_token:
                raise TokenRejected("Invalid token - a QR token is required for qr_code attendance", "missing")
            verdict = verify_token(presented_token, session_id, now)
            if not verdict.ok:
                raise TokenRejected(_token_message(verdict.reason, verdict.age_seconds), verdict.reason.value)

        decision = EdgeCaseGuard(store, FixedClock(now)).check_attendance(mark)
        if not decision.should_proceed:
            raise AdmissionDenied(decision.reason, suggested_action=decision.suggested_action,
                                  category=decision.category, code=decision.code)

        if store.get_attendance(session_id, student_id) is not None:
            raise AlreadyMarked()

        result = validate_attendance(mark)
        if not result.is_valid:
            raise InvalidInput(result.errors, result.warnings)

        session = store.get_session(session_id)
        status = attendance_status_for(session, now)
        # a restrição única ainda pode rejeitar aqui (corrida com outra marcação)
        record = store.insert_attendance(session_id=session_id, student_id=student_id,
                                         status=status.value, method_used=method, marked_at=now)
    except Exception as exc:
        return AttendanceResult(ok=False, error=_fail(exc, context))

    logger.info("attendance %s marked %s for student %s in session %s",
                record.id, record.status, student_id, session_id)
    return AttendanceResult(ok=True, attendance=AttendanceEventOut.model_validate(record))


def create_session(store: AttendanceStore, descriptor: SessionCreate, clock: Clock) -> SessionResult:
    context = {"action": "create_session", "section_id": descriptor.section_id,
               "session_date": descriptor.session_date}
    try:
        result = validate_session(descriptor, today=clock.today())
        if not result.is_valid:
            raise InvalidInput(result.errors, result.warnings)

        decision = EdgeCaseGuard(store, clock).check_session_creation(descriptor)
        if not decision.should_proceed:
            raise AdmissionDenied(decision.reason, suggested_action=decision.suggested_action,
                                  category=decision.category, code=decision.code)

        session = store.insert_session({
            "course_id": descriptor.course_id,
            "section_id": descriptor.section_id,
            "session_name": descriptor.session_name.strip(),
            "session_date": date.fromisoformat(descriptor.session_date),
            "start_time": time.fromisoformat(descriptor.start_time),
            "end_time": time.fromisoformat(descriptor.end_time),
            "location": descriptor.location,
            "capacity": descriptor.capacity,
            "status": descriptor.status or SessionStatus.scheduled.value,
        })
    except Exception as exc:
        error = _fail(exc, context)
        warnings = exc.warnings if isinstance(exc, InvalidInput) else []
        return SessionResult(ok=False, error=error, warnings=warnings)

    # avisos de validação e da guarda podem repetir o mesmo texto
    warnings = list(dict.fromkeys(result.warnings + decision.warnings))
    logger.info("session %s created for section %s", session.id, session.section_id)
    return SessionResult(ok=True, session=SessionOut.model_validate(session), warnings=warnings)


def enroll_student(store: AttendanceStore, descriptor: EnrollmentCreate, clock: Clock,
                   section_capacity: Optional[int] = None) -> EnrollmentResult:
    context = {"action": "enroll_student", "student_id": descriptor.student_id,
               "section_id": descriptor.section_id}
    try:
        result = validate_enrollment(descriptor, today=clock.today())
        if not result.is_valid:
            raise InvalidInput(result.errors, result.warnings)

        decision = EdgeCaseGuard(store, clock).check_enrollment(descriptor, section_capacity)
        if not decision.should_proceed:
            raise AdmissionDenied(decision.reason, suggested_action=decision.suggested_action,
                                  category=decision.category, code=decision.code)

        enrollment = store.insert_enrollment({
            "student_id": descriptor.student_id,
            "section_id": descriptor.section_id,
            "enrollment_date": (date.fromisoformat(descriptor.enrollment_date)
                                if descriptor.enrollment_date else clock.today()),
            "status": descriptor.status or "active",
        })
    except Exception as exc:
        error = _fail(exc, context)
        warnings = exc.warnings if isinstance(exc, InvalidInput) else []
        return EnrollmentResult(ok=False, error=error, warnings=warnings)

    return EnrollmentResult(ok=True, enrollment=EnrollmentOut.model_validate(enrollment),
                            warnings=result.warnings)


def synthesize_absences(store: AttendanceStore, session: AttendanceSession, now: datetime) -> int:
    """Grava 'absent' para quem não marcou. Idempotente: nunca sobrescreve."""
    marked = set(store.list_marked_students(session.id))
    created = 0
    for enrollment in store.list_active_enrollments(session.section_id):
        if enrollment.student_id in marked:
            continue
        try:
            store.insert_attendance(session_id=session.id, student_id=enrollment.student_id,
                                    status=AttendanceStatus.absent.value,
                                    method_used=AttendanceOrigin.auto.value, marked_at=now)
        except AlreadyMarked:
            # o aluno marcou entre a leitura e a escrita
            continue
        created += 1
    if created:
        logger.info("session %s: %d students marked absent", session.id, created)
    return created


def advance_session_status(store: AttendanceStore, session_id: str, status: str,
                           clock: Clock) -> StatusChangeResult:
    context = {"action": "advance_session_status", "session_id": session_id, "status": status}
    try:
        session = store.get_session(session_id)
        if session is None:
            raise AdmissionDenied("Session not found", category=ErrorCategory.not_found,
                                  suggested_action="Check if session was removed")
        if status not in TRANSITIONS.get(session.status, set()):
            raise AdmissionDenied(f"Cannot change session status from {session.status} to {status}",
                                  suggested_action="Follow scheduled -> active -> completed")
        session = store.update_session_status(session, status)
        absent = 0
        if status == SessionStatus.completed.value:
            absent = synthesize_absences(store, session, clock.now())
    except Exception as exc:
        return StatusChangeResult(ok=False, error=_fail(exc, context))

    logger.info("session %s is now %s", session_id, status)
    return StatusChangeResult(ok=True, session=SessionOut.model_validate(session), absent_marked=absent)


def run_consistency_audit(store: AttendanceStore) -> ConsistencyCheckResult:
    return ConsistencyAuditor(store).run()
