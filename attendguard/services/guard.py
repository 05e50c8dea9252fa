# attendguard/services/guard.py
"""Checagens de admissibilidade feitas logo antes de gravar.

Cada checagem lê o estado atual (sessão, matrícula, sessões do dia) e devolve
um GuardDecision com motivo e ação sugerida. Não há trava em processo: a
corrida entre duas marcações do mesmo aluno é resolvida pela restrição de
unicidade da tabela attendance_records.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional

from attendguard.core.clock import Clock, local_zone
from attendguard.core.config import settings
from attendguard.crud.store import AttendanceStore
from attendguard.models.session import AttendanceSession
from attendguard.schemas.attendance import AttendanceMark
from attendguard.schemas.enrollment import EnrollmentCreate
from attendguard.schemas.errors import ErrorCategory
from attendguard.schemas.session import SessionCreate
from attendguard.schemas.validation import GuardDecision

logger = logging.getLogger(__name__)


def session_window(session: AttendanceSession) -> tuple[datetime, datetime]:
    tz = local_zone()
    start = datetime.combine(session.session_date, session.start_time, tzinfo=tz)
    end = datetime.combine(session.session_date, session.end_time, tzinfo=tz)
    return start, end


def _deny(reason: str, action: str, category: ErrorCategory = ErrorCategory.validation,
          code: str = "ADMISSION_DENIED") -> GuardDecision:
    return GuardDecision(should_proceed=False, reason=reason, suggested_action=action,
                         category=category, code=code)


class EdgeCaseGuard:
    def __init__(self, store: AttendanceStore, clock: Clock):
        self.store = store
        self.clock = clock

    def check_attendance(self, data: AttendanceMark) -> GuardDecision:
        # ordem: existência -> autorização -> horário
        session = self.store.get_session(data.session_id)
        if session is None:
            return _deny("Session not found or cancelled",
                         "Check if session was cancelled or removed", ErrorCategory.not_found)
        if session.status == "cancelled":
            return _deny("Session has been cancelled",
                         "Contact your lecturer for alternative arrangements")
        # encerrada: as faltas já foram geradas
        if session.status == "completed":
            return _deny("Session has already been completed",
                         "Contact lecturer if you need to mark attendance for this session")

        enrollment = self.store.get_active_enrollment(data.student_id, session.section_id)
        if enrollment is None:
            return _deny("Student is not enrolled in this section",
                         "Contact academic advisor to re-enroll", ErrorCategory.authorization)

        now = self.clock.now()
        start, end = session_window(session)
        if now < start:
            return _deny("Session has not started yet",
                         "Wait for session to start before marking attendance")
        if now > end:
            return _deny("Session has already ended",
                         "Contact lecturer if you need to mark attendance for this session")

        return GuardDecision(should_proceed=True,
                             reason="Attendance marking conditions are valid",
                             suggested_action="Proceed with marking attendance")

    def check_session_creation(self, data: SessionCreate) -> GuardDecision:
        session_date = date.fromisoformat(data.session_date)
        new_start = time.fromisoformat(data.start_time)
        new_end = time.fromisoformat(data.end_time)

        for existing in self.store.list_sessions_for_section_day(data.section_id, session_date):
            # intervalos semiabertos [início, fim)
            if new_start < existing.end_time and new_end > existing.start_time:
                logger.info("session overlap in section %s on %s with %s",
                            data.section_id, session_date, existing.id)
                return _deny(f"Time conflict with existing session: {existing.session_name}",
                             "Choose different time or date to avoid conflicts", code="SESSION_CONFLICT")

        warnings = []
        if data.capacity and data.capacity > settings.CAPACITY_WARNING_THRESHOLD:
            logger.warning("very large capacity requested: %s", data.capacity)
            warnings.append(f"Very large capacity ({data.capacity}) - consider if this is realistic")

        return GuardDecision(should_proceed=True,
                             reason="Session creation conditions are valid",
                             suggested_action="Proceed with creating session",
                             warnings=warnings)

    def check_enrollment(self, data: EnrollmentCreate, section_capacity: Optional[int] = None) -> GuardDecision:
        # só matrículas ativas disputam vaga ou colidem com outra
        if data.status and data.status != "active":
            return GuardDecision(should_proceed=True,
                                 reason="Inactive enrollment does not occupy a seat",
                                 suggested_action="Proceed with enrollment")

        if self.store.get_active_enrollment(data.student_id, data.section_id) is not None:
            return _deny("Student is already actively enrolled in this section",
                         "Review the existing enrollment instead of creating a new one",
                         code="DUPLICATE_ENROLLMENT")

        if section_capacity is not None:
            enrolled = self.store.count_active_enrollments(data.section_id)
            if enrolled >= section_capacity:
                return _deny(f"Section is full ({enrolled}/{section_capacity})",
                             "Choose another section or raise the section capacity", code="SECTION_FULL")

        return GuardDecision(should_proceed=True,
                             reason="Enrollment appears valid",
                             suggested_action="Proceed with enrollment")
