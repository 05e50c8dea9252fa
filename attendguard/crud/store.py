# attendguard/crud/store.py
"""Ponto único de acesso a dados para guarda, auditoria e pipeline.

Tudo o que as regras de admissão precisam ler ou escrever passa por aqui,
de modo que elas possam ser testadas com qualquer implementação (SQLite em
memória nos testes, Postgres em produção).
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Protocol

from sqlalchemy.orm import Session

from attendguard.crud.attendance import attendance_crud
from attendguard.crud.enrollment import enrollment_crud
from attendguard.crud.session import session_crud
from attendguard.models.attendance import AttendanceRecord
from attendguard.models.enrollment import SectionEnrollment
from attendguard.models.session import AttendanceSession


class AttendanceStore(Protocol):
    # leitura
    def get_session(self, session_id: str) -> Optional[AttendanceSession]: ...
    def get_active_enrollment(self, student_id: str, section_id: str) -> Optional[SectionEnrollment]: ...
    def list_active_enrollments(self, section_id: str) -> List[SectionEnrollment]: ...
    def count_active_enrollments(self, section_id: str) -> int: ...
    def list_sessions_for_section_day(self, section_id: str, session_date: date) -> List[AttendanceSession]: ...
    def list_section_ids_in_use(self) -> List[str]: ...
    def get_attendance(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]: ...
    def list_marked_students(self, session_id: str) -> List[str]: ...
    def orphaned_attendance(self) -> List[AttendanceRecord]: ...
    def enrollments_missing_section(self) -> List[SectionEnrollment]: ...
    def enrollments_outside_sections(self, section_ids: Iterable[str]) -> List[SectionEnrollment]: ...
    def attendance_with_status_outside(self, allowed: Iterable[str]) -> List[AttendanceRecord]: ...
    def enrollments_with_status_outside(self, allowed: Iterable[str]) -> List[SectionEnrollment]: ...
    # escrita
    def insert_session(self, data: Dict[str, Any]) -> AttendanceSession: ...
    def update_session_status(self, session: AttendanceSession, status: str) -> AttendanceSession: ...
    def insert_enrollment(self, data: Dict[str, Any]) -> SectionEnrollment: ...
    def insert_attendance(self, *, session_id: str, student_id: str, status: str,
                          method_used: str, marked_at: datetime) -> AttendanceRecord: ...
    # remediação
    def delete_orphaned_attendance(self) -> int: ...
    def coerce_attendance_status(self, allowed: Iterable[str], default: str) -> int: ...
    def coerce_enrollment_status(self, allowed: Iterable[str], default: str) -> int: ...


class SqlAttendanceStore:
    def __init__(self, db: Session):
        self.db = db

    def get_session(self, session_id):
        return session_crud.get(self.db, session_id)

    def get_active_enrollment(self, student_id, section_id):
        return enrollment_crud.get_active(self.db, student_id=student_id, section_id=section_id)

    def list_active_enrollments(self, section_id):
        return enrollment_crud.list_active(self.db, section_id=section_id)

    def count_active_enrollments(self, section_id):
        return enrollment_crud.count_active(self.db, section_id=section_id)

    def list_sessions_for_section_day(self, section_id, session_date):
        return session_crud.list_for_section_day(self.db, section_id=section_id, session_date=session_date)

    def list_section_ids_in_use(self):
        return session_crud.section_ids_in_use(self.db)

    def get_attendance(self, session_id, student_id):
        return attendance_crud.get_for(self.db, session_id=session_id, student_id=student_id)

    def list_marked_students(self, session_id):
        return attendance_crud.students_marked(self.db, session_id=session_id)

    def orphaned_attendance(self):
        return attendance_crud.orphaned(self.db)

    def enrollments_missing_section(self):
        return enrollment_crud.missing_section(self.db)

    def enrollments_outside_sections(self, section_ids):
        return enrollment_crud.outside_sections(self.db, section_ids)

    def attendance_with_status_outside(self, allowed):
        return attendance_crud.status_outside(self.db, allowed)

    def enrollments_with_status_outside(self, allowed):
        return enrollment_crud.status_outside(self.db, allowed)

    def insert_session(self, data):
        return session_crud.create(self.db, data)

    def update_session_status(self, session, status):
        return session_crud.update(self.db, session, {"status": status})

    def insert_enrollment(self, data):
        return enrollment_crud.create(self.db, data)

    def insert_attendance(self, *, session_id, student_id, status, method_used, marked_at):
        return attendance_crud.insert(self.db, session_id=session_id, student_id=student_id,
                                      status=status, method_used=method_used, marked_at=marked_at)

    def delete_orphaned_attendance(self):
        return attendance_crud.delete_orphaned(self.db)

    def coerce_attendance_status(self, allowed, default):
        return attendance_crud.coerce_status(self.db, allowed, default)

    def coerce_enrollment_status(self, allowed, default):
        return enrollment_crud.coerce_status(self.db, allowed, default)
