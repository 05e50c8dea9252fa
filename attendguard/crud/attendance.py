from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, update, delete, or_
from sqlalchemy.exc import IntegrityError
from attendguard.crud.base import CRUDBase
from attendguard.core.exceptions import AlreadyMarked
from attendguard.models.attendance import AttendanceRecord
from attendguard.models.session import AttendanceSession

class CRUDAttendance(CRUDBase[AttendanceRecord]):
    def get_for(self, db: Session, *, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        return db.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.session_id == session_id,
                AttendanceRecord.student_id == student_id,
            )
        ).scalar_one_or_none()

    def insert(self, db: Session, *, session_id: str, student_id: str, status: str,
               method_used: str, marked_at: datetime) -> AttendanceRecord:
        att = AttendanceRecord(session_id=session_id, student_id=student_id, status=status,
                               method_used=method_used, marked_at=marked_at)
        db.add(att)
        try:
            db.commit()
        except IntegrityError:
            # outra marcação para o mesmo (sessão, aluno) venceu a corrida
            db.rollback()
            raise AlreadyMarked()
        db.refresh(att)
        return att

    def students_marked(self, db: Session, *, session_id: str) -> List[str]:
        return list(db.scalars(select(AttendanceRecord.student_id).where(AttendanceRecord.session_id == session_id)).all())

    # ---- varreduras de consistência ----

    def orphaned(self, db: Session) -> List[AttendanceRecord]:
        live = select(AttendanceSession.id)
        stmt = select(AttendanceRecord).where(AttendanceRecord.session_id.not_in(live)).order_by(AttendanceRecord.id)
        return list(db.scalars(stmt).all())

    def status_outside(self, db: Session, allowed: Iterable[str]) -> List[AttendanceRecord]:
        stmt = select(AttendanceRecord).where(
            or_(AttendanceRecord.status.is_(None), AttendanceRecord.status.not_in(list(allowed)))
        ).order_by(AttendanceRecord.id)
        return list(db.scalars(stmt).all())

    # ---- remediação (destrutiva) ----

    def delete_orphaned(self, db: Session) -> int:
        live = select(AttendanceSession.id)
        res = db.execute(
            delete(AttendanceRecord)
            .where(AttendanceRecord.session_id.not_in(live))
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return res.rowcount or 0

    def coerce_status(self, db: Session, allowed: Iterable[str], default: str) -> int:
        res = db.execute(
            update(AttendanceRecord)
            .where(or_(AttendanceRecord.status.is_(None), AttendanceRecord.status.not_in(list(allowed))))
            .values(status=default)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return res.rowcount or 0

attendance_crud = CRUDAttendance(AttendanceRecord)
