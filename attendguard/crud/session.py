from datetime import date
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select
from attendguard.crud.base import CRUDBase
from attendguard.models.session import AttendanceSession

class CRUDSession(CRUDBase[AttendanceSession]):
    def list_for_section_day(self, db: Session, *, section_id: str, session_date: date) -> List[AttendanceSession]:
        # canceladas não ocupam horário
        stmt = (
            select(AttendanceSession)
            .where(
                AttendanceSession.section_id == section_id,
                AttendanceSession.session_date == session_date,
                AttendanceSession.status != "cancelled",
            )
            .order_by(AttendanceSession.start_time, AttendanceSession.id)
        )
        return list(db.scalars(stmt).all())

    def section_ids_in_use(self, db: Session) -> List[str]:
        stmt = (
            select(AttendanceSession.section_id)
            .where(AttendanceSession.section_id.is_not(None), AttendanceSession.section_id != "")
            .distinct()
            .order_by(AttendanceSession.section_id)
        )
        return list(db.scalars(stmt).all())

session_crud = CRUDSession(AttendanceSession)
