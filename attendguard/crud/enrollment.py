from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, update, func, or_
from attendguard.crud.base import CRUDBase
from attendguard.models.enrollment import SectionEnrollment

class CRUDEnrollment(CRUDBase[SectionEnrollment]):
    def get_active(self, db: Session, *, student_id: str, section_id: str) -> Optional[SectionEnrollment]:
        stmt = (
            select(SectionEnrollment)
            .where(
                SectionEnrollment.student_id == student_id,
                SectionEnrollment.section_id == section_id,
                SectionEnrollment.status == "active",
            )
            .order_by(SectionEnrollment.id)
            .limit(1)
        )
        return db.scalars(stmt).first()

    def list_active(self, db: Session, *, section_id: str) -> List[SectionEnrollment]:
        stmt = select(SectionEnrollment).where(
            SectionEnrollment.section_id == section_id,
            SectionEnrollment.status == "active",
        ).order_by(SectionEnrollment.student_id)
        return list(db.scalars(stmt).all())

    def count_active(self, db: Session, *, section_id: str) -> int:
        return db.scalar(
            select(func.count()).select_from(SectionEnrollment).where(
                SectionEnrollment.section_id == section_id,
                SectionEnrollment.status == "active",
            )
        ) or 0

    # ---- varreduras de consistência ----

    def missing_section(self, db: Session) -> List[SectionEnrollment]:
        stmt = select(SectionEnrollment).where(
            or_(SectionEnrollment.section_id.is_(None), SectionEnrollment.section_id == "")
        ).order_by(SectionEnrollment.id)
        return list(db.scalars(stmt).all())

    def outside_sections(self, db: Session, section_ids: Iterable[str]) -> List[SectionEnrollment]:
        stmt = select(SectionEnrollment).where(
            SectionEnrollment.section_id.is_not(None),
            SectionEnrollment.section_id != "",
            SectionEnrollment.section_id.not_in(list(section_ids)),
        ).order_by(SectionEnrollment.id)
        return list(db.scalars(stmt).all())

    def status_outside(self, db: Session, allowed: Iterable[str]) -> List[SectionEnrollment]:
        stmt = select(SectionEnrollment).where(
            or_(SectionEnrollment.status.is_(None), SectionEnrollment.status.not_in(list(allowed)))
        ).order_by(SectionEnrollment.id)
        return list(db.scalars(stmt).all())

    # ---- remediação (destrutiva) ----

    def coerce_status(self, db: Session, allowed: Iterable[str], default: str) -> int:
        res = db.execute(
            update(SectionEnrollment)
            .where(or_(SectionEnrollment.status.is_(None), SectionEnrollment.status.not_in(list(allowed))))
            .values(status=default)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return res.rowcount or 0

enrollment_crud = CRUDEnrollment(SectionEnrollment)
