from datetime import date, datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Date, DateTime, func
from attendguard.db.base import Base
from attendguard.models.session import new_id

class SectionEnrollment(Base):
    __tablename__ = "section_enrollments"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    student_id: Mapped[str] = mapped_column(String(36), index=True)
    # anulável: matrícula sem turma é um defeito que a auditoria precisa enxergar
    section_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    enrollment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
