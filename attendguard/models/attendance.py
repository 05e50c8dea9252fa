from enum import Enum
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, UniqueConstraint, DateTime, String
from attendguard.db.base import Base
from attendguard.models.session import new_id

class AttendanceOrigin(str, Enum):
    qr_code="qr_code"
    facial_recognition="facial_recognition"
    auto="auto"

class AttendanceRecord(Base):
    __tablename__ = "attendance_records"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    session_id: Mapped[str] = mapped_column(ForeignKey("attendance_sessions.id"))
    student_id: Mapped[str] = mapped_column(String(36))
    status: Mapped[str] = mapped_column(String(20))
    method_used: Mapped[str] = mapped_column(String(20), default=AttendanceOrigin.qr_code.value)
    marked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    session = relationship("AttendanceSession", back_populates="records")

    # a unicidade (sessão, aluno) é o que resolve duas marcações concorrentes
    __table_args__ = (UniqueConstraint("session_id","student_id", name="uq_attendance_unique"),)
