import uuid
from datetime import date, time, datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, Date, Time, DateTime, func
from attendguard.db.base import Base

def new_id() -> str:
    return str(uuid.uuid4())

class AttendanceSession(Base):
    __tablename__ = "attendance_sessions"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    course_id: Mapped[str] = mapped_column(String(36))
    section_id: Mapped[str] = mapped_column(String(36), index=True)
    session_name: Mapped[str] = mapped_column(String(100))
    session_date: Mapped[date] = mapped_column(Date)
    start_time: Mapped[time] = mapped_column(Time)
    end_time: Mapped[time] = mapped_column(Time)
    location: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # string (não Enum) para que valores corrompidos continuem legíveis
    status: Mapped[str] = mapped_column(String(20), default="scheduled")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    records = relationship("AttendanceRecord", back_populates="session")
