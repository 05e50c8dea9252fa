from __future__ import annotations
from datetime import date, time, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from attendguard.schemas.errors import AppError

# ---------------------------
# Session Schemas
# ---------------------------

class SessionStatus(str, Enum):
    scheduled = "scheduled"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


class SessionCreate(BaseModel):
    # strings cruas: o formato é checado pelos validadores do domínio,
    # não pela coerção do pydantic, para que todos os erros saiam juntos
    course_id: Optional[str] = None
    section_id: Optional[str] = None
    session_name: Optional[str] = None
    session_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    capacity: Optional[int] = None
    status: Optional[str] = None


class SessionOut(BaseModel):
    id: str
    course_id: str
    section_id: str
    session_name: str
    session_date: date
    start_time: time
    end_time: time
    location: Optional[str] = None
    capacity: Optional[int] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SessionStatusUpdate(BaseModel):
    status: SessionStatus


class SessionResult(BaseModel):
    ok: bool
    session: Optional[SessionOut] = None
    warnings: List[str] = Field(default_factory=list)
    error: Optional[AppError] = None


class StatusChangeResult(BaseModel):
    ok: bool
    session: Optional[SessionOut] = None
    absent_marked: int = 0
    error: Optional[AppError] = None


class TokenOut(BaseModel):
    session_id: str
    token: str
    rotation_seconds: int
    expires_in: int
