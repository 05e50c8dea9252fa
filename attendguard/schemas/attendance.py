from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel

from attendguard.schemas.errors import AppError


class AttendanceMethod(str, Enum):
    qr_code = "qr_code"
    facial_recognition = "facial_recognition"


class AttendanceStatus(str, Enum):
    present = "present"
    late = "late"
    absent = "absent"


# ---- entrada: o que o aluno apresenta ----

class AttendanceMark(BaseModel):
    session_id: Optional[str] = None
    student_id: Optional[str] = None
    method: Optional[str] = None
    token: Optional[str] = None


class AttendanceScan(BaseModel):
    """Corpo do POST /sessions/{id}/attendance (session_id vem da rota)."""
    student_id: str
    method: str = AttendanceMethod.qr_code.value
    token: Optional[str] = None


# ---- resposta principal ----

class AttendanceEventOut(BaseModel):
    id: str
    session_id: str
    student_id: str
    status: str
    method_used: str
    marked_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AttendanceResult(BaseModel):
    ok: bool
    attendance: Optional[AttendanceEventOut] = None
    error: Optional[AppError] = None
