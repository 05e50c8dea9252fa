from __future__ import annotations
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from attendguard.schemas.errors import AppError

class EnrollmentStatus(str, Enum):
    active="active"
    inactive="inactive"
    withdrawn="withdrawn"

class EnrollmentCreate(BaseModel):
    student_id: Optional[str] = None
    section_id: Optional[str] = None
    enrollment_date: Optional[str] = None
    status: Optional[str] = None
    # capacidade da turma, quando o chamador a conhece
    section_capacity: Optional[int] = None

class EnrollmentOut(BaseModel):
    id: str
    student_id: str
    section_id: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class EnrollmentResult(BaseModel):
    ok: bool
    enrollment: Optional[EnrollmentOut] = None
    warnings: List[str] = Field(default_factory=list)
    error: Optional[AppError] = None
