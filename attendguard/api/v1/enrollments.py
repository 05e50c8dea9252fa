# attendguard/api/v1/enrollments.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from attendguard.api.deps import get_clock, get_store
from attendguard.api.responses import rejected
from attendguard.core.clock import Clock
from attendguard.crud.store import SqlAttendanceStore
from attendguard.schemas.enrollment import EnrollmentCreate, EnrollmentResult
from attendguard.services.attendance import enroll_student

router = APIRouter()

@router.post("/", response_model=EnrollmentResult, status_code=status.HTTP_201_CREATED)
def create_enrollment(
    body: EnrollmentCreate,
    store: SqlAttendanceStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    result = enroll_student(store, body, clock, section_capacity=body.section_capacity)
    if not result.ok:
        return rejected(result)
    return result
