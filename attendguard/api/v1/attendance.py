# attendguard/api/v1/attendance.py
from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from attendguard.api.deps import get_clock, get_store
from attendguard.api.responses import rejected
from attendguard.core.clock import Clock
from attendguard.crud.store import SqlAttendanceStore
from attendguard.schemas.attendance import AttendanceResult, AttendanceScan
from attendguard.services.attendance import mark_attendance

router = APIRouter()

# POST /sessions/{id}/attendance: leitura do QR (ou reconhecimento facial)
@router.post("/{session_id}/attendance", response_model=AttendanceResult, status_code=status.HTTP_201_CREATED)
def scan(
    session_id: str,
    body: AttendanceScan = Body(...),
    store: SqlAttendanceStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    result = mark_attendance(store, session_id, body.student_id, body.token, body.method, clock.now())
    if not result.ok:
        return rejected(result)
    return result
