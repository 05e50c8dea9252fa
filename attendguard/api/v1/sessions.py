# attendguard/api/v1/sessions.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from attendguard.api.deps import get_clock, get_store
from attendguard.api.responses import rejected
from attendguard.core.clock import Clock
from attendguard.core.config import settings
from attendguard.crud.store import SqlAttendanceStore
from attendguard.schemas.session import (
    SessionCreate,
    SessionResult,
    SessionStatusUpdate,
    StatusChangeResult,
    TokenOut,
)
from attendguard.services.attendance import advance_session_status, create_session
from attendguard.services.qr import issue_token, seconds_until_rotation

router = APIRouter()

@router.post("/", response_model=SessionResult, status_code=status.HTTP_201_CREATED)
def create(
    body: SessionCreate,
    store: SqlAttendanceStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    result = create_session(store, body, clock)
    if not result.ok:
        return rejected(result)
    return result

# GET /sessions/{id}/token -> código atual exibido no QR + contagem regressiva
@router.get("/{session_id}/token", response_model=TokenOut)
def current_token(
    session_id: str,
    store: SqlAttendanceStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    session = store.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    if session.status in {"cancelled", "completed"}:
        raise HTTPException(status_code=409, detail=f"Session is {session.status}")
    now = clock.now()
    return TokenOut(
        session_id=session_id,
        token=issue_token(session_id, now),
        rotation_seconds=settings.QR_ROTATION_SECONDS,
        expires_in=seconds_until_rotation(now),
    )

@router.post("/{session_id}/status", response_model=StatusChangeResult)
def change_status(
    session_id: str,
    body: SessionStatusUpdate,
    store: SqlAttendanceStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    result = advance_session_status(store, session_id, body.status.value, clock)
    if not result.ok:
        return rejected(result)
    return result
