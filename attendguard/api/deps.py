from typing import Any, Dict

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from attendguard.core.clock import Clock, SystemClock
from attendguard.core.tokens import decode_access
from attendguard.crud.store import SqlAttendanceStore
from attendguard.db.session import get_db

ROLE_ADMIN = "admin"

def get_store(db: Session = Depends(get_db)) -> SqlAttendanceStore:
    return SqlAttendanceStore(db)

def get_clock() -> Clock:
    return SystemClock()

# ----------------------------------------------------------------------
# Lê o Bearer do header Authorization (sem usar OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1]

def require_admin(token: str = Depends(get_bearer_token)) -> Dict[str, Any]:
    payload = decode_access(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if payload.get("role") != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Insufficient role")
    return payload
