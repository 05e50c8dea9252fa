# attendguard/core/tokens.py
# Tokens de acesso emitidos pelo provedor de identidade (HS256, SECRET_KEY).
# Aqui só são usados para autorizar a remediação da auditoria.
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from attendguard.core.config import settings

def _now() -> datetime:
    return datetime.now(timezone.utc)

def create_access_token(*, sub: str, role: str, minutes: int = 30) -> str:
    payload: Dict[str, Any] = {
        "type": "access",
        "sub": sub,
        "role": role,
        "jti": uuid.uuid4().hex,
        "iat": int(_now().timestamp()),
        "exp": int((_now() + timedelta(minutes=minutes)).timestamp()),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access(token: str) -> Optional[Dict[str, Any]]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("type") != "access":
        return None
    if not payload.get("sub"):
        return None
    return payload
