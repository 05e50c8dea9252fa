# attendguard/services/qr.py
# Token rotativo exibido no QR: base64("<session_id>:<janela>").
# A codificação é reversível e sem assinatura: só impede reuso de um código
# capturado depois que a janela fecha, não impede forja.
from __future__ import annotations

import base64
import binascii
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel

from attendguard.core.config import settings


class TokenFailure(str, Enum):
    malformed_token = "malformed_token"
    session_mismatch = "session_mismatch"
    expired = "expired"


class TokenVerdict(BaseModel):
    ok: bool
    reason: Optional[TokenFailure] = None
    age_seconds: Optional[int] = None


def _bucket(now: datetime, rotation: int) -> int:
    return int(now.timestamp() // rotation)


def _decode(token: str) -> Optional[Tuple[str, str]]:
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None
    parts = raw.split(":")
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def issue_token(session_id: str, now: datetime) -> str:
    window = _bucket(now, settings.QR_ROTATION_SECONDS)
    return base64.b64encode(f"{session_id}:{window}".encode("utf-8")).decode("ascii")


def token_format_ok(token: str) -> bool:
    """Só formato (duas partes separadas por ':'); validade temporal fica com verify_token."""
    return _decode(token) is not None


def verify_token(token: str, expected_session_id: str, now: datetime) -> TokenVerdict:
    decoded = _decode(token or "")
    if decoded is None:
        return TokenVerdict(ok=False, reason=TokenFailure.malformed_token)
    session_id, window_raw = decoded
    try:
        window = int(window_raw)
    except ValueError:
        return TokenVerdict(ok=False, reason=TokenFailure.malformed_token)

    if session_id != expected_session_id:
        return TokenVerdict(ok=False, reason=TokenFailure.session_mismatch)

    now_ts = now.timestamp()
    issued_at = window * settings.QR_ROTATION_SECONDS
    # int x float compara sem converter: janelas gigantes não estouram
    age = int(now_ts) - issued_at
    if issued_at < now_ts - settings.QR_GRACE_SECONDS:
        return TokenVerdict(ok=False, reason=TokenFailure.expired, age_seconds=age)
    # janela muito no futuro: relógio do display adiantado além da tolerância
    if issued_at > now_ts + settings.QR_CLOCK_SKEW_SECONDS:
        return TokenVerdict(ok=False, reason=TokenFailure.expired, age_seconds=age)
    return TokenVerdict(ok=True, age_seconds=age)


def seconds_until_rotation(now: datetime) -> int:
    rotation = settings.QR_ROTATION_SECONDS
    return rotation - int(now.timestamp()) % rotation
