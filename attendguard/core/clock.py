# attendguard/core/clock.py
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Protocol
from zoneinfo import ZoneInfo

from attendguard.core.config import settings


class Clock(Protocol):
    def now(self) -> datetime: ...
    def today(self) -> date: ...


class SystemClock:
    """Relógio real, no fuso configurado (TIMEZONE)."""

    def __init__(self, tz: str | None = None):
        self.tz = ZoneInfo(tz or settings.TIMEZONE)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Relógio parado num instante; usado em testes e reprocessamentos."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def today(self) -> date:
        return self.instant.date()


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)
