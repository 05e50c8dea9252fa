# attendguard/core/config.py
import os
from typing import ClassVar
from pydantic import BaseModel, Field

def _default_database_url() -> str:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "./data"))
    return os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(data_dir, 'attendance.db')}")

def _env_int(name: str, default: int):
    return lambda: int(os.getenv(name, str(default)))

class Settings(BaseModel):
    # Constante (não vira campo Pydantic)
    DATA_DIR: ClassVar[str] = os.path.abspath(os.getenv("DATA_DIR", "./data"))

    DATABASE_URL: str = Field(default_factory=_default_database_url)
    SECRET_KEY: str = Field(default_factory=lambda: os.getenv("SECRET_KEY", "CHANGE_ME_SUPER_SECRET"))
    ALGORITHM: str = "HS256"
    TIMEZONE: str = Field(default_factory=lambda: os.getenv("TIMEZONE", "UTC"))
    LOG_LEVEL: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # token rotativo
    QR_ROTATION_SECONDS: int = Field(default_factory=_env_int("QR_ROTATION_SECONDS", 60))
    QR_GRACE_SECONDS: int = Field(default_factory=_env_int("QR_GRACE_SECONDS", 120))
    QR_CLOCK_SKEW_SECONDS: int = Field(default_factory=_env_int("QR_CLOCK_SKEW_SECONDS", 300))

    # regras de validação
    MAX_FUTURE_DAYS: int = Field(default_factory=_env_int("MAX_FUTURE_DAYS", 365))
    MIN_SESSION_MINUTES: int = Field(default_factory=_env_int("MIN_SESSION_MINUTES", 15))
    MAX_SESSION_MINUTES: int = Field(default_factory=_env_int("MAX_SESSION_MINUTES", 8 * 60))
    CAPACITY_WARNING_THRESHOLD: int = Field(default_factory=_env_int("CAPACITY_WARNING_THRESHOLD", 200))
    LATE_AFTER_MINUTES: int = Field(default_factory=_env_int("LATE_AFTER_MINUTES", 15))

    # retry
    RETRY_BASE_SECONDS: float = Field(default_factory=lambda: float(os.getenv("RETRY_BASE_SECONDS", "1")))
    RETRY_MAX_SECONDS: float = Field(default_factory=lambda: float(os.getenv("RETRY_MAX_SECONDS", "10")))

settings = Settings()
