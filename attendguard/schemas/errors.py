from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ErrorCategory(str, Enum):
    network = "network"
    database = "database"
    validation = "validation"
    authentication = "authentication"
    authorization = "authorization"
    not_found = "not_found"
    unknown = "unknown"


class ErrorSeverity(str, Enum):
    info = "info"
    warning = "warning"
    error = "error"
    critical = "critical"


class AppError(BaseModel):
    id: str
    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    details: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime
    retryable: bool
    retry_count: int = 0
    suggested_action: Optional[str] = None
