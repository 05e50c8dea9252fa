from __future__ import annotations
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class IssueKind(str, Enum):
    orphaned_record = "orphaned_record"
    missing_reference = "missing_reference"
    invalid_status = "invalid_status"
    data_mismatch = "data_mismatch"


class IssueSeverity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class ConsistencyIssue(BaseModel):
    kind: IssueKind
    table: str
    record_id: str
    description: str
    severity: IssueSeverity
    suggested_action: Optional[str] = None


class ConsistencyCheckResult(BaseModel):
    is_consistent: bool
    issues: List[ConsistencyIssue] = Field(default_factory=list)
    by_severity: Dict[str, int] = Field(default_factory=dict)
    fixed: int = 0
    warnings: List[str] = Field(default_factory=list)


class RemediationKind(str, Enum):
    orphaned_attendance = "orphaned_attendance"
    invalid_status = "invalid_status"
    invalid_enrollment_status = "invalid_enrollment_status"


class RemediationRequest(BaseModel):
    kind: RemediationKind


class RemediationResult(BaseModel):
    kind: RemediationKind
    fixed: int
    authorized_by: str
