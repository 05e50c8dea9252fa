# attendguard/api/v1/audit.py
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from attendguard.api.deps import get_store, require_admin
from attendguard.crud.store import SqlAttendanceStore
from attendguard.schemas.audit import ConsistencyCheckResult, RemediationRequest, RemediationResult
from attendguard.services.attendance import run_consistency_audit
from attendguard.services.audit import remediate

router = APIRouter()

@router.get("/", response_model=ConsistencyCheckResult)
def audit(store: SqlAttendanceStore = Depends(get_store)):
    return run_consistency_audit(store)

# destrutivo: só com token de admin, nunca disparado pela auditoria
@router.post("/remediate", response_model=RemediationResult)
def remediate_issues(
    body: RemediationRequest,
    store: SqlAttendanceStore = Depends(get_store),
    admin: Dict[str, Any] = Depends(require_admin),
):
    fixed = remediate(store, body.kind, authorized_by=admin["sub"])
    return RemediationResult(kind=body.kind, fixed=fixed, authorized_by=admin["sub"])
