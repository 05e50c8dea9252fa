# attendguard/services/audit.py
"""Varreduras de consistência sobre o banco.

A auditoria só lê. A correção (remediate) é uma entrada separada e
destrutiva, que exige um responsável identificado e nunca é chamada pela
auditoria.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import List

from attendguard.core.exceptions import NotAuthorized
from attendguard.crud.store import AttendanceStore
from attendguard.schemas.attendance import AttendanceStatus
from attendguard.schemas.audit import (
    ConsistencyCheckResult,
    ConsistencyIssue,
    IssueKind,
    IssueSeverity,
    RemediationKind,
)
from attendguard.schemas.enrollment import EnrollmentStatus

logger = logging.getLogger(__name__)

ATTENDANCE_STATUSES = [s.value for s in AttendanceStatus]
ENROLLMENT_STATUSES = [s.value for s in EnrollmentStatus]


class ConsistencyAuditor:
    def __init__(self, store: AttendanceStore):
        self.store = store

    def orphaned_attendance(self) -> List[ConsistencyIssue]:
        return [
            ConsistencyIssue(
                kind=IssueKind.orphaned_record,
                table="attendance_records",
                record_id=rec.id,
                description=f"Attendance record references non-existent session {rec.session_id}",
                severity=IssueSeverity.medium,
                suggested_action="Remove orphaned record or restore session",
            )
            for rec in self.store.orphaned_attendance()
        ]

    def enrollments_without_section(self) -> List[ConsistencyIssue]:
        return [
            ConsistencyIssue(
                kind=IssueKind.orphaned_record,
                table="section_enrollments",
                record_id=enr.id,
                description="Enrollment record has invalid or missing section_id",
                severity=IssueSeverity.high,
                suggested_action="Remove invalid enrollment or fix section reference",
            )
            for enr in self.store.enrollments_missing_section()
        ]

    def enrollments_with_unknown_section(self) -> List[ConsistencyIssue]:
        # turmas "conhecidas" = as que aparecem em alguma sessão
        known = self.store.list_section_ids_in_use()
        if not known:
            return []
        return [
            ConsistencyIssue(
                kind=IssueKind.missing_reference,
                table="section_enrollments",
                record_id=enr.id,
                description=f"Enrollment references non-existent section {enr.section_id}",
                severity=IssueSeverity.high,
                suggested_action="Remove enrollment or create missing section",
            )
            for enr in self.store.enrollments_outside_sections(known)
        ]

    def invalid_attendance_status(self) -> List[ConsistencyIssue]:
        return [
            ConsistencyIssue(
                kind=IssueKind.invalid_status,
                table="attendance_records",
                record_id=rec.id,
                description=f"Attendance record has invalid status: {rec.status}",
                severity=IssueSeverity.medium,
                suggested_action="Update status to valid value (present, late, or absent)",
            )
            for rec in self.store.attendance_with_status_outside(ATTENDANCE_STATUSES)
        ]

    def invalid_enrollment_status(self) -> List[ConsistencyIssue]:
        return [
            ConsistencyIssue(
                kind=IssueKind.invalid_status,
                table="section_enrollments",
                record_id=enr.id,
                description=f"Enrollment has invalid status: {enr.status}",
                severity=IssueSeverity.medium,
                suggested_action="Update status to valid value (active, inactive, or withdrawn)",
            )
            for enr in self.store.enrollments_with_status_outside(ENROLLMENT_STATUSES)
        ]

    def run(self) -> ConsistencyCheckResult:
        logger.info("running data consistency checks")
        issues = [
            *self.orphaned_attendance(),
            *self.enrollments_without_section(),
            *self.enrollments_with_unknown_section(),
            *self.invalid_attendance_status(),
            *self.invalid_enrollment_status(),
        ]

        counts = Counter(issue.severity.value for issue in issues)
        by_severity = {sev.value: counts.get(sev.value, 0) for sev in IssueSeverity}

        warnings = []
        if by_severity["critical"]:
            warnings.append(f"{by_severity['critical']} critical issues found - immediate attention required")
        if by_severity["high"]:
            warnings.append(f"{by_severity['high']} high-severity issues found")

        if issues:
            logger.warning("consistency check complete: %d issues found %s", len(issues), by_severity)
        else:
            logger.info("consistency check complete: all good")

        return ConsistencyCheckResult(
            is_consistent=not issues,
            issues=issues,
            by_severity=by_severity,
            fixed=0,
            warnings=warnings,
        )


def remediate(store: AttendanceStore, kind: RemediationKind, *, authorized_by: str) -> int:
    """Aplica correção em massa. Destrutivo: apaga ou reescreve linhas."""
    if not authorized_by or not authorized_by.strip():
        raise NotAuthorized("Remediation requires an explicitly authorized operator",
                            suggested_action="Run remediation with an administrator account")

    if kind == RemediationKind.orphaned_attendance:
        fixed = store.delete_orphaned_attendance()
    elif kind == RemediationKind.invalid_status:
        fixed = store.coerce_attendance_status(ATTENDANCE_STATUSES, AttendanceStatus.absent.value)
    elif kind == RemediationKind.invalid_enrollment_status:
        fixed = store.coerce_enrollment_status(ENROLLMENT_STATUSES, EnrollmentStatus.inactive.value)
    else:
        raise ValueError(f"Unknown remediation kind: {kind}")

    logger.warning("remediation %s by %s changed %d rows", kind.value, authorized_by, fixed)
    return fixed
