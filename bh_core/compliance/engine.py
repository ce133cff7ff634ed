# backend/bh_core/compliance/engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

import structlog
from django.utils import timezone

from bh_core.compliance.expiration import FAILING, ExpirationStatus, as_instant, classify_artifact
from bh_core.compliance.obligations import STRATEGY_BY_KIND, ObligationVerdict, evaluate_obligations
from bh_core.compliance.periods import Instant, Period, resolve_period
from bh_core.documents.models import Document, OwnerType
from bh_core.facilities.selectors import employees_for_facility
from bh_core.obligations.models import ObligationRecord

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ComplianceStatus:
    facility_id: int
    evaluated_at: datetime
    period: Period
    in_compliance: bool
    document_issues: list[int]
    document_warnings: list[int]
    obligation_issues: list[str]
    reasons: list[dict] = field(default_factory=list)
    obligations: list[ObligationVerdict] = field(default_factory=list)


@dataclass(frozen=True)
class EmployeeComplianceRow:
    employee_id: int
    status: str  # compliant | expiring_soon | non_compliant
    issues: list[int]
    warnings: list[int]


@dataclass(frozen=True)
class EmployeeComplianceSummary:
    facility_id: int
    compliant: int
    expiring_soon: int
    non_compliant: int
    employees: list[EmployeeComplianceRow]


def _obligation_reason(verdict: ObligationVerdict) -> dict:
    label = STRATEGY_BY_KIND[verdict.kind].label
    if verdict.record_count and verdict.missing_shifts:
        message = f"{label} for {verdict.window} is missing the {' and '.join(verdict.missing_shifts)} shift."
    else:
        message = f"{label} for {verdict.window} has not been recorded."
    return {"type": "obligation", "code": verdict.kind, "message": message}


def _document_reason(doc, status: ExpirationStatus) -> dict:
    if status == ExpirationStatus.AWAITING_UPLOAD:
        message = f"{doc.name} has been requested but not uploaded."
    else:
        message = f"{doc.name} has expired."
    return {"type": "document", "code": status.value, "message": message, "document_id": doc.id}


class ComplianceEngine:
    """
    Facility-level compliance, recomputed on every read.

    Never raises business errors: missing data classifies as the failing case.
    """

    @staticmethod
    def evaluate(
        *,
        facility_id: int,
        documents: Iterable,
        records: Iterable,
        now: Instant,
    ) -> ComplianceStatus:
        """
        Pure aggregation over already-loaded rows.
        ``documents`` must be the facility-owned documents only.
        """
        period = resolve_period(now)

        document_issues: list[int] = []
        document_warnings: list[int] = []
        reasons: list[dict] = []

        for doc in documents:
            status = classify_artifact(doc, now)
            if status in FAILING:
                document_issues.append(doc.id)
                reasons.append(_document_reason(doc, status))
            elif status == ExpirationStatus.EXPIRING_SOON:
                document_warnings.append(doc.id)

        verdicts = evaluate_obligations(records, period)
        obligation_issues = [v.kind for v in verdicts if not v.satisfied]
        reasons.extend(_obligation_reason(v) for v in verdicts if not v.satisfied)

        evaluated_at = as_instant(now)
        return ComplianceStatus(
            facility_id=facility_id,
            evaluated_at=evaluated_at,
            period=period,
            in_compliance=not document_issues and not obligation_issues,
            document_issues=document_issues,
            document_warnings=document_warnings,
            obligation_issues=obligation_issues,
            reasons=reasons,
            obligations=verdicts,
        )

    @staticmethod
    def get_compliance_status(*, facility_id: int, now: Instant | None = None) -> ComplianceStatus:
        now = now or timezone.now()
        period = resolve_period(now)

        documents = Document.objects.filter(facility_id=facility_id, owner_type=OwnerType.FACILITY)
        # Only rows that can match a current window are loaded.
        records = ObligationRecord.objects.filter(
            facility_id=facility_id,
            year__in={period.year, period.bi_week_year},
        )

        result = ComplianceEngine.evaluate(
            facility_id=facility_id,
            documents=list(documents),
            records=list(records),
            now=now,
        )
        logger.debug(
            "compliance.evaluated",
            facility_id=facility_id,
            in_compliance=result.in_compliance,
            obligation_issues=result.obligation_issues,
            document_issues=len(result.document_issues),
        )
        return result

    @staticmethod
    def employee_compliance(*, facility_id: int, now: Instant | None = None) -> EmployeeComplianceSummary:
        """
        Per-employee roll-up of EMPLOYEE-owned documents.
        Employees with no documents count as compliant.
        """
        now = now or timezone.now()

        employees = list(employees_for_facility(facility_id=facility_id))
        docs_by_employee: dict[int, list] = {e.id: [] for e in employees}
        for doc in Document.objects.filter(
            facility_id=facility_id,
            owner_type=OwnerType.EMPLOYEE,
            employee_id__in=list(docs_by_employee),
        ):
            docs_by_employee[doc.employee_id].append(doc)

        rows: list[EmployeeComplianceRow] = []
        for e in employees:
            issues, warnings = [], []
            for doc in docs_by_employee[e.id]:
                status = classify_artifact(doc, now)
                if status in FAILING:
                    issues.append(doc.id)
                elif status == ExpirationStatus.EXPIRING_SOON:
                    warnings.append(doc.id)

            if issues:
                label = "non_compliant"
            elif warnings:
                label = "expiring_soon"
            else:
                label = "compliant"
            rows.append(EmployeeComplianceRow(employee_id=e.id, status=label, issues=issues, warnings=warnings))

        return EmployeeComplianceSummary(
            facility_id=facility_id,
            compliant=sum(1 for r in rows if r.status == "compliant"),
            expiring_soon=sum(1 for r in rows if r.status == "expiring_soon"),
            non_compliant=sum(1 for r in rows if r.status == "non_compliant"),
            employees=rows,
        )


def get_compliance_status(facility_id: int, now: Instant | None = None) -> ComplianceStatus:
    return ComplianceEngine.get_compliance_status(facility_id=facility_id, now=now)


def employee_compliance(facility_id: int, now: Instant | None = None) -> EmployeeComplianceSummary:
    return ComplianceEngine.employee_compliance(facility_id=facility_id, now=now)
