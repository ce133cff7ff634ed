# backend/bh_core/compliance/tests/test_engine.py
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from bh_core.compliance.engine import ComplianceEngine, employee_compliance, get_compliance_status
from bh_core.documents.models import Document, DocumentStatus, OwnerType
from bh_core.facilities.models import Employee
from bh_core.obligations.services import ObligationService

pytestmark = pytest.mark.django_db

NOW = datetime(2025, 3, 15, 12, tzinfo=ZoneInfo("America/Phoenix"))


def submit(actor, facility, kind, performed_on, shift=None, **kw):
    return ObligationService.submit(
        actor=actor,
        facility_id=facility.id,
        kind=kind,
        performed_on=performed_on,
        shift=shift,
        **kw,
    )


def satisfy_all(actor, facility):
    submit(actor, facility, "FIRE_DRILL", date(2025, 3, 3), "AM")
    submit(actor, facility, "FIRE_DRILL", date(2025, 3, 4), "PM")
    submit(actor, facility, "EVACUATION_DRILL", date(2025, 1, 10), "AM")
    submit(actor, facility, "EVACUATION_DRILL", date(2025, 2, 10), "PM")
    submit(actor, facility, "DISASTER_DRILL", date(2025, 1, 20), "AM")
    submit(actor, facility, "DISASTER_DRILL", date(2025, 2, 20), "PM")
    submit(actor, facility, "OVERSIGHT_TRAINING", date(2025, 3, 12))


def facility_doc(facility, *, status=DocumentStatus.UPLOADED, expires_at=None, name="Fire inspection"):
    return Document.objects.create(
        facility=facility,
        owner_type=OwnerType.FACILITY,
        name=name,
        doc_type="inspection",
        status=status,
        expires_at=expires_at,
    )


def test_fire_drill_missing_pm_shift_is_reported(bhrf_actor, facility):
    submit(bhrf_actor, facility, "FIRE_DRILL", date(2025, 3, 3), "AM")

    result = get_compliance_status(facility.id, NOW)
    assert result.in_compliance is False
    assert "FIRE_DRILL" in result.obligation_issues
    fire = next(v for v in result.obligations if v.kind == "FIRE_DRILL")
    assert fire.missing_shifts == ("PM",)
    assert any("missing the PM shift" in r["message"] for r in result.reasons)

    submit(bhrf_actor, facility, "FIRE_DRILL", date(2025, 3, 20), "PM")
    result = get_compliance_status(facility.id, NOW)
    assert "FIRE_DRILL" not in result.obligation_issues


def test_all_obligations_met_is_in_compliance(bhrf_actor, facility):
    satisfy_all(bhrf_actor, facility)
    status = get_compliance_status(facility.id, NOW)
    assert status.in_compliance is True
    assert status.reasons == []
    assert all(v.satisfied for v in status.obligations)


def test_march_records_do_not_carry_into_april(bhrf_actor, facility):
    satisfy_all(bhrf_actor, facility)
    april = datetime(2025, 4, 2, 12, tzinfo=ZoneInfo("America/Phoenix"))
    status = get_compliance_status(facility.id, april)
    assert "FIRE_DRILL" in status.obligation_issues
    assert "DISASTER_DRILL" in status.obligation_issues
    # Q1 evacuation drills still cover H1
    assert "EVACUATION_DRILL" not in status.obligation_issues


def test_empty_facility_fails_every_obligation(facility):
    status = ComplianceEngine.get_compliance_status(facility_id=facility.id, now=NOW)
    assert status.in_compliance is False
    assert set(status.obligation_issues) == {
        "FIRE_DRILL",
        "EVACUATION_DRILL",
        "DISASTER_DRILL",
        "OVERSIGHT_TRAINING",
    }
    assert status.document_issues == []
    assert status.period.month == 3
    assert status.period.quarter == "Q1"
    assert status.period.bi_week == 6
    assert status.evaluated_at == NOW


def test_date_reference_reports_start_of_that_day(facility):
    status = ComplianceEngine.get_compliance_status(facility_id=facility.id, now=date(2025, 3, 15))
    assert status.evaluated_at == datetime(2025, 3, 15, tzinfo=ZoneInfo("America/Phoenix"))
    assert status.period.month == 3


def test_requested_and_expired_documents_fail_compliance(bhrf_actor, facility):
    satisfy_all(bhrf_actor, facility)
    requested = facility_doc(facility, status=DocumentStatus.REQUESTED, name="Insurance")
    expired = facility_doc(facility, expires_at=date(2025, 3, 14), name="License")
    soon = facility_doc(facility, expires_at=date(2025, 4, 10), name="Permit")
    facility_doc(facility, expires_at=date(2026, 1, 1), name="Lease")

    status = get_compliance_status(facility.id, NOW)
    assert status.in_compliance is False
    assert sorted(status.document_issues) == sorted([requested.id, expired.id])
    assert status.document_warnings == [soon.id]
    assert status.obligation_issues == []
    codes = {r["code"] for r in status.reasons if r["type"] == "document"}
    assert codes == {"awaiting_upload", "expired"}


def test_expiring_documents_warn_without_failing(bhrf_actor, facility):
    satisfy_all(bhrf_actor, facility)
    facility_doc(facility, expires_at=date(2025, 3, 15))

    status = get_compliance_status(facility.id, NOW)
    assert status.in_compliance is True
    assert len(status.document_warnings) == 1


def test_employee_documents_do_not_affect_facility_status(bhrf_actor, facility, employee):
    satisfy_all(bhrf_actor, facility)
    Document.objects.create(
        facility=facility,
        owner_type=OwnerType.EMPLOYEE,
        employee=employee,
        name="CPR card",
        doc_type="cpr",
        status=DocumentStatus.REQUESTED,
    )
    assert get_compliance_status(facility.id, NOW).in_compliance is True


def test_other_facility_records_do_not_count(bhrf_actor, other_bhrf_actor, facility, other_facility):
    satisfy_all(other_bhrf_actor, other_facility)
    assert get_compliance_status(other_facility.id, NOW).in_compliance is True
    assert get_compliance_status(facility.id, NOW).in_compliance is False


def test_employee_compliance_rollup(facility, employee):
    expiring = Employee.objects.create(facility=facility, full_name="Casey Diaz", position="RN")
    failing = Employee.objects.create(facility=facility, full_name="Blake Ortiz", position="BHT")
    Employee.objects.create(facility=facility, full_name="Former Staff", is_active=False)

    def emp_doc(emp, **kw):
        return Document.objects.create(
            facility=facility,
            owner_type=OwnerType.EMPLOYEE,
            employee=emp,
            name="Fingerprint clearance",
            doc_type="fingerprint",
            **kw,
        )

    emp_doc(employee, status=DocumentStatus.UPLOADED, expires_at=date(2026, 6, 1))
    warn = emp_doc(expiring, status=DocumentStatus.UPLOADED, expires_at=date(2025, 3, 30))
    fail = emp_doc(failing, status=DocumentStatus.UPLOADED, expires_at=date(2025, 1, 1))

    summary = employee_compliance(facility.id, NOW)
    assert (summary.compliant, summary.expiring_soon, summary.non_compliant) == (1, 1, 1)
    rows = {r.employee_id: r for r in summary.employees}
    assert set(rows) == {employee.id, expiring.id, failing.id}
    assert rows[expiring.id].warnings == [warn.id]
    assert rows[failing.id].issues == [fail.id]
    assert rows[employee.id].status == "compliant"
