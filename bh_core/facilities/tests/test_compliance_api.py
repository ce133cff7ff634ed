# backend/bh_core/facilities/tests/test_compliance_api.py
from datetime import date

import pytest

from bh_core.documents.models import Document, DocumentStatus, OwnerType
from bh_core.obligations.models import ObligationRecord


@pytest.mark.django_db
def test_compliance_endpoint_reports_missing_obligations(bhp_client, facility):
    ObligationRecord.objects.create(
        facility=facility, kind="FIRE_DRILL", shift="AM", performed_on=date(2025, 3, 3), month=3, year=2025
    )

    resp = bhp_client.get(f"/api/v1/facilities/{facility.id}/compliance/", {"as_of": "2025-03-15"})
    assert resp.status_code == 200
    assert resp.data["facility_id"] == facility.id
    assert resp.data["in_compliance"] is False
    assert "FIRE_DRILL" in resp.data["obligation_issues"]
    assert resp.data["period"]["quarter"] == "Q1"
    assert resp.data["period"]["bi_week"] == 6

    fire = next(o for o in resp.data["obligations"] if o["kind"] == "FIRE_DRILL")
    assert fire["window"] == "2025-03"
    assert fire["missing_shifts"] == ["PM"]


@pytest.mark.django_db
def test_compliance_endpoint_is_scoped(other_bhrf_client, facility):
    resp = other_bhrf_client.get(f"/api/v1/facilities/{facility.id}/compliance/")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_employee_compliance_endpoint(bhrf_client, facility, employee):
    Document.objects.create(
        facility=facility,
        owner_type=OwnerType.EMPLOYEE,
        employee=employee,
        name="Fingerprint clearance",
        doc_type="fingerprint",
        status=DocumentStatus.REQUESTED,
    )

    resp = bhrf_client.get(f"/api/v1/facilities/{facility.id}/employee-compliance/", {"as_of": "2025-03-15"})
    assert resp.status_code == 200
    assert resp.data["non_compliant"] == 1
    assert resp.data["employees"][0]["employee_id"] == employee.id
    assert resp.data["employees"][0]["status"] == "non_compliant"
