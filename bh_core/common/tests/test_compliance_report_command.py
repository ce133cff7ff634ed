# backend/bh_core/common/tests/test_compliance_report_command.py
import json
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


@pytest.mark.django_db
def test_report_lists_failing_facilities(facility):
    out = StringIO()
    call_command("compliance_report", "--as-of", "2025-03-15", stdout=out)
    text = out.getvalue()
    assert "[FAIL] Sunrise House" in text
    assert "Fire drill for 2025-03 has not been recorded." in text
    assert "0 compliant, 1 out of compliance." in text


@pytest.mark.django_db
def test_report_json_output(facility):
    out = StringIO()
    call_command("compliance_report", "--facility", str(facility.id), "--json", "--as-of", "2025-03-15", stdout=out)
    row = json.loads(out.getvalue().strip())
    assert row["facility_id"] == facility.id
    assert row["in_compliance"] is False
    assert "OVERSIGHT_TRAINING" in row["obligation_issues"]


@pytest.mark.django_db
def test_report_rejects_unknown_facility_and_bad_date(facility):
    with pytest.raises(CommandError):
        call_command("compliance_report", "--facility", "999999", stdout=StringIO())
    with pytest.raises(CommandError):
        call_command("compliance_report", "--as-of", "March 15", stdout=StringIO())
