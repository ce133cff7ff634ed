# backend/bh_core/audit/tests/test_audit_events.py
import pytest

from bh_core.audit.models import AuditEvent, AuditImmutableError
from bh_core.audit.services import AuditEntry, AuditService


def _append(facility, user_id, code="intake.submitted", entity_id=1, **metadata):
    return AuditService.append(
        AuditEntry(
            event_code=code,
            entity_type="ClinicalRecord",
            entity_id=entity_id,
            facility_id=facility.id,
            actor_user_id=user_id,
            metadata={"from_status": "DRAFT", "to_status": "PENDING", **metadata},
        )
    )


@pytest.mark.django_db
def test_append_persists_event(facility, bhrf_user):
    ev = _append(facility, bhrf_user.id)
    assert ev.pk
    ev = AuditEvent.objects.get(pk=ev.pk)
    assert ev.event_code == "intake.submitted"
    assert ev.metadata["to_status"] == "PENDING"
    assert ev.occurred_at is not None


@pytest.mark.django_db
def test_clinical_content_is_redacted(facility, bhrf_user):
    ev = _append(facility, bhrf_user.id, content={"religion": "x"}, subject_name="Alex Morgan")
    stored = AuditEvent.objects.get(pk=ev.pk).metadata
    assert "content" not in stored
    assert stored["subject_name"] == "Alex Morgan"


@pytest.mark.django_db
def test_events_cannot_be_changed_or_removed(facility, bhrf_user):
    ev = AuditEvent.objects.get(pk=_append(facility, bhrf_user.id).pk)

    ev.event_code = "intake.approved"
    with pytest.raises(AuditImmutableError):
        ev.save()
    with pytest.raises(AuditImmutableError):
        ev.delete()
    with pytest.raises(AuditImmutableError):
        AuditEvent.objects.filter(pk=ev.pk).update(event_code="x")
    with pytest.raises(AuditImmutableError):
        AuditEvent.objects.filter(pk=ev.pk).delete()

    assert AuditEvent.objects.get(pk=ev.pk).event_code == "intake.submitted"


@pytest.mark.django_db
def test_audit_api_is_scoped_and_filtered(bhp_client, other_bhrf_client, facility, bhrf_user):
    _append(facility, bhrf_user.id, code="intake.submitted", entity_id=7)
    _append(facility, bhrf_user.id, code="intake.approved", entity_id=7)
    _append(facility, bhrf_user.id, code="asam.submitted", entity_id=8)

    resp = bhp_client.get("/api/v1/audit/events/", {"entity_id": 7})
    assert resp.status_code == 200
    assert resp.data["count"] == 2
    # newest first
    assert resp.data["results"][0]["event_code"] == "intake.approved"
    assert resp.data["results"][0]["transition"] == "DRAFT -> PENDING"

    resp = bhp_client.get("/api/v1/audit/events/", {"event_code": "asam.submitted"})
    assert resp.data["count"] == 1

    resp = other_bhrf_client.get("/api/v1/audit/events/")
    assert resp.data["count"] == 0


@pytest.mark.django_db
def test_audit_api_rejects_bad_integer(bhp_client):
    resp = bhp_client.get("/api/v1/audit/events/", {"entity_id": "abc"})
    assert resp.status_code == 400
    assert resp.data["error"]["details"] == {"entity_id": ["Invalid integer."]}
