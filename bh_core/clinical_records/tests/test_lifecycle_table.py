# backend/bh_core/clinical_records/tests/test_lifecycle_table.py
import pytest
from rest_framework.exceptions import PermissionDenied, ValidationError

from bh_core.clinical_records.lifecycle import NEW, allowed_actions, require_role, resolve_target
from bh_core.common.api.exceptions import ConflictError


def test_submit_resolves_against_review_policy():
    assert resolve_target(state=NEW, action="SUBMIT", role="BHRF", requires_review=True) == "PENDING"
    assert resolve_target(state=NEW, action="SUBMIT", role="BHRF", requires_review=False) == "APPROVED"
    assert resolve_target(state="DRAFT", action="SUBMIT", role="BHRF", requires_review=True) == "PENDING"


def test_save_draft_stays_draft():
    assert resolve_target(state=NEW, action="SAVE_DRAFT", role="BHRF") == "DRAFT"
    assert resolve_target(state="DRAFT", action="SAVE_DRAFT", role="BHRF") == "DRAFT"


@pytest.mark.parametrize("outcome", ["APPROVED", "CONDITIONAL", "DENIED"])
def test_decide_from_pending(outcome):
    assert resolve_target(state="PENDING", action="DECIDE", role="BHP", outcome=outcome) == outcome


def test_decide_requires_valid_outcome():
    with pytest.raises(ValidationError):
        resolve_target(state="PENDING", action="DECIDE", role="BHP", outcome="PENDING")


@pytest.mark.parametrize("state", ["PENDING", "APPROVED", "CONDITIONAL", "DENIED"])
def test_edit_keeps_state(state):
    assert resolve_target(state=state, action="EDIT", role="BHP") == state


@pytest.mark.parametrize(
    "state,action,role",
    [
        ("DRAFT", "DECIDE", "BHP"),
        ("APPROVED", "DECIDE", "BHP"),
        ("DENIED", "DECIDE", "BHP"),
        ("PENDING", "SUBMIT", "BHRF"),
        ("APPROVED", "SAVE_DRAFT", "BHRF"),
        ("DRAFT", "EDIT", "BHP"),
    ],
)
def test_illegal_state_is_conflict(state, action, role):
    with pytest.raises(ConflictError):
        resolve_target(state=state, action=action, role=role, outcome="APPROVED")


def test_second_decision_message():
    with pytest.raises(ConflictError) as exc:
        resolve_target(state="CONDITIONAL", action="DECIDE", role="BHP", outcome="APPROVED")
    assert str(exc.value.detail) == "Record already has a decision."


@pytest.mark.parametrize(
    "action,role",
    [
        ("DECIDE", "BHRF"),
        ("DECIDE", "ADMIN"),
        ("EDIT", "BHRF"),
        ("SUBMIT", "BHP"),
        ("SAVE_DRAFT", "ADMIN"),
    ],
)
def test_role_never_allowed_is_permission_denied(action, role):
    with pytest.raises(PermissionDenied):
        require_role(action=action, role=role)


def test_unknown_action_is_validation_error():
    with pytest.raises(ValidationError):
        require_role(action="ARCHIVE", role="BHP")


def test_allowed_actions_per_state_and_role():
    assert sorted(allowed_actions(state="DRAFT", role="BHRF")) == ["SAVE_DRAFT", "SUBMIT"]
    assert sorted(allowed_actions(state="PENDING", role="BHP")) == ["DECIDE", "EDIT"]
    assert allowed_actions(state="DENIED", role="BHP") == ["EDIT"]
    assert allowed_actions(state="PENDING", role="BHRF") == []
    assert allowed_actions(state="APPROVED", role="ADMIN") == []
