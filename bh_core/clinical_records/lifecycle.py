# backend/bh_core/clinical_records/lifecycle.py
"""
Clinical record state machine as data.

    (state, action, role) -> target

Targets SUBMITTED / DECIDED / UNCHANGED are resolved against the facility's
review policy, the decision outcome, and the current state respectively.
Anything not in the table is illegal:
  - role never allowed the action        -> PermissionDenied
  - role allowed, but not from this state -> ConflictError
"""
from __future__ import annotations

from typing import Optional

from django.db import models
from rest_framework.exceptions import PermissionDenied, ValidationError

from bh_core.clinical_records.models import DECIDED_STATUSES, RecordStatus
from bh_core.common.api.exceptions import ConflictError
from bh_core.iam.models import Role


class Action(models.TextChoices):
    SAVE_DRAFT = "SAVE_DRAFT", "Save draft"
    SUBMIT = "SUBMIT", "Submit"
    DECIDE = "DECIDE", "Decide"
    EDIT = "EDIT", "Edit"


NEW = "NEW"  # record does not exist yet

SUBMITTED = "<submitted>"
DECIDED = "<decided>"
UNCHANGED = "<unchanged>"

_DRAFT = RecordStatus.DRAFT.value
_PENDING = RecordStatus.PENDING.value

TRANSITIONS: dict[tuple[str, str, str], str] = {
    (NEW, Action.SAVE_DRAFT, Role.BHRF): _DRAFT,
    (NEW, Action.SUBMIT, Role.BHRF): SUBMITTED,
    (_DRAFT, Action.SAVE_DRAFT, Role.BHRF): _DRAFT,
    (_DRAFT, Action.SUBMIT, Role.BHRF): SUBMITTED,
    (_PENDING, Action.DECIDE, Role.BHP): DECIDED,
    (_PENDING, Action.EDIT, Role.BHP): UNCHANGED,
    **{(s.value, Action.EDIT, Role.BHP): UNCHANGED for s in DECIDED_STATUSES},
}

ROLES_BY_ACTION: dict[str, frozenset[str]] = {
    action: frozenset(role for (_, a, role) in TRANSITIONS if a == action)
    for action in Action.values
}

DECISION_OUTCOMES = frozenset(s.value for s in DECIDED_STATUSES)


def allowed_actions(*, state: str, role: str) -> list[str]:
    return [a for (s, a, r) in TRANSITIONS if s == state and r == role]


def require_role(*, action: str, role: str) -> None:
    if action not in ROLES_BY_ACTION:
        raise ValidationError({"action": [f"Unknown action {action!r}."]})
    if role not in ROLES_BY_ACTION[action]:
        raise PermissionDenied(f"Role {role} cannot perform {action}.")


def resolve_target(
    *,
    state: str,
    action: str,
    role: str,
    requires_review: bool = False,
    outcome: Optional[str] = None,
) -> str:
    require_role(action=action, role=role)

    target = TRANSITIONS.get((state, action, role))
    if target is None:
        if action == Action.DECIDE and state in DECISION_OUTCOMES:
            raise ConflictError("Record already has a decision.")
        raise ConflictError(f"Cannot {action} a record in status {state}.")

    if target == SUBMITTED:
        return RecordStatus.APPROVED.value if not requires_review else _PENDING
    if target == DECIDED:
        if outcome not in DECISION_OUTCOMES:
            raise ValidationError({"outcome": ["Must be one of APPROVED, CONDITIONAL, DENIED."]})
        return outcome
    if target == UNCHANGED:
        return state
    return target
