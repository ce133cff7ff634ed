# backend/bh_core/common/permissions.py
from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission

from bh_core.iam.actors import resolve_actor
from bh_core.iam.models import Role

ROLE_ADMIN = Role.ADMIN.value
ROLE_BHP = Role.BHP.value
ROLE_BHRF = Role.BHRF.value

ALL_ROLES = frozenset({ROLE_ADMIN, ROLE_BHP, ROLE_BHRF})

# HTTP method -> (collection action, detail action) for views without view.action
_METHOD_ACTIONS = {
    "GET": ("list", "retrieve"),
    "HEAD": ("list", "retrieve"),
    "OPTIONS": ("list", "retrieve"),
    "POST": ("create", "create"),
    "PUT": ("update", "update"),
    "PATCH": ("partial_update", "partial_update"),
    "DELETE": ("destroy", "destroy"),
}


def get_actor(request):
    """
    Resolve (and memoize on the request) the Actor for request.user.
    """
    actor = getattr(request, "actor", None)
    if actor is None:
        actor = resolve_actor(request.user)
        request.actor = actor
    return actor


def _is_detail(view) -> bool:
    kwargs = getattr(view, "kwargs", None) or {}
    return "pk" in kwargs


def view_action(request, view) -> str | None:
    action = getattr(view, "action", None)
    if action:
        return action
    pair = _METHOD_ACTIONS.get(request.method.upper())
    if pair is None:
        return None
    return pair[1] if _is_detail(view) else pair[0]


class BaseRolePermission(BasePermission):
    """
    Coarse role gate per view action.

    ADMIN passes every gate; ownership and state rules are the services' job.
    An action missing from the table is denied, except reads, which fall back to list/retrieve.
    """
    message = "Your role cannot perform this action."

    allowed_roles_per_action: dict[str, frozenset[str] | set[str]] = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
    }

    def has_permission(self, request, view) -> bool:
        if not getattr(request.user, "is_authenticated", False):
            return False

        actor = get_actor(request)
        if actor.is_admin:
            return True

        allowed = self.allowed_roles_per_action.get(view_action(request, view))
        if allowed is None and request.method in SAFE_METHODS:
            allowed = self.allowed_roles_per_action.get("retrieve" if _is_detail(view) else "list")
        return allowed is not None and actor.role in allowed
