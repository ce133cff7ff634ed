from __future__ import annotations

from bh_core.common.permissions import ALL_ROLES, ROLE_ADMIN, ROLE_BHRF, BaseRolePermission


class ObligationPermission(BaseRolePermission):
    """
    read: everyone (rows are scoped per actor by the selector)
    submit: facility staff
    correct: ADMIN only
    """
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_ADMIN, ROLE_BHRF},
        "correct": {ROLE_ADMIN},
    }
