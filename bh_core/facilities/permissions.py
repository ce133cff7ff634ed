from __future__ import annotations

from bh_core.common.permissions import ALL_ROLES, ROLE_ADMIN, BaseRolePermission


class FacilityPermission(BaseRolePermission):
    """
    read: every role (scoped by the selector)
    write: ADMIN only; facilities are deactivated, never deleted
    """
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "compliance": ALL_ROLES,
        "employee_compliance": ALL_ROLES,
        "create": {ROLE_ADMIN},
        "partial_update": {ROLE_ADMIN},
        "deactivate": {ROLE_ADMIN},
    }
