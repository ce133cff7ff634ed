from __future__ import annotations

from bh_core.common.permissions import ALL_ROLES, ROLE_BHP, ROLE_BHRF, BaseRolePermission


class ClinicalRecordPermission(BaseRolePermission):
    """
    Coarse gate only; per-transition role/state rules live in the lifecycle table.
    """
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_BHRF},
        "transition": {ROLE_BHP, ROLE_BHRF},
    }
