from __future__ import annotations

from bh_core.common.permissions import ALL_ROLES, ROLE_ADMIN, ROLE_BHP, ROLE_BHRF, BaseRolePermission


class DocumentPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": {ROLE_ADMIN, ROLE_BHP, ROLE_BHRF},
        "upload": {ROLE_ADMIN, ROLE_BHRF},
    }
