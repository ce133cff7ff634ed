# backend/bh_core/iam/actors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from bh_core.iam.models import Role, UserProfile


@dataclass(frozen=True)
class Actor:
    """
    Who is acting, resolved once per request.
    Services receive an Actor instead of a request/user so they can be called
    from management commands and tests without HTTP plumbing.
    """
    user_id: int
    role: str
    bhp_id: Optional[int] = None
    facility_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_bhp(self) -> bool:
        return self.role == Role.BHP

    @property
    def is_bhrf(self) -> bool:
        return self.role == Role.BHRF


def resolve_actor(user) -> Actor:
    if not user or not getattr(user, "is_authenticated", False):
        raise NotAuthenticated()

    # Superuser treated as admin
    if getattr(user, "is_superuser", False):
        return Actor(user_id=user.id, role=Role.ADMIN)

    profile = UserProfile.objects.filter(user_id=user.id, is_active=True).first()
    if profile is None:
        raise PermissionDenied("No active profile for this user.")

    return Actor(
        user_id=user.id,
        role=profile.role,
        bhp_id=profile.bhp_id,
        facility_id=profile.facility_id,
    )


def can_access_facility(actor: Actor, facility) -> bool:
    """
    ADMIN sees everything, a BHP sees the facilities it manages,
    BHRF staff see only their own facility.
    """
    if actor.is_admin:
        return True
    if actor.is_bhp:
        return actor.bhp_id is not None and facility.bhp_id == actor.bhp_id
    if actor.is_bhrf:
        return actor.facility_id is not None and facility.id == actor.facility_id
    return False
