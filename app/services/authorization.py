"""
services/authorization.py
-------------------------
Answers "may user U do A in company C".

Resolution goes through memberships -> roles -> permissions. A user may hold
several roles in one company; their permissions are unioned, and holding the
owner role on any row grants everything without consulting permissions.
"""

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, UnauthorizedError
from app.core.logging import get_logger
from app.core.permissions import OWNER_ROLE
from app.core.store import fetch_all
from app.models.membership import Membership

logger = get_logger(__name__)


@dataclass
class Access:
    """Effective access of one user inside one company."""

    is_owner: bool = False
    roles: list[str] = field(default_factory=list)
    permissions: set[str] = field(default_factory=set)

    @property
    def is_member(self) -> bool:
        return bool(self.roles)

    def allows(self, permission_name: str) -> bool:
        return self.is_owner or permission_name in self.permissions


async def get_memberships(
    db: AsyncSession, user_id: str, company_id: str
) -> list[Membership]:
    """All membership rows of a user in a company, roles and permissions loaded."""
    stmt = (
        select(Membership)
        .where(Membership.user_id == user_id, Membership.company_id == company_id)
        .order_by(Membership.created_at)
    )
    return list(await fetch_all(db, stmt))


def access_from_memberships(memberships: list[Membership]) -> Access:
    access = Access()
    for membership in memberships:
        role = membership.role
        access.roles.append(role.name)
        if role.name == OWNER_ROLE:
            access.is_owner = True
        access.permissions.update(p.name for p in role.permissions)
    return access


async def resolve_access(db: AsyncSession, user_id: str, company_id: str) -> Access:
    memberships = await get_memberships(db, user_id, company_id)
    return access_from_memberships(memberships)


async def has_permission(
    db: AsyncSession, user_id: str, company_id: str, permission_name: str
) -> bool:
    """True when any of the user's roles in the company grants the permission."""
    access = await resolve_access(db, user_id, company_id)
    if not access.is_member:
        return False
    return access.allows(permission_name)


async def require_membership(db: AsyncSession, user_id: str, company_id: str) -> Access:
    """
    Raise NotFoundError when the user has no membership in the company.
    Missing companies and foreign companies look the same to the caller.
    """
    access = await resolve_access(db, user_id, company_id)
    if not access.is_member:
        raise NotFoundError("Company not found or access denied")
    return access


async def require_permission(
    db: AsyncSession,
    user_id: str,
    company_id: str,
    permission_name: str,
    action: str,
) -> Access:
    """Membership first (404), then the permission itself (403)."""
    access = await require_membership(db, user_id, company_id)
    if not access.allows(permission_name):
        logger.warning(
            f"Permission denied: {permission_name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        raise UnauthorizedError(f"You don't have permission to {action}")
    return access
