"""
services/members.py
-------------------
Membership ledger operations.

The same code serves two scopes: regular members (``member:user:*``) and
admins (``admin:user:*``). Only the guarding permissions differ. Owner
memberships are never granted, reassigned or removed here.
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import MemberScope
from app.core.errors import (
    BusinessRuleViolation,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.logging import get_logger
from app.core.store import commit_or_conflict, fetch_all
from app.models.membership import Membership
from app.models.role import Role
from app.services.authorization import get_memberships, require_membership, require_permission
from app.services.users import UserService

logger = get_logger(__name__)

ALREADY_HELD = "User already has all selected roles in this company"


async def _target_memberships(
    db: AsyncSession, company_id: str, user_id: str
) -> list[Membership]:
    memberships = await get_memberships(db, user_id, company_id)
    if not memberships:
        raise NotFoundError("User is not a member of this company")
    return memberships


class MemberService:

    @staticmethod
    async def add_members(
        db: AsyncSession,
        actor_id: str,
        company_id: str,
        user_id: str,
        role_ids: list[str],
        scope: MemberScope = MemberScope.MEMBER,
    ) -> list[Membership]:
        """Grant roles to a user, skipping the ones they already hold."""
        await require_permission(
            db, actor_id, company_id, scope.create_permission, f"add {scope.value}s"
        )

        if not user_id:
            raise ValidationError("User ID is required")
        wanted = list(dict.fromkeys(role_ids or []))
        if not wanted:
            raise ValidationError("At least one role ID is required")

        if await UserService.get_user(db, user_id) is None:
            raise NotFoundError("User not found")

        roles = await fetch_all(
            db, select(Role).where(Role.id.in_(wanted), Role.company_id == company_id)
        )
        if len(roles) != len(wanted):
            raise NotFoundError("One or more roles not found or do not belong to this company")
        if any(role.is_owner for role in roles):
            raise BusinessRuleViolation("Cannot assign owner role")

        held = {m.role_id for m in await get_memberships(db, user_id, company_id)}
        new_role_ids = [role_id for role_id in wanted if role_id not in held]
        if not new_role_ids:
            raise ConflictError(ALREADY_HELD, field="role_ids")

        for role_id in new_role_ids:
            db.add(Membership(user_id=user_id, company_id=company_id, role_id=role_id))
        await commit_or_conflict(db, ALREADY_HELD, field="role_ids")

        logger.info(
            f"Granted {len(new_role_ids)} role(s) to {user_id} ({scope.value})",
            extra={"company_id": company_id, "user_id": actor_id},
        )
        return await get_memberships(db, user_id, company_id)

    @staticmethod
    async def update_member_role(
        db: AsyncSession,
        actor_id: str,
        company_id: str,
        user_id: str,
        role_id: str,
        from_role_id: Optional[str] = None,
        scope: MemberScope = MemberScope.MEMBER,
    ) -> Membership:
        """
        Swap one of the user's roles for another.

        ``from_role_id`` selects which row to change; it may be omitted only
        when the user holds a single role in the company.
        """
        await require_permission(
            db, actor_id, company_id, scope.update_permission, f"update {scope.value} roles"
        )
        memberships = await _target_memberships(db, company_id, user_id)

        if from_role_id is not None:
            target = next((m for m in memberships if m.role_id == from_role_id), None)
            if target is None:
                raise NotFoundError("User does not hold this role in this company")
        elif len(memberships) == 1:
            target = memberships[0]
        else:
            raise ValidationError("User holds several roles; from_role_id is required")

        if target.role.is_owner:
            logger.warning(
                f"Rejected owner reassignment for {user_id}",
                extra={"company_id": company_id, "user_id": actor_id},
            )
            raise BusinessRuleViolation("Cannot edit owner. Owner role cannot be changed")

        if not role_id:
            raise ValidationError("Role ID is required")
        new_role = await db.scalar(
            select(Role).where(Role.id == role_id, Role.company_id == company_id)
        )
        if new_role is None:
            raise NotFoundError("Role not found or does not belong to this company")
        if new_role.is_owner:
            raise BusinessRuleViolation("Cannot assign owner role")
        if any(m.role_id == new_role.id for m in memberships):
            raise ConflictError("User already has this role in this company", field="role_id")

        membership_id = target.id
        target.role_id = new_role.id
        await commit_or_conflict(db, "User already has this role in this company", field="role_id")

        logger.info(
            f"Changed role of {user_id} to {new_role.name} ({scope.value})",
            extra={"company_id": company_id, "user_id": actor_id},
        )
        updated = await get_memberships(db, user_id, company_id)
        return next(m for m in updated if m.id == membership_id)

    @staticmethod
    async def remove_member(
        db: AsyncSession,
        actor_id: str,
        company_id: str,
        user_id: str,
        scope: MemberScope = MemberScope.MEMBER,
    ) -> None:
        """
        Drop every role the user holds in the company.
        Leaving a company yourself only requires being a member.
        """
        await require_membership(db, actor_id, company_id)
        memberships = await _target_memberships(db, company_id, user_id)

        if any(m.role.is_owner for m in memberships):
            logger.warning(
                f"Rejected removal of owner {user_id}",
                extra={"company_id": company_id, "user_id": actor_id},
            )
            raise BusinessRuleViolation("Cannot remove owner")

        if user_id != actor_id:
            await require_permission(
                db, actor_id, company_id, scope.delete_permission, f"remove {scope.value}s"
            )

        await db.execute(
            delete(Membership).where(
                Membership.user_id == user_id, Membership.company_id == company_id
            )
        )
        await db.commit()

        logger.info(
            f"Removed {user_id} from company ({scope.value})",
            extra={"company_id": company_id, "user_id": actor_id},
        )
