"""
services/roles.py
-----------------
Role catalog of a company.

Role names are stored trimmed and lower-cased. The ``owner`` role is created
with the company and is immutable afterwards: it cannot be created, renamed,
edited or deleted through this service.
"""

from typing import Optional

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BusinessRuleViolation, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.permissions import OWNER_ROLE
from app.core.store import commit_or_conflict, fetch_all, fetch_one, flush_or_conflict
from app.models.membership import Membership
from app.models.permission import Permission, role_permissions
from app.models.role import Role
from app.schemas.role import RoleCreate, RoleUpdate
from app.services.authorization import require_permission

logger = get_logger(__name__)

NAME_CONFLICT = "Role name already exists in this company"


def _normalize_name(name: Optional[str]) -> str:
    name = (name or "").strip().lower()
    if not name:
        raise ValidationError("Role name is required")
    return name


async def _load_permissions(db: AsyncSession, permission_ids: list[str]) -> list[Permission]:
    """Resolve permission ids, failing when any of them is unknown."""
    wanted = set(permission_ids)
    if not wanted:
        return []
    result = await db.execute(select(Permission).where(Permission.id.in_(list(wanted))))
    permissions = list(result.scalars().all())
    if len(permissions) != len(wanted):
        raise ValidationError("One or more permissions are invalid")
    return permissions


async def _get_role(db: AsyncSession, company_id: str, role_id: str) -> Role:
    role = await fetch_one(
        db, select(Role).where(Role.id == role_id, Role.company_id == company_id)
    )
    if role is None:
        raise NotFoundError("Role not found")
    return role


class RoleService:

    @staticmethod
    async def list_roles(db: AsyncSession, user_id: str, company_id: str) -> list[Role]:
        await require_permission(db, user_id, company_id, "member:role:view", "view roles")
        stmt = select(Role).where(Role.company_id == company_id).order_by(Role.created_at)
        return list(await fetch_all(db, stmt))

    @staticmethod
    async def get_role(
        db: AsyncSession, user_id: str, company_id: str, role_id: str
    ) -> tuple[Role, list[Membership]]:
        """Role plus the membership rows (with users) that hold it."""
        await require_permission(db, user_id, company_id, "member:role:view", "view roles")
        role = await _get_role(db, company_id, role_id)
        memberships = await fetch_all(
            db,
            select(Membership)
            .where(Membership.role_id == role.id, Membership.company_id == company_id)
            .order_by(Membership.created_at),
        )
        return role, list(memberships)

    @staticmethod
    async def create_role(
        db: AsyncSession, user_id: str, company_id: str, data: RoleCreate
    ) -> Role:
        await require_permission(db, user_id, company_id, "member:role:create", "create roles")

        name = _normalize_name(data.name)
        if name == OWNER_ROLE:
            raise BusinessRuleViolation("Cannot create a role named 'owner'")
        permissions = await _load_permissions(db, data.permission_ids or [])

        role = Role(name=name, company_id=company_id, permissions=permissions)
        db.add(role)
        await commit_or_conflict(db, NAME_CONFLICT, field="name")

        logger.info(
            f"Role created: {name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_role(db, company_id, role.id)

    @staticmethod
    async def update_role(
        db: AsyncSession, user_id: str, company_id: str, role_id: str, data: RoleUpdate
    ) -> Role:
        """
        Rename and/or replace the permission set. A supplied
        ``permission_ids`` list replaces every existing link; omitting it
        leaves permissions untouched.
        """
        await require_permission(db, user_id, company_id, "member:role:update", "update roles")
        role = await _get_role(db, company_id, role_id)

        if role.is_owner:
            logger.warning(
                "Rejected edit of owner role",
                extra={"company_id": company_id, "user_id": user_id},
            )
            raise BusinessRuleViolation("Cannot edit the owner role")

        if data.name is not None:
            name = _normalize_name(data.name)
            if name == OWNER_ROLE:
                raise BusinessRuleViolation("Cannot rename a role to 'owner'")
            role.name = name
            await flush_or_conflict(db, NAME_CONFLICT, field="name")

        if data.permission_ids is not None:
            permissions = await _load_permissions(db, data.permission_ids)
            await db.execute(
                delete(role_permissions).where(role_permissions.c.role_id == role.id)
            )
            if permissions:
                await db.execute(
                    insert(role_permissions),
                    [{"role_id": role.id, "permission_id": p.id} for p in permissions],
                )

        await commit_or_conflict(db, NAME_CONFLICT, field="name")

        logger.info(
            f"Role updated: {role.name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_role(db, company_id, role_id)

    @staticmethod
    async def delete_role(db: AsyncSession, user_id: str, company_id: str, role_id: str) -> None:
        await require_permission(db, user_id, company_id, "member:role:delete", "delete roles")
        role = await _get_role(db, company_id, role_id)

        if role.is_owner:
            raise BusinessRuleViolation("Cannot delete the owner role")

        in_use = await db.scalar(
            select(func.count(Membership.id)).where(Membership.role_id == role.id)
        )
        if in_use:
            logger.warning(
                f"Rejected delete of role in use: {role.name}",
                extra={"company_id": company_id, "user_id": user_id},
            )
            raise BusinessRuleViolation(
                f"Cannot delete role. It is assigned to {in_use} user(s)"
            )

        await db.execute(delete(role_permissions).where(role_permissions.c.role_id == role.id))
        await db.execute(delete(Role).where(Role.id == role.id))
        await db.commit()

        logger.info(
            f"Role deleted: {role.name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
