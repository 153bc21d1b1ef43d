"""
services/companies.py
---------------------
Tenant directory: company bootstrap, lookup, rename and teardown.

A company is born with exactly one ``owner`` role holding the whole
permission catalog and one membership tying the creator to it. Teardown
removes every tenant-owned row in dependency order inside one transaction.
"""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.permissions import OWNER_ROLE
from app.core.store import commit_or_conflict, fetch_all, fetch_one, flush_or_conflict
from app.models.batch import Batch, BatchAttribute, BatchRelation, BatchSource
from app.models.company import Company
from app.models.farmer import Farmer, FarmerGroup, FarmerGroupFarmer
from app.models.land import Land
from app.models.membership import Membership
from app.models.permission import Permission, role_permissions
from app.models.role import Role
from app.services.authorization import (
    Access,
    access_from_memberships,
    require_membership,
    require_permission,
)

logger = get_logger(__name__)

NAME_CONFLICT = "Company name already exists"


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Company name is required")
    if len(name) > 100:
        raise ValidationError("Company name must be at most 100 characters")
    return name


def _group_members(memberships: list[Membership]) -> list[dict]:
    """Collapse membership rows into one entry per user with all their roles."""
    members: dict[str, dict] = {}
    for membership in memberships:
        user = membership.user
        entry = members.get(user.id)
        if entry is None:
            entry = members[user.id] = {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "image": user.image,
                "roles": [],
                "joined_at": membership.created_at,
            }
        entry["roles"].append({"id": membership.role.id, "name": membership.role.name})
    return list(members.values())


class CompanyService:

    @staticmethod
    async def create_company(
        db: AsyncSession, user_id: str, name: str, image: Optional[str] = None
    ) -> tuple[Company, Access]:
        """
        Create the company, its owner role and the creator's membership.
        Nothing is committed unless all three rows are written.
        """
        name = _clean_name(name)

        result = await db.execute(select(Permission).order_by(Permission.name))
        permissions = list(result.scalars().all())

        company = Company(name=name, image=image, user_id=user_id)
        db.add(company)
        await flush_or_conflict(db, NAME_CONFLICT, field="name")

        owner = Role(name=OWNER_ROLE, company_id=company.id, permissions=permissions)
        db.add(owner)
        await flush_or_conflict(db, NAME_CONFLICT, field="name")

        db.add(Membership(user_id=user_id, company_id=company.id, role_id=owner.id))
        await commit_or_conflict(db, NAME_CONFLICT, field="name")

        logger.info(
            f"Company created: {company.name}",
            extra={"company_id": company.id, "user_id": user_id},
        )
        access = Access(
            is_owner=True,
            roles=[OWNER_ROLE],
            permissions={p.name for p in permissions},
        )
        return company, access

    @staticmethod
    async def list_companies(db: AsyncSession, user_id: str) -> list[tuple[Company, Access]]:
        """Every company the user holds at least one role in."""
        stmt = (
            select(Membership)
            .where(Membership.user_id == user_id)
            .order_by(Membership.created_at)
        )
        memberships = await fetch_all(db, stmt)

        by_company: dict[str, list[Membership]] = {}
        for membership in memberships:
            by_company.setdefault(membership.company_id, []).append(membership)
        if not by_company:
            return []

        companies = await fetch_all(
            db,
            select(Company)
            .where(Company.id.in_(list(by_company)))
            .order_by(Company.created_at.desc()),
        )
        return [(c, access_from_memberships(by_company[c.id])) for c in companies]

    @staticmethod
    async def get_company(
        db: AsyncSession, user_id: str, company_id: str
    ) -> tuple[Company, Access, list[dict]]:
        """
        Company detail plus the caller's access. The member list is only
        filled in for owners and holders of ``member:user:view``.
        """
        access = await require_membership(db, user_id, company_id)
        company = await fetch_one(db, select(Company).where(Company.id == company_id))
        if company is None:
            raise NotFoundError("Company not found or access denied")

        members: list[dict] = []
        if access.allows("member:user:view"):
            rows = await fetch_all(
                db,
                select(Membership)
                .where(Membership.company_id == company_id)
                .order_by(Membership.created_at),
            )
            members = _group_members(list(rows))
        return company, access, members

    @staticmethod
    async def get_company_by_name(
        db: AsyncSession, user_id: str, name: str
    ) -> tuple[Company, Access, list[dict]]:
        company = await fetch_one(db, select(Company).where(Company.name == name.strip()))
        if company is None:
            raise NotFoundError("Company not found or access denied")
        return await CompanyService.get_company(db, user_id, company.id)

    @staticmethod
    async def update_company(
        db: AsyncSession, user_id: str, company_id: str, name: str
    ) -> tuple[Company, Access]:
        access = await require_permission(
            db, user_id, company_id, "company:update", "update this company"
        )
        name = _clean_name(name)

        company = await fetch_one(db, select(Company).where(Company.id == company_id))
        if company is None:
            raise NotFoundError("Company not found or access denied")

        company.name = name
        await commit_or_conflict(db, NAME_CONFLICT, field="name")

        logger.info(
            f"Company renamed: {name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        company = await fetch_one(db, select(Company).where(Company.id == company_id))
        return company, access

    @staticmethod
    async def delete_company(db: AsyncSession, user_id: str, company_id: str) -> None:
        """Remove the company and everything it owns, children first."""
        await require_permission(
            db, user_id, company_id, "company:delete", "delete this company"
        )

        batch_ids = select(Batch.id).where(Batch.company_id == company_id)
        group_ids = select(FarmerGroup.id).where(FarmerGroup.company_id == company_id)
        role_ids = select(Role.id).where(Role.company_id == company_id)

        statements = (
            delete(BatchSource).where(BatchSource.batch_id.in_(batch_ids)),
            delete(BatchAttribute).where(BatchAttribute.batch_id.in_(batch_ids)),
            delete(BatchRelation).where(
                BatchRelation.parent_batch_id.in_(batch_ids)
                | BatchRelation.child_batch_id.in_(batch_ids)
            ),
            delete(Batch).where(Batch.company_id == company_id),
            delete(FarmerGroupFarmer).where(FarmerGroupFarmer.farmer_group_id.in_(group_ids)),
            delete(Farmer).where(Farmer.company_id == company_id),
            delete(FarmerGroup).where(FarmerGroup.company_id == company_id),
            delete(Land).where(Land.company_id == company_id),
            delete(Membership).where(Membership.company_id == company_id),
            delete(role_permissions).where(role_permissions.c.role_id.in_(role_ids)),
            delete(Role).where(Role.company_id == company_id),
            delete(Company).where(Company.id == company_id),
        )
        for stmt in statements:
            await db.execute(stmt.execution_options(synchronize_session=False))
        await db.commit()

        logger.info(
            "Company deleted",
            extra={"company_id": company_id, "user_id": user_id},
        )
