"""
services/farmer_groups.py
-------------------------
Farmer groups of a company. A supplied ``farmer_ids`` list replaces every
existing link of the group.
"""

from typing import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import BusinessRuleViolation, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.store import fetch_all, fetch_one
from app.models.batch import BatchSource
from app.models.farmer import Farmer, FarmerGroup, FarmerGroupFarmer
from app.schemas.farmer import FarmerGroupCreate, FarmerGroupUpdate
from app.services.authorization import require_permission
from app.services.common import require_text, updated_text

logger = get_logger(__name__)


async def _check_company_farmers(
    db: AsyncSession, company_id: str, farmer_ids: Iterable[str]
) -> list[str]:
    wanted = list(dict.fromkeys(farmer_ids))
    if not wanted:
        return []
    result = await db.execute(
        select(Farmer.id).where(Farmer.id.in_(wanted), Farmer.company_id == company_id)
    )
    if len(result.scalars().all()) != len(wanted):
        raise ValidationError("One or more farmers not found or don't belong to this company")
    return wanted


async def _get_group(db: AsyncSession, company_id: str, group_id: str) -> FarmerGroup:
    group = await fetch_one(
        db,
        select(FarmerGroup)
        .where(FarmerGroup.id == group_id, FarmerGroup.company_id == company_id)
        .options(selectinload(FarmerGroup.farmers)),
    )
    if group is None:
        raise NotFoundError("Farmer group not found")
    return group


class FarmerGroupService:

    @staticmethod
    async def list_groups(db: AsyncSession, user_id: str, company_id: str) -> list[FarmerGroup]:
        await require_permission(
            db, user_id, company_id, "farmer_group:view", "view farmer groups"
        )
        stmt = (
            select(FarmerGroup)
            .where(FarmerGroup.company_id == company_id)
            .options(selectinload(FarmerGroup.farmers))
            .order_by(FarmerGroup.created_at.desc())
        )
        return list(await fetch_all(db, stmt))

    @staticmethod
    async def get_group(
        db: AsyncSession, user_id: str, company_id: str, group_id: str
    ) -> FarmerGroup:
        await require_permission(
            db, user_id, company_id, "farmer_group:view", "view farmer groups"
        )
        return await _get_group(db, company_id, group_id)

    @staticmethod
    async def create_group(
        db: AsyncSession, user_id: str, company_id: str, data: FarmerGroupCreate
    ) -> FarmerGroup:
        await require_permission(
            db, user_id, company_id, "farmer_group:create", "create farmer groups"
        )
        name = require_text(data.name, "Name")
        farmer_ids = await _check_company_farmers(db, company_id, data.farmer_ids or [])

        group = FarmerGroup(company_id=company_id, name=name)
        db.add(group)
        await db.flush()
        for farmer_id in farmer_ids:
            db.add(FarmerGroupFarmer(farmer_group_id=group.id, farmer_id=farmer_id))
        await db.commit()

        logger.info(
            f"Farmer group created: {name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_group(db, company_id, group.id)

    @staticmethod
    async def update_group(
        db: AsyncSession, user_id: str, company_id: str, group_id: str, data: FarmerGroupUpdate
    ) -> FarmerGroup:
        await require_permission(
            db, user_id, company_id, "farmer_group:update", "update farmer groups"
        )
        group = await _get_group(db, company_id, group_id)

        if data.name is not None:
            group.name = updated_text(data.name, "Name")

        if data.farmer_ids is not None:
            farmer_ids = await _check_company_farmers(db, company_id, data.farmer_ids)
            await db.execute(
                delete(FarmerGroupFarmer).where(FarmerGroupFarmer.farmer_group_id == group.id)
            )
            for farmer_id in farmer_ids:
                db.add(FarmerGroupFarmer(farmer_group_id=group.id, farmer_id=farmer_id))

        await db.commit()

        logger.info(
            f"Farmer group updated: {group.name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_group(db, company_id, group_id)

    @staticmethod
    async def delete_group(
        db: AsyncSession, user_id: str, company_id: str, group_id: str
    ) -> None:
        """Refused while batch sources still reference the group."""
        await require_permission(
            db, user_id, company_id, "farmer_group:delete", "delete farmer groups"
        )
        group = await _get_group(db, company_id, group_id)

        in_use = await db.scalar(
            select(func.count(BatchSource.id)).where(BatchSource.farmer_group_id == group.id)
        )
        if in_use:
            logger.warning(
                f"Rejected delete of farmer group in use: {group.name}",
                extra={"company_id": company_id, "user_id": user_id},
            )
            raise BusinessRuleViolation("Cannot delete farmer group used by batch sources")

        await db.execute(
            delete(FarmerGroupFarmer).where(FarmerGroupFarmer.farmer_group_id == group.id)
        )
        await db.execute(delete(FarmerGroup).where(FarmerGroup.id == group.id))
        await db.commit()

        logger.info(
            f"Farmer group deleted: {group.name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
