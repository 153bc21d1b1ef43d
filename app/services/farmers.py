"""
services/farmers.py
-------------------
Farmers of a company and their farmer group links.

Group links are written as ``FarmerGroupFarmer`` rows; a supplied
``farmer_group_ids`` list replaces every existing link of the farmer.
"""

from typing import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.store import commit_or_conflict, fetch_all, fetch_one, flush_or_conflict
from app.models.farmer import Farmer, FarmerGroup, FarmerGroupFarmer
from app.schemas.farmer import FarmerCreate, FarmerUpdate
from app.services.authorization import require_permission
from app.services.common import require_text, updated_text

logger = get_logger(__name__)

NATIONAL_ID_CONFLICT = "Farmer with this national ID already exists"


async def check_company_groups(
    db: AsyncSession, company_id: str, group_ids: Iterable[str]
) -> list[str]:
    """Deduplicated ids, all of which must be farmer groups of the company."""
    wanted = list(dict.fromkeys(group_ids))
    if not wanted:
        return []
    result = await db.execute(
        select(FarmerGroup.id).where(
            FarmerGroup.id.in_(wanted), FarmerGroup.company_id == company_id
        )
    )
    if len(result.scalars().all()) != len(wanted):
        raise ValidationError(
            "One or more farmer groups not found or don't belong to this company"
        )
    return wanted


async def _get_farmer(db: AsyncSession, company_id: str, farmer_id: str) -> Farmer:
    farmer = await fetch_one(
        db,
        select(Farmer)
        .where(Farmer.id == farmer_id, Farmer.company_id == company_id)
        .options(selectinload(Farmer.groups)),
    )
    if farmer is None:
        raise NotFoundError("Farmer not found")
    return farmer


class FarmerService:

    @staticmethod
    async def list_farmers(db: AsyncSession, user_id: str, company_id: str) -> list[Farmer]:
        await require_permission(db, user_id, company_id, "farmer:view", "view farmers")
        stmt = (
            select(Farmer)
            .where(Farmer.company_id == company_id)
            .options(selectinload(Farmer.groups))
            .order_by(Farmer.created_at.desc())
        )
        return list(await fetch_all(db, stmt))

    @staticmethod
    async def get_farmer(db: AsyncSession, user_id: str, company_id: str, farmer_id: str) -> Farmer:
        await require_permission(db, user_id, company_id, "farmer:view", "view farmers")
        return await _get_farmer(db, company_id, farmer_id)

    @staticmethod
    async def create_farmer(
        db: AsyncSession, user_id: str, company_id: str, data: FarmerCreate
    ) -> Farmer:
        await require_permission(db, user_id, company_id, "farmer:create", "create farmers")

        farmer = Farmer(
            company_id=company_id,
            first_name=require_text(data.first_name, "First name"),
            last_name=require_text(data.last_name, "Last name"),
            national_id=require_text(data.national_id, "National ID"),
            phone_number=require_text(data.phone_number, "Phone number"),
            address=require_text(data.address, "Address"),
        )
        group_ids = await check_company_groups(db, company_id, data.farmer_group_ids or [])

        db.add(farmer)
        await flush_or_conflict(db, NATIONAL_ID_CONFLICT, field="national_id")
        for group_id in group_ids:
            db.add(FarmerGroupFarmer(farmer_group_id=group_id, farmer_id=farmer.id))
        await commit_or_conflict(db, NATIONAL_ID_CONFLICT, field="national_id")

        logger.info(
            f"Farmer created: {farmer.first_name} {farmer.last_name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_farmer(db, company_id, farmer.id)

    @staticmethod
    async def update_farmer(
        db: AsyncSession, user_id: str, company_id: str, farmer_id: str, data: FarmerUpdate
    ) -> Farmer:
        await require_permission(db, user_id, company_id, "farmer:update", "update farmers")
        farmer = await _get_farmer(db, company_id, farmer_id)

        if data.first_name is not None:
            farmer.first_name = updated_text(data.first_name, "First name")
        if data.last_name is not None:
            farmer.last_name = updated_text(data.last_name, "Last name")
        if data.national_id is not None:
            farmer.national_id = updated_text(data.national_id, "National ID")
        if data.phone_number is not None:
            farmer.phone_number = updated_text(data.phone_number, "Phone number")
        if data.address is not None:
            farmer.address = updated_text(data.address, "Address")

        if data.farmer_group_ids is not None:
            group_ids = await check_company_groups(db, company_id, data.farmer_group_ids)
            await flush_or_conflict(db, NATIONAL_ID_CONFLICT, field="national_id")
            await db.execute(
                delete(FarmerGroupFarmer).where(FarmerGroupFarmer.farmer_id == farmer.id)
            )
            for group_id in group_ids:
                db.add(FarmerGroupFarmer(farmer_group_id=group_id, farmer_id=farmer.id))

        await commit_or_conflict(db, NATIONAL_ID_CONFLICT, field="national_id")

        logger.info(
            f"Farmer updated: {farmer.first_name} {farmer.last_name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_farmer(db, company_id, farmer_id)

    @staticmethod
    async def delete_farmer(db: AsyncSession, user_id: str, company_id: str, farmer_id: str) -> None:
        await require_permission(db, user_id, company_id, "farmer:delete", "delete farmers")
        farmer = await _get_farmer(db, company_id, farmer_id)

        await db.execute(delete(FarmerGroupFarmer).where(FarmerGroupFarmer.farmer_id == farmer.id))
        await db.execute(delete(Farmer).where(Farmer.id == farmer.id))
        await db.commit()

        logger.info(
            f"Farmer deleted: {farmer.first_name} {farmer.last_name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
