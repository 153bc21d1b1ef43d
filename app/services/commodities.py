"""
services/commodities.py
-----------------------
Commodities are a global catalog; every operation is still authorized
through the caller's company, and detail views only show that company's
batches.
"""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BusinessRuleViolation, NotFoundError
from app.core.logging import get_logger
from app.core.store import commit_or_conflict, fetch_all, fetch_one
from app.models.batch import Batch
from app.models.commodity import Commodity
from app.schemas.commodity import CommodityCreate, CommodityUpdate
from app.services.authorization import require_permission
from app.services.common import require_text, updated_text

logger = get_logger(__name__)

CODE_CONFLICT = "Commodity code already exists"


async def _get_commodity(db: AsyncSession, commodity_id: str) -> Commodity:
    commodity = await fetch_one(db, select(Commodity).where(Commodity.id == commodity_id))
    if commodity is None:
        raise NotFoundError("Commodity not found")
    return commodity


async def _company_batches(db: AsyncSession, company_id: str, commodity_ids: list[str]) -> dict[str, list[Batch]]:
    batches: dict[str, list[Batch]] = {cid: [] for cid in commodity_ids}
    if not commodity_ids:
        return batches
    rows = await fetch_all(
        db,
        select(Batch)
        .where(Batch.company_id == company_id, Batch.commodity_id.in_(commodity_ids))
        .order_by(Batch.created_at.desc()),
    )
    for batch in rows:
        batches[batch.commodity_id].append(batch)
    return batches


class CommodityService:

    @staticmethod
    async def list_commodities(
        db: AsyncSession, user_id: str, company_id: str
    ) -> list[tuple[Commodity, list[Batch]]]:
        await require_permission(db, user_id, company_id, "commodity:view", "view commodities")
        commodities = list(await fetch_all(db, select(Commodity).order_by(Commodity.name)))
        batches = await _company_batches(db, company_id, [c.id for c in commodities])
        return [(c, batches[c.id]) for c in commodities]

    @staticmethod
    async def get_commodity(
        db: AsyncSession, user_id: str, company_id: str, commodity_id: str
    ) -> tuple[Commodity, list[Batch]]:
        await require_permission(db, user_id, company_id, "commodity:view", "view commodities")
        commodity = await _get_commodity(db, commodity_id)
        batches = await _company_batches(db, company_id, [commodity.id])
        return commodity, batches[commodity.id]

    @staticmethod
    async def create_commodity(
        db: AsyncSession, user_id: str, company_id: str, data: CommodityCreate
    ) -> Commodity:
        await require_permission(db, user_id, company_id, "commodity:create", "create commodities")
        name = require_text(data.name, "Name")
        code = require_text(data.code, "Code")

        commodity = Commodity(name=name, code=code)
        db.add(commodity)
        await commit_or_conflict(db, CODE_CONFLICT, field="code")

        logger.info(
            f"Commodity created: {code}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_commodity(db, commodity.id)

    @staticmethod
    async def update_commodity(
        db: AsyncSession, user_id: str, company_id: str, commodity_id: str, data: CommodityUpdate
    ) -> Commodity:
        await require_permission(db, user_id, company_id, "commodity:update", "update commodities")
        commodity = await _get_commodity(db, commodity_id)

        if data.name is not None:
            commodity.name = updated_text(data.name, "Name")
        if data.code is not None:
            commodity.code = updated_text(data.code, "Code")
        await commit_or_conflict(db, CODE_CONFLICT, field="code")

        logger.info(
            f"Commodity updated: {commodity.code}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_commodity(db, commodity_id)

    @staticmethod
    async def delete_commodity(
        db: AsyncSession, user_id: str, company_id: str, commodity_id: str
    ) -> None:
        """Refused while any batch, in any company, still uses the commodity."""
        await require_permission(db, user_id, company_id, "commodity:delete", "delete commodities")
        commodity = await _get_commodity(db, commodity_id)

        in_use = await db.scalar(
            select(func.count(Batch.id)).where(Batch.commodity_id == commodity.id)
        )
        if in_use:
            logger.warning(
                f"Rejected delete of commodity in use: {commodity.code}",
                extra={"company_id": company_id, "user_id": user_id},
            )
            raise BusinessRuleViolation("Cannot delete commodity with existing batches")

        await db.execute(delete(Commodity).where(Commodity.id == commodity.id))
        await db.commit()

        logger.info(
            f"Commodity deleted: {commodity.code}",
            extra={"company_id": company_id, "user_id": user_id},
        )
