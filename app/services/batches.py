"""
services/batches.py
-------------------
Batch lifecycle and lineage.

``total_kg`` is never written here except for its initial zero; it is owned
by the batch source service. Deleting a batch removes its sources,
attributes and lineage edges in that order, in one transaction.
"""

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import BusinessRuleViolation, NotFoundError
from app.core.logging import get_logger
from app.core.store import commit_or_conflict, fetch_all, fetch_one
from app.models.batch import Batch, BatchAttribute, BatchRelation, BatchSource
from app.models.commodity import Commodity
from app.schemas.batch import BatchCreate, BatchUpdate
from app.services.authorization import require_permission
from app.services.common import require_text, updated_text

logger = get_logger(__name__)

LOT_CODE_CONFLICT = "Lot code already exists for this company"


async def get_company_batch(
    db: AsyncSession, company_id: str, batch_id: str, lock: bool = False
) -> Batch:
    """
    Tenant-scoped batch lookup. With ``lock`` the row is held FOR UPDATE
    until the surrounding transaction ends.
    """
    stmt = select(Batch).where(Batch.id == batch_id, Batch.company_id == company_id)
    if lock:
        stmt = stmt.with_for_update()
    batch = await fetch_one(db, stmt)
    if batch is None:
        raise NotFoundError("Batch not found")
    return batch


class BatchService:

    @staticmethod
    async def list_batches(db: AsyncSession, user_id: str, company_id: str) -> list[Batch]:
        await require_permission(db, user_id, company_id, "batch:view", "view batches")
        stmt = (
            select(Batch)
            .where(Batch.company_id == company_id)
            .order_by(Batch.created_at.desc())
        )
        return list(await fetch_all(db, stmt))

    @staticmethod
    async def get_batch(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str
    ) -> tuple[Batch, list[BatchRelation], list[BatchRelation]]:
        """Batch with sources and attributes loaded, plus parent and child edges."""
        await require_permission(db, user_id, company_id, "batch:view", "view batches")
        batch = await fetch_one(
            db,
            select(Batch)
            .where(Batch.id == batch_id, Batch.company_id == company_id)
            .options(selectinload(Batch.sources), selectinload(Batch.attributes)),
        )
        if batch is None:
            raise NotFoundError("Batch not found")

        parents = await fetch_all(
            db,
            select(BatchRelation)
            .where(BatchRelation.child_batch_id == batch.id)
            .order_by(BatchRelation.created_at),
        )
        children = await fetch_all(
            db,
            select(BatchRelation)
            .where(BatchRelation.parent_batch_id == batch.id)
            .order_by(BatchRelation.created_at),
        )
        return batch, list(parents), list(children)

    @staticmethod
    async def create_batch(
        db: AsyncSession, user_id: str, company_id: str, data: BatchCreate
    ) -> Batch:
        await require_permission(db, user_id, company_id, "batch:create", "create batches")
        commodity_id = require_text(data.commodity_id, "Commodity ID")
        lot_code = require_text(data.lot_code, "Lot code")

        commodity = await db.scalar(select(Commodity.id).where(Commodity.id == commodity_id))
        if commodity is None:
            raise NotFoundError("Commodity not found")

        batch = Batch(
            company_id=company_id,
            commodity_id=commodity_id,
            lot_code=lot_code,
            harvest_date=data.harvest_date,
            total_kg=0.0,
        )
        db.add(batch)
        await commit_or_conflict(db, LOT_CODE_CONFLICT, field="lot_code")

        logger.info(
            f"Batch created: {lot_code}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await get_company_batch(db, company_id, batch.id)

    @staticmethod
    async def update_batch(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str, data: BatchUpdate
    ) -> Batch:
        """Only lot code and harvest date can change."""
        await require_permission(db, user_id, company_id, "batch:update", "update batches")
        batch = await get_company_batch(db, company_id, batch_id)

        if data.lot_code is not None:
            batch.lot_code = updated_text(data.lot_code, "Lot code")
        if data.harvest_date is not None:
            batch.harvest_date = data.harvest_date
        await commit_or_conflict(db, LOT_CODE_CONFLICT, field="lot_code")

        logger.info(
            f"Batch updated: {batch.lot_code}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await get_company_batch(db, company_id, batch_id)

    @staticmethod
    async def delete_batch(db: AsyncSession, user_id: str, company_id: str, batch_id: str) -> None:
        await require_permission(db, user_id, company_id, "batch:delete", "delete batches")
        batch = await get_company_batch(db, company_id, batch_id, lock=True)

        await db.execute(delete(BatchSource).where(BatchSource.batch_id == batch.id))
        await db.execute(delete(BatchAttribute).where(BatchAttribute.batch_id == batch.id))
        await db.execute(
            delete(BatchRelation).where(
                or_(
                    BatchRelation.parent_batch_id == batch.id,
                    BatchRelation.child_batch_id == batch.id,
                )
            )
        )
        await db.execute(delete(Batch).where(Batch.id == batch.id))
        await db.commit()

        logger.info(
            f"Batch deleted: {batch.lot_code}",
            extra={"company_id": company_id, "user_id": user_id},
        )

    @staticmethod
    async def link_batches(
        db: AsyncSession, user_id: str, company_id: str, parent_id: str, child_id: str
    ) -> BatchRelation:
        """Record that ``child_id`` was produced from ``parent_id``."""
        await require_permission(db, user_id, company_id, "batch:update", "update batches")
        parent = await get_company_batch(db, company_id, parent_id)
        child = await get_company_batch(db, company_id, require_text(child_id, "Child batch ID"))
        if parent.id == child.id:
            raise BusinessRuleViolation("A batch cannot be its own parent")

        relation = BatchRelation(parent_batch_id=parent.id, child_batch_id=child.id)
        db.add(relation)
        await commit_or_conflict(db, "Batch relation already exists", field="child_batch_id")

        logger.info(
            f"Batch {child.lot_code} linked to parent {parent.lot_code}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return relation

    @staticmethod
    async def unlink_batches(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str, relation_id: str
    ) -> None:
        await require_permission(db, user_id, company_id, "batch:update", "update batches")
        batch = await get_company_batch(db, company_id, batch_id)

        relation = await fetch_one(
            db,
            select(BatchRelation).where(
                BatchRelation.id == relation_id,
                or_(
                    BatchRelation.parent_batch_id == batch.id,
                    BatchRelation.child_batch_id == batch.id,
                ),
            ),
        )
        if relation is None:
            raise NotFoundError("Batch relation not found")

        await db.execute(delete(BatchRelation).where(BatchRelation.id == relation.id))
        await db.commit()

        logger.info(
            "Batch relation removed",
            extra={"company_id": company_id, "user_id": user_id},
        )
