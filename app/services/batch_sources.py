"""
services/batch_sources.py
-------------------------
Batch sources and the ``Batch.total_kg`` aggregate.

Every source write locks the owning batch row first, then recomputes the
total from the stored sources before the single commit. Concurrent writers
on one batch therefore serialize, and the committed total always equals the
committed sum of ``volume_kg``.
"""

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.store import commit_or_conflict, fetch_all, fetch_one, flush_or_conflict
from app.models.batch import Batch, BatchSource
from app.models.farmer import FarmerGroup
from app.models.land import Land
from app.schemas.batch import BatchSourceCreate, BatchSourceUpdate
from app.services.authorization import require_permission
from app.services.batches import get_company_batch
from app.services.common import require_text, updated_text

logger = get_logger(__name__)

COMBINATION_CONFLICT = "Batch source with this combination already exists"


async def recompute_total_kg(db: AsyncSession, batch_id: str) -> float:
    """Set ``total_kg`` to the sum of the batch's current sources."""
    total = await db.scalar(
        select(func.coalesce(func.sum(BatchSource.volume_kg), 0.0))
        .where(BatchSource.batch_id == batch_id)
    )
    total = float(total or 0.0)
    await db.execute(update(Batch).where(Batch.id == batch_id).values(total_kg=total))
    return total


async def _check_farmer_group(db: AsyncSession, company_id: str, farmer_group_id: str) -> None:
    found = await db.scalar(
        select(FarmerGroup.id).where(
            FarmerGroup.id == farmer_group_id, FarmerGroup.company_id == company_id
        )
    )
    if found is None:
        raise NotFoundError("Farmer group not found or doesn't belong to this company")


async def _check_land(db: AsyncSession, company_id: str, land_id: str) -> None:
    found = await db.scalar(
        select(Land.id).where(Land.id == land_id, Land.company_id == company_id)
    )
    if found is None:
        raise NotFoundError("Land not found or doesn't belong to this company")


async def _get_source(db: AsyncSession, batch_id: str, source_id: str) -> BatchSource:
    source = await fetch_one(
        db,
        select(BatchSource).where(
            BatchSource.id == source_id, BatchSource.batch_id == batch_id
        ),
    )
    if source is None:
        raise NotFoundError("Batch source not found")
    return source


class BatchSourceService:

    @staticmethod
    async def list_sources(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str
    ) -> list[BatchSource]:
        await require_permission(
            db, user_id, company_id, "batch_source:view", "view batch sources"
        )
        batch = await get_company_batch(db, company_id, batch_id)
        stmt = (
            select(BatchSource)
            .where(BatchSource.batch_id == batch.id)
            .order_by(BatchSource.created_at)
        )
        return list(await fetch_all(db, stmt))

    @staticmethod
    async def get_source(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str, source_id: str
    ) -> BatchSource:
        await require_permission(
            db, user_id, company_id, "batch_source:view", "view batch sources"
        )
        batch = await get_company_batch(db, company_id, batch_id)
        return await _get_source(db, batch.id, source_id)

    @staticmethod
    async def create_source(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str, data: BatchSourceCreate
    ) -> BatchSource:
        await require_permission(
            db, user_id, company_id, "batch_source:create", "create batch sources"
        )
        farmer_group_id = require_text(data.farmer_group_id, "Farmer group ID")
        land_id = require_text(data.land_id, "Land ID")
        if data.volume_kg is None or data.volume_kg < 0:
            raise ValidationError("Volume kg is required and must be >= 0")

        batch = await get_company_batch(db, company_id, batch_id, lock=True)
        await _check_farmer_group(db, company_id, farmer_group_id)
        await _check_land(db, company_id, land_id)

        source = BatchSource(
            batch_id=batch.id,
            farmer_group_id=farmer_group_id,
            land_id=land_id,
            volume_kg=data.volume_kg,
            land_snapshot=data.land_snapshot or {},
        )
        db.add(source)
        await flush_or_conflict(db, COMBINATION_CONFLICT, field="land_id")
        total = await recompute_total_kg(db, batch.id)
        await commit_or_conflict(db, COMBINATION_CONFLICT, field="land_id")

        logger.info(
            f"Batch source added to {batch.lot_code}, total {total} kg",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_source(db, batch.id, source.id)

    @staticmethod
    async def update_source(
        db: AsyncSession,
        user_id: str,
        company_id: str,
        batch_id: str,
        source_id: str,
        data: BatchSourceUpdate,
    ) -> BatchSource:
        await require_permission(
            db, user_id, company_id, "batch_source:update", "update batch sources"
        )
        batch = await get_company_batch(db, company_id, batch_id, lock=True)
        source = await _get_source(db, batch.id, source_id)

        if data.farmer_group_id is not None:
            farmer_group_id = updated_text(data.farmer_group_id, "Farmer group ID")
            await _check_farmer_group(db, company_id, farmer_group_id)
            source.farmer_group_id = farmer_group_id
        if data.land_id is not None:
            land_id = updated_text(data.land_id, "Land ID")
            await _check_land(db, company_id, land_id)
            source.land_id = land_id
        if data.volume_kg is not None:
            if data.volume_kg < 0:
                raise ValidationError("Volume kg must be >= 0")
            source.volume_kg = data.volume_kg
        if data.land_snapshot is not None:
            source.land_snapshot = data.land_snapshot

        await flush_or_conflict(db, COMBINATION_CONFLICT, field="land_id")
        total = await recompute_total_kg(db, batch.id)
        await commit_or_conflict(db, COMBINATION_CONFLICT, field="land_id")

        logger.info(
            f"Batch source updated on {batch.lot_code}, total {total} kg",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_source(db, batch.id, source_id)

    @staticmethod
    async def delete_source(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str, source_id: str
    ) -> None:
        await require_permission(
            db, user_id, company_id, "batch_source:delete", "delete batch sources"
        )
        batch = await get_company_batch(db, company_id, batch_id, lock=True)
        source = await _get_source(db, batch.id, source_id)

        await db.execute(delete(BatchSource).where(BatchSource.id == source.id))
        total = await recompute_total_kg(db, batch.id)
        await db.commit()

        logger.info(
            f"Batch source removed from {batch.lot_code}, total {total} kg",
            extra={"company_id": company_id, "user_id": user_id},
        )
