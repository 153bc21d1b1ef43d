"""
services/batch_attributes.py
----------------------------
Free-form measurements recorded against a batch. Attributes have no
company column of their own; they are always reached through a batch of
the caller's company.
"""

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.core.logging import get_logger
from app.core.store import fetch_all, fetch_one
from app.models.batch import BatchAttribute
from app.schemas.batch import BatchAttributeCreate, BatchAttributeUpdate
from app.services.authorization import require_permission
from app.services.batches import get_company_batch
from app.services.common import require_text, updated_text

logger = get_logger(__name__)


async def _get_attribute(db: AsyncSession, batch_id: str, attribute_id: str) -> BatchAttribute:
    attribute = await fetch_one(
        db,
        select(BatchAttribute).where(
            BatchAttribute.id == attribute_id, BatchAttribute.batch_id == batch_id
        ),
    )
    if attribute is None:
        raise NotFoundError("Batch attribute not found")
    return attribute


class BatchAttributeService:

    @staticmethod
    async def list_attributes(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str
    ) -> list[BatchAttribute]:
        await require_permission(
            db, user_id, company_id, "batch_attribute:view", "view batch attributes"
        )
        batch = await get_company_batch(db, company_id, batch_id)
        stmt = (
            select(BatchAttribute)
            .where(BatchAttribute.batch_id == batch.id)
            .order_by(BatchAttribute.recorded_at.desc())
        )
        return list(await fetch_all(db, stmt))

    @staticmethod
    async def get_attribute(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str, attribute_id: str
    ) -> BatchAttribute:
        await require_permission(
            db, user_id, company_id, "batch_attribute:view", "view batch attributes"
        )
        batch = await get_company_batch(db, company_id, batch_id)
        return await _get_attribute(db, batch.id, attribute_id)

    @staticmethod
    async def create_attribute(
        db: AsyncSession,
        user_id: str,
        company_id: str,
        batch_id: str,
        data: BatchAttributeCreate,
    ) -> BatchAttribute:
        await require_permission(
            db, user_id, company_id, "batch_attribute:create", "create batch attributes"
        )
        key = require_text(data.key, "Key")
        value = require_text(data.value, "Value")
        batch = await get_company_batch(db, company_id, batch_id)

        attribute = BatchAttribute(
            batch_id=batch.id,
            key=key,
            value=value,
            unit=data.unit or None,
            recorded_at=data.recorded_at or datetime.now(timezone.utc),
        )
        db.add(attribute)
        await db.commit()

        logger.info(
            f"Batch attribute recorded on {batch.lot_code}: {key}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_attribute(db, batch.id, attribute.id)

    @staticmethod
    async def update_attribute(
        db: AsyncSession,
        user_id: str,
        company_id: str,
        batch_id: str,
        attribute_id: str,
        data: BatchAttributeUpdate,
    ) -> BatchAttribute:
        await require_permission(
            db, user_id, company_id, "batch_attribute:update", "update batch attributes"
        )
        batch = await get_company_batch(db, company_id, batch_id)
        attribute = await _get_attribute(db, batch.id, attribute_id)

        if data.key is not None:
            attribute.key = updated_text(data.key, "Key")
        if data.value is not None:
            attribute.value = updated_text(data.value, "Value")
        if data.unit is not None:
            attribute.unit = data.unit or None
        if data.recorded_at is not None:
            attribute.recorded_at = data.recorded_at
        await db.commit()

        logger.info(
            f"Batch attribute updated on {batch.lot_code}: {attribute.key}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_attribute(db, batch.id, attribute_id)

    @staticmethod
    async def delete_attribute(
        db: AsyncSession, user_id: str, company_id: str, batch_id: str, attribute_id: str
    ) -> None:
        await require_permission(
            db, user_id, company_id, "batch_attribute:delete", "delete batch attributes"
        )
        batch = await get_company_batch(db, company_id, batch_id)
        attribute = await _get_attribute(db, batch.id, attribute_id)

        await db.execute(delete(BatchAttribute).where(BatchAttribute.id == attribute.id))
        await db.commit()

        logger.info(
            f"Batch attribute removed from {batch.lot_code}",
            extra={"company_id": company_id, "user_id": user_id},
        )
