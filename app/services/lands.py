"""
services/lands.py
-----------------
Land parcels of a company.
"""

from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BusinessRuleViolation, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.store import fetch_all, fetch_one
from app.models.batch import BatchSource
from app.models.land import Land
from app.schemas.land import LandCreate, LandUpdate
from app.services.authorization import require_permission
from app.services.common import require_text, updated_text

logger = get_logger(__name__)


def _check_area(value: Optional[float]) -> float:
    if value is None or value <= 0:
        raise ValidationError("Area in hectares must be a positive number")
    return value


def _check_latitude(value: Optional[float]) -> float:
    if value is None or not -90 <= value <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    return value


def _check_longitude(value: Optional[float]) -> float:
    if value is None or not -180 <= value <= 180:
        raise ValidationError("Longitude must be between -180 and 180")
    return value


async def _get_land(db: AsyncSession, company_id: str, land_id: str) -> Land:
    land = await fetch_one(
        db, select(Land).where(Land.id == land_id, Land.company_id == company_id)
    )
    if land is None:
        raise NotFoundError("Land not found")
    return land


class LandService:

    @staticmethod
    async def list_lands(db: AsyncSession, user_id: str, company_id: str) -> list[Land]:
        await require_permission(db, user_id, company_id, "land:view", "view lands")
        stmt = (
            select(Land)
            .where(Land.company_id == company_id)
            .order_by(Land.recorded_at.desc())
        )
        return list(await fetch_all(db, stmt))

    @staticmethod
    async def get_land(db: AsyncSession, user_id: str, company_id: str, land_id: str) -> Land:
        await require_permission(db, user_id, company_id, "land:view", "view lands")
        return await _get_land(db, company_id, land_id)

    @staticmethod
    async def create_land(
        db: AsyncSession, user_id: str, company_id: str, data: LandCreate
    ) -> Land:
        await require_permission(db, user_id, company_id, "land:create", "create lands")

        land = Land(
            company_id=company_id,
            name=require_text(data.name, "Name"),
            area_hectares=_check_area(data.area_hectares),
            latitude=_check_latitude(data.latitude),
            longitude=_check_longitude(data.longitude),
            location=require_text(data.location, "Location"),
            geo_polygon=require_text(data.geo_polygon, "GeoPolygon"),
            is_deforestation_free=data.is_deforestation_free,
        )
        db.add(land)
        await db.commit()

        logger.info(
            f"Land created: {land.name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_land(db, company_id, land.id)

    @staticmethod
    async def update_land(
        db: AsyncSession, user_id: str, company_id: str, land_id: str, data: LandUpdate
    ) -> Land:
        await require_permission(db, user_id, company_id, "land:update", "update lands")
        land = await _get_land(db, company_id, land_id)

        if data.name is not None:
            land.name = updated_text(data.name, "Name")
        if data.area_hectares is not None:
            land.area_hectares = _check_area(data.area_hectares)
        if data.latitude is not None:
            land.latitude = _check_latitude(data.latitude)
        if data.longitude is not None:
            land.longitude = _check_longitude(data.longitude)
        if data.location is not None:
            land.location = updated_text(data.location, "Location")
        if data.geo_polygon is not None:
            land.geo_polygon = updated_text(data.geo_polygon, "GeoPolygon")
        if data.is_deforestation_free is not None:
            land.is_deforestation_free = data.is_deforestation_free
        await db.commit()

        logger.info(
            f"Land updated: {land.name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
        return await _get_land(db, company_id, land_id)

    @staticmethod
    async def delete_land(db: AsyncSession, user_id: str, company_id: str, land_id: str) -> None:
        """Refused while batch sources still point at the parcel."""
        await require_permission(db, user_id, company_id, "land:delete", "delete lands")
        land = await _get_land(db, company_id, land_id)

        in_use = await db.scalar(
            select(func.count(BatchSource.id)).where(BatchSource.land_id == land.id)
        )
        if in_use:
            logger.warning(
                f"Rejected delete of land in use: {land.name}",
                extra={"company_id": company_id, "user_id": user_id},
            )
            raise BusinessRuleViolation("Cannot delete land used by batch sources")

        await db.execute(delete(Land).where(Land.id == land.id))
        await db.commit()

        logger.info(
            f"Land deleted: {land.name}",
            extra={"company_id": company_id, "user_id": user_id},
        )
