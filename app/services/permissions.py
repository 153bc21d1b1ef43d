"""
services/permissions.py
-----------------------
Keeps the ``permissions`` table equal to the code-defined catalog and serves
it to the role editor.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.permissions import PERMISSION_CATALOG
from app.models.permission import Permission

logger = get_logger(__name__)


class PermissionService:

    @staticmethod
    async def sync_permission_catalog(db: AsyncSession) -> int:
        """
        Upsert every catalog entry by id. Returns how many rows changed.
        Rows that are no longer in the catalog are left alone so existing
        role links keep working.
        """
        result = await db.execute(select(Permission))
        existing = {p.id: p for p in result.scalars().all()}

        changed = 0
        for entry in PERMISSION_CATALOG:
            permission = existing.get(entry.id)
            if permission is None:
                db.add(Permission(id=entry.id, name=entry.name, description=entry.description))
                changed += 1
            elif (permission.name, permission.description) != (entry.name, entry.description):
                permission.name = entry.name
                permission.description = entry.description
                changed += 1

        await db.commit()
        if changed:
            logger.info(f"Permission catalog synced ({changed} rows written)")
        return changed

    @staticmethod
    async def list_permissions(db: AsyncSession) -> list[Permission]:
        result = await db.execute(select(Permission).order_by(Permission.name))
        return list(result.scalars().all())
