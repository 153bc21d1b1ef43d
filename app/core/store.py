"""Storage helpers shared by the service layer.

The injected ``AsyncSession`` is the storage port. These helpers keep two
rules in one place: duplicate-key failures become ``ConflictError`` at the
write that caused them, and reads used for responses always see committed
state rather than whatever an earlier statement left in the identity map.
Any other integrity failure (foreign key, NOT NULL, CHECK) is rolled back,
logged and re-raised untouched.
"""
from typing import Optional, Sequence, TypeVar

from sqlalchemy import Select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError
from app.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

# SQLSTATE unique_violation
PG_UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True only for duplicate-key failures on PostgreSQL or SQLite."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == PG_UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


async def _translate(db: AsyncSession, exc: IntegrityError, detail: str, field: Optional[str]):
    await db.rollback()
    if is_unique_violation(exc):
        logger.info(f"Integrity violation translated to conflict: {detail}")
        raise ConflictError(detail, field=field) from exc
    logger.error(f"Integrity violation: {exc.orig}")
    raise exc


async def commit_or_conflict(
    db: AsyncSession,
    detail: str,
    field: Optional[str] = None,
) -> None:
    """Commit the unit of work, translating uniqueness failures."""
    try:
        await db.commit()
    except IntegrityError as exc:
        await _translate(db, exc, detail, field)


async def flush_or_conflict(
    db: AsyncSession,
    detail: str,
    field: Optional[str] = None,
) -> None:
    """Flush pending writes, translating uniqueness failures."""
    try:
        await db.flush()
    except IntegrityError as exc:
        await _translate(db, exc, detail, field)


async def fetch_one(db: AsyncSession, stmt: Select) -> Optional[T]:
    """Run a select and return a single fresh ORM object or None."""
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalars().first()


async def fetch_all(db: AsyncSession, stmt: Select) -> Sequence[T]:
    """Run a select and return fresh ORM objects."""
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalars().unique().all()
