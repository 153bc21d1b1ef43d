"""Async engine, declarative base and the per-request session dependency."""
from typing import AsyncGenerator

from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings


PSYCOPG_SCHEME = "postgresql+psycopg://"

# Schemes that all mean "PostgreSQL"; they are served by psycopg 3
_POSTGRES_SCHEMES = ("postgresql+asyncpg://", "postgres://", "postgresql://")


def normalize_database_url(database_url: str) -> str:
    for scheme in _POSTGRES_SCHEMES:
        if database_url.startswith(scheme):
            return PSYCOPG_SCHEME + database_url[len(scheme):]
    return database_url


naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}


class Base(DeclarativeBase):
    """Declarative base shared by every table of the service."""
    metadata = MetaData(naming_convention=naming_convention)


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str, **overrides) -> AsyncEngine:
    """
    Engine for either backend. SQLite gets foreign keys switched on and no
    pool sizing; PostgreSQL gets the configured pool.
    """
    database_url = normalize_database_url(database_url)
    options = {"echo": settings.DEBUG}

    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        options.update(overrides)
        engine = create_async_engine(database_url, **options)
        enable_sqlite_foreign_keys(engine)
        return engine

    options.update(
        pool_pre_ping=True,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_recycle=1800,
    )
    options.update(overrides)
    return create_async_engine(database_url, **options)


engine = build_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request."""
    async with async_session_maker() as session:
        yield session
