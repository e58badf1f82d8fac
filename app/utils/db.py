"""Database connection utilities."""

import logging
import sys
from pathlib import Path
from typing import AsyncGenerator, Optional

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from app.config import settings

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()

# Global engine and session factory
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def get_db_url() -> str:
    """Build database URL from settings."""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    return (
        f"postgresql+asyncpg://{settings.DB_USER}:{settings.DB_PASSWORD}"
        f"@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
    )


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement (and ON DELETE CASCADE) for SQLite connections."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(db_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine for the given URL."""
    if db_url.startswith("sqlite"):
        engine = create_async_engine(db_url, echo=settings.DEBUG, **kwargs)
        enable_sqlite_foreign_keys(engine)
        return engine
    return create_async_engine(
        db_url,
        echo=settings.DEBUG,
        pool_pre_ping=True,  # Verify connections before using
        **kwargs,
    )


async def get_db_engine() -> AsyncEngine:
    """Get or create database engine."""
    global _engine
    if _engine is None:
        _engine = build_engine(get_db_url())
    return _engine


async def verify_db_connection():
    """Verify database connection. Raises exception if connection fails."""
    engine = await get_db_engine()
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def run_migrations():
    """Run database migrations using Alembic."""
    import asyncio

    from alembic import command
    from alembic.config import Config

    project_root = Path(__file__).resolve().parents[2]
    alembic_ini_path = project_root / "alembic.ini"

    if not alembic_ini_path.exists():
        raise FileNotFoundError(
            f"Alembic configuration file not found at {alembic_ini_path}"
        )

    alembic_cfg = Config(str(alembic_ini_path))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", get_db_url())
    # Keep the application logging setup
    alembic_cfg.attributes["configure_logger"] = False

    # env.py drives the async engine through asyncio.run, so keep it
    # off the running event loop.
    await asyncio.to_thread(command.upgrade, alembic_cfg, "head")


async def create_tables():
    """Create all tables from ORM metadata."""
    import app.models  # noqa: F401  (registers mappers on Base.metadata)

    engine = await get_db_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db():
    """Prepare the schema and verify the connection. Exits on failure."""
    try:
        if settings.RUN_MIGRATIONS:
            await run_migrations()
        else:
            await create_tables()
        await verify_db_connection()
    except Exception as e:
        logger.critical("Failed to initialize database", extra={"error": str(e)})
        print(f"Failed to initialize database: {e}", file=sys.stderr)
        sys.exit(1)


async def get_session() -> AsyncSession:
    """Get database session."""
    global _session_factory
    if _session_factory is None:
        engine = await get_db_engine()
        _session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
    return _session_factory()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped database session."""
    session = await get_session()
    try:
        yield session
    finally:
        await session.close()


async def close_db():
    """Close database connections."""
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None
