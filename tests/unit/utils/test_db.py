"""Tests for database connection helpers."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from app.utils.db import build_engine, get_db_url, init_db, verify_db_connection


def test_get_db_url_prefers_database_url(monkeypatch):
    """DATABASE_URL overrides the DB_* pieces."""
    monkeypatch.setattr("app.utils.db.settings.DATABASE_URL", "sqlite+aiosqlite://")
    assert get_db_url() == "sqlite+aiosqlite://"


def test_get_db_url_builds_postgres_url(monkeypatch):
    monkeypatch.setattr("app.utils.db.settings.DATABASE_URL", "")
    monkeypatch.setattr("app.utils.db.settings.DB_USER", "planner")
    monkeypatch.setattr("app.utils.db.settings.DB_PASSWORD", "pw")
    monkeypatch.setattr("app.utils.db.settings.DB_HOST", "db")
    monkeypatch.setattr("app.utils.db.settings.DB_PORT", 5432)
    monkeypatch.setattr("app.utils.db.settings.DB_NAME", "study")

    assert get_db_url() == "postgresql+asyncpg://planner:pw@db:5432/study"


@pytest.mark.asyncio
async def test_sqlite_engine_enforces_foreign_keys():
    """SQLite connections get PRAGMA foreign_keys=ON so cascades work."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("PRAGMA foreign_keys"))
            assert result.scalar_one() == 1
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_verify_db_connection_raises_on_failure():
    """verify_db_connection propagates connection errors."""
    with patch("app.utils.db.get_db_engine", new_callable=AsyncMock) as mock_get_engine:
        mock_engine = MagicMock()
        mock_context = AsyncMock()
        mock_context.__aenter__.side_effect = OperationalError(
            "connection failed", None, None
        )
        mock_engine.connect.return_value = mock_context
        mock_get_engine.return_value = mock_engine

        with pytest.raises(OperationalError):
            await verify_db_connection()


@pytest.mark.asyncio
async def test_init_db_exits_on_connection_failure():
    """init_db terminates the process when the database is unreachable."""
    with patch("app.utils.db.create_tables", new_callable=AsyncMock), patch(
        "app.utils.db.verify_db_connection", new_callable=AsyncMock
    ) as mock_verify:
        mock_verify.side_effect = OperationalError("connection failed", None, None)

        with pytest.raises(SystemExit):
            await init_db()


@pytest.mark.asyncio
async def test_init_db_runs_migrations_when_enabled(monkeypatch):
    monkeypatch.setattr("app.utils.db.settings.RUN_MIGRATIONS", True)
    with patch(
        "app.utils.db.run_migrations", new_callable=AsyncMock
    ) as mock_migrate, patch(
        "app.utils.db.create_tables", new_callable=AsyncMock
    ) as mock_create, patch(
        "app.utils.db.verify_db_connection", new_callable=AsyncMock
    ):
        await init_db()

    mock_migrate.assert_awaited_once()
    mock_create.assert_not_awaited()
