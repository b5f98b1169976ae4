"""Tests for the connection pool wrapper and schema bootstrap."""
from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import exc as sa_exc
from sqlalchemy import insert, text
from sqlalchemy.ext.asyncio import AsyncSession

from client_registry.core import (
    ConfigurationException,
    DatabaseConnectionException,
    PoolException,
    QueryException,
)
from client_registry.clients.infrastructure import ClientModel, SQLAlchemyClientRepository
from client_registry.infrastructure.database import Database, create_tables

from conftest import sqlite_url


# ===========================================================================
# Pool creation
# ===========================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("url", [None, "", "   "])
async def test_create_rejects_missing_url(url):
    with pytest.raises(ConfigurationException, match="DATABASE_URL is not set"):
        await Database.create(url)


@pytest.mark.asyncio
async def test_create_rejects_malformed_url():
    with pytest.raises(ConfigurationException):
        await Database.create("this is not a url")


@pytest.mark.asyncio
async def test_create_rejects_unknown_dialect():
    with pytest.raises(ConfigurationException):
        await Database.create("nosuchdb+nodriver://localhost/clients")


@pytest.mark.asyncio
async def test_create_rejects_sync_driver(db_path):
    with pytest.raises(ConfigurationException):
        await Database.create(f"sqlite:///{db_path}")


@pytest.mark.asyncio
async def test_create_fails_when_database_cannot_be_opened(tmp_path):
    url = sqlite_url(tmp_path / "missing" / "dir" / "clients.db")

    with pytest.raises(DatabaseConnectionException):
        await Database.create(url, pool_timeout=2.0)


@pytest.mark.asyncio
async def test_create_in_memory_database():
    db = await Database.create("sqlite+aiosqlite:///:memory:")
    try:
        assert await db.ping() is True
    finally:
        await db.close()


# ===========================================================================
# Acquire / release
# ===========================================================================

@pytest.mark.asyncio
async def test_acquire_times_out_when_pool_exhausted(db_path):
    db = await Database.create(
        sqlite_url(db_path), pool_size=1, max_overflow=0, pool_timeout=0.2
    )
    try:
        async with db.acquire():
            with pytest.raises(PoolException, match="timed out"):
                async with db.acquire():
                    pass
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_waiting_acquire_gets_released_connection(db_path):
    db = await Database.create(
        sqlite_url(db_path), pool_size=1, max_overflow=0, pool_timeout=5.0
    )
    order = []

    async def holder():
        async with db.acquire():
            order.append("held")
            await asyncio.sleep(0.3)
        order.append("released")

    async def waiter():
        await asyncio.sleep(0.05)
        async with db.acquire() as conn:
            await conn.execute(text("SELECT 1"))
            order.append("acquired")

    try:
        await asyncio.gather(holder(), waiter())
    finally:
        await db.close()

    assert order == ["held", "released", "acquired"]


@pytest.mark.asyncio
async def test_connection_released_after_failed_statement(db_path):
    db = await Database.create(
        sqlite_url(db_path), pool_size=1, max_overflow=0, pool_timeout=0.5
    )
    try:
        with pytest.raises(QueryException) as exc_info:
            async with db.session() as session:
                await db.execute(session, text("SELECT * FROM no_such_table"), "select_missing")
        assert exc_info.value.operation == "select_missing"

        # The only pooled connection must be available again
        assert await db.ping() is True
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_connection_released_after_caller_error(db_path):
    db = await Database.create(
        sqlite_url(db_path), pool_size=1, max_overflow=0, pool_timeout=0.5
    )
    try:
        with pytest.raises(RuntimeError):
            async with db.session():
                raise RuntimeError("boom")
        assert await db.ping() is True
    finally:
        await db.close()


# ===========================================================================
# In-memory database
# ===========================================================================

@pytest.mark.asyncio
async def test_in_memory_failed_unit_does_not_leak_into_concurrent_insert():
    db = await Database.create("sqlite+aiosqlite:///:memory:", pool_timeout=5.0)
    await create_tables(db)
    repo = SQLAlchemyClientRepository(db)
    written = asyncio.Event()

    async def failing_unit():
        with pytest.raises(RuntimeError):
            async with db.session() as session:
                await db.execute(session, insert(ClientModel).values(name="ghost"), "insert_client")
                written.set()
                await asyncio.sleep(0.1)
                raise RuntimeError("caller gave up")

    async def concurrent_insert():
        await written.wait()
        await repo.insert("Alice")

    try:
        await asyncio.gather(failing_unit(), concurrent_insert())
        clients = await repo.list()
    finally:
        await db.close()

    assert [c.name for c in clients] == ["Alice"]


@pytest.mark.asyncio
async def test_in_memory_acquire_waits_for_the_single_connection():
    db = await Database.create("sqlite+aiosqlite:///:memory:", pool_timeout=0.2)
    try:
        async with db.acquire():
            with pytest.raises(PoolException, match="timed out"):
                async with db.acquire():
                    pass
        assert await db.ping() is True
    finally:
        await db.close()


# ===========================================================================
# Rollback
# ===========================================================================

@pytest.mark.asyncio
async def test_failed_rollback_does_not_replace_original_error(database, monkeypatch):
    async def broken_rollback(self):
        raise sa_exc.OperationalError("ROLLBACK", {}, Exception("disk I/O error"))

    monkeypatch.setattr(AsyncSession, "rollback", broken_rollback)

    with pytest.raises(QueryException) as exc_info:
        async with database.session() as session:
            await database.execute(session, text("SELECT * FROM no_such_table"), "list_clients")

    assert exc_info.value.operation == "list_clients"
    assert await database.ping() is True


# ===========================================================================
# Schema bootstrap
# ===========================================================================

@pytest.mark.asyncio
async def test_create_tables_is_idempotent(database):
    await create_tables(database)

    async with database.acquire() as conn:
        result = await conn.execute(
            text("SELECT name FROM sqlite_master WHERE type='table' AND name='clients'")
        )
        assert result.scalar_one() == "clients"


@pytest.mark.asyncio
async def test_ping_reports_healthy_pool(database):
    assert await database.ping() is True
