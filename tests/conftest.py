"""Pytest configuration and shared fixtures.

Every test gets its own SQLite file under tmp_path, so tests are isolated
and leave nothing behind.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from client_registry.clients.infrastructure import SQLAlchemyClientRepository
from client_registry.config import Settings
from client_registry.infrastructure.database import Database, create_tables
from client_registry.main import create_app


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


def run_sql(db_path: Path, statement: str) -> None:
    """Run a statement on the database file outside the application pool."""
    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute(statement)
        conn.commit()
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "clients.db"


@pytest_asyncio.fixture
async def database(db_path):
    db = await Database.create(
        sqlite_url(db_path),
        pool_size=2,
        max_overflow=0,
        pool_timeout=2.0,
        query_timeout=5.0,
    )
    await create_tables(db)
    yield db
    await db.close()


@pytest.fixture
def repository(database) -> SQLAlchemyClientRepository:
    return SQLAlchemyClientRepository(database)


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def static_dirs(tmp_path):
    root = tmp_path / "root"
    images = tmp_path / "images"
    root.mkdir()
    (images / "icons").mkdir(parents=True)
    (root / "index.html").write_text("<h1>Welcome</h1>", encoding="utf-8")
    (root / "about.html").write_text("<p>About</p>", encoding="utf-8")
    (images / "cat.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    (images / "icons" / "star.svg").write_text("<svg/>", encoding="utf-8")
    return root, images


@pytest.fixture
def settings(db_path, static_dirs) -> Settings:
    root, images = static_dirs
    return Settings(
        _env_file=None,
        database_url=sqlite_url(db_path),
        environment="test",
        db_pool_size=2,
        db_pool_timeout=2.0,
        db_query_timeout=5.0,
        static_root=root,
        images_dir=images,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
