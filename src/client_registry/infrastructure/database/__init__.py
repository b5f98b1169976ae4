"""
Database Infrastructure
=======================

Manages the connection pool, connection/session lifecycle, and schema
bootstrap.

Uses SQLAlchemy 2.0 asyncio. SQLite (aiosqlite) is the default store;
any async SQLAlchemy URL (e.g. postgresql+asyncpg) works the same way.

The pool is owned by a single `Database` instance created once during
application startup and kept on `app.state.database`. Every repository
operation borrows one connection through `Database.session()` and gives it
back when the scope exits, whatever the outcome.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import exc as sa_exc
from sqlalchemy import text
from sqlalchemy.engine import Result, URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool, StaticPool

from client_registry.core import (
    ConfigurationException,
    DatabaseConnectionException,
    PoolException,
    QueryException,
)
from client_registry.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    SQLAlchemy 2.0 style using DeclarativeBase.
    All models inherit from this class.
    """
    pass


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _describe(exc: Exception) -> str:
    """Prefer the driver's message over SQLAlchemy's wrapped text."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


async def _rollback_quietly(session: AsyncSession) -> None:
    try:
        await session.rollback()
    except (sa_exc.SQLAlchemyError, OSError) as exc:
        logger.warning(f"Rollback failed: {_describe(exc)}")


class Database:
    """
    Process-wide handle to the connection pool.

    Use `Database.create()` to build one; the constructor only wraps an
    engine that already exists.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        query_timeout: float = 10.0,
        pool_timeout: float = 30.0,
        exclusive: bool = False,
    ):
        self._engine = engine
        self._query_timeout = query_timeout
        self._pool_timeout = pool_timeout
        # Single shared connection: lend it to one caller at a time
        self._exclusive_lock = asyncio.Lock() if exclusive else None

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @classmethod
    async def create(
        cls,
        database_url: Optional[str],
        *,
        pool_size: int = 5,
        max_overflow: int = 0,
        pool_timeout: float = 30.0,
        query_timeout: float = 10.0,
        echo: bool = False,
    ) -> "Database":
        """
        Create the engine and verify the database can be opened.

        Args:
            database_url: SQLAlchemy async URL
            pool_size: Connections kept in the pool
            max_overflow: Extra connections allowed above pool_size
            pool_timeout: Seconds acquire() waits for a free connection
            query_timeout: Seconds a single statement may run
            echo: Log every SQL statement

        Returns:
            Database: Ready-to-use pool wrapper

        Raises:
            ConfigurationException: URL missing, malformed, or not async
            DatabaseConnectionException: Database cannot be opened
        """
        if not database_url or not database_url.strip():
            raise ConfigurationException("DATABASE_URL is not set")

        try:
            url = make_url(database_url.strip())
        except sa_exc.ArgumentError as exc:
            raise ConfigurationException(
                f"Malformed database URL: {exc}",
                {"database_url": database_url}
            ) from exc

        in_memory = _is_memory_sqlite(url)
        engine_options: dict[str, Any] = {"echo": echo}
        if in_memory:
            # One shared connection; a second one would see an empty database
            engine_options["poolclass"] = StaticPool
        else:
            engine_options.update(
                poolclass=AsyncAdaptedQueuePool,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_pre_ping=True,
            )

        try:
            engine = create_async_engine(url, **engine_options)
        except (sa_exc.ArgumentError, sa_exc.InvalidRequestError, ImportError) as exc:
            raise ConfigurationException(
                f"Unusable database URL: {exc}",
                {"driver": url.drivername}
            ) from exc

        try:
            await asyncio.wait_for(cls._check_connection(engine), timeout=pool_timeout)
        except (sa_exc.SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
            await engine.dispose()
            raise DatabaseConnectionException(
                f"Couldn't open database: {_describe(exc)}",
                {"driver": url.drivername}
            ) from exc

        logger.info("Database pool created", extra={
            "driver": url.drivername,
            "pool_size": 1 if in_memory else pool_size,
            "max_overflow": 0 if in_memory else max_overflow,
        })
        return cls(
            engine,
            query_timeout=query_timeout,
            pool_timeout=pool_timeout,
            exclusive=in_memory,
        )

    @staticmethod
    async def _check_connection(engine: AsyncEngine) -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[AsyncConnection]:
        """
        Borrow a connection from the pool.

        Waits up to the pool timeout for a free connection. The connection
        goes back to the pool when the block exits, including on errors.

        Raises:
            PoolException: No connection could be acquired
        """
        lock = self._exclusive_lock
        if lock is not None:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self._pool_timeout)
            except asyncio.TimeoutError as exc:
                raise PoolException(
                    "timed out waiting for a free connection",
                    {"pool_status": "in-memory database, 1 connection in use"}
                ) from exc

        try:
            try:
                conn = await self._engine.connect()
            except sa_exc.TimeoutError as exc:
                raise PoolException(
                    "timed out waiting for a free connection",
                    {"pool_status": self._engine.pool.status()}
                ) from exc
            except (sa_exc.SQLAlchemyError, OSError) as exc:
                raise PoolException(f"couldn't acquire a connection: {_describe(exc)}") from exc

            try:
                yield conn
            finally:
                await conn.close()
        finally:
            if lock is not None:
                lock.release()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Unit of work on one borrowed connection.

        Commits when the block exits normally and rolls back otherwise. A
        rollback that fails is logged and never replaces the original error.

        Usage:
            async with database.session() as session:
                await database.execute(session, stmt, "insert_client")

        Raises:
            PoolException: No connection could be acquired
            QueryException: The commit failed
        """
        async with self.acquire() as conn:
            async with AsyncSession(bind=conn, expire_on_commit=False, autoflush=False) as session:
                try:
                    yield session
                except Exception:
                    await _rollback_quietly(session)
                    raise

                try:
                    await session.commit()
                except sa_exc.SQLAlchemyError as exc:
                    await _rollback_quietly(session)
                    raise QueryException("commit", _describe(exc)) from exc

    async def execute(self, session: AsyncSession, statement: Any, operation: str) -> Result:
        """
        Run one statement, bounded by the query timeout.

        Raises:
            QueryException: Execution failed or timed out
        """
        try:
            return await asyncio.wait_for(
                session.execute(statement),
                timeout=self._query_timeout
            )
        except asyncio.TimeoutError as exc:
            raise QueryException(
                operation,
                f"timed out after {self._query_timeout}s"
            ) from exc
        except sa_exc.SQLAlchemyError as exc:
            raise QueryException(operation, _describe(exc)) from exc

    async def ping(self) -> bool:
        """Check that a connection can be acquired and used."""
        try:
            async with self.acquire() as conn:
                await asyncio.wait_for(
                    conn.execute(text("SELECT 1")),
                    timeout=self._query_timeout
                )
        except (PoolException, sa_exc.SQLAlchemyError, asyncio.TimeoutError) as exc:
            logger.warning(f"Database ping failed: {exc}")
            return False
        return True

    async def close(self) -> None:
        """Dispose of all pooled connections. Called at shutdown."""
        await self._engine.dispose()
        logger.info("Database pool closed")


async def create_tables(database: Database) -> None:
    """
    Create all tables declared on Base.metadata that do not exist yet.

    Raises:
        DatabaseConnectionException: The schema could not be created
    """
    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except sa_exc.SQLAlchemyError as exc:
        raise DatabaseConnectionException(f"Couldn't create tables: {_describe(exc)}") from exc


def get_database(request: Request) -> Database:
    """
    FastAPI dependency returning the pool created at startup.

    Usage in FastAPI:
        @router.get("/clients")
        async def list_clients(database: Database = Depends(get_database)):
            ...
    """
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not initialized. Application startup did not complete.")
    return database
