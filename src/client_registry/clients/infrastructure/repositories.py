"""
Clients Infrastructure Repositories
===================================

SQLAlchemy implementation of the client repository.

Each operation is one acquire/execute/release cycle on the shared pool:
the connection is borrowed by `Database.session()` and returned when the
operation finishes, whether it succeeded or not.
"""

from typing import List

from sqlalchemy import insert, select

from client_registry.clients.application import IClientRepository
from client_registry.clients.domain import Client
from client_registry.clients.infrastructure.models import ClientModel
from client_registry.infrastructure.database import Database
from client_registry.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


class SQLAlchemyClientRepository(IClientRepository):
    """
    SQLAlchemy implementation of client repository.

    Raises PoolException when no connection can be acquired and
    QueryException when the statement or its commit fails.
    """

    def __init__(self, database: Database):
        self._database = database

    async def insert(self, name: str) -> None:
        """Insert one client row; `name` is bound as a parameter."""
        stmt = insert(ClientModel).values(name=name)

        with log_latency(logger, "insert_client"):
            async with self._database.session() as session:
                await self._database.execute(session, stmt, "insert_client")

    async def list(self) -> List[Client]:
        """List all clients ordered by ascending id."""
        stmt = select(ClientModel.id, ClientModel.name).order_by(ClientModel.id)

        with log_latency(logger, "list_clients"):
            async with self._database.session() as session:
                result = await self._database.execute(session, stmt, "list_clients")
                rows = result.all()

        return [Client(id=row.id, name=row.name) for row in rows]
