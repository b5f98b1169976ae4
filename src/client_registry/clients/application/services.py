"""
Clients Application Services
============================

Orchestrates client registration and listing between the API layer and
the repository.
"""

from abc import ABC, abstractmethod
from typing import List

from client_registry.clients.domain import Client, render_client_summary
from client_registry.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces ==========

class IClientRepository(ABC):
    """Interface for client data access."""

    @abstractmethod
    async def insert(self, name: str) -> None:
        """Store a new client; the store assigns its id."""

    @abstractmethod
    async def list(self) -> List[Client]:
        """Return every client in ascending id order."""


# ========== Application Services ==========

class ClientService:
    """
    Service for registering and listing clients.

    Repository failures (PoolException, QueryException) propagate to the
    caller unchanged.
    """

    def __init__(self, repository: IClientRepository):
        self._repository = repository

    async def register(self, name: str) -> str:
        """
        Persist a client and build the acknowledgement message.

        Args:
            name: Client name, stored as given

        Returns:
            "Thanks, <name>"
        """
        await self._repository.insert(name)
        logger.info(f"Added a client: {name}", extra={"client_name": name})
        return f"Thanks, {name}"

    async def list_clients(self) -> List[Client]:
        return await self._repository.list()

    async def summarize(self) -> str:
        """Render all clients as "Clients are: <id>. <name>; ..."."""
        return render_client_summary(await self._repository.list())
