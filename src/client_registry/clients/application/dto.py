"""
Clients Application DTOs
========================

Pydantic models for the structured client API.
"""

from typing import List

from pydantic import BaseModel, Field

from client_registry.clients.domain import Client


class ClientResponse(BaseModel):
    """One stored client."""
    id: int = Field(..., description="Store-assigned identifier")
    name: str = Field(..., description="Registered name")

    @classmethod
    def from_domain(cls, client: Client) -> "ClientResponse":
        """Create from domain entity."""
        return cls(id=client.id, name=client.name)


class ClientListResponse(BaseModel):
    """All stored clients in ascending id order."""
    clients: List[ClientResponse]
    total: int

    @classmethod
    def from_domain(cls, clients: List[Client]) -> "ClientListResponse":
        return cls(
            clients=[ClientResponse.from_domain(client) for client in clients],
            total=len(clients)
        )
