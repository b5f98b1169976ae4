"""
Clients Application Layer
=========================

Contains:
- Services: Business logic orchestration
- DTOs: Data transfer objects for API serialization
"""

from client_registry.clients.application.dto import (
    ClientResponse,
    ClientListResponse,
)
from client_registry.clients.application.services import (
    ClientService,
    IClientRepository,
)

__all__ = [
    # DTOs
    "ClientResponse",
    "ClientListResponse",
    # Services
    "ClientService",
    # Repository Interfaces
    "IClientRepository",
]
