"""
Clients Infrastructure Layer
============================

Contains:
- Models: SQLAlchemy ORM models
- Repositories: Data access implementations
"""

from client_registry.clients.infrastructure.models import ClientModel
from client_registry.clients.infrastructure.repositories import SQLAlchemyClientRepository

__all__ = [
    "ClientModel",
    "SQLAlchemyClientRepository",
]
