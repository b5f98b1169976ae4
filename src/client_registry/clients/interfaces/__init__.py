"""
Clients Interfaces Layer
========================

Contains:
- Controllers: FastAPI route handlers
"""

from client_registry.clients.interfaces.controllers import router as clients_router

__all__ = ["clients_router"]
