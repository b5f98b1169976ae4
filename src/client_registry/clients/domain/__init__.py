"""
Clients Domain Layer
====================

Contains:
- Entities: Client
- Rendering: render_client_summary

This layer is framework-agnostic.
"""

from client_registry.clients.domain.entities import (
    Client,
    SUMMARY_PREFIX,
    render_client_summary,
)

__all__ = [
    "Client",
    "SUMMARY_PREFIX",
    "render_client_summary",
]
