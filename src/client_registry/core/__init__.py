"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from client_registry.core.exceptions import (
    ApplicationException,
    ConfigurationException,
    DatabaseConnectionException,
    RepositoryException,
    PoolException,
    QueryException,
)

__all__ = [
    "ApplicationException",
    "ConfigurationException",
    "DatabaseConnectionException",
    "RepositoryException",
    "PoolException",
    "QueryException",
]
