"""
Core Exceptions
================

Custom exceptions for the application.

Two families exist. Startup errors (configuration, connectivity) stop the
process before it serves anything. Repository errors belong to a single
request and are turned into an HTTP error response at the API boundary.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationException(ApplicationException):
    """Exception for missing or malformed configuration."""


class DatabaseConnectionException(ApplicationException):
    """Exception when the database cannot be reached at startup."""


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class PoolException(RepositoryException):
    """No pooled connection could be acquired for the operation."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(f"Connection pool: {message}", details)


class QueryException(RepositoryException):
    """A statement failed to execute or commit."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.operation = operation
        super().__init__(
            f"Query '{operation}' failed: {message}",
            details or {"operation": operation}
        )
