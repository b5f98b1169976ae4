"""
Shared Kernel Module
====================

Generic infrastructure used by every bounded context: logging, HTTP
middleware and static file serving.

DO NOT add client business logic to the shared kernel.
"""

__version__ = "1.0.0"
