"""
Shared API
==========

Middleware, exception handlers and static file mounts.
"""
