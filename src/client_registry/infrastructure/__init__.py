"""
Infrastructure Layer
====================

Database connection pool and schema bootstrap.
"""
