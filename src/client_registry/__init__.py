"""
Client Registry
===============

Client registration backend: a form endpoint that stores names, a listing
endpoint, and static file serving, on top of a pooled async SQL store.
"""

__version__ = "1.0.0"
