"""
Clients Module
==============

Bounded context for client registration.

Responsibilities:
- Store submitted client names
- List stored clients, as records or as one summary line
"""

__version__ = "1.0.0"
