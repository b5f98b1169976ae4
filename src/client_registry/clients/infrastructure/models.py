"""
Clients Infrastructure Models
=============================

SQLAlchemy ORM models for the clients module.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from client_registry.infrastructure.database import Base


class ClientModel(Base):
    """
    Database model for Client entity.

    Maps to the 'clients' table. AUTOINCREMENT keeps SQLite from reusing
    ids, so ids only ever grow.
    """
    __tablename__ = "clients"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
