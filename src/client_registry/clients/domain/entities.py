"""
Clients Domain Entities
=======================

Pure Python objects for registered clients, plus the rendering of the
client listing. Nothing here knows about SQL or HTTP.
"""

from dataclasses import dataclass
from typing import Iterable


SUMMARY_PREFIX = "Clients are: "


@dataclass(frozen=True)
class Client:
    """
    A registered client.

    `id` is assigned by the store on insert and grows with every insert.
    Names are neither unique nor validated.
    """
    id: int
    name: str

    def describe(self) -> str:
        return f"{self.id}. {self.name}"


def render_client_summary(clients: Iterable[Client]) -> str:
    """
    Render clients as one display line.

    Every client is followed by "; ", so a non-empty summary ends with a
    separator: "Clients are: 1. Alice; 2. Bob; ".
    """
    return SUMMARY_PREFIX + "".join(f"{client.describe()}; " for client in clients)
