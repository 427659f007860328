"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service, DB, and Game layers.

    NOTE: The board itself is not stored. Replaying `moves_uci` from the starting position rebuilds it.
    """

    moves_uci: list[str] = field(default_factory=list)
    status: str = "in progress"
    winner: Optional[str] = None
