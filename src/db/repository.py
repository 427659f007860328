"""Protocol repository: what the service needs from storage, whatever the backend (SQL Alchemy, in-memory dict, ...)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """
    Stores games as `GameModel`s: the moves in UCI notation, the status and the winner.
    The board itself is never stored; the domain layer rebuilds it by replaying the moves.
    """

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Stored moves/status/winner of a game, or None if there is no such record."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite moves, status and winner of an existing record. None if the record does not exist."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record and return what was stored. None if the record does not exist."""
        ...
