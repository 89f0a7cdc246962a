"""
Storage contract for game ledgers.

A game is stored as its replay recipe (initial FEN, UCI moves, resignation / agreement), never as derived state.
"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Anything that can keep GameModels by ID. The service only talks to this."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Stored recipe of the game, None for an unknown ID."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a fresh game and hand out its ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the stored recipe. None if there was nothing to overwrite."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Drop the record, returning what was stored (None for an unknown ID)."""
        ...
