"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    AgreeDrawRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    LineRequest,
    MoveRequest,
    ResignRequest,
    UndoRequest,
)
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository
from src.ledger.fen import STARTING_FEN
from src.ledger.game import Game

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Create a new game, from the standard start or from a given FEN."""

        # Build the Game first: an invalid FEN never reaches the repository
        new_game = Game.from_fen(request.starting_fen or STARTING_FEN)
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info("Created game %s from %s", game_id, stored_game.initial_fen)
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves (in UCI)."""
        game = self._load_game(request.game_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            color=game.side_to_move,
            legal_moves=[move.uci() for move in game.legal_moves()],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt."""
        game = self._load_game(request.game_id)
        if request.uci is not None:
            game.apply_uci(request.uci)
        else:
            assert request.san is not None
            game.apply_san(request.san)
        return self._store(request.game_id, game)

    def play_line(self, request: LineRequest) -> GameResponse:
        """Play a sequence of moves. Either all of them get stored, or none."""
        game = self._load_game(request.game_id)
        line = " ".join(request.moves)
        if request.notation == "san":
            game.apply_line_san(line)
        else:
            game.apply_line_uci(line)
        return self._store(request.game_id, game)

    def undo_move(self, request: UndoRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.undo()
        return self._store(request.game_id, game)

    def resign(self, request: ResignRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.resign(request.color)
        return self._store(request.game_id, game)

    def agree_draw(self, request: AgreeDrawRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.agree_draw()
        return self._store(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with {request.game_id=} not found.")
        logger.info("Deleted game %s", request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the state of the Game to a GameResponse (for game with given ID.)"""
        result = game.result()
        return GameResponse(
            game_id=game_id,
            fen_state=game.to_fen(),
            starting_state=game.initial_fen,
            move_history=[move.uci() for move in game.move_history],
            movetext=game.generate_movetext(),
            side_to_move=game.side_to_move,
            status=game.status,
            result=result.score if result else None,
            winner=result.winner if result else None,
            can_claim_draw=game.is_ongoing()
            and (game.is_threefold_repetition() or game.is_fifty_move_rule()),
        )

    def _store(self, game_id: UUID, game: Game) -> GameResponse:
        """Persist the new state of the Game and report it."""
        if self.repo.update_game(game_id, game.to_model()) is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        logger.debug("Stored game %s at %s", game_id, game.to_fen())
        return self._create_game_response(game_id, game)

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

    def _load_game(self, game_id: UUID) -> Game:
        return Game.from_model(self._fetch_game(game_id))
