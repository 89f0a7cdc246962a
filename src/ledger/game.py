"""
The Game class is the entrypoint into the domain layer for the service layer.
It is the ledger of a single game: it owns the current position, the move counters and the history of played moves,
and it is the only place where the game can move forward (apply), move back (undo) or end (rules, resignation, agreement).

All knowledge about a single position is delegated to the evaluator. The Game only keeps the books.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Callable, Iterable, Optional, Self, TypeVar

import chess

from src.core.exceptions import (
    GameError,
    GameOverError,
    GameStateError,
    IllegalMoveError,
    NoMovesPlayedError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Status
from src.ledger import evaluator
from src.ledger.evaluator import Move, Position, as_legal
from src.ledger.fen import Snapshot
from src.ledger.history import HistoryEntry
from src.ledger.notation import generate_movetext, split_movetext
from src.ledger.outcome import GameResult, is_position_terminal, resolve_result

logger = logging.getLogger(__name__)

FIFTY_MOVE_RULE_HALFMOVES = 100
SEVENTY_FIVE_MOVE_RULE_HALFMOVES = 150
THREEFOLD = 3
FIVEFOLD = 5

T = TypeVar("T")


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    position: Position
    halfmove_clock: int
    fullmove_number: int
    initial_snapshot: Snapshot
    history: list[HistoryEntry] = field(default_factory=list)
    ongoing: bool = True
    resigned_side: Optional[Color] = None
    draw_agreed: bool = False

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> Self:
        """A snapshot can already be a finished game (mate on the board, clock at 150, ...): derive that right away."""
        game = cls(
            position=snapshot.position,
            halfmove_clock=snapshot.halfmove_clock,
            fullmove_number=snapshot.fullmove_number,
            initial_snapshot=snapshot,
        )
        game._update_game_status()
        return game

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        return cls.from_snapshot(Snapshot.from_fen(fen))

    @classmethod
    def new(cls) -> Self:
        """Standard starting position"""
        return cls.from_snapshot(Snapshot.starting_position())

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Rebuild a Game from the information the Service layer actually has.
        ----

        The moves are replayed from the initial position, so all counters and histories get rebuilt by the same rules
        that built them in the first place. A record that cannot be replayed is corrupt --> GameStateError.
        """
        game = cls.from_fen(model.initial_fen)
        try:
            game.apply_line_uci(" ".join(model.moves_uci))
            if model.resigned_side is not None:
                game.resign(Color(model.resigned_side))
            if model.draw_agreed:
                game.agree_draw()
        except (GameError, ValueError) as exc:
            raise GameStateError(f"Stored game cannot be replayed: {exc}") from exc
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            initial_fen=self.initial_snapshot.to_fen(),
            moves_uci=[evaluator.move_to_uci(move) for move in self.move_history],
            resigned_side=self.resigned_side.value if self.resigned_side else None,
            draw_agreed=self.draw_agreed,
        )

    def copy(self) -> Self:
        """Independent duplicate. History entries are immutable, so copying the list is enough."""
        return replace(self, history=list(self.history))

    # --- QUERIES ---
    @property
    def side_to_move(self) -> Color:
        return self.position.turn

    @property
    def initial_fen(self) -> str:
        return self.initial_snapshot.to_fen()

    @property
    def position_history(self) -> list[Position]:
        return [entry.position for entry in self.history]

    @property
    def move_history(self) -> list[Move]:
        return [entry.move for entry in self.history]

    @property
    def halfmove_clock_history(self) -> list[int]:
        return [entry.halfmove_clock for entry in self.history]

    @property
    def status(self) -> Status:
        result = self.result()
        return Status.IN_PROGRESS if result is None else result.status

    def piece_at(self, square: str) -> Optional[chess.Piece]:
        return self.position.piece_at(square)

    def legal_moves(self) -> list[Move]:
        """No moves are legal once the game is over."""
        if not self.ongoing:
            return []
        return evaluator.legal_moves(self.position)

    def is_legal(self, move: Move) -> bool:
        return as_legal(move, self.legal_moves()) is not None

    def is_capture(self, move: Move) -> bool:
        legal_move = self._as_legal_or_raise(move)
        return evaluator.is_capture(self.position, legal_move)

    # --- MOVE APPLICATION ---
    def apply(self, move: Move) -> None:
        """
        Play a move
        ----

        1. resolve the move against the legal moves (nothing is legal when the game is over)
        2. compute the next position and counters
        3. commit: history record, position, counters
        4. update game status (if needed)

        An illegal move raises IllegalMoveError before anything gets touched.
        """
        legal_move = self._as_legal_or_raise(move)

        # everything is computed before the first mutation
        next_position = evaluator.apply_move(self.position, legal_move)
        next_halfmove_clock = self._next_halfmove_clock(legal_move)
        next_fullmove_number = self.fullmove_number + (
            1 if self.side_to_move == Color.BLACK else 0
        )

        self.history.append(
            HistoryEntry(
                position=self.position,
                move=legal_move,
                halfmove_clock=self.halfmove_clock,
            )
        )
        self.position = next_position
        self.halfmove_clock = next_halfmove_clock
        self.fullmove_number = next_fullmove_number
        logger.debug("Played %s, now at %s", legal_move.uci(), self.to_fen())

        self._update_game_status()

    def apply_uci(self, uci: str) -> None:
        """InvalidNotationError if it is not a UCI move at all, IllegalMoveError if it is not legal here."""
        self.apply(evaluator.move_from_uci(uci))

    def apply_san(self, san: str) -> None:
        """InvalidNotationError if it is not a SAN move at all, IllegalMoveError if it is not legal here."""
        self.apply(self.san_to_move(san))

    def apply_line(self, moves: Iterable[Move]) -> None:
        """Play all moves, or none of them: the first failure is raised and the game is left as it was."""
        self._apply_atomically(Game.apply, moves)

    def apply_line_uci(self, line: str) -> None:
        """Space separated UCI moves (no move numbers). All or nothing."""
        self._apply_atomically(Game.apply_uci, line.split())

    def apply_line_san(self, line: str) -> None:
        """Space separated SAN moves (no move numbers). All or nothing."""
        self._apply_atomically(Game.apply_san, line.split())

    def apply_movetext(self, movetext: str) -> None:
        """SAN movetext as written by generate_movetext (move numbers allowed). All or nothing."""
        self._apply_atomically(Game.apply_san, split_movetext(movetext))

    def undo(self) -> None:
        """
        Take back the most recent move.
        ----

        NOTE Undo always revives the game, whatever ended it. Resignations and draw agreements are dropped as well.
        """
        if not self.history:
            raise NoMovesPlayedError("Cannot undo: no moves have been played.")

        entry = self.history.pop()
        if entry.position.turn == Color.BLACK:
            self.fullmove_number -= 1
        self.position = entry.position
        self.halfmove_clock = entry.halfmove_clock
        self.ongoing = True
        self.resigned_side = None
        self.draw_agreed = False
        logger.debug("Took back %s, now at %s", entry.move.uci(), self.to_fen())

    # --- ENDING THE GAME BY ACTION ---
    def resign(self, side: Color) -> None:
        """The given side gives up. (Also the way to record a loss on time.)"""
        self._assert_can_end_game("resign")
        self.resigned_side = side
        self.ongoing = False
        logger.info("%s resigned", side)

    def agree_draw(self) -> None:
        """Draw by agreement. (Also the way to record a successful draw claim.)"""
        self._assert_can_end_game("agree to a draw")
        self.draw_agreed = True
        self.ongoing = False
        logger.info("Draw agreed at %s", self.to_fen())

    # --- OUTCOME ---
    def is_ongoing(self) -> bool:
        return self.ongoing

    def is_game_over(self) -> bool:
        return not self.ongoing

    def result(self) -> Optional[GameResult]:
        if self.ongoing:
            return None
        return resolve_result(self)

    def repetition_count(self) -> int:
        """How often the current position has occurred, including now."""
        return 1 + sum(1 for entry in self.history if entry.position == self.position)

    def is_threefold_repetition(self) -> bool:
        """A draw may be claimed on the third occurrence. Does not end the game by itself."""
        return self.repetition_count() == THREEFOLD

    def is_fivefold_repetition(self) -> bool:
        return self.repetition_count() >= FIVEFOLD

    def is_fifty_move_rule(self) -> bool:
        """A draw may be claimed at exactly 100 half moves. Does not end the game by itself."""
        return self.halfmove_clock == FIFTY_MOVE_RULE_HALFMOVES

    def is_seventy_five_move_rule(self) -> bool:
        return self.halfmove_clock >= SEVENTY_FIVE_MOVE_RULE_HALFMOVES

    def is_check(self) -> bool:
        return evaluator.is_check(self.position)

    def is_checkmate(self) -> bool:
        return evaluator.is_checkmate(self.position)

    def is_stalemate(self) -> bool:
        return evaluator.is_stalemate(self.position)

    def is_insufficient_material(self) -> bool:
        return evaluator.insufficient_material(self.position)

    def is_sufficient_material(self) -> bool:
        return not self.is_insufficient_material()

    def checked_side(self) -> Optional[Color]:
        return self.side_to_move if self.is_check() else None

    def checkmated_side(self) -> Optional[Color]:
        return self.side_to_move if self.is_checkmate() else None

    def stalemated_side(self) -> Optional[Color]:
        return self.side_to_move if self.is_stalemate() else None

    # --- NOTATION ---
    def move_to_san(self, move: Move) -> str:
        legal_move = self._as_legal_or_raise(move)
        return evaluator.move_to_san(self.position, legal_move)

    def san_to_move(self, san: str) -> Move:
        move = evaluator.san_to_move(self.position, san)
        return self._as_legal_or_raise(move, description=san)

    def export_snapshot(self) -> Snapshot:
        return Snapshot(
            position=self.position,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def to_fen(self) -> str:
        return self.export_snapshot().to_fen()

    def generate_movetext(self) -> str:
        """SAN movetext of the game so far (without result)."""
        return generate_movetext(self.initial_snapshot, self.history)

    def __str__(self) -> str:
        return str(self.position)

    # -- PRIVATE HELPERS ---
    def _as_legal_or_raise(self, move: Move, description: Optional[str] = None) -> Move:
        legal_move = as_legal(move, self.legal_moves())
        if legal_move is None:
            reason = "" if self.ongoing else " (game is over)"
            raise IllegalMoveError(
                f"Move not allowed: {description or move.uci()}{reason}"
            )
        return legal_move

    def _next_halfmove_clock(self, move: Move) -> int:
        """Reset on a pawn move or capture, otherwise count on."""
        if evaluator.is_pawn_move(self.position, move) or evaluator.is_capture(
            self.position, move
        ):
            return 0
        return self.halfmove_clock + 1

    def _update_game_status(self) -> None:
        """Checks whether the position ends the game and changes status accordingly."""
        self.ongoing = not is_position_terminal(self)
        if not self.ongoing:
            logger.info("Game over: %s", self.result())

    def _assert_can_end_game(self, action: str) -> None:
        """A game ends once: resigning after a draw agreement (or the other way around) is rejected explicitly."""
        if (
            not self.ongoing
            or self.resigned_side is not None
            or self.draw_agreed
        ):
            raise GameOverError(f"Cannot {action}: the game is already over.")

    def _apply_atomically(self, step: Callable[["Game", T], None], items: Iterable[T]) -> None:
        """Work on a scratch copy, swap it in only when every step succeeded."""
        scratch = self.copy()
        for item in items:
            step(scratch, item)
        self._commit(scratch)

    def _commit(self, scratch: "Game") -> None:
        for game_field in fields(self):
            setattr(self, game_field.name, getattr(scratch, game_field.name))
