"""
Position evaluator: thin facade over python-chess.
----

The ledger never touches python-chess directly. Everything it needs to know about a single position
(legal moves, the position after a move, check/mate/stalemate, material, SAN/UCI conversion) is asked here.
Notation failures are translated into the ledger's own exceptions so python-chess errors never leak out.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Optional, Self

import chess

from src.core.exceptions import IllegalMoveError, InvalidNotationError
from src.core.shared_types import Color

# A move is the python-chess value: origin, destination and (optional) promotion piece.
Move = chess.Move


@dataclass(frozen=True)
class Position:
    """
    Immutable board position.
    ----

    Stored as an EPD string: piece placement, side to move, castling rights and en passant square.
    The en passant square is only recorded when an en passant capture is actually legal,
    so two positions compare equal exactly when they count as the same position for repetitions.
    Move counters are NOT part of a position, the ledger tracks those.
    """

    epd: str

    @classmethod
    def from_board(cls, board: chess.Board) -> Self:
        return cls(board.epd())

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        return cls.from_board(chess.Board(fen))

    @cached_property
    def _board(self) -> chess.Board:
        # shared working copy: anything pushed onto it (e.g. by Board.san) is popped again
        return chess.Board(self.epd)

    def to_board(self) -> chess.Board:
        """A fresh python-chess board that the caller is free to mutate."""
        return self._board.copy(stack=False)

    @property
    def turn(self) -> Color:
        return Color.from_chess(self._board.turn)

    def piece_at(self, square: str) -> Optional[chess.Piece]:
        """Occupant of a square given by name, e.g. 'e4'."""
        try:
            square_index = chess.parse_square(square)
        except ValueError as exc:
            raise InvalidNotationError(f"Not a square name: {square!r}") from exc
        return self._board.piece_at(square_index)

    def pretty(self, perspective: Color = Color.WHITE, ascii: bool = True) -> str:
        """Board diagram seen from the given side."""
        if not ascii:
            return self._board.unicode(orientation=perspective.to_chess())
        rows = str(self._board).splitlines()
        if perspective == Color.BLACK:
            rows = [row[::-1] for row in reversed(rows)]
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.pretty(self.turn)


# --- MOVE GENERATION / APPLICATION ---
def legal_moves(position: Position) -> list[Move]:
    return list(position._board.legal_moves)


def apply_move(position: Position, move: Move) -> Position:
    """Position after the move. Only defined for moves taken from legal_moves(position)."""
    board = position.to_board()
    board.push(move)
    return Position.from_board(board)


def as_legal(move: Move, legal: list[Move]) -> Optional[Move]:
    """
    Resolve a (possibly partially specified) move to the legal move it stands for.
    ----

    Matching is on origin, destination and, when given, the promotion piece.
    A move without promotion piece therefore still resolves if exactly one legal move fits.
    Returns None if no legal move fits, or if the intent is ambiguous (e.g. a promotion without piece type).
    """
    candidates = [
        candidate
        for candidate in legal
        if candidate.from_square == move.from_square
        and candidate.to_square == move.to_square
        and (move.promotion is None or candidate.promotion == move.promotion)
    ]
    return candidates[0] if len(candidates) == 1 else None


def is_capture(position: Position, move: Move) -> bool:
    return position._board.is_capture(move)


def is_pawn_move(position: Position, move: Move) -> bool:
    return position._board.piece_type_at(move.from_square) == chess.PAWN


# --- POSITION FACTS ---
def is_check(position: Position) -> bool:
    """The side to move is in check."""
    return position._board.is_check()


def is_checkmate(position: Position) -> bool:
    return position._board.is_checkmate()


def is_stalemate(position: Position) -> bool:
    return position._board.is_stalemate()


def insufficient_material(position: Position) -> bool:
    """
    Neither side can ever deliver mate:
    * King and knight vs. king
    * King and zero or more bishops vs. king and zero or more bishops, all bishops on one color complex
    """
    return position._board.is_insufficient_material()


# --- NOTATION ---
def move_from_uci(uci: str) -> Move:
    try:
        move = Move.from_uci(uci)
    except ValueError as exc:
        raise InvalidNotationError(f"Cannot interpret {uci!r} as a UCI move.") from exc
    return _reject_null_move(move, uci)


def move_to_uci(move: Move) -> str:
    return move.uci()


def move_to_san(position: Position, move: Move) -> str:
    """SAN of a move that is legal in the position."""
    return position._board.san(move)


def san_to_move(position: Position, san: str) -> Move:
    """
    Parse SAN in the context of the position.
    ----

    * Well-formed SAN that matches no legal move --> IllegalMoveError
    * Anything else that fails (garbage, ambiguous SAN, the null move) --> InvalidNotationError
    """
    try:
        move = position._board.parse_san(san)
    except chess.IllegalMoveError as exc:
        raise IllegalMoveError(f"Move not allowed: {san}") from exc
    except ValueError as exc:
        raise InvalidNotationError(f"Cannot interpret {san!r} as a SAN move.") from exc
    return _reject_null_move(move, san)


def _reject_null_move(move: Move, notation: str) -> Move:
    """python-chess reads "0000" and "--" as the null move, which is not a move at all."""
    if not move:
        raise InvalidNotationError(f"Null move {notation!r} is not a playable move.")
    return move
