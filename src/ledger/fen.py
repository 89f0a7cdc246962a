"""
Snapshot of a game that can be encoded in a FEN string: the position plus both move counters.
"""

from dataclasses import dataclass
from typing import Self

import chess

from src.core.exceptions import InvalidFENError
from src.ledger.evaluator import Position

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
NUM_FEN_FIELDS = 6


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


def parse_board(fen: str) -> chess.Board:
    """
    Let python-chess read the FEN, and reject anything that is not a playable position
    (missing kings, pawns on the back rank, side not to move in check, ...).
    """
    try:
        board = chess.Board(fen)
    except ValueError as exc:
        raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}") from exc
    if not board.is_valid():
        raise InvalidFENError(f"FEN does not describe a valid position: {fen}")
    return board


@dataclass(frozen=True)
class Snapshot:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

    <board position string><active color><castling rights><en passant square><# half move clock><full move number>

    The first four fields make up the Position. The counters are kept apart, as they are owned by the game ledger:
    * The half move clock counts the half moves since the last pawn move or capture (75-move rule, 50-move claim).
    * The full move number starts at 1 and increments after every move black makes.
    """

    position: Position
    halfmove_clock: int
    fullmove_number: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse and validate the FEN"""
        parts = fen.split()
        if len(parts) != NUM_FEN_FIELDS:
            raise InvalidFENError(
                f"FEN must contain {NUM_FEN_FIELDS} space-separated fields: {fen}"
            )

        halfmove_part, fullmove_part = parts[4], parts[5]
        if not (
            is_valid_move_counter(halfmove_part)
            and is_valid_move_counter(fullmove_part)
        ):
            raise InvalidFENError(f"Move counters must be non-negative integers: {fen}")

        board = parse_board(fen)
        return cls(
            position=Position.from_board(board),
            halfmove_clock=int(halfmove_part),
            fullmove_number=max(int(fullmove_part), 1),
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        return f"{self.position.epd} {self.halfmove_clock} {self.fullmove_number}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)
