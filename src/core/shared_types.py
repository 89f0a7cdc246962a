"""
Type definitions used across layers
"""

from enum import StrEnum
from typing import Self

import chess


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    RESIGNATION = "resignation"
    STALEMATE = "stalemate"
    DRAW_AGREEMENT = "draw by agreement"
    DRAW_FIVEFOLD_REPETITION = "draw by fivefold repetition"
    DRAW_SEVENTY_FIVE_MOVE_RULE = "draw by 75-move rule"
    DRAW_INSUFFICIENT_MATERIAL = "draw by insufficient material"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @classmethod
    def from_chess(cls, color: chess.Color) -> Self:
        """python-chess encodes colors as booleans (WHITE = True)"""
        return cls.WHITE if color == chess.WHITE else cls.BLACK

    def to_chess(self) -> chess.Color:
        return chess.WHITE if self == Color.WHITE else chess.BLACK


class WinType(StrEnum):
    CHECKMATE = "checkmate"
    RESIGNATION = "resignation"


class DrawType(StrEnum):
    AGREEMENT = "agreement"
    STALEMATE = "stalemate"
    FIVEFOLD_REPETITION = "fivefold repetition"
    SEVENTY_FIVE_MOVE_RULE = "75-move rule"
    INSUFFICIENT_MATERIAL = "insufficient material"
