"""
Movetext generation: the SAN record of a game, replayed from the positions the moves were played from.
"""

import re
from typing import Sequence

from src.core.shared_types import Color
from src.ledger.evaluator import move_to_san
from src.ledger.fen import Snapshot
from src.ledger.history import HistoryEntry

MOVE_NUMBER = re.compile(r"\d+\.+")


def generate_movetext(initial: Snapshot, history: Sequence[HistoryEntry]) -> str:
    """
    SAN movetext, e.g. '1. e4 e5 2. Nf3'.
    ----

    * White's moves get a move number 'N.'
    * Black's move only gets one ('N...') if the game started with black to move
    * SAN of a move depends on the position it was played from, so that position is taken from the history.
    """
    tokens: list[str] = []
    fullmove_number = initial.fullmove_number
    for index, entry in enumerate(history):
        san = move_to_san(entry.position, entry.move)
        if entry.position.turn == Color.WHITE:
            tokens.append(f"{fullmove_number}. {san}")
        else:
            tokens.append(f"{fullmove_number}... {san}" if index == 0 else san)
            fullmove_number += 1
    return " ".join(tokens).strip()


def split_movetext(movetext: str) -> list[str]:
    """SAN tokens of a movetext, move numbers dropped ('1. e4 e5 2. Nf3' --> ['e4', 'e5', 'Nf3'])"""
    return MOVE_NUMBER.sub(" ", movetext).split()
