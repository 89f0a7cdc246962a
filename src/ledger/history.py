"""One record per played move. Position, move and clock are pushed and popped together."""

from dataclasses import dataclass

from src.ledger.evaluator import Move, Position


@dataclass(frozen=True)
class HistoryEntry:
    position: Position  # position the move was played from
    move: Move
    halfmove_clock: int  # clock value before the move
