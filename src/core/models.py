"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
FEN = str
UCI = str
PieceColor = str


@dataclass
class GameModel:
    """
    Transport-safe representation of a chess game used between API, Service, DB, and Game layers.
    ----

    Only the facts that cannot be recomputed are stored: where the game started, which moves were played
    and whether it ended by an explicit action. Everything else (current position, counters, result) follows
    from replaying the moves.
    """

    initial_fen: FEN
    moves_uci: list[UCI] = field(default_factory=list)
    resigned_side: Optional[PieceColor] = None
    draw_agreed: bool = False
