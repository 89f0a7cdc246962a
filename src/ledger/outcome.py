"""
Outcome determination.
----

The end of a game is decided by an ordered table of termination rules. The first rule whose predicate holds
decides the result, so the precedence is simply the order of the table:

draw by agreement > resignation > checkmate > stalemate > fivefold repetition > 75-move rule > insufficient material

Only the position-derived rules can end a game on their own after a move. Agreement and resignation are
explicit actions on the ledger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Self

from src.core.exceptions import LedgerInvariantError
from src.core.shared_types import Color, DrawType, Status, WinType

if TYPE_CHECKING:
    from src.ledger.game import Game


@dataclass(frozen=True)
class GameResult:
    """Either a win (winner + how) or a draw (how)."""

    winner: Optional[Color] = None
    win_type: Optional[WinType] = None
    draw_type: Optional[DrawType] = None
    stalemated_side: Optional[Color] = None

    @classmethod
    def wins(cls, winner: Color, win_type: WinType) -> Self:
        return cls(winner=winner, win_type=win_type)

    @classmethod
    def draw(cls, draw_type: DrawType, stalemated_side: Optional[Color] = None) -> Self:
        return cls(draw_type=draw_type, stalemated_side=stalemated_side)

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    @property
    def score(self) -> str:
        """PGN style result token"""
        if self.winner is None:
            return "1/2-1/2"
        return "1-0" if self.winner == Color.WHITE else "0-1"

    @property
    def status(self) -> Status:
        if self.win_type is not None:
            return _WIN_STATUS[self.win_type]
        assert self.draw_type is not None
        return _DRAW_STATUS[self.draw_type]

    @property
    def description(self) -> str:
        if self.winner is not None:
            return f"{self.winner} wins by {self.win_type}"
        if self.stalemated_side is not None:
            return f"draw by stalemate ({self.stalemated_side} to move)"
        return f"draw by {self.draw_type}"

    def __str__(self) -> str:
        return self.description


_WIN_STATUS: dict[WinType, Status] = {
    WinType.CHECKMATE: Status.CHECKMATE,
    WinType.RESIGNATION: Status.RESIGNATION,
}

_DRAW_STATUS: dict[DrawType, Status] = {
    DrawType.AGREEMENT: Status.DRAW_AGREEMENT,
    DrawType.STALEMATE: Status.STALEMATE,
    DrawType.FIVEFOLD_REPETITION: Status.DRAW_FIVEFOLD_REPETITION,
    DrawType.SEVENTY_FIVE_MOVE_RULE: Status.DRAW_SEVENTY_FIVE_MOVE_RULE,
    DrawType.INSUFFICIENT_MATERIAL: Status.DRAW_INSUFFICIENT_MATERIAL,
}


@dataclass(frozen=True)
class TerminationRule:
    name: str
    applies: Callable[[Game], bool]
    result: Callable[[Game], GameResult]
    position_derived: bool = True


def _resigned_result(game: Game) -> GameResult:
    assert game.resigned_side is not None
    return GameResult.wins(game.resigned_side.opponent, WinType.RESIGNATION)


def _checkmate_result(game: Game) -> GameResult:
    # the side to move got mated
    return GameResult.wins(game.side_to_move.opponent, WinType.CHECKMATE)


TERMINATION_RULES: tuple[TerminationRule, ...] = (
    TerminationRule(
        name="agreement",
        applies=lambda game: game.draw_agreed,
        result=lambda _: GameResult.draw(DrawType.AGREEMENT),
        position_derived=False,
    ),
    TerminationRule(
        name="resignation",
        applies=lambda game: game.resigned_side is not None,
        result=_resigned_result,
        position_derived=False,
    ),
    TerminationRule(
        name="checkmate",
        applies=lambda game: game.is_checkmate(),
        result=_checkmate_result,
    ),
    TerminationRule(
        name="stalemate",
        applies=lambda game: game.is_stalemate(),
        result=lambda game: GameResult.draw(DrawType.STALEMATE, game.side_to_move),
    ),
    TerminationRule(
        name="fivefold repetition",
        applies=lambda game: game.is_fivefold_repetition(),
        result=lambda _: GameResult.draw(DrawType.FIVEFOLD_REPETITION),
    ),
    TerminationRule(
        name="75-move rule",
        applies=lambda game: game.is_seventy_five_move_rule(),
        result=lambda _: GameResult.draw(DrawType.SEVENTY_FIVE_MOVE_RULE),
    ),
    TerminationRule(
        name="insufficient material",
        applies=lambda game: game.is_insufficient_material(),
        result=lambda _: GameResult.draw(DrawType.INSUFFICIENT_MATERIAL),
    ),
)

POSITION_RULES: tuple[TerminationRule, ...] = tuple(
    rule for rule in TERMINATION_RULES if rule.position_derived
)


def is_position_terminal(game: Game) -> bool:
    """Does any rule that follows from the position alone end the game?"""
    return any(rule.applies(game) for rule in POSITION_RULES)


def resolve_result(game: Game) -> GameResult:
    """
    Result of a finished game: first matching rule wins.

    Raises LedgerInvariantError if the game is over but no rule matches.
    """
    for rule in TERMINATION_RULES:
        if rule.applies(game):
            return rule.result(game)
    raise LedgerInvariantError(
        f"Game is marked as over, but no end condition holds. FEN: {game.to_fen()}"
    )
