"""
Exceptions raised across layers.

Every recoverable error derives from GameError, so the service (or any caller) can catch the whole family at once.
A recoverable error always leaves the game untouched.
"""


class GameError(Exception):
    """Root of all recoverable chess ledger errors."""


# --- DOMAIN ERRORS ---
class IllegalMoveError(GameError):
    """A well-formed move that is not legal in the current position (or the game is already over)."""


class InvalidNotationError(GameError):
    """A UCI/SAN string that does not describe any move at all."""


class NoMovesPlayedError(GameError):
    """Undo requested before any move was played."""


class GameOverError(GameError):
    """Resignation or draw agreement requested for a game that has already ended."""


class InvalidFENError(GameError):
    """The supplied string cannot be read as a FEN snapshot."""


class GameStateError(GameError):
    """A stored game cannot be turned back into a consistent ledger."""


# --- BOUNDARY ERRORS ---
class RepositoryError(GameError):
    """Persistence layer could not find (or store) a game."""


class InvalidRequestError(GameError):
    """Request data failed validation before reaching the domain layer."""


# --- DEFECTS ---
class LedgerInvariantError(RuntimeError):
    """
    The ledger's bookkeeping contradicts itself (e.g. the game is over but no end condition holds).

    NOTE not a GameError on purpose: this signals a bug and must never be handled as a normal outcome.
    """
