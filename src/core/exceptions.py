"""
Custom exceptions used across layers.

All of them derive from GameError, so a caller (service / API) can catch the whole family at once
and still look at the specific type (or `kind`) to present an accurate message.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """The rule that was violated when a move got rejected."""

    INVALID_NOTATION = "invalid_notation"
    EMPTY_SQUARE = "empty_square"
    WRONG_TURN = "wrong_turn"
    ILLEGAL_MOVE = "illegal_move"
    GAME_OVER = "game_over"


class GameError(Exception):
    """Base class for everything the chess backend raises on purpose."""


class RuleViolationError(GameError):
    """A move attempt broke one of the rules of the game. Always recoverable by the caller."""

    kind: ErrorKind


class InvalidNotationError(RuleViolationError, ValueError):
    kind = ErrorKind.INVALID_NOTATION


class EmptySquareError(RuleViolationError):
    kind = ErrorKind.EMPTY_SQUARE


class NotYourTurnError(RuleViolationError):
    kind = ErrorKind.WRONG_TURN


class IllegalMoveError(RuleViolationError):
    kind = ErrorKind.ILLEGAL_MOVE


class GameOverError(RuleViolationError):
    kind = ErrorKind.GAME_OVER


class GameStateError(GameError):
    """Stored / supplied game state cannot be turned into a consistent Game."""


class RepositoryError(GameError):
    """Record not found or could not be stored."""


class InvalidRequestError(GameError, ValueError):
    """Raised by the request validators. Subclasses ValueError so pydantic reports it as a validation error."""
