"""Exceptions raised by the 3-2-5 engine."""

from __future__ import annotations


class ActionRejected(Exception):
    """An action was refused and the state is unchanged.

    Attributes:
        reason: Human-readable explanation for the acting seat.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class IllegalMoveError(ActionRejected):
    """Raised when a play, trump choice or deal breaks the rules."""


class IllegalPullActionError(ActionRejected):
    """Raised when a card-pull step is invalid (wrong step, puller, target, index or return)."""


class StaleActionError(ActionRejected):
    """Raised when an action targets a phase the game is not in.

    Typically a duplicate submission that lost the race. Callers treat it as
    a no-op rather than surfacing it as an error.
    """


class PreconditionViolation(RuntimeError):
    """Raised when the engine is fed inconsistent state.

    This indicates a bug in the surrounding orchestration (for example a
    wrong number of staged cards) and is not recoverable for the game.
    """
