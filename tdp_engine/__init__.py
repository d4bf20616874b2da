"""3-2-5 (Teen Do Paanch) card game engine."""

from tdp_engine.cards import Card, Rank, Suit
from tdp_engine.state import GameState, SeatState, Phase, create_game
from tdp_engine.actions import (
    Action,
    StartDealing,
    ChooseTrump,
    DealFinal,
    PlayCard,
    SelectPullTarget,
    SelectPullCardIndex,
    ReturnPullCard,
    StartNextRound,
)
from tdp_engine.executor import Transition, execute_action
from tdp_engine.errors import (
    ActionRejected,
    IllegalMoveError,
    IllegalPullActionError,
    StaleActionError,
    PreconditionViolation,
)

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "GameState",
    "SeatState",
    "Phase",
    "create_game",
    "Action",
    "StartDealing",
    "ChooseTrump",
    "DealFinal",
    "PlayCard",
    "SelectPullTarget",
    "SelectPullCardIndex",
    "ReturnPullCard",
    "StartNextRound",
    "Transition",
    "execute_action",
    "ActionRejected",
    "IllegalMoveError",
    "IllegalPullActionError",
    "StaleActionError",
    "PreconditionViolation",
]
