"""Actions accepted by the 3-2-5 controller."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tdp_engine.cards import Card, Suit


class ActionType(str, Enum):
    """Type of action."""

    START_DEALING = "start_dealing"
    CHOOSE_TRUMP = "choose_trump"
    DEAL_FINAL = "deal_final"
    PLAY_CARD = "play_card"
    SELECT_PULL_TARGET = "select_pull_target"
    SELECT_PULL_CARD_INDEX = "select_pull_card_index"
    RETURN_PULL_CARD = "return_pull_card"
    START_NEXT_ROUND = "start_next_round"


@dataclass(frozen=True, slots=True)
class Action(ABC):
    """Base class for all actions.

    ``player`` is the seat submitting the action. When given, the controller
    checks it is the seat the rules are waiting on; when None that check is
    left to the caller.
    """

    @property
    @abstractmethod
    def action_type(self) -> ActionType:
        """The type of this action."""
        ...

    @abstractmethod
    def __str__(self) -> str:
        """Human-readable action description."""
        ...


@dataclass(frozen=True, slots=True)
class StartDealing(Action):
    """Deal the first five cards of the first round.

    ``deck`` optionally fixes the card order (30 cards); otherwise a freshly
    shuffled deck is used.
    """

    deck: tuple[Card, ...] | None = None
    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.START_DEALING

    def __str__(self) -> str:
        return "Start dealing"


@dataclass(frozen=True, slots=True)
class ChooseTrump(Action):
    """The 5-trick seat names trump; three more cards are dealt."""

    suit: Suit
    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.CHOOSE_TRUMP

    def __str__(self) -> str:
        return f"Choose {self.suit.symbol} as trump"


@dataclass(frozen=True, slots=True)
class DealFinal(Action):
    """The dealer deals the last two cards to each seat."""

    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.DEAL_FINAL

    def __str__(self) -> str:
        return "Deal final cards"


@dataclass(frozen=True, slots=True)
class PlayCard(Action):
    """Play a card to the current trick."""

    card: Card
    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.PLAY_CARD

    def __str__(self) -> str:
        return f"Play {self.card}"


@dataclass(frozen=True, slots=True)
class SelectPullTarget(Action):
    """The current puller names the under-scorer to pull from."""

    target: int
    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.SELECT_PULL_TARGET

    def __str__(self) -> str:
        return f"Pull from player {self.target}"


@dataclass(frozen=True, slots=True)
class SelectPullCardIndex(Action):
    """The current puller picks a face-down position in the target's hand."""

    index: int
    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.SELECT_PULL_CARD_INDEX

    def __str__(self) -> str:
        return f"Pull card at position {self.index + 1}"


@dataclass(frozen=True, slots=True)
class ReturnPullCard(Action):
    """The current puller hands a card back to the target."""

    card: Card
    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.RETURN_PULL_CARD

    def __str__(self) -> str:
        return f"Return {self.card}"


@dataclass(frozen=True, slots=True)
class StartNextRound(Action):
    """Deal the first five cards of the next round."""

    deck: tuple[Card, ...] | None = None
    player: int | None = None

    @property
    def action_type(self) -> ActionType:
        return ActionType.START_NEXT_ROUND

    def __str__(self) -> str:
        return "Start next round"
