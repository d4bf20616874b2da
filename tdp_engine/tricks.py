"""Play legality and trick resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from tdp_engine.cards import HAND_SIZE, Card, Suit
from tdp_engine.errors import PreconditionViolation


@dataclass(frozen=True, slots=True)
class Play:
    """A card played to a trick by the seat at ``position``."""

    position: int
    card: Card

    def __str__(self) -> str:
        return f"P{self.position}:{self.card}"


@dataclass(frozen=True, slots=True)
class TrickRecord:
    """A resolved trick, kept for replay and audit.

    Attributes:
        round_number: Round the trick belongs to.
        trick_number: 1..10 within the round.
        plays: The three plays in the order they were made.
        winner: Position that took the trick.
    """

    round_number: int
    trick_number: int
    plays: tuple[Play, ...]
    winner: int


@dataclass(frozen=True, slots=True)
class Legality:
    """Outcome of a legality check. Truthy when legal."""

    legal: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.legal


LEGAL = Legality(True)


def trick_index_for(hand: Sequence[Card]) -> int:
    """Zero-based index of the trick about to be played by a seat holding ``hand``."""
    return HAND_SIZE - len(hand)


def check_play(
    card: Card,
    hand: Sequence[Card],
    current_trick: Sequence[Play],
    trump_suit: Suit | None,
    trick_index: int,
    trump_led_at_start: bool | None,
) -> Legality:
    """Check whether ``card`` may be played from ``hand``.

    Leading the very first trick is unconstrained. On later leads the suit of
    the round's opening card decides: if trump was led first, a seat holding
    trump must lead trump; if not, trump may only be led by a seat holding
    nothing else. Followers must follow the lead suit when they can.
    """
    if card not in hand:
        return Legality(False, "card not in hand")

    if not current_trick:
        if trick_index == 0 or trump_suit is None or trump_led_at_start is None:
            return LEGAL
        if trump_led_at_start:
            if card.suit != trump_suit and any(c.suit == trump_suit for c in hand):
                return Legality(False, "must lead trump")
        elif card.suit == trump_suit and any(c.suit != trump_suit for c in hand):
            return Legality(False, "cannot lead trump unless forced")
        return LEGAL

    lead_suit = current_trick[0].card.suit
    if card.suit != lead_suit and any(c.suit == lead_suit for c in hand):
        return Legality(False, "must follow suit")
    return LEGAL


def legal_cards(
    hand: Sequence[Card],
    current_trick: Sequence[Play],
    trump_suit: Suit | None,
    trick_index: int,
    trump_led_at_start: bool | None,
) -> list[Card]:
    """Cards in ``hand`` that ``check_play`` accepts, in hand order."""
    return [
        card
        for card in hand
        if check_play(card, hand, current_trick, trump_suit, trick_index, trump_led_at_start)
    ]


def _beats(card: Card, winning: Card, lead_suit: Suit, trump_suit: Suit | None) -> bool:
    if trump_suit is not None and card.suit == trump_suit:
        if winning.suit != trump_suit:
            return True
        return card.rank > winning.rank
    if card.suit == lead_suit and winning.suit == lead_suit:
        return card.rank > winning.rank
    return False


def evaluate_trick(plays: Sequence[Play], trump_suit: Suit | None) -> int:
    """Return the position that wins the trick.

    Trump beats any non-trump card, higher trump beats lower trump, and
    among non-trump cards only the lead suit can win, by rank.

    Raises:
        PreconditionViolation: If ``plays`` is empty.
    """
    if not plays:
        raise PreconditionViolation("Cannot evaluate an empty trick")

    lead_suit = plays[0].card.suit
    winner = plays[0]
    for play in plays[1:]:
        if _beats(play.card, winner.card, lead_suit, trump_suit):
            winner = play
    return winner.position
