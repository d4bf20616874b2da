"""Card-pull protocol between rounds.

Seats that took more tricks than their quota in the previous round
("over-scorers") each get one pull per extra trick. A pull names an
under-scorer, takes a card from a face-down position in that seat's hand,
and hands back a card from the puller's own hand. The return must be of the
pulled card's suit, or else leave the puller at least two cards of the
returned suit.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence

from tdp_engine.cards import SEATS, Card, count_suit, remove_card
from tdp_engine.tricks import LEGAL, Legality

MIN_SUIT_KEPT = 2


class PullPhase(str, Enum):
    """Step of the current pull."""

    SELECTING_TARGET = "selecting_target"
    SELECTING_CARD = "selecting_card"
    RETURNING_CARD = "returning_card"


@dataclass(frozen=True, slots=True)
class RoundResult:
    """One seat's outcome in a finished round."""

    position: int
    tricks_won: int
    target_tricks: int

    @property
    def overachievement(self) -> int:
        return self.tricks_won - self.target_tricks


@dataclass(frozen=True, slots=True)
class Puller:
    """An over-scorer and how many pulls it has left."""

    position: int
    extra_tricks: int
    pulls_remaining: int


@dataclass(frozen=True, slots=True)
class CardPullState:
    """Progress through the card-pull protocol.

    Attributes:
        pullers: Over-scorers in pulling order.
        under_scorers: Positions that may be pulled from.
        current_puller_index: Index into ``pullers`` of the seat pulling now.
        phase: Step of the current pull.
        selected_target: Under-scorer chosen for the current pull.
        pulled_card: Card revealed once a position has been picked.
        pulled_card_index: Position in the target's hand that was picked.
    """

    pullers: tuple[Puller, ...]
    under_scorers: tuple[int, ...]
    current_puller_index: int = 0
    phase: PullPhase = PullPhase.SELECTING_TARGET
    selected_target: int | None = None
    pulled_card: Card | None = None
    pulled_card_index: int | None = None

    @property
    def current_puller(self) -> Puller:
        return self.pullers[self.current_puller_index]


def calculate_eligibility(
    previous_results: Sequence[RoundResult], dealer_index: int
) -> tuple[list[Puller], list[int]]:
    """Split the previous round's seats into pullers and under-scorers.

    Pullers are ordered by extra tricks, most first. Ties go to the seat
    closest clockwise after the dealer.

    Returns:
        Tuple of (pullers, under-scorer positions). Seats that met their
        quota exactly appear in neither.
    """
    pullers = []
    under_scorers = []
    for result in previous_results:
        diff = result.overachievement
        if diff > 0:
            pullers.append(Puller(result.position, extra_tricks=diff, pulls_remaining=diff))
        elif diff < 0:
            under_scorers.append(result.position)

    pullers.sort(key=lambda p: (-p.extra_tricks, (p.position - dealer_index + SEATS) % SEATS))
    return pullers, under_scorers


def initialize_card_pull_state(
    pullers: Sequence[Puller], under_scorers: Sequence[int]
) -> CardPullState | None:
    """Start the protocol, or return None when nobody can pull from anybody."""
    if not pullers or not under_scorers:
        return None
    return CardPullState(pullers=tuple(pullers), under_scorers=tuple(under_scorers))


def can_return_card(return_card: Card, pulled_card: Card, puller_hand: Sequence[Card]) -> Legality:
    """Check whether the puller may hand back ``return_card`` for ``pulled_card``.

    ``puller_hand`` is the puller's hand before the swap.
    """
    if return_card not in puller_hand:
        return Legality(False, "card not in hand")
    if return_card == pulled_card or return_card.suit == pulled_card.suit:
        return LEGAL
    if count_suit(puller_hand, return_card.suit) - 1 < MIN_SUIT_KEPT:
        return Legality(False, f"must keep at least {MIN_SUIT_KEPT} of that suit")
    return LEGAL


def valid_return_cards(pulled_card: Card, puller_hand: Sequence[Card]) -> list[Card]:
    return [c for c in puller_hand if can_return_card(c, pulled_card, puller_hand)]


def swap_cards(
    puller_hand: tuple[Card, ...],
    target_hand: tuple[Card, ...],
    pulled_card: Card,
    return_card: Card,
) -> tuple[tuple[Card, ...], tuple[Card, ...]]:
    """Exchange the pulled card and the returned card between the two hands."""
    new_puller = remove_card(puller_hand, return_card) + (pulled_card,)
    new_target = remove_card(target_hand, pulled_card) + (return_card,)
    return new_puller, new_target


def select_target(state: CardPullState, target: int) -> CardPullState:
    return replace(state, phase=PullPhase.SELECTING_CARD, selected_target=target)


def reveal_card(state: CardPullState, index: int, card: Card) -> CardPullState:
    return replace(
        state,
        phase=PullPhase.RETURNING_CARD,
        pulled_card=card,
        pulled_card_index=index,
    )


def finish_pull(state: CardPullState) -> CardPullState | None:
    """Use up one pull and move on.

    The same puller continues while it has pulls left, otherwise the next
    puller starts. Returns None once every puller is done.
    """
    puller = state.current_puller
    updated = replace(puller, pulls_remaining=puller.pulls_remaining - 1)
    pullers = list(state.pullers)
    pullers[state.current_puller_index] = updated

    next_index = state.current_puller_index
    if updated.pulls_remaining <= 0:
        next_index += 1
        if next_index >= len(pullers):
            return None

    return CardPullState(
        pullers=tuple(pullers),
        under_scorers=state.under_scorers,
        current_puller_index=next_index,
        phase=PullPhase.SELECTING_TARGET,
    )
