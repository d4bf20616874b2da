"""Legal action generation for 3-2-5."""

from __future__ import annotations

from tdp_engine.actions import (
    Action,
    ChooseTrump,
    DealFinal,
    PlayCard,
    ReturnPullCard,
    SelectPullCardIndex,
    SelectPullTarget,
    StartDealing,
    StartNextRound,
)
from tdp_engine.card_pull import PullPhase, valid_return_cards
from tdp_engine.cards import Suit
from tdp_engine.state import GameState, Phase
from tdp_engine.tricks import legal_cards, trick_index_for


def generate_legal_actions(state: GameState) -> list[Action]:
    """Generate every legal action for the seat the game is waiting on.

    Actions carry the acting seat in ``player`` (None for the round-start
    actions, which any seat may trigger).

    Args:
        state: Current game state.

    Returns:
        List of legal actions; empty once the game is finished.
    """
    match state.phase:
        case Phase.WAITING:
            return [StartDealing()]
        case Phase.TRUMP_SELECTION:
            player = state.five_trick_position
            return [ChooseTrump(suit=suit, player=player) for suit in Suit]
        case Phase.DEALING_3:
            return [DealFinal(player=state.dealer_index)]
        case Phase.CARD_PULL:
            return _generate_card_pull_actions(state)
        case Phase.PLAYING:
            return _generate_play_actions(state)
        case Phase.ROUND_COMPLETE:
            return [StartNextRound()]
        case Phase.FINISHED:
            return []

    return []


def _generate_play_actions(state: GameState) -> list[Action]:
    seat = state.current_seat
    cards = legal_cards(
        seat.hand,
        state.current_trick,
        state.trump_suit,
        trick_index_for(seat.hand),
        state.trump_led_at_start,
    )
    return [PlayCard(card=card, player=seat.position) for card in cards]


def _generate_card_pull_actions(state: GameState) -> list[Action]:
    pull = state.card_pull_state
    puller = pull.current_puller.position

    match pull.phase:
        case PullPhase.SELECTING_TARGET:
            return [SelectPullTarget(target=t, player=puller) for t in pull.under_scorers]
        case PullPhase.SELECTING_CARD:
            size = len(state.seats[pull.selected_target].hand)
            return [SelectPullCardIndex(index=i, player=puller) for i in range(size)]
        case PullPhase.RETURNING_CARD:
            hand = state.seats[puller].hand
            return [
                ReturnPullCard(card=card, player=puller)
                for card in valid_return_cards(pull.pulled_card, hand)
            ]

    return []
