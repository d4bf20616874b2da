"""Action execution for 3-2-5.

``execute_action`` is a pure reducer: it never mutates the state it is given
and returns the next state together with the effects the surrounding service
should carry out (recording tricks, announcing results).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace

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
from tdp_engine.card_pull import (
    PullPhase,
    RoundResult,
    calculate_eligibility,
    can_return_card,
    finish_pull,
    initialize_card_pull_state,
    reveal_card,
    select_target,
    swap_cards,
)
from tdp_engine.cards import SEATS, Card, create_deck, deal, remove_card, shuffle_deck, validate_deck
from tdp_engine.effects import CardPulled, Effect, GameFinished, RoundCompleted, TrickCompleted
from tdp_engine.errors import (
    IllegalMoveError,
    IllegalPullActionError,
    PreconditionViolation,
    StaleActionError,
)
from tdp_engine.state import WINNING_SCORE, GameState, Phase, SeatState
from tdp_engine.targets import target_tricks
from tdp_engine.tricks import Play, TrickRecord, check_play, evaluate_trick, trick_index_for

logger = logging.getLogger(__name__)

FIRST_DEAL = 5
SECOND_DEAL = 3
FINAL_DEAL = 2


@dataclass(frozen=True, slots=True)
class Transition:
    """Result of applying one action."""

    state: GameState
    effects: tuple[Effect, ...] = ()


def execute_action(
    state: GameState, action: Action, rng: random.Random | None = None
) -> Transition:
    """Apply an action and return the new state.

    Args:
        state: Current game state.
        action: Action to apply.
        rng: Random source for shuffling when a deal needs a fresh deck.

    Returns:
        The resulting transition.

    Raises:
        StaleActionError: If the game is not in the phase the action needs.
        IllegalMoveError: If a deal, trump choice or play breaks the rules.
        IllegalPullActionError: If a card-pull step is invalid.
        PreconditionViolation: If the state itself is inconsistent.
    """
    match action:
        case StartDealing():
            return _execute_start_dealing(state, action, rng)
        case ChooseTrump():
            return _execute_choose_trump(state, action)
        case DealFinal():
            return _execute_deal_final(state, action)
        case PlayCard():
            return _execute_play_card(state, action)
        case SelectPullTarget():
            return _execute_select_pull_target(state, action)
        case SelectPullCardIndex():
            return _execute_select_pull_card_index(state, action)
        case ReturnPullCard():
            return _execute_return_pull_card(state, action)
        case StartNextRound():
            return _execute_start_next_round(state, action, rng)
        case _:
            raise IllegalMoveError(f"Unknown action type: {type(action).__name__}")


def _require_phase(state: GameState, phase: Phase, action: Action) -> None:
    if state.phase != phase:
        raise StaleActionError(f"{action} ignored: game is in {state.phase.value}, not {phase.value}")


def _require_player(action: Action, expected: int) -> None:
    if action.player is not None and action.player != expected:
        raise IllegalMoveError("Not your turn")


# ---------------------------------------------------------------------------
# Dealing
# ---------------------------------------------------------------------------


def _execute_start_dealing(
    state: GameState, action: StartDealing, rng: random.Random | None
) -> Transition:
    _require_phase(state, Phase.WAITING, action)
    return Transition(_deal_first_five(state, action.deck, rng))


def _execute_start_next_round(
    state: GameState, action: StartNextRound, rng: random.Random | None
) -> Transition:
    _require_phase(state, Phase.ROUND_COMPLETE, action)
    return Transition(_deal_first_five(state, action.deck, rng))


def _deal_first_five(
    state: GameState, deck: tuple[Card, ...] | None, rng: random.Random | None
) -> GameState:
    """Deal five cards each with the current dealer and stage the other fifteen."""
    if deck is None:
        cards = shuffle_deck(create_deck(), rng=rng or random.Random())
    else:
        validate_deck(deck)
        cards = list(deck)

    hands = deal(cards, FIRST_DEAL)
    seats = [
        replace(
            seat,
            hand=hands[seat.position],
            target_tricks=target_tricks(seat.position, state.dealer_index),
            tricks_won=0,
        )
        for seat in state.seats
    ]
    logger.debug("Round %d: dealt %d each, dealer %d", state.round_number, FIRST_DEAL, state.dealer_index)

    return replace(
        state.with_seats(seats),
        phase=Phase.TRUMP_SELECTION,
        trump_suit=None,
        trump_led_at_start=None,
        current_trick=(),
        last_trick=None,
        card_pull_state=None,
        first_trick_leader=None,
        remaining_cards=tuple(cards[FIRST_DEAL * SEATS :]),
    )


def _execute_choose_trump(state: GameState, action: ChooseTrump) -> Transition:
    _require_phase(state, Phase.TRUMP_SELECTION, action)
    _require_player(action, state.five_trick_position)

    remaining = state.remaining_cards or ()
    expected = (SECOND_DEAL + FINAL_DEAL) * SEATS
    if len(remaining) != expected:
        raise PreconditionViolation(
            f"Expected {expected} staged cards before trump selection, found {len(remaining)}"
        )

    hands = deal(remaining, SECOND_DEAL)
    seats = [seat.with_hand(seat.hand + hands[seat.position]) for seat in state.seats]

    return Transition(
        replace(
            state.with_seats(seats),
            phase=Phase.DEALING_3,
            trump_suit=action.suit,
            remaining_cards=tuple(remaining[SECOND_DEAL * SEATS :]),
        )
    )


def _execute_deal_final(state: GameState, action: DealFinal) -> Transition:
    _require_phase(state, Phase.DEALING_3, action)
    _require_player(action, state.dealer_index)

    remaining = state.remaining_cards or ()
    expected = FINAL_DEAL * SEATS
    if len(remaining) != expected:
        raise PreconditionViolation(
            f"Expected {expected} staged cards for the final deal, found {len(remaining)}"
        )

    hands = deal(remaining, FINAL_DEAL)
    seats = [seat.with_hand(seat.hand + hands[seat.position]) for seat in state.seats]
    leader = state.five_trick_position

    card_pull_state = None
    if state.round_number > 1 and state.previous_round_results:
        pullers, under_scorers = calculate_eligibility(
            state.previous_round_results, state.dealer_index
        )
        card_pull_state = initialize_card_pull_state(pullers, under_scorers)

    next_phase = Phase.CARD_PULL if card_pull_state is not None else Phase.PLAYING
    logger.debug("Round %d: final deal done, entering %s", state.round_number, next_phase.value)

    return Transition(
        replace(
            state.with_seats(seats),
            phase=next_phase,
            current_player_index=leader,
            first_trick_leader=leader,
            remaining_cards=None,
            trump_led_at_start=None,
            card_pull_state=card_pull_state,
        )
    )


# ---------------------------------------------------------------------------
# Playing
# ---------------------------------------------------------------------------


def _execute_play_card(state: GameState, action: PlayCard) -> Transition:
    _require_phase(state, Phase.PLAYING, action)
    _require_player(action, state.current_player_index)

    seat = state.current_seat
    trick_index = trick_index_for(seat.hand)
    legality = check_play(
        action.card,
        seat.hand,
        state.current_trick,
        state.trump_suit,
        trick_index,
        state.trump_led_at_start,
    )
    if not legality:
        raise IllegalMoveError(legality.reason)

    trump_led_at_start = state.trump_led_at_start
    if trick_index == 0 and not state.current_trick:
        trump_led_at_start = action.card.suit == state.trump_suit

    seat = seat.with_hand(remove_card(seat.hand, action.card))
    trick = state.current_trick + (Play(seat.position, action.card),)
    new_state = replace(
        state.with_seat(seat),
        current_trick=trick,
        trump_led_at_start=trump_led_at_start,
    )

    if len(trick) < SEATS:
        return Transition(
            replace(new_state, current_player_index=(state.current_player_index + 1) % SEATS)
        )

    return _complete_trick(new_state, trick_index)


def _complete_trick(state: GameState, trick_index: int) -> Transition:
    """Resolve a full trick, credit the winner and end the round if hands are empty."""
    winner = evaluate_trick(state.current_trick, state.trump_suit)
    record = TrickRecord(
        round_number=state.round_number,
        trick_number=trick_index + 1,
        plays=state.current_trick,
        winner=winner,
    )
    winning_seat = state.seats[winner]
    new_state = replace(
        state.with_seat(winning_seat.with_tricks_won(winning_seat.tricks_won + 1)),
        current_trick=(),
        last_trick=record,
        current_player_index=winner,
    )
    effects: tuple[Effect, ...] = (TrickCompleted(record),)

    if any(seat.hand for seat in new_state.seats):
        return Transition(new_state, effects)

    round_end = _end_round(new_state)
    return Transition(round_end.state, effects + round_end.effects)


def _end_round(state: GameState) -> Transition:
    """Score the round, then finish the game or rotate the dealer."""
    results = tuple(
        RoundResult(seat.position, seat.tricks_won, seat.target_tricks) for seat in state.seats
    )
    seats = [seat.with_score(seat.score + seat.overachievement) for seat in state.seats]
    state = state.with_seats(seats)
    scores = state.scores
    effects: list[Effect] = [RoundCompleted(state.round_number, results, scores)]

    winner = next((seat.position for seat in seats if seat.score >= WINNING_SCORE), None)
    if winner is not None:
        logger.debug("Game finished after round %d, winner %d", state.round_number, winner)
        effects.append(GameFinished(winner, scores))
        return Transition(
            replace(state, phase=Phase.FINISHED, winner=winner, previous_round_results=results),
            tuple(effects),
        )

    return Transition(
        replace(
            state,
            phase=Phase.ROUND_COMPLETE,
            dealer_index=(state.dealer_index + 1) % SEATS,
            round_number=state.round_number + 1,
            previous_round_results=results,
        ),
        tuple(effects),
    )


# ---------------------------------------------------------------------------
# Card pull
# ---------------------------------------------------------------------------


def _require_pull_step(state: GameState, step: PullPhase, action: Action) -> None:
    _require_phase(state, Phase.CARD_PULL, action)
    pull = state.card_pull_state
    if pull is None:
        raise PreconditionViolation("Card pull phase without card pull state")
    if pull.phase != step:
        raise IllegalPullActionError("Invalid action")
    if action.player is not None and action.player != pull.current_puller.position:
        raise IllegalPullActionError("Not your turn to pull")


def _execute_select_pull_target(state: GameState, action: SelectPullTarget) -> Transition:
    _require_pull_step(state, PullPhase.SELECTING_TARGET, action)
    pull = state.card_pull_state
    if action.target not in pull.under_scorers:
        raise IllegalPullActionError("Invalid target")
    return Transition(state.with_card_pull_state(select_target(pull, action.target)))


def _execute_select_pull_card_index(state: GameState, action: SelectPullCardIndex) -> Transition:
    _require_pull_step(state, PullPhase.SELECTING_CARD, action)
    pull = state.card_pull_state
    target_hand = state.seats[pull.selected_target].hand
    if not 0 <= action.index < len(target_hand):
        raise IllegalPullActionError("Invalid card position")
    card = target_hand[action.index]
    return Transition(state.with_card_pull_state(reveal_card(pull, action.index, card)))


def _execute_return_pull_card(state: GameState, action: ReturnPullCard) -> Transition:
    _require_pull_step(state, PullPhase.RETURNING_CARD, action)
    pull = state.card_pull_state
    puller = state.seats[pull.current_puller.position]
    target = state.seats[pull.selected_target]

    legality = can_return_card(action.card, pull.pulled_card, puller.hand)
    if not legality:
        raise IllegalPullActionError(legality.reason)

    puller_hand, target_hand = swap_cards(puller.hand, target.hand, pull.pulled_card, action.card)
    new_state = state.with_seat(puller.with_hand(puller_hand)).with_seat(
        target.with_hand(target_hand)
    )
    effect = CardPulled(puller.position, target.position, pull.pulled_card, action.card)

    next_pull = finish_pull(pull)
    if next_pull is None:
        logger.debug("Round %d: card pull complete", state.round_number)
        new_state = replace(new_state, phase=Phase.PLAYING, card_pull_state=None)
    else:
        new_state = new_state.with_card_pull_state(next_pull)
    return Transition(new_state, (effect,))
