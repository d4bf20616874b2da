"""Tests for the card-pull protocol."""

from tdp_engine.card_pull import (
    CardPullState,
    Puller,
    PullPhase,
    RoundResult,
    calculate_eligibility,
    can_return_card,
    finish_pull,
    initialize_card_pull_state,
    reveal_card,
    select_target,
    swap_cards,
    valid_return_cards,
)
from tdp_engine.cards import parse_card


def cards(*texts):
    return tuple(parse_card(t) for t in texts)


class TestEligibility:
    def test_over_and_under_scorers(self):
        results = [RoundResult(0, 2, 2), RoundResult(1, 7, 5), RoundResult(2, 1, 3)]
        pullers, under = calculate_eligibility(results, dealer_index=0)

        assert pullers == [Puller(1, extra_tricks=2, pulls_remaining=2)]
        assert under == [2]

    def test_sorted_by_extra_tricks(self):
        results = [RoundResult(0, 3, 2), RoundResult(1, 2, 5), RoundResult(2, 5, 3)]
        pullers, under = calculate_eligibility(results, dealer_index=0)

        assert [p.position for p in pullers] == [2, 0]
        assert under == [1]

    def test_tie_goes_to_seat_nearest_after_dealer(self):
        # Dealer 1: seat 2 is one step clockwise, seat 0 is two steps.
        results = [RoundResult(0, 4, 3), RoundResult(1, 0, 2), RoundResult(2, 6, 5)]
        pullers, _ = calculate_eligibility(results, dealer_index=1)

        assert [p.position for p in pullers] == [2, 0]

    def test_everyone_on_target(self):
        results = [RoundResult(0, 2, 2), RoundResult(1, 5, 5), RoundResult(2, 3, 3)]
        pullers, under = calculate_eligibility(results, dealer_index=0)

        assert pullers == []
        assert under == []
        assert initialize_card_pull_state(pullers, under) is None

    def test_initialize(self):
        state = initialize_card_pull_state([Puller(1, 2, 2)], [2])
        assert state.phase == PullPhase.SELECTING_TARGET
        assert state.current_puller.position == 1
        assert state.under_scorers == (2,)


class TestCanReturnCard:
    def test_exact_match(self):
        hand = cards("9♣", "A♥")
        assert can_return_card(parse_card("9♣"), parse_card("9♣"), hand)

    def test_same_suit_any_rank(self):
        hand = cards("8♣", "A♥", "K♦")
        assert can_return_card(parse_card("8♣"), parse_card("Q♣"), hand)

    def test_card_not_in_hand(self):
        result = can_return_card(parse_card("8♣"), parse_card("Q♣"), cards("A♥"))
        assert result.reason == "card not in hand"

    def test_two_of_suit_is_not_enough(self):
        hand = cards("8♦", "9♦", "A♥", "K♥", "Q♥")
        result = can_return_card(parse_card("8♦"), parse_card("J♣"), hand)
        assert not result
        assert result.reason == "must keep at least 2 of that suit"

    def test_three_of_suit_is_enough(self):
        hand = cards("8♦", "9♦", "10♦", "A♥")
        assert can_return_card(parse_card("8♦"), parse_card("J♣"), hand)

    def test_valid_returns(self):
        hand = cards("8♣", "8♦", "9♦", "A♥", "K♥", "Q♥")
        assert valid_return_cards(parse_card("J♣"), hand) == list(cards("8♣", "A♥", "K♥", "Q♥"))


class TestSwap:
    def test_swap(self):
        puller = cards("A♥", "8♣")
        target = cards("J♣", "9♦")
        new_puller, new_target = swap_cards(puller, target, parse_card("J♣"), parse_card("8♣"))

        assert sorted(new_puller) == sorted(cards("A♥", "J♣"))
        assert sorted(new_target) == sorted(cards("9♦", "8♣"))


class TestSequencing:
    def test_steps(self):
        state = initialize_card_pull_state([Puller(1, 1, 1)], [2])
        state = select_target(state, 2)
        assert state.phase == PullPhase.SELECTING_CARD
        assert state.selected_target == 2

        state = reveal_card(state, 4, parse_card("Q♣"))
        assert state.phase == PullPhase.RETURNING_CARD
        assert state.pulled_card == parse_card("Q♣")
        assert state.pulled_card_index == 4

    def test_same_puller_continues(self):
        state = CardPullState(
            pullers=(Puller(1, 2, 2),),
            under_scorers=(0, 2),
            phase=PullPhase.RETURNING_CARD,
            selected_target=2,
            pulled_card=parse_card("Q♣"),
            pulled_card_index=0,
        )
        next_state = finish_pull(state)

        assert next_state.current_puller_index == 0
        assert next_state.current_puller.pulls_remaining == 1
        assert next_state.phase == PullPhase.SELECTING_TARGET
        assert next_state.selected_target is None
        assert next_state.pulled_card is None

    def test_next_puller_then_done(self):
        state = CardPullState(pullers=(Puller(2, 1, 1), Puller(0, 1, 1)), under_scorers=(1,))

        state = finish_pull(state)
        assert state.current_puller.position == 0
        assert state.pullers[0].pulls_remaining == 0

        assert finish_pull(state) is None
