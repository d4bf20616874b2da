"""Tests for play legality and trick resolution."""

from itertools import permutations

import pytest

from tdp_engine.cards import Suit, parse_card
from tdp_engine.errors import PreconditionViolation
from tdp_engine.tricks import Play, check_play, evaluate_trick, legal_cards, trick_index_for


def cards(*texts):
    return tuple(parse_card(t) for t in texts)


class TestFollowSuit:
    def test_must_follow_lead_suit(self):
        hand = cards("A♥", "9♦")
        trick = (Play(0, parse_card("K♦")),)
        result = check_play(parse_card("A♥"), hand, trick, Suit.SPADES, 3, False)
        assert not result
        assert result.reason == "must follow suit"

    def test_following_is_legal(self):
        hand = cards("A♥", "9♦")
        trick = (Play(0, parse_card("K♦")),)
        assert check_play(parse_card("9♦"), hand, trick, Suit.SPADES, 3, False)

    def test_void_may_play_anything(self):
        hand = cards("A♥", "8♠")
        trick = (Play(0, parse_card("K♦")),)
        assert legal_cards(hand, trick, Suit.SPADES, 3, False) == list(hand)

    def test_card_not_in_hand(self):
        result = check_play(parse_card("A♣"), cards("A♥"), (), Suit.SPADES, 0, None)
        assert result.reason == "card not in hand"


class TestLeading:
    def test_first_trick_unconstrained(self):
        hand = cards("7♠", "A♥", "9♦")
        assert legal_cards(hand, (), Suit.SPADES, 0, None) == list(hand)

    def test_must_lead_trump_after_trump_opening(self):
        hand = cards("8♠", "A♥")
        result = check_play(parse_card("A♥"), hand, (), Suit.SPADES, 1, True)
        assert not result
        assert result.reason == "must lead trump"
        assert legal_cards(hand, (), Suit.SPADES, 1, True) == [parse_card("8♠")]

    def test_no_trump_left_after_trump_opening(self):
        hand = cards("A♥", "9♦")
        assert legal_cards(hand, (), Suit.SPADES, 4, True) == list(hand)

    def test_cannot_lead_trump_after_plain_opening(self):
        hand = cards("8♠", "A♥")
        result = check_play(parse_card("8♠"), hand, (), Suit.SPADES, 2, False)
        assert not result
        assert result.reason == "cannot lead trump unless forced"

    def test_sole_trump_holder_may_lead_trump(self):
        hand = cards("8♠", "Q♠")
        assert legal_cards(hand, (), Suit.SPADES, 7, False) == list(hand)

    def test_follow_rule_ignores_lead_history(self):
        """Following a trick is only about the lead suit."""
        hand = cards("8♠", "A♥")
        trick = (Play(1, parse_card("K♣")),)
        assert legal_cards(hand, trick, Suit.SPADES, 2, True) == list(hand)


class TestTrickIndex:
    def test_index_from_hand_size(self):
        assert trick_index_for(cards(*["A♠"] * 10)) == 0
        assert trick_index_for(cards("A♠")) == 9


class TestEvaluateTrick:
    def test_highest_of_lead_suit(self):
        plays = [Play(0, parse_card("9♦")), Play(1, parse_card("K♦")), Play(2, parse_card("10♦"))]
        assert evaluate_trick(plays, Suit.SPADES) == 1

    def test_off_suit_never_wins(self):
        plays = [Play(0, parse_card("8♦")), Play(1, parse_card("A♥")), Play(2, parse_card("A♣"))]
        assert evaluate_trick(plays, Suit.SPADES) == 0

    def test_trump_beats_lead(self):
        plays = [Play(2, parse_card("A♦")), Play(0, parse_card("7♠")), Play(1, parse_card("K♦"))]
        assert evaluate_trick(plays, Suit.SPADES) == 0

    def test_higher_trump_wins(self):
        plays = [Play(1, parse_card("A♦")), Play(2, parse_card("9♠")), Play(0, parse_card("J♠"))]
        assert evaluate_trick(plays, Suit.SPADES) == 0

    def test_trump_lead(self):
        plays = [Play(0, parse_card("8♥")), Play(1, parse_card("A♣")), Play(2, parse_card("7♥"))]
        assert evaluate_trick(plays, Suit.HEARTS) == 0

    def test_empty_trick(self):
        with pytest.raises(PreconditionViolation):
            evaluate_trick([], Suit.SPADES)

    @pytest.mark.parametrize(
        "texts,trump",
        [
            (("Q♦", "K♦", "8♦"), Suit.CLUBS),
            (("Q♦", "9♣", "A♦"), Suit.CLUBS),
            (("Q♦", "9♣", "J♣"), Suit.CLUBS),
            (("7♥", "8♥", "10♥"), Suit.HEARTS),
        ],
    )
    def test_winner_stable_when_followers_reordered(self, texts, trump):
        """With the same lead, the order of the other two plays does not change the winner."""
        lead = Play(0, parse_card(texts[0]))
        followers = [Play(1, parse_card(texts[1])), Play(2, parse_card(texts[2]))]
        winners = {evaluate_trick([lead, *order], trump) for order in permutations(followers)}
        assert len(winners) == 1
