"""Per-round trick quotas."""

from __future__ import annotations

from tdp_engine.cards import SEATS

DEALER_TARGET = 2
FIVE_TRICK_TARGET = 5
THIRD_SEAT_TARGET = 3


def five_trick_position(dealer_index: int) -> int:
    """Seat holding the 5-trick quota: chooses trump and leads the first trick."""
    return (dealer_index + 1) % SEATS


def target_tricks(position: int, dealer_index: int) -> int:
    """Trick quota for ``position`` when ``dealer_index`` deals.

    The dealer needs 2, the next seat clockwise needs 5 and the last seat
    needs 3, so the quotas always add up to the 10 tricks of a round.
    """
    if position == dealer_index:
        return DEALER_TARGET
    if position == five_trick_position(dealer_index):
        return FIVE_TRICK_TARGET
    return THIRD_SEAT_TARGET


def all_targets(dealer_index: int) -> tuple[int, int, int]:
    return tuple(target_tricks(position, dealer_index) for position in range(SEATS))
