"""Immutable game state models for 3-2-5."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from tdp_engine.cards import SEATS
from tdp_engine.targets import five_trick_position

if TYPE_CHECKING:
    from tdp_engine.card_pull import CardPullState, RoundResult
    from tdp_engine.cards import Card, Suit
    from tdp_engine.tricks import Play, TrickRecord

WINNING_SCORE = 5


class Phase(str, Enum):
    """Where the game is in its round cycle."""

    WAITING = "waiting"  # Seated, nothing dealt yet
    TRUMP_SELECTION = "trump_selection"  # 5 cards each, 5-trick seat picks trump
    DEALING_3 = "dealing_3"  # 8 cards each, dealer deals the last 2
    CARD_PULL = "card_pull"  # Over-scorers pull from under-scorers
    PLAYING = "playing"  # Tricks being played
    ROUND_COMPLETE = "round_complete"  # Scores updated, waiting for next round
    FINISHED = "finished"  # A seat reached the winning score

    @property
    def status(self) -> str:
        """Coarse room status used by the stored record."""
        if self in (Phase.TRUMP_SELECTION, Phase.DEALING_3, Phase.CARD_PULL):
            return "dealing"
        if self == Phase.ROUND_COMPLETE:
            return "redistribution"
        return self.value


@dataclass(frozen=True, slots=True)
class SeatState:
    """State of one seat.

    Attributes:
        position: 0, 1 or 2.
        hand: Cards held (hidden from the other seats).
        target_tricks: Quota for the current round (2, 3 or 5).
        tricks_won: Tricks taken so far this round.
        score: Cumulative overachievement across rounds.
        name: Display name, if the surrounding service supplied one.
    """

    position: int
    hand: tuple[Card, ...] = ()
    target_tricks: int = 0
    tricks_won: int = 0
    score: int = 0
    name: str | None = None

    @property
    def overachievement(self) -> int:
        return self.tricks_won - self.target_tricks

    def with_hand(self, hand: tuple[Card, ...]) -> SeatState:
        """Return new state with updated hand."""
        return replace(self, hand=hand)

    def with_tricks_won(self, tricks_won: int) -> SeatState:
        """Return new state with updated trick count."""
        return replace(self, tricks_won=tricks_won)

    def with_score(self, score: int) -> SeatState:
        """Return new state with updated score."""
        return replace(self, score=score)


@dataclass(frozen=True, slots=True)
class GameState:
    """Complete immutable state of one room's game.

    Attributes:
        seats: The three seats, indexed by position.
        phase: Current phase.
        dealer_index: Seat dealing this round (quota 2).
        round_number: 1-based round counter.
        current_player_index: Seat to play next while playing.
        first_trick_leader: 5-trick seat that led the round's first trick.
        trump_suit: Trump for the round, None before it is chosen.
        trump_led_at_start: Whether the round's opening lead was trump;
            None until that card is played.
        current_trick: Plays of the trick in progress.
        remaining_cards: Cards staged between dealing stages.
        previous_round_results: Last round's outcome, for the card pull.
        card_pull_state: Present only during the card pull.
        last_trick: Most recently completed trick, for display.
        winner: Winning seat once the game is finished.
    """

    seats: tuple[SeatState, SeatState, SeatState]
    phase: Phase = Phase.WAITING
    dealer_index: int = 0
    round_number: int = 1
    current_player_index: int = 0
    first_trick_leader: int | None = None
    trump_suit: Suit | None = None
    trump_led_at_start: bool | None = None
    current_trick: tuple[Play, ...] = ()
    remaining_cards: tuple[Card, ...] | None = None
    previous_round_results: tuple[RoundResult, ...] | None = None
    card_pull_state: CardPullState | None = None
    last_trick: TrickRecord | None = None
    winner: int | None = None

    @property
    def status(self) -> str:
        return self.phase.status

    @property
    def is_game_over(self) -> bool:
        return self.phase == Phase.FINISHED

    @property
    def five_trick_position(self) -> int:
        return five_trick_position(self.dealer_index)

    @property
    def current_seat(self) -> SeatState:
        return self.seats[self.current_player_index]

    @property
    def acting_player(self) -> int | None:
        """Seat whose input the game is waiting for, or None if anyone may act."""
        match self.phase:
            case Phase.TRUMP_SELECTION:
                return self.five_trick_position
            case Phase.DEALING_3:
                return self.dealer_index
            case Phase.CARD_PULL:
                return self.card_pull_state.current_puller.position
            case Phase.PLAYING:
                return self.current_player_index
        return None

    @property
    def scores(self) -> tuple[int, int, int]:
        return tuple(seat.score for seat in self.seats)

    def with_seat(self, seat: SeatState) -> GameState:
        """Return new state with the seat at ``seat.position`` replaced."""
        seats = list(self.seats)
        seats[seat.position] = seat
        return replace(self, seats=(seats[0], seats[1], seats[2]))

    def with_seats(self, seats: Sequence[SeatState]) -> GameState:
        """Return new state with all seats replaced."""
        return replace(self, seats=(seats[0], seats[1], seats[2]))

    def with_card_pull_state(self, card_pull_state: CardPullState | None) -> GameState:
        """Return new state with updated card-pull state."""
        return replace(self, card_pull_state=card_pull_state)


def create_game(names: Sequence[str | None] | None = None, dealer_index: int = 0) -> GameState:
    """Create a game with three empty seats, waiting for the first deal.

    Args:
        names: Optional display names, one per seat.
        dealer_index: Seat that deals the first round.
    """
    if names is None:
        names = (None,) * SEATS
    if len(names) != SEATS:
        raise ValueError(f"Expected {SEATS} seat names, got {len(names)}")
    seats = tuple(SeatState(position=i, name=names[i]) for i in range(SEATS))
    return GameState(seats=seats, dealer_index=dealer_index % SEATS)
