"""Card, Suit, and Rank models for 3-2-5."""

from __future__ import annotations

import random
from enum import IntEnum
from functools import total_ordering
from typing import ClassVar, Sequence

from tdp_engine.errors import PreconditionViolation

SEATS = 3
HAND_SIZE = 10
DECK_SIZE = SEATS * HAND_SIZE


class Suit(IntEnum):
    """Card suits. Order only matters for display and sorting."""

    SPADES = 0
    HEARTS = 1
    DIAMONDS = 2
    CLUBS = 3

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        return {
            Suit.SPADES: "♠",
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
        }[self]

    @property
    def letter(self) -> str:
        return self.name[0]

    @classmethod
    def parse(cls, text: str) -> Suit:
        """Parse a suit from its symbol, letter, or name (case-insensitive)."""
        value = text.strip()
        for suit in cls:
            if value == suit.symbol or value.upper() in (suit.letter, suit.name):
                return suit
        raise ValueError(f"Unknown suit: {text!r}")


class Rank(IntEnum):
    """Card ranks, Ace high. The value is the ordinal used in trick resolution."""

    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return self.name[0]

    @classmethod
    def parse(cls, text: str) -> Rank:
        value = text.strip().upper()
        for rank in cls:
            if value == rank.symbol:
                return rank
        raise ValueError(f"Unknown rank: {text!r}")


@total_ordering
class Card:
    """A playing card.

    Cards are immutable and interned: ``Card(rank, suit)`` always returns the
    same instance for the same rank and suit. Ordering is by suit, then rank,
    which groups a hand by suit when sorted.
    """

    __slots__ = ("_rank", "_suit")

    _instances: ClassVar[dict[tuple[Rank, Suit], Card]] = {}

    def __new__(cls, rank: Rank, suit: Suit) -> Card:
        key = (Rank(rank), Suit(suit))
        if key not in cls._instances:
            instance = object.__new__(cls)
            instance._rank = key[0]
            instance._suit = key[1]
            cls._instances[key] = instance
        return cls._instances[key]

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def suit(self) -> Suit:
        return self._suit

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self._rank == other._rank and self._suit == other._suit

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        if self._suit != other._suit:
            return self._suit < other._suit
        return self._rank < other._rank

    def __hash__(self) -> int:
        return hash((self._rank, self._suit))

    def __reduce__(self) -> tuple:
        return (Card, (self._rank, self._suit))

    def __repr__(self) -> str:
        return f"Card({self._rank.name}, {self._suit.name})"

    def __str__(self) -> str:
        return f"{self._rank.symbol}{self._suit.symbol}"


def parse_card(text: str) -> Card:
    """Parse ``"10♥"``, ``"10h"``, ``"Qs"`` or ``"A♣"`` into a Card."""
    value = text.strip()
    if len(value) < 2:
        raise ValueError(f"Cannot parse card: {text!r}")
    return Card(Rank.parse(value[:-1]), Suit.parse(value[-1]))


def create_deck() -> list[Card]:
    """Create the 30-card 3-2-5 deck.

    Ranks A through 8 in all four suits, plus the 7♠ and 7♥.
    """
    deck = [Card(rank, suit) for suit in Suit for rank in Rank if rank != Rank.SEVEN]
    deck.append(Card(Rank.SEVEN, Suit.SPADES))
    deck.append(Card(Rank.SEVEN, Suit.HEARTS))
    return deck


def shuffle_deck(
    deck: list[Card], seed: int | None = None, rng: random.Random | None = None
) -> list[Card]:
    """Return a shuffled copy of the deck."""
    if rng is None:
        rng = random.Random(seed)
    shuffled = deck.copy()
    rng.shuffle(shuffled)
    return shuffled


def validate_deck(deck: Sequence[Card]) -> None:
    """Raise PreconditionViolation unless ``deck`` is exactly the 30-card deck."""
    if len(deck) != DECK_SIZE or set(deck) != set(create_deck()):
        raise PreconditionViolation(
            f"Deck must hold the {DECK_SIZE} distinct 3-2-5 cards, got {len(deck)} cards"
        )


def deal(cards: Sequence[Card], count: int) -> tuple[tuple[Card, ...], ...]:
    """Deal ``count`` cards to each seat, one card per seat per pass.

    Seat 0 receives indices 0, 3, 6, ..., seat 1 receives 1, 4, 7, ... and
    seat 2 receives 2, 5, 8, ...; ``count * 3`` cards are consumed.
    """
    needed = count * SEATS
    if len(cards) < needed:
        raise PreconditionViolation(f"Need {needed} cards to deal {count} each, have {len(cards)}")
    return tuple(tuple(cards[i * SEATS + seat] for i in range(count)) for seat in range(SEATS))


def remove_card(hand: tuple[Card, ...], card: Card) -> tuple[Card, ...]:
    """Return ``hand`` without the first occurrence of ``card``."""
    index = hand.index(card)
    return hand[:index] + hand[index + 1 :]


def count_suit(hand: Sequence[Card], suit: Suit) -> int:
    return sum(1 for c in hand if c.suit == suit)
