"""Effects emitted by the controller for the surrounding service to act on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tdp_engine.card_pull import RoundResult
    from tdp_engine.cards import Card
    from tdp_engine.tricks import TrickRecord


@dataclass(frozen=True, slots=True)
class Effect:
    """Base class for effects."""


@dataclass(frozen=True, slots=True)
class TrickCompleted(Effect):
    """A trick was resolved. The record belongs in the trick history."""

    record: TrickRecord


@dataclass(frozen=True, slots=True)
class CardPulled(Effect):
    """A pull completed: ``pulled_card`` went to the puller, ``returned_card`` to the target."""

    puller: int
    target: int
    pulled_card: Card
    returned_card: Card


@dataclass(frozen=True, slots=True)
class RoundCompleted(Effect):
    """All ten tricks were played and scores updated."""

    round_number: int
    results: tuple[RoundResult, ...]
    scores: tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class GameFinished(Effect):
    """A seat reached the winning score."""

    winner: int
    scores: tuple[int, int, int]
