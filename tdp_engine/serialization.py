"""Plain-data records for storing and transmitting game state.

Keys follow the stored room/player/trick columns. Cards are encoded as
``{"suit": "♠", "rank": "10"}``.
"""

from __future__ import annotations

from typing import Any

from tdp_engine.card_pull import CardPullState, PullPhase, Puller, RoundResult
from tdp_engine.cards import Card, Rank, Suit
from tdp_engine.state import GameState, Phase, SeatState
from tdp_engine.tricks import Play, TrickRecord


def card_to_dict(card: Card) -> dict:
    return {"suit": card.suit.symbol, "rank": card.rank.symbol}


def card_from_dict(data: dict) -> Card:
    return Card(Rank.parse(data["rank"]), Suit.parse(data["suit"]))


def _cards_to_list(cards) -> list[dict]:
    return [card_to_dict(c) for c in cards]


def _cards_from_list(data) -> tuple[Card, ...]:
    return tuple(card_from_dict(c) for c in data)


def play_to_dict(play: Play) -> dict:
    return {"position": play.position, "card": card_to_dict(play.card)}


def play_from_dict(data: dict) -> Play:
    return Play(data["position"], card_from_dict(data["card"]))


def trick_to_record(trick: TrickRecord) -> dict:
    """Encode a resolved trick as a trick-history row."""
    return {
        "round_number": trick.round_number,
        "trick_number": trick.trick_number,
        "cards_played": [play_to_dict(p) for p in trick.plays],
        "winner_position": trick.winner,
    }


def trick_from_record(data: dict) -> TrickRecord:
    return TrickRecord(
        round_number=data["round_number"],
        trick_number=data["trick_number"],
        plays=tuple(play_from_dict(p) for p in data["cards_played"]),
        winner=data["winner_position"],
    )


def card_pull_to_dict(pull: CardPullState) -> dict:
    return {
        "pullers": [
            {
                "position": p.position,
                "extra_tricks": p.extra_tricks,
                "pulls_remaining": p.pulls_remaining,
            }
            for p in pull.pullers
        ],
        "under_scorers": [{"position": u} for u in pull.under_scorers],
        "current_puller_index": pull.current_puller_index,
        "phase": pull.phase.value,
        "selected_target": pull.selected_target,
        "pulled_card": card_to_dict(pull.pulled_card) if pull.pulled_card else None,
        "pulled_card_index": pull.pulled_card_index,
    }


def card_pull_from_dict(data: dict) -> CardPullState:
    return CardPullState(
        pullers=tuple(
            Puller(p["position"], p["extra_tricks"], p["pulls_remaining"]) for p in data["pullers"]
        ),
        under_scorers=tuple(u["position"] for u in data["under_scorers"]),
        current_puller_index=data["current_puller_index"],
        phase=PullPhase(data["phase"]),
        selected_target=data.get("selected_target"),
        pulled_card=card_from_dict(data["pulled_card"]) if data.get("pulled_card") else None,
        pulled_card_index=data.get("pulled_card_index"),
    )


def seat_to_record(seat: SeatState) -> dict:
    return {
        "position": seat.position,
        "name": seat.name,
        "hand": _cards_to_list(seat.hand),
        "target_tricks": seat.target_tricks,
        "tricks_won": seat.tricks_won,
        "score": seat.score,
    }


def seat_from_record(data: dict) -> SeatState:
    return SeatState(
        position=data["position"],
        hand=_cards_from_list(data.get("hand", [])),
        target_tricks=data.get("target_tricks", 0),
        tricks_won=data.get("tricks_won", 0),
        score=data.get("score", 0),
        name=data.get("name"),
    )


def state_to_record(state: GameState) -> dict[str, Any]:
    """Encode the full state, hands included, as JSON-compatible data."""
    previous = state.previous_round_results
    return {
        "status": state.status,
        "dealing_phase": state.phase.value,
        "trump_suit": state.trump_suit.symbol if state.trump_suit is not None else None,
        "dealer_index": state.dealer_index,
        "current_player_index": state.current_player_index,
        "first_trick_leader": state.first_trick_leader,
        "round_number": state.round_number,
        "current_trick": [play_to_dict(p) for p in state.current_trick],
        "remaining_cards": (
            _cards_to_list(state.remaining_cards) if state.remaining_cards is not None else None
        ),
        "trump_led_at_start": state.trump_led_at_start,
        "previous_round_results": (
            [
                {
                    "position": r.position,
                    "tricks_won": r.tricks_won,
                    "target_tricks": r.target_tricks,
                }
                for r in previous
            ]
            if previous is not None
            else None
        ),
        "card_pull_state": (
            card_pull_to_dict(state.card_pull_state) if state.card_pull_state else None
        ),
        "last_trick": trick_to_record(state.last_trick) if state.last_trick else None,
        "winner": state.winner,
        "players": [seat_to_record(s) for s in state.seats],
    }


def state_from_record(data: dict[str, Any]) -> GameState:
    """Decode a record produced by ``state_to_record``."""
    seats = sorted((seat_from_record(s) for s in data["players"]), key=lambda s: s.position)
    previous = data.get("previous_round_results")
    remaining = data.get("remaining_cards")
    return GameState(
        seats=(seats[0], seats[1], seats[2]),
        phase=Phase(data["dealing_phase"]),
        dealer_index=data["dealer_index"],
        round_number=data["round_number"],
        current_player_index=data["current_player_index"],
        first_trick_leader=data.get("first_trick_leader"),
        trump_suit=Suit.parse(data["trump_suit"]) if data.get("trump_suit") else None,
        trump_led_at_start=data.get("trump_led_at_start"),
        current_trick=tuple(play_from_dict(p) for p in data.get("current_trick", [])),
        remaining_cards=_cards_from_list(remaining) if remaining is not None else None,
        previous_round_results=(
            tuple(
                RoundResult(r["position"], r["tricks_won"], r["target_tricks"]) for r in previous
            )
            if previous is not None
            else None
        ),
        card_pull_state=(
            card_pull_from_dict(data["card_pull_state"]) if data.get("card_pull_state") else None
        ),
        last_trick=trick_from_record(data["last_trick"]) if data.get("last_trick") else None,
        winner=data.get("winner"),
    )
