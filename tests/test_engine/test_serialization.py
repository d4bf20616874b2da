"""Tests for state records."""

import json
import random

from tdp_engine.action_generator import generate_legal_actions
from tdp_engine.actions import StartDealing
from tdp_engine.cards import parse_card
from tdp_engine.executor import execute_action
from tdp_engine.serialization import (
    card_from_dict,
    card_to_dict,
    state_from_record,
    state_to_record,
    trick_from_record,
    trick_to_record,
)
from tdp_engine.state import Phase, create_game
from tdp_engine.tricks import Play, TrickRecord


class TestCards:
    def test_card_format(self):
        assert card_to_dict(parse_card("10♥")) == {"suit": "♥", "rank": "10"}
        assert card_from_dict({"suit": "♠", "rank": "Q"}) is parse_card("Q♠")


class TestTrickRecord:
    def test_keys(self):
        record = TrickRecord(
            round_number=2,
            trick_number=4,
            plays=(Play(1, parse_card("9♦")), Play(2, parse_card("A♦")), Play(0, parse_card("8♦"))),
            winner=2,
        )
        data = trick_to_record(record)

        assert data["cards_played"][1] == {"position": 2, "card": {"suit": "♦", "rank": "A"}}
        assert data["winner_position"] == 2
        assert trick_from_record(data) == record


class TestStateRecord:
    def test_new_game(self):
        data = state_to_record(create_game(names=["Asha", "Ben", "Chen"]))

        assert data["status"] == "waiting"
        assert data["dealing_phase"] == "waiting"
        assert data["remaining_cards"] is None
        assert [p["name"] for p in data["players"]] == ["Asha", "Ben", "Chen"]

    def test_states_survive_json(self):
        """Every state along a random game decodes back to an equal state."""
        rng = random.Random(11)
        state = create_game()
        phases = set()

        while not state.is_game_over:
            data = json.loads(json.dumps(state_to_record(state)))
            assert state_from_record(data) == state
            phases.add(state.phase)
            state = execute_action(state, rng.choice(generate_legal_actions(state)), rng=rng).state

        assert state_from_record(state_to_record(state)) == state
        assert {Phase.TRUMP_SELECTION, Phase.DEALING_3, Phase.PLAYING} <= phases

    def test_trump_and_staged_cards(self):
        state = execute_action(create_game(), StartDealing(), rng=random.Random(2)).state
        data = state_to_record(state)

        assert data["status"] == "dealing"
        assert data["dealing_phase"] == "trump_selection"
        assert len(data["remaining_cards"]) == 15
        assert data["trump_suit"] is None
