"""Command-line interface for 3-2-5."""

from __future__ import annotations

import argparse
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tdp_engine.action_generator import generate_legal_actions
from tdp_engine.effects import CardPulled, RoundCompleted, TrickCompleted
from tdp_engine.executor import execute_action
from tdp_engine.state import GameState, Phase, create_game

if TYPE_CHECKING:
    from tdp_engine.actions import Action

logger = logging.getLogger(__name__)

MAX_ACTIONS_PER_GAME = 20_000


def format_state(state: GameState, show_all_hands: bool = False) -> str:
    """Format game state for display."""
    lines = []

    lines.append("=" * 60)
    lines.append(f"Round {state.round_number} | Phase: {state.phase.value}")
    trump = state.trump_suit.symbol if state.trump_suit is not None else "-"
    lines.append(f"Dealer: Player {state.dealer_index} | Trump: {trump}")
    lines.append("=" * 60)

    acting = state.acting_player
    for seat in state.seats:
        prefix = "→ " if seat.position == acting else "  "
        name = seat.name or f"Player {seat.position}"
        lines.append(
            f"\n{prefix}{name}: {seat.tricks_won}/{seat.target_tricks} tricks, score {seat.score}"
        )
        if show_all_hands or seat.position == acting:
            hand_str = " ".join(str(c) for c in sorted(seat.hand)) or "(empty)"
            lines.append(f"  Hand: {hand_str}")
        else:
            lines.append(f"  Hand: [{len(seat.hand)} cards]")

    if state.current_trick:
        trick_str = ", ".join(f"P{p.position} {p.card}" for p in state.current_trick)
        lines.append(f"\nTrick: {trick_str}")

    if state.card_pull_state is not None:
        pull = state.card_pull_state
        puller = pull.current_puller
        lines.append(
            f"\nCard pull: Player {puller.position} has {puller.pulls_remaining} pull(s) left"
        )
        if pull.pulled_card is not None:
            lines.append(f"  Pulled {pull.pulled_card} from Player {pull.selected_target}")

    if state.is_game_over:
        lines.append("\n" + "=" * 60)
        lines.append(f"GAME OVER - Player {state.winner} wins! Scores: {state.scores}")
        lines.append("=" * 60)

    return "\n".join(lines)


def format_actions(actions: list[Action]) -> str:
    """Format available actions for display."""
    lines = ["Available actions:"]
    for i, action in enumerate(actions):
        lines.append(f"  {i + 1}. {action}")
    return "\n".join(lines)


def play_hot_seat(seed: int | None = None) -> None:
    """Play a game with all three seats at one terminal."""
    rng = random.Random(seed)
    state = create_game()

    print("\nWelcome to 3-2-5!")
    print("All three seats play here. Type the number of an action.")
    print("Type 'q' to quit.\n")

    while not state.is_game_over:
        print(format_state(state))
        actions = generate_legal_actions(state)
        print(f"\n{format_actions(actions)}")

        while True:
            choice = input("\nAction: ").strip()
            if choice.lower() == "q":
                print("Goodbye!")
                return
            try:
                index = int(choice) - 1
            except ValueError:
                print("Please enter a valid number or 'q' to quit")
                continue
            if 0 <= index < len(actions):
                action = actions[index]
                break
            print(f"Please enter a number 1-{len(actions)}")

        transition = execute_action(state, action, rng=rng)
        for effect in transition.effects:
            match effect:
                case TrickCompleted(record=record):
                    print(f"\nTrick {record.trick_number} goes to Player {record.winner}")
                case CardPulled():
                    print(
                        f"\nPlayer {effect.puller} took {effect.pulled_card} from "
                        f"Player {effect.target} and returned {effect.returned_card}"
                    )
                case RoundCompleted(round_number=number, scores=scores):
                    print(f"\nRound {number} complete. Scores: {scores}")
        state = transition.state
        print()

    print(format_state(state, show_all_hands=True))


@dataclass
class SimulationResult:
    """Outcome of one simulated game."""

    seed: int
    winner: int | None
    rounds: int
    scores: tuple[int, int, int]
    actions: int


def simulate_game(seed: int) -> SimulationResult:
    """Play one game to completion choosing uniformly among legal actions."""
    rng = random.Random(seed)
    state = create_game(dealer_index=rng.randrange(3))
    count = 0

    while not state.is_game_over and count < MAX_ACTIONS_PER_GAME:
        action = rng.choice(generate_legal_actions(state))
        state = execute_action(state, action, rng=rng).state
        count += 1

    if not state.is_game_over:
        logger.warning("Game with seed %d stopped after %d actions", seed, count)

    rounds = state.round_number if state.phase == Phase.FINISHED else state.round_number - 1
    return SimulationResult(
        seed=seed,
        winner=state.winner,
        rounds=rounds,
        scores=state.scores,
        actions=count,
    )


def run_simulation(num_games: int = 100, seed: int = 42) -> None:
    """Simulate random games and print a summary."""
    print(f"\nSimulating {num_games} games of random play")

    results = [simulate_game(seed + i) for i in range(num_games)]
    wins = [sum(1 for r in results if r.winner == p) for p in range(3)]
    unfinished = sum(1 for r in results if r.winner is None)
    avg_rounds = sum(r.rounds for r in results) / len(results)
    avg_actions = sum(r.actions for r in results) / len(results)

    print("\nResults:")
    for position, count in enumerate(wins):
        print(f"  Player {position} wins: {count} ({100 * count / num_games:.1f}%)")
    if unfinished:
        print(f"  Unfinished: {unfinished}")
    print(f"  Average rounds: {avg_rounds:.1f}")
    print(f"  Average actions: {avg_actions:.1f}")


def main() -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="3-2-5 card game")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Hot-seat game for three players")
    play_parser.add_argument("--seed", type=int, help="Random seed")

    simulate_parser = subparsers.add_parser("simulate", help="Simulate random games")
    simulate_parser.add_argument("--games", type=int, default=100, help="Number of games")
    simulate_parser.add_argument("--seed", type=int, default=42, help="Random seed")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "play":
        play_hot_seat(seed=args.seed)
    elif args.command == "simulate":
        run_simulation(num_games=args.games, seed=args.seed)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
