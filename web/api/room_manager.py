"""Room management for the web API.

Each room is owned by a ``RoomActor``: submitted actions go onto the room's
queue and a single worker task applies them one at a time, so two actions
for the same room never interleave.
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Sequence

from tdp_engine.action_generator import generate_legal_actions
from tdp_engine.actions import (
    ChooseTrump,
    PlayCard,
    ReturnPullCard,
    SelectPullCardIndex,
    SelectPullTarget,
)
from tdp_engine.effects import GameFinished, RoundCompleted, TrickCompleted
from tdp_engine.errors import PreconditionViolation, StaleActionError
from tdp_engine.executor import execute_action
from tdp_engine.serialization import card_pull_to_dict, card_to_dict, play_to_dict, trick_to_record
from tdp_engine.state import create_game

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from tdp_engine.actions import Action
    from tdp_engine.effects import Effect
    from tdp_engine.state import GameState
    from tdp_engine.tricks import TrickRecord


class RoomFaultedError(Exception):
    """Raised for actions sent to a room whose state is no longer trusted."""


@dataclass
class ActionOutcome:
    """Result of one submitted action."""

    applied: bool
    state: GameState
    effects: tuple[Effect, ...] = ()
    reason: str | None = None


@dataclass
class RoomActor:
    """A room's game state and the worker that serializes changes to it."""

    id: str
    state: GameState
    created_at: datetime
    rng: random.Random
    trick_history: list[TrickRecord] = field(default_factory=list)
    action_log: list[dict] = field(default_factory=list)
    trick_hold_ms: int = 2000
    fault: str | None = None

    _queue: asyncio.Queue | None = None
    _worker: asyncio.Task | None = None
    _state_listeners: list[Callable[[dict], None]] = field(default_factory=list)

    def add_listener(self, callback: Callable[[dict], None]) -> None:
        """Add a state change listener."""
        self._state_listeners.append(callback)

    def _notify_listeners(self, event: dict) -> None:
        for listener in self._state_listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener failed for room %s", self.id)

    def start(self) -> None:
        """Start the worker task on the running event loop if it is not already there."""
        loop = asyncio.get_running_loop()
        if self._worker is not None and not self._worker.done() and self._worker.get_loop() is loop:
            return
        self._queue = asyncio.Queue()
        self._worker = loop.create_task(self._run())

    async def stop(self) -> None:
        """Cancel the worker and fail every action still waiting in the queue."""
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

        dropped = 0
        while not self._queue.empty():
            _, future = self._queue.get_nowait()
            if not future.done():
                future.set_exception(RoomFaultedError("room stopped"))
                dropped += 1
        if dropped:
            logger.info("Room %s stopped with %d queued action(s) failed", self.id, dropped)

    async def submit(self, action: Action) -> ActionOutcome:
        """Queue an action and wait for the worker to apply it."""
        self.start()
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        await self._queue.put((action, future))
        return await future

    async def _run(self) -> None:
        while True:
            action, future = await self._queue.get()
            try:
                outcome = self.apply(action)
            except Exception as e:
                if not future.cancelled():
                    future.set_exception(e)
            else:
                if not future.cancelled():
                    future.set_result(outcome)
            finally:
                self._queue.task_done()

    def apply(self, action: Action) -> ActionOutcome:
        """Apply one action synchronously.

        Stale actions come back as an unapplied outcome. Rule violations
        propagate unchanged. A precondition violation faults the room.
        """
        if self.fault is not None:
            raise RoomFaultedError(self.fault)

        try:
            transition = execute_action(self.state, action, rng=self.rng)
        except StaleActionError as e:
            logger.debug("Room %s: stale action %s: %s", self.id, action, e.reason)
            return ActionOutcome(applied=False, state=self.state, reason=e.reason)
        except PreconditionViolation as e:
            logger.exception("Room %s: inconsistent state while applying %s", self.id, action)
            self.fault = str(e)
            raise RoomFaultedError(self.fault) from e

        old_state = self.state
        self.state = transition.state
        self._record(action, old_state, transition.effects)
        return ActionOutcome(applied=True, state=self.state, effects=transition.effects)

    def _record(self, action: Action, old_state: GameState, effects: tuple[Effect, ...]) -> None:
        self.action_log.append(
            {
                "round": old_state.round_number,
                "phase": old_state.phase.value,
                "player": getattr(action, "player", None),
                "action": str(action),
                "action_type": action.action_type.value,
                "timestamp": datetime.now().isoformat(),
            }
        )

        for effect in effects:
            match effect:
                case TrickCompleted(record=record):
                    self.trick_history.append(record)
                    self._notify_listeners(
                        {"type": "trick_completed", "trick": trick_to_record(record)}
                    )
                case RoundCompleted(round_number=number, scores=scores):
                    logger.info("Room %s: round %d complete, scores %s", self.id, number, scores)
                case GameFinished(winner=winner, scores=scores):
                    logger.info("Room %s: player %d wins with scores %s", self.id, winner, scores)
                    self._notify_listeners({"type": "game_over", "winner": winner, "scores": scores})

        self._notify_listeners({"type": "state_changed", "action": self.action_log[-1]})

    def legal_actions(self, viewer: int | None = None) -> list[Action]:
        """Legal actions ``viewer`` may take.

        A spectator (None) only gets the round-start actions any seat may
        send, so seat-owned moves never leak a hand.
        """
        return [a for a in generate_legal_actions(self.state) if a.player in (None, viewer)]

    def to_client_state(self, viewer: int | None = None) -> dict:
        """Convert the room state to a client-friendly format.

        Args:
            viewer: Seat viewing the state. Other seats' hands are hidden; a
                pulled card is only shown to the puller and the target. None
                is a spectator and sees no hand at all.
        """
        state = self.state
        pull = state.card_pull_state

        pull_dict = None
        if pull is not None:
            pull_dict = card_pull_to_dict(pull)
            if viewer is None or viewer not in (pull.current_puller.position, pull.selected_target):
                pull_dict["pulled_card"] = None

        return {
            "room_id": self.id,
            "status": state.status,
            "dealing_phase": state.phase.value,
            "round_number": state.round_number,
            "dealer_index": state.dealer_index,
            "current_player_index": state.current_player_index,
            "first_trick_leader": state.first_trick_leader,
            "acting_player": state.acting_player,
            "trump_suit": state.trump_suit.symbol if state.trump_suit is not None else None,
            "trump_led_at_start": state.trump_led_at_start,
            "current_trick": [play_to_dict(p) for p in state.current_trick],
            "last_trick": trick_to_record(state.last_trick) if state.last_trick else None,
            "trick_hold_ms": self.trick_hold_ms,
            "card_pull_state": pull_dict,
            "winner": state.winner,
            "fault": self.fault,
            "players": [
                {
                    "position": seat.position,
                    "name": seat.name,
                    "hand": (
                        [card_to_dict(c) for c in seat.hand] if viewer == seat.position else None
                    ),
                    "hand_count": len(seat.hand),
                    "target_tricks": seat.target_tricks,
                    "tricks_won": seat.tricks_won,
                    "score": seat.score,
                }
                for seat in state.seats
            ],
        }

    def actions_to_client(self, actions: list[Action]) -> list[dict]:
        """Convert actions to client-friendly format."""
        return [_action_to_dict(i, a) for i, a in enumerate(actions)]


def _action_to_dict(index: int, action: Action) -> dict:
    base = {
        "index": index,
        "type": action.action_type.value,
        "player": action.player,
        "description": str(action),
    }

    match action:
        case ChooseTrump(suit=suit):
            base["suit"] = suit.symbol
        case PlayCard(card=card) | ReturnPullCard(card=card):
            base["card"] = card_to_dict(card)
        case SelectPullTarget(target=target):
            base["target"] = target
        case SelectPullCardIndex(index=card_index):
            base["card_index"] = card_index

    return base


class RoomManager:
    """Manages all active rooms."""

    def __init__(self, trick_hold_ms: int = 2000):
        self._rooms: dict[str, RoomActor] = {}
        self.trick_hold_ms = trick_hold_ms

    def create_room(
        self,
        names: Sequence[str | None] | None = None,
        seed: int | None = None,
        dealer_index: int = 0,
    ) -> RoomActor:
        """Create a room with three seats, waiting for the first deal."""
        room_id = str(uuid.uuid4())
        room = RoomActor(
            id=room_id,
            state=create_game(names=names, dealer_index=dealer_index),
            created_at=datetime.now(),
            rng=random.Random(seed),
            trick_hold_ms=self.trick_hold_ms,
        )
        self._rooms[room_id] = room
        logger.info("Created room %s", room_id)
        return room

    def get_room(self, room_id: str) -> RoomActor | None:
        """Get a room by ID."""
        return self._rooms.get(room_id)

    async def delete_room(self, room_id: str) -> bool:
        """Stop and remove a room."""
        room = self._rooms.pop(room_id, None)
        if room is None:
            return False
        await room.stop()
        return True

    def list_rooms(self) -> list[dict]:
        """List all active rooms."""
        return [
            {
                "id": r.id,
                "created_at": r.created_at.isoformat(),
                "status": r.state.status,
                "dealing_phase": r.state.phase.value,
                "round_number": r.state.round_number,
                "scores": list(r.state.scores),
                "winner": r.state.winner,
                "faulted": r.fault is not None,
            }
            for r in self._rooms.values()
        ]

    async def shutdown(self) -> None:
        """Stop every room worker."""
        for room in list(self._rooms.values()):
            await room.stop()


# Global room manager instance
room_manager = RoomManager(trick_hold_ms=int(os.environ.get("TRICK_HOLD_MS", "2000")))
