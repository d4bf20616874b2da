"""Room API routes."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tdp_engine.actions import (
    Action,
    ActionType,
    ChooseTrump,
    DealFinal,
    PlayCard,
    ReturnPullCard,
    SelectPullCardIndex,
    SelectPullTarget,
    StartDealing,
    StartNextRound,
)
from tdp_engine.cards import Suit, parse_card
from tdp_engine.errors import ActionRejected
from tdp_engine.serialization import trick_to_record
from web.api.room_manager import RoomActor, RoomFaultedError, room_manager

router = APIRouter(tags=["rooms"])


# Request/Response models
class CreateRoomRequest(BaseModel):
    """Request to create a new room."""

    names: list[str | None] | None = Field(None, description="Display names for seats 0, 1 and 2")
    seed: int | None = Field(None, description="Random seed for reproducible shuffles")
    dealer_index: int = Field(0, ge=0, le=2, description="Seat that deals the first round")


class ActionRequest(BaseModel):
    """Request to apply an action to a room."""

    type: ActionType
    player: int | None = Field(None, ge=0, le=2, description="Seat submitting the action")
    suit: str | None = Field(None, description="Trump suit for choose_trump, e.g. '♠' or 's'")
    card: str | None = Field(None, description="Card for play_card/return_pull_card, e.g. '10♥'")
    target: int | None = Field(None, ge=0, le=2, description="Under-scorer for select_pull_target")
    index: int | None = Field(None, description="Hand position for select_pull_card_index")


class ActionResponse(BaseModel):
    """Response after an action was processed."""

    applied: bool
    reason: str | None = None
    state: dict
    legal_actions: list[dict]


def to_action(request: ActionRequest) -> Action:
    """Build an engine action from a request.

    Raises:
        ValueError: If a field the action needs is missing or malformed.
    """
    player = request.player
    match request.type:
        case ActionType.START_DEALING:
            return StartDealing(player=player)
        case ActionType.CHOOSE_TRUMP:
            if request.suit is None:
                raise ValueError("choose_trump requires 'suit'")
            return ChooseTrump(suit=Suit.parse(request.suit), player=player)
        case ActionType.DEAL_FINAL:
            return DealFinal(player=player)
        case ActionType.PLAY_CARD:
            if request.card is None:
                raise ValueError("play_card requires 'card'")
            return PlayCard(card=parse_card(request.card), player=player)
        case ActionType.SELECT_PULL_TARGET:
            if request.target is None:
                raise ValueError("select_pull_target requires 'target'")
            return SelectPullTarget(target=request.target, player=player)
        case ActionType.SELECT_PULL_CARD_INDEX:
            if request.index is None:
                raise ValueError("select_pull_card_index requires 'index'")
            return SelectPullCardIndex(index=request.index, player=player)
        case ActionType.RETURN_PULL_CARD:
            if request.card is None:
                raise ValueError("return_pull_card requires 'card'")
            return ReturnPullCard(card=parse_card(request.card), player=player)
        case ActionType.START_NEXT_ROUND:
            return StartNextRound(player=player)

    raise ValueError(f"Unsupported action type: {request.type}")


def _get_room_or_404(room_id: str) -> RoomActor:
    room = room_manager.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


# REST Endpoints


@router.post("/rooms", response_model=dict)
async def create_room(request: CreateRoomRequest):
    """Create a new room with three seats."""
    try:
        room = room_manager.create_room(
            names=request.names,
            seed=request.seed,
            dealer_index=request.dealer_index,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "room_id": room.id,
        "state": room.to_client_state(),
        "legal_actions": room.actions_to_client(room.legal_actions()),
    }


@router.get("/rooms", response_model=list[dict])
async def list_rooms():
    """List all active rooms."""
    return room_manager.list_rooms()


@router.get("/rooms/{room_id}")
async def get_room(room_id: str, viewer: int | None = None):
    """Get the current state of a room as seen by ``viewer``."""
    room = _get_room_or_404(room_id)
    return {
        "state": room.to_client_state(viewer=viewer),
        "legal_actions": room.actions_to_client(room.legal_actions(viewer)),
    }


@router.post("/rooms/{room_id}/actions", response_model=ActionResponse)
async def apply_action(room_id: str, request: ActionRequest):
    """Apply an action to a room.

    Stale actions (the room already moved past that phase) are answered with
    ``applied: false`` rather than an error.
    """
    room = _get_room_or_404(room_id)

    try:
        action = to_action(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        outcome = await room.submit(action)
    except RoomFaultedError as e:
        raise HTTPException(status_code=409, detail=f"Room is faulted: {e}")
    except ActionRejected as e:
        raise HTTPException(status_code=400, detail=e.reason)

    viewer = request.player
    return ActionResponse(
        applied=outcome.applied,
        reason=outcome.reason,
        state=room.to_client_state(viewer=viewer),
        legal_actions=room.actions_to_client(room.legal_actions(viewer)),
    )


@router.get("/rooms/{room_id}/tricks")
async def get_trick_history(room_id: str, round_number: int | None = None):
    """Get the resolved tricks of a room, optionally for one round."""
    room = _get_room_or_404(room_id)
    tricks = [
        trick_to_record(t)
        for t in room.trick_history
        if round_number is None or t.round_number == round_number
    ]
    return {"tricks": tricks}


@router.get("/rooms/{room_id}/log")
async def get_action_log(room_id: str):
    """Get the applied actions of a room."""
    room = _get_room_or_404(room_id)
    return {"actions": room.action_log}


@router.delete("/rooms/{room_id}")
async def delete_room(room_id: str):
    """Delete a room."""
    if await room_manager.delete_room(room_id):
        return {"deleted": True}
    raise HTTPException(status_code=404, detail="Room not found")
