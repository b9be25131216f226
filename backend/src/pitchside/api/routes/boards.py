"""Tactics board API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from pitchside.api.payloads import (
    CreateBoardRequest,
    PointPayload,
    ResolveConflictRequest,
    StartDragRequest,
    to_http_error,
)
from pitchside.errors import PositioningError
from pitchside.models.conflict import resolution_from_kind
from pitchside.models.formation import Position
from pitchside.models.session import PickupGesture, PositioningMode
from pitchside.services.formation_service import has_duplicate_bindings
from pitchside.utils.roles import is_valid_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards", tags=["boards"])


class CancelDragRequest(BaseModel):
    reason: str = "aborted"


class AutoAssignRequest(BaseModel):
    team: Optional[str] = None


def _manager(request: Request):
    return request.app.state.board_manager


@router.post("", status_code=201)
async def create_board(request: Request, body: CreateBoardRequest):
    """Create a board from a named template or an explicit formation."""
    if body.formation is not None:
        formation = body.formation.to_formation()
        bad_roles = [s.role for s in formation.slots if not is_valid_role(s.role)]
        if bad_roles:
            raise HTTPException(status_code=422, detail=f"Unknown slot roles: {bad_roles}")
        if has_duplicate_bindings(formation):
            raise HTTPException(status_code=422, detail="A player is bound to more than one slot")
    elif body.template_id is not None:
        formation = request.app.state.formation_repository.get_template(body.template_id)
        if formation is None:
            raise HTTPException(status_code=404, detail=f"Formation template not found: {body.template_id}")
    else:
        raise HTTPException(status_code=400, detail="Either template_id or formation is required")

    roster = [p.to_player() for p in body.roster]
    if len({p.id for p in roster}) != len(roster):
        raise HTTPException(status_code=422, detail="Duplicate player ids in roster")

    board = _manager(request).create_board(formation, roster, body.chemistry.to_inputs())
    if body.auto_assign:
        board.auto_assign(body.team)
    return board.to_dict()


@router.get("")
async def list_boards(request: Request):
    """List active boards."""
    return {"boards": _manager(request).list_boards()}


@router.get("/{board_id}")
async def get_board(request: Request, board_id: str):
    try:
        with _manager(request).locked(board_id) as board:
            return board.to_dict()
    except PositioningError as e:
        raise to_http_error(e)


@router.delete("/{board_id}", status_code=204)
async def delete_board(request: Request, board_id: str):
    if not _manager(request).remove_board(board_id):
        raise HTTPException(status_code=404, detail=f"Board not found: {board_id}")


@router.post("/{board_id}/drags", status_code=201)
async def start_drag(request: Request, board_id: str, body: StartDragRequest):
    """Pick up a player token.

    A ``long_press`` pick-up shorter than the configured threshold picks
    nothing up and returns ``{"session": null}``.
    """
    pointer = Position(x=body.x, y=body.y)
    mode = PositioningMode(body.mode)
    try:
        with _manager(request).locked(board_id) as board:
            if PickupGesture(body.gesture) is PickupGesture.LONG_PRESS:
                session = board.long_press(
                    body.player_id, pointer, body.press_duration_ms or 0, mode
                )
            else:
                session = board.start_drag(body.player_id, pointer, mode)
    except PositioningError as e:
        raise to_http_error(e)
    return {"session": session.to_dict() if session else None}


@router.post("/{board_id}/drags/{session_id}/move")
async def move_drag(request: Request, board_id: str, session_id: str, body: PointPayload):
    try:
        with _manager(request).locked(board_id) as board:
            update = board.update_drag(session_id, body.to_position())
    except PositioningError as e:
        raise to_http_error(e)
    return update.to_dict()


@router.post("/{board_id}/drags/{session_id}/release")
async def release_drag(request: Request, board_id: str, session_id: str):
    """Release the token: commits, cancels, or returns a conflict to resolve."""
    try:
        with _manager(request).locked(board_id) as board:
            result = board.release_drag(session_id)
    except PositioningError as e:
        raise to_http_error(e)
    return result.to_dict()


@router.post("/{board_id}/drags/{session_id}/cancel")
async def cancel_drag(
    request: Request, board_id: str, session_id: str, body: Optional[CancelDragRequest] = None
):
    reason = body.reason if body else "aborted"
    try:
        with _manager(request).locked(board_id) as board:
            result = board.cancel_drag(session_id, reason)
    except PositioningError as e:
        raise to_http_error(e)
    return result.to_dict()


@router.post("/{board_id}/conflicts/{conflict_id}/resolve")
async def resolve_conflict(
    request: Request, board_id: str, conflict_id: str, body: ResolveConflictRequest
):
    resolution = resolution_from_kind(body.outcome, body.slot_id)
    try:
        with _manager(request).locked(board_id) as board:
            result = board.resolve_conflict(conflict_id, resolution)
    except PositioningError as e:
        raise to_http_error(e)
    return result.to_dict()


@router.get("/{board_id}/chemistry")
async def get_chemistry(request: Request, board_id: str):
    try:
        with _manager(request).locked(board_id) as board:
            return board.compute_chemistry().to_dict()
    except PositioningError as e:
        raise to_http_error(e)


@router.get("/{board_id}/analysis")
async def get_analysis(request: Request, board_id: str):
    """Per-slot fit scores, line metrics and issues for the current formation."""
    try:
        with _manager(request).locked(board_id) as board:
            return board.analyze()
    except PositioningError as e:
        raise to_http_error(e)


@router.post("/{board_id}/auto-assign")
async def auto_assign(request: Request, board_id: str, body: Optional[AutoAssignRequest] = None):
    """Rebind every slot from the roster using optimal assignment."""
    try:
        with _manager(request).locked(board_id) as board:
            result = board.auto_assign(body.team if body else None)
    except PositioningError as e:
        raise to_http_error(e)
    return result.to_dict()
