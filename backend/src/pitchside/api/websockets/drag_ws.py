"""WebSocket handler for live drag and drop on a tactics board."""

import json
import logging

from fastapi import WebSocket, WebSocketDisconnect

from pitchside.errors import PositioningError, SessionNotFound
from pitchside.models.conflict import resolution_from_kind
from pitchside.models.formation import Position
from pitchside.models.session import PositioningMode
from pitchside.services.board_manager import BoardManager
from pitchside.services.tactics_board import TacticsBoard

logger = logging.getLogger(__name__)


def _point(msg: dict) -> Position:
    return Position(x=float(msg["x"]), y=float(msg["y"]))


def _handle_message(board: TacticsBoard, msg: dict) -> dict:
    """Apply one client message to the board and build the reply."""
    if not isinstance(msg, dict):
        raise ValueError("Message must be a JSON object")
    msg_type = msg.get("type")

    if msg_type == "pick":
        mode = PositioningMode(msg.get("mode", "snap"))
        session = board.start_drag(msg["player_id"], _point(msg), mode)
        return {"type": "picked", "session": session.to_dict()}

    if msg_type == "long_press":
        mode = PositioningMode(msg.get("mode", "snap"))
        session = board.long_press(msg["player_id"], _point(msg), float(msg["duration_ms"]), mode)
        return {"type": "picked", "session": session.to_dict() if session else None}

    if msg_type == "move":
        update = board.update_drag(msg["session_id"], _point(msg))
        return {"type": "candidate", **update.to_dict()}

    if msg_type == "release":
        result = board.release_drag(msg["session_id"])
        return {"type": "released", "result": result.to_dict()}

    if msg_type == "cancel":
        result = board.cancel_drag(msg["session_id"], msg.get("reason", "aborted"))
        return {"type": "released", "result": result.to_dict()}

    if msg_type == "resolve":
        resolution = resolution_from_kind(msg["outcome"], msg.get("slot_id"))
        result = board.resolve_conflict(msg["conflict_id"], resolution)
        return {"type": "resolved", "result": result.to_dict()}

    raise ValueError(f"Unknown message type: {msg_type}")


async def drag_websocket(websocket: WebSocket, board_id: str, manager: BoardManager):
    """Handle WebSocket connection for one board.

    Each client message is applied under the board lock and answered with
    exactly one reply. Engine errors are reported back and leave the
    connection open.

    Args:
        websocket: The WebSocket connection
        board_id: ID of the board to drive
        manager: BoardManager instance
    """
    try:
        with manager.locked(board_id) as board:
            state = {"type": "board_state", "board": board.to_dict()}
    except SessionNotFound:
        await websocket.close(code=4004, reason="Board not found")
        return

    await websocket.accept()
    await websocket.send_json(state)

    try:
        while True:
            data = await websocket.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Invalid JSON received: {data}")
                await websocket.send_json(
                    {"type": "error", "error": "InvalidMessage", "detail": "Invalid JSON"}
                )
                continue

            try:
                with manager.locked(board_id) as locked_board:
                    reply = _handle_message(locked_board, msg)
            except PositioningError as e:
                reply = {"type": "error", "error": type(e).__name__, "detail": str(e)}
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Board {board_id}: bad message {msg!r}: {e}")
                reply = {"type": "error", "error": "InvalidMessage", "detail": str(e)}
            await websocket.send_json(reply)
    except WebSocketDisconnect:
        logger.debug(f"Board {board_id}: client disconnected")
