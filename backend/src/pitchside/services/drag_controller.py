"""Drag session state machine.

Transitions are pure ``(session, event) -> session`` functions. They never
touch the formation: committing a resolved drop is done by the caller with
``commit_drop`` so that the lifecycle can be tested without a board.

    idle -> picked -> dragging -> resolved
                              \\-> conflict_pending -> resolved | cancelled
                              \\-> cancelled
"""

import logging
import uuid
from dataclasses import replace
from typing import Optional

from pitchside.models.formation import Formation, Position
from pitchside.models.session import (
    Abort,
    Candidate,
    ConflictDecided,
    DragEvent,
    DragPhase,
    DragSession,
    NO_CANDIDATE,
    PickupGesture,
    PointerMove,
    PointerUp,
    PositioningMode,
)
from pitchside.services.formation_service import bind_player, move_slot
from pitchside.services.positioning_policy import (
    DragContext,
    PositioningPolicy,
    is_out_of_bounds,
)

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return f"drag_{uuid.uuid4().hex[:12]}"


def pick_up(
    formation: Formation,
    player_id: str,
    pointer: Position,
    mode: PositioningMode,
    gesture: PickupGesture = PickupGesture.POINTER,
    session_id: Optional[str] = None,
) -> DragSession:
    """Create a session in the picked phase.

    The initial candidate is the player's own slot; a benched player starts
    with no candidate.
    """
    source = formation.slot_for_player(player_id)
    if source is not None:
        candidate = Candidate(slot_id=source.id, position=source.position, is_valid=True)
    else:
        candidate = NO_CANDIDATE

    return DragSession(
        id=session_id or new_session_id(),
        player_id=player_id,
        source_slot_id=source.id if source else None,
        origin=source.position if source else None,
        mode=PositioningMode(mode),
        phase=DragPhase.PICKED,
        pointer=pointer,
        candidate=candidate,
        gesture=gesture,
    )


def refresh(
    session: DragSession,
    formation: Formation,
    policy: PositioningPolicy,
    player_role: Optional[str] = None,
) -> DragSession:
    """Recompute source slot and candidate against the current formation.

    Other sessions may have committed since this one last saw the board: the
    player may have been swapped to another slot or benched, and the target
    may have been taken. A picked session targets the player's current slot;
    a dragging one re-runs the policy at its last pointer.
    """
    if session.phase not in (DragPhase.PICKED, DragPhase.DRAGGING):
        return session

    source = formation.slot_for_player(session.player_id)
    source_slot_id = source.id if source else None
    if session.phase is DragPhase.PICKED:
        if source is None:
            candidate = NO_CANDIDATE
        else:
            candidate = Candidate(slot_id=source.id, position=source.position, is_valid=True)
    else:
        ctx = DragContext(
            player_id=session.player_id,
            player_role=player_role,
            source_slot_id=source_slot_id,
        )
        candidate = policy.candidate(formation, session.pointer, ctx)

    if candidate != session.candidate or source_slot_id != session.source_slot_id:
        logger.debug(f"Session {session.id} refreshed: candidate {candidate.slot_id}")
    return replace(session, source_slot_id=source_slot_id, candidate=candidate)


def _cancel(session: DragSession, reason: str) -> DragSession:
    return replace(session, phase=DragPhase.CANCELLED, cancel_reason=reason)


def transition(
    session: DragSession,
    event: DragEvent,
    formation: Formation,
    policy: PositioningPolicy,
    player_role: Optional[str] = None,
) -> DragSession:
    """Apply one event to a session.

    Events that make no sense in the current phase (a move while a conflict
    is pending, anything after the session ended) leave it unchanged.
    """
    phase = session.phase

    if session.is_terminal:
        logger.debug(f"Ignoring {type(event).__name__} for finished session {session.id}")
        return session

    if isinstance(event, Abort):
        return _cancel(session, event.reason)

    if isinstance(event, PointerMove):
        if phase not in (DragPhase.PICKED, DragPhase.DRAGGING):
            logger.debug(f"Ignoring move for session {session.id} in phase {phase.value}")
            return session
        if is_out_of_bounds(event.position):
            return _cancel(session, "left_field")
        ctx = DragContext(
            player_id=session.player_id,
            player_role=player_role,
            source_slot_id=session.source_slot_id,
        )
        return replace(
            session,
            phase=DragPhase.DRAGGING,
            pointer=event.position,
            candidate=policy.candidate(formation, event.position, ctx),
        )

    if isinstance(event, PointerUp):
        if phase not in (DragPhase.PICKED, DragPhase.DRAGGING):
            return session
        candidate = session.candidate
        if not candidate.is_valid:
            return _cancel(session, "no_valid_target")
        if candidate.has_pending_conflict:
            return replace(session, phase=DragPhase.CONFLICT_PENDING)
        return replace(session, phase=DragPhase.RESOLVED)

    if isinstance(event, ConflictDecided):
        if phase is not DragPhase.CONFLICT_PENDING:
            return session
        if event.cancelled:
            return _cancel(session, "conflict_cancelled")
        return replace(session, phase=DragPhase.RESOLVED)

    raise TypeError(f"Unknown drag event: {event!r}")


def commit_drop(
    formation: Formation,
    session: DragSession,
    player_role: Optional[str] = None,
) -> Formation:
    """Apply an uncontested, resolved drop to the formation.

    Snap mode binds the player to the candidate slot. Free mode binds the
    player to the carrier slot and moves it to the drop coordinate.
    """
    candidate = session.candidate
    if session.phase is not DragPhase.RESOLVED or candidate.slot_id is None:
        raise ValueError(f"Session {session.id} has nothing to commit")

    updated = bind_player(formation, candidate.slot_id, session.player_id, player_role)
    if session.mode is PositioningMode.FREE and candidate.position is not None:
        updated = move_slot(updated, candidate.slot_id, candidate.position)
    return updated
