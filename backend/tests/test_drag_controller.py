"""Tests for the drag session state machine."""
import pytest

from pitchside.models.formation import Position
from pitchside.models.session import (
    Abort,
    ConflictDecided,
    DragPhase,
    NO_CANDIDATE,
    PickupGesture,
    PointerMove,
    PointerUp,
    PositioningMode,
)
from pitchside.services.drag_controller import commit_drop, pick_up, refresh, transition
from pitchside.services.formation_service import swap_slots, unbind_player, unbind_slot
from pitchside.services.positioning_policy import FreePolicy, SnapPolicy


@pytest.fixture
def snap():
    return SnapPolicy(snap_radius=8.0)


@pytest.fixture
def free():
    return FreePolicy(collision_radius=5.0)


def drag(session, formation, policy, role, *points):
    for x, y in points:
        session = transition(session, PointerMove(Position(x, y)), formation, policy, role)
    return session


def test_pick_up_bound_player(formation):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    assert session.phase is DragPhase.PICKED
    assert session.source_slot_id == "s7"
    assert session.origin == Position(38, 48)
    assert session.candidate.slot_id == "s7"
    assert session.id.startswith("drag_")


def test_pick_up_benched_player(formation):
    session = pick_up(formation, "p13", Position(50, 50), "free", gesture=PickupGesture.LONG_PRESS)
    assert session.source_slot_id is None
    assert session.candidate == NO_CANDIDATE
    assert session.mode is PositioningMode.FREE
    assert session.gesture is PickupGesture.LONG_PRESS


def test_move_enters_dragging(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    moved = drag(session, formation, snap, "cm", (50, 48), (61, 48))
    assert moved.phase is DragPhase.DRAGGING
    assert moved.pointer == Position(61, 48)
    assert moved.candidate.slot_id == "s8"


def test_transition_does_not_mutate_session(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    drag(session, formation, snap, "cm", (61, 48))
    assert session.phase is DragPhase.PICKED


def test_leaving_the_field_cancels(formation, snap):
    session = pick_up(formation, "p2", Position(15, 25), PositioningMode.SNAP)
    moved = drag(session, formation, snap, "fb", (5, 25), (-6, 25))
    assert moved.phase is DragPhase.CANCELLED
    assert moved.cancel_reason == "left_field"


def test_release_on_free_target_resolves(formation, snap):
    freed = unbind_slot(formation, "s8")
    session = pick_up(freed, "p7", Position(38, 48), PositioningMode.SNAP)
    released = transition(drag(session, freed, snap, "cm", (62, 48)), PointerUp(), freed, snap, "cm")
    assert released.phase is DragPhase.RESOLVED


def test_release_on_occupant_raises_conflict(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    released = transition(drag(session, formation, snap, "cm", (62, 48)), PointerUp(), formation, snap, "cm")
    assert released.phase is DragPhase.CONFLICT_PENDING


def test_release_without_target_cancels(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    released = transition(drag(session, formation, snap, "cm", (50, 35)), PointerUp(), formation, snap, "cm")
    assert released.phase is DragPhase.CANCELLED
    assert released.cancel_reason == "no_valid_target"


def test_release_without_moving_resolves_to_own_slot(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    released = transition(session, PointerUp(), formation, snap, "cm")
    assert released.phase is DragPhase.RESOLVED
    assert commit_drop(formation, released, "cm").bindings == formation.bindings


def test_moves_ignored_while_conflict_pending(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    pending = transition(drag(session, formation, snap, "cm", (62, 48)), PointerUp(), formation, snap, "cm")
    assert drag(pending, formation, snap, "cm", (15, 50)) == pending


def test_conflict_decision(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    pending = transition(drag(session, formation, snap, "cm", (62, 48)), PointerUp(), formation, snap, "cm")
    cancelled = transition(pending, ConflictDecided(cancelled=True), formation, snap)
    resolved = transition(pending, ConflictDecided(cancelled=False), formation, snap)
    assert cancelled.phase is DragPhase.CANCELLED
    assert cancelled.cancel_reason == "conflict_cancelled"
    assert resolved.phase is DragPhase.RESOLVED


def test_abort_from_any_live_phase(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    aborted = transition(session, Abort("escape"), formation, snap)
    assert aborted.phase is DragPhase.CANCELLED
    assert aborted.cancel_reason == "escape"


def test_terminal_sessions_ignore_events(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    aborted = transition(session, Abort(), formation, snap)
    assert transition(aborted, PointerMove(Position(62, 48)), formation, snap, "cm") is aborted
    assert transition(aborted, PointerUp(), formation, snap, "cm") is aborted


def test_unknown_event_raises(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    with pytest.raises(TypeError):
        transition(session, object(), formation, snap)


def test_commit_drop_free_mode_moves_slot(formation, free):
    session = pick_up(formation, "p10", Position(38, 78), PositioningMode.FREE)
    released = transition(drag(session, formation, free, "cf", (45, 70)), PointerUp(), formation, free, "cf")
    committed = commit_drop(formation, released, "cf")
    assert committed.get_slot("s10").position == Position(45, 70)
    assert committed.get_slot("s10").player_id == "p10"


def test_commit_drop_requires_resolved_session(formation):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    with pytest.raises(ValueError):
        commit_drop(formation, session)


def test_refresh_follows_player_to_new_slot(formation, snap):
    session = pick_up(formation, "p8", Position(62, 48), PositioningMode.SNAP)
    swapped = swap_slots(formation, "s7", "s8")
    refreshed = refresh(session, swapped, snap, "cm")
    assert refreshed.phase is DragPhase.PICKED
    assert refreshed.source_slot_id == "s7"
    assert refreshed.candidate.slot_id == "s7"
    assert not refreshed.candidate.has_pending_conflict


def test_refresh_benched_player_loses_target(formation, snap):
    session = pick_up(formation, "p8", Position(62, 48), PositioningMode.SNAP)
    refreshed = refresh(session, unbind_player(formation, "p8"), snap, "cm")
    assert refreshed.source_slot_id is None
    assert refreshed.candidate == NO_CANDIDATE


def test_refresh_rechecks_dragging_target(formation, snap):
    freed = unbind_slot(formation, "s8")
    session = pick_up(freed, "p7", Position(38, 48), PositioningMode.SNAP)
    moved = drag(session, freed, snap, "cm", (62, 48))
    assert not moved.candidate.has_pending_conflict

    refreshed = refresh(moved, formation, snap, "cm")
    assert refreshed.candidate.slot_id == "s8"
    assert refreshed.candidate.occupant_id == "p8"


def test_refresh_leaves_pending_sessions_alone(formation, snap):
    session = pick_up(formation, "p7", Position(38, 48), PositioningMode.SNAP)
    pending = transition(drag(session, formation, snap, "cm", (62, 48)), PointerUp(), formation, snap, "cm")
    assert refresh(pending, unbind_slot(formation, "s8"), snap, "cm") is pending
