"""Drag session state and pointer events."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from pitchside.models.formation import Position


class PositioningMode(str, Enum):
    """How candidate targets are computed while dragging."""

    SNAP = "snap"  # Drop onto the nearest slot within the snap radius
    FREE = "free"  # Drop anywhere; collisions raise a conflict


class DragPhase(str, Enum):
    """Lifecycle of a drag session."""

    IDLE = "idle"  # No open session on the board
    PICKED = "picked"  # Token picked up, no movement yet
    DRAGGING = "dragging"  # Pointer moving, candidate tracked
    CONFLICT_PENDING = "conflict_pending"  # Released onto an occupant, waiting for a choice
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


TERMINAL_PHASES = frozenset({DragPhase.RESOLVED, DragPhase.CANCELLED})
# Phases that block another pick-up
BUSY_PHASES = frozenset({DragPhase.DRAGGING, DragPhase.CONFLICT_PENDING})


class PickupGesture(str, Enum):
    """How the token was picked up."""

    POINTER = "pointer"
    LONG_PRESS = "long_press"


@dataclass(frozen=True)
class Candidate:
    """Where the dragged token would land if released now."""

    slot_id: Optional[str]
    position: Optional[Position]
    is_valid: bool
    # Set when the target is held by another player
    occupant_id: Optional[str] = None

    @property
    def has_pending_conflict(self) -> bool:
        return self.occupant_id is not None

    def to_dict(self) -> dict:
        return {
            "slot_id": self.slot_id,
            "position": self.position.to_dict() if self.position else None,
            "is_valid": self.is_valid,
            "occupant_id": self.occupant_id,
            "has_pending_conflict": self.has_pending_conflict,
        }


NO_CANDIDATE = Candidate(slot_id=None, position=None, is_valid=False)


@dataclass(frozen=True)
class DragSession:
    """Ephemeral state of one pick-up to release/cancel interaction."""

    id: str
    player_id: str
    source_slot_id: Optional[str]  # None when picked from the bench
    origin: Optional[Position]  # Source slot position at pick-up
    mode: PositioningMode
    phase: DragPhase
    pointer: Position
    candidate: Candidate
    gesture: PickupGesture = PickupGesture.POINTER
    cancel_reason: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def is_busy(self) -> bool:
        return self.phase in BUSY_PHASES

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return {
            "session_id": self.id,
            "player_id": self.player_id,
            "source_slot_id": self.source_slot_id,
            "origin": self.origin.to_dict() if self.origin else None,
            "mode": self.mode.value,
            "phase": self.phase.value,
            "pointer": self.pointer.to_dict(),
            "candidate": self.candidate.to_dict(),
            "gesture": self.gesture.value,
            "cancel_reason": self.cancel_reason,
        }


# Pointer events fed to the drag controller


@dataclass(frozen=True)
class PointerMove:
    position: Position


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class Abort:
    reason: str = "aborted"


@dataclass(frozen=True)
class ConflictDecided:
    """The caller picked a resolution; ``cancelled`` for the cancel outcome."""

    cancelled: bool


DragEvent = Union[PointerMove, PointerUp, Abort, ConflictDecided]


@dataclass(frozen=True)
class DragUpdate:
    """Result of feeding a pointer move to a session."""

    session_id: str
    phase: DragPhase
    candidate_slot_id: Optional[str]
    candidate_position: Optional[Position]
    is_valid: bool
    has_pending_conflict: bool

    @classmethod
    def from_session(cls, session: DragSession) -> "DragUpdate":
        return cls(
            session_id=session.id,
            phase=session.phase,
            candidate_slot_id=session.candidate.slot_id,
            candidate_position=session.candidate.position,
            is_valid=session.candidate.is_valid,
            has_pending_conflict=session.candidate.has_pending_conflict,
        )

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "phase": self.phase.value,
            "candidate_slot_id": self.candidate_slot_id,
            "candidate_position": (
                self.candidate_position.to_dict() if self.candidate_position else None
            ),
            "is_valid": self.is_valid,
            "has_pending_conflict": self.has_pending_conflict,
        }
