"""Tactics board: the positioning engine's public surface.

A board owns a working copy of one formation plus the roster and chemistry
records it was created with. Callers drive it with pick-up, move, release
and resolve calls; every committed change replaces the working formation
and returns freshly computed chemistry.
"""

import logging
import time
import uuid
from typing import Optional

from pitchside.config import Settings, get_settings
from pitchside.errors import PlayerNotFound, SessionBusy, SessionNotFound
from pitchside.models.chemistry import ChemistryInputs, FormationChemistry
from pitchside.models.conflict import (
    Cancel,
    Cancelled,
    Committed,
    ConflictContext,
    ConflictRaised,
    ReleaseResult,
    Resolution,
)
from pitchside.models.formation import Formation, Position
from pitchside.models.player import Player
from pitchside.models.session import (
    Abort,
    ConflictDecided,
    DragPhase,
    DragSession,
    DragUpdate,
    PickupGesture,
    PointerMove,
    PointerUp,
    PositioningMode,
)
from pitchside.services.auto_assignment import AutoAssignmentService
from pitchside.services.chemistry_service import ChemistryService
from pitchside.services.conflict_resolver import ConflictResolver
from pitchside.services.drag_controller import commit_drop, pick_up, refresh, transition
from pitchside.services.formation_analysis_service import FormationAnalysisService
from pitchside.services.positioning_policy import FreePolicy, PositioningPolicy, SnapPolicy

logger = logging.getLogger(__name__)


class TacticsBoard:
    """Drag, drop and conflict handling over one formation."""

    def __init__(
        self,
        formation: Formation,
        roster: list[Player],
        chemistry_inputs: Optional[ChemistryInputs] = None,
        board_id: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.id = board_id or uuid.uuid4().hex[:8]
        self._formation = formation
        self._players: dict[str, Player] = {p.id: p for p in roster}

        self.chemistry = ChemistryService(chemistry_inputs, rate=self.settings.familiarity_rate)
        self.resolver = ConflictResolver(self.chemistry)
        self.analysis = FormationAnalysisService(chemistry=self.chemistry)
        self.auto_assigner = AutoAssignmentService(self.analysis.scorer)
        self._policies: dict[PositioningMode, PositioningPolicy] = {
            PositioningMode.SNAP: SnapPolicy(self.settings.snap_radius),
            PositioningMode.FREE: FreePolicy(self.settings.collision_radius),
        }

        self._sessions: dict[str, DragSession] = {}
        self._conflicts: dict[str, ConflictContext] = {}

        self.created_at = time.time()
        self.last_access = self.created_at

    # Read-only views

    @property
    def formation(self) -> Formation:
        """Current working formation; safe to read while a conflict is pending."""
        return self._formation

    @property
    def roster(self) -> list[Player]:
        return list(self._players.values())

    @property
    def player_roles(self) -> dict[str, str]:
        return {pid: p.role for pid, p in self._players.items()}

    def get_session(self, session_id: str) -> DragSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def get_conflict(self, conflict_id: str) -> ConflictContext:
        context = self._conflicts.get(conflict_id)
        if context is None:
            raise SessionNotFound(conflict_id)
        return context

    def _busy_session(self, exclude: Optional[str] = None) -> Optional[DragSession]:
        for session in self._sessions.values():
            if session.is_busy and session.id != exclude:
                return session
        return None

    @property
    def drag_phase(self) -> DragPhase:
        """Board-level drag state: the blocking session's phase, else picked or idle."""
        busy = self._busy_session()
        if busy is not None:
            return busy.phase
        return DragPhase.PICKED if self._sessions else DragPhase.IDLE

    def _role_of(self, player_id: str) -> Optional[str]:
        player = self._players.get(player_id)
        return player.role if player else None

    # Drag lifecycle

    def start_drag(
        self,
        player_id: str,
        pointer: Position,
        mode: PositioningMode = PositioningMode.SNAP,
        gesture: PickupGesture = PickupGesture.POINTER,
    ) -> DragSession:
        """Pick up a bound or benched player token.

        Raises:
            PlayerNotFound: player is not on this board's roster
            SessionBusy: another drag is in flight or awaiting resolution
        """
        if player_id not in self._players:
            raise PlayerNotFound(player_id)
        busy = self._busy_session()
        if busy is not None:
            logger.warning(f"Board {self.id}: pick-up of {player_id} rejected, {busy.id} active")
            raise SessionBusy(busy.id)

        session = pick_up(self._formation, player_id, pointer, mode, gesture)
        self._sessions[session.id] = session
        logger.debug(f"Board {self.id}: {player_id} picked up ({session.id}, {session.mode.value})")
        return session

    def long_press(
        self,
        player_id: str,
        position: Position,
        duration_ms: float,
        mode: PositioningMode = PositioningMode.SNAP,
    ) -> Optional[DragSession]:
        """Touch pick-up; presses shorter than the threshold pick nothing up."""
        if duration_ms < self.settings.long_press_ms:
            return None
        return self.start_drag(player_id, position, mode, PickupGesture.LONG_PRESS)

    def update_drag(self, session_id: str, pointer: Position) -> DragUpdate:
        """Feed a pointer move and return the live candidate.

        Only the last move before release matters, so callers may throttle
        or coalesce moves freely.
        """
        session = self.get_session(session_id)
        if session.phase is DragPhase.PICKED:
            busy = self._busy_session(exclude=session_id)
            if busy is not None:
                raise SessionBusy(busy.id)

        updated = transition(
            session,
            PointerMove(pointer),
            self._formation,
            self._policies[session.mode],
            self._role_of(session.player_id),
        )
        if updated.is_terminal:
            logger.debug(f"Board {self.id}: {session_id} cancelled ({updated.cancel_reason})")
            self._sessions.pop(session_id, None)
        else:
            self._sessions[session_id] = updated
        return DragUpdate.from_session(updated)

    def release_drag(self, session_id: str) -> ReleaseResult:
        """Drop the token: commit, raise a conflict, or cancel."""
        session = self.get_session(session_id)
        if session.phase is DragPhase.CONFLICT_PENDING:
            for context in self._conflicts.values():
                if context.session_id == session_id:
                    return ConflictRaised(context)

        role = self._role_of(session.player_id)
        policy = self._policies[session.mode]
        # Candidate may predate commits made by other sessions
        current = refresh(session, self._formation, policy, role)
        updated = transition(current, PointerUp(), self._formation, policy, role)

        if updated.phase is DragPhase.RESOLVED:
            formation = commit_drop(self._formation, updated, role)
            self._sessions.pop(session_id, None)
            return self._commit(formation)

        if updated.phase is DragPhase.CONFLICT_PENDING:
            self._sessions[session_id] = updated
            context = self.resolver.build_context(self._formation, updated, self.player_roles)
            self._conflicts[context.id] = context
            return ConflictRaised(context)

        self._sessions.pop(session_id, None)
        return Cancelled(reason=updated.cancel_reason or "cancelled", formation=self._formation)

    def resolve_conflict(self, conflict_id: str, resolution: Resolution) -> ReleaseResult:
        """Apply the caller's choice for a pending conflict.

        If the choice fails (InvalidRole, NoAlternativeSlot) the conflict
        stays pending and the caller may pick again.
        """
        context = self.get_conflict(conflict_id)
        session = self._sessions.get(context.session_id)
        if session is None:
            self._conflicts.pop(conflict_id, None)
            raise SessionNotFound(context.session_id)

        updated_formation = self.resolver.apply_resolution(
            self._formation, context, resolution, self.player_roles
        )
        finished = transition(
            session,
            ConflictDecided(cancelled=isinstance(resolution, Cancel)),
            self._formation,
            self._policies[session.mode],
        )
        self._conflicts.pop(conflict_id, None)
        self._sessions.pop(session.id, None)
        logger.info(f"Board {self.id}: conflict {conflict_id} resolved with {resolution.kind.value}")

        if finished.phase is DragPhase.CANCELLED:
            return Cancelled(reason=finished.cancel_reason or "cancelled", formation=self._formation)
        return self._commit(updated_formation, resolution)

    def cancel_drag(self, session_id: str, reason: str = "aborted") -> Cancelled:
        """Abort a drag or a pending conflict; the formation is left untouched."""
        session = self.get_session(session_id)
        finished = transition(
            session, Abort(reason), self._formation, self._policies[session.mode]
        )
        self._sessions.pop(session_id, None)
        for conflict_id in [c.id for c in self._conflicts.values() if c.session_id == session_id]:
            self._conflicts.pop(conflict_id)
        return Cancelled(reason=finished.cancel_reason or reason, formation=self._formation)

    def _commit(self, formation: Formation, resolution: Optional[Resolution] = None) -> Committed:
        self._formation = formation.touched()
        return Committed(
            formation=self._formation,
            chemistry=self.compute_chemistry(),
            resolution=resolution.kind if resolution is not None else None,
        )

    # Advisory

    def compute_chemistry(self) -> FormationChemistry:
        return self.chemistry.calculate_formation_chemistry(self._formation)

    def analyze(self) -> dict:
        return self.analysis.analyze(self._formation, self.roster)

    def auto_assign(self, team: Optional[str] = None) -> Committed:
        """Recompute all bindings from the roster.

        Raises:
            SessionBusy: a drag is in flight or awaiting resolution
        """
        busy = self._busy_session()
        if busy is not None:
            raise SessionBusy(busy.id)
        self._sessions.clear()
        return self._commit(self.auto_assigner.assign(self._formation, self.roster, team))

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return {
            "board_id": self.id,
            "drag_phase": self.drag_phase.value,
            "formation": self._formation.to_dict(),
            "chemistry": self.compute_chemistry().to_dict(),
            "roster": [p.to_dict() for p in self._players.values()],
            "sessions": [s.to_dict() for s in self._sessions.values()],
            "conflicts": [c.to_dict() for c in self._conflicts.values()],
        }
