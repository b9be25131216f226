"""Conflict resolution when a drop lands on an occupied slot.

The resolver never picks an outcome itself. ``build_context`` describes the
conflict and the menu of outcomes; ``apply_resolution`` performs the one the
caller chose and returns the new formation.
"""

import logging
import uuid
from typing import Optional

from pitchside.errors import InvalidRole, NoAlternativeSlot
from pitchside.models.conflict import (
    AlternativeSlot,
    Cancel,
    ConflictContext,
    FindAlternative,
    Replace,
    Resolution,
    ResolutionKind,
    ResolutionOption,
    Swap,
)
from pitchside.models.formation import Formation, Position, slot_sort_key
from pitchside.models.session import DragSession
from pitchside.services.chemistry_service import ChemistryService
from pitchside.services.formation_service import (
    bind_player,
    compatible_free_slots,
    role_match_for,
    swap_slots,
    unbind_player,
)
from pitchside.utils.roles import RoleMatch, is_structurally_allowed

logger = logging.getLogger(__name__)


class ConflictResolver:
    """Builds conflict menus and applies the chosen outcome."""

    def __init__(self, chemistry: Optional[ChemistryService] = None):
        self.chemistry = chemistry or ChemistryService()

    def rank_alternatives(
        self,
        formation: Formation,
        player_id: str,
        player_role: Optional[str],
        drop_position: Position,
        exclude_slot_ids: tuple[str, ...] = (),
    ) -> list[AlternativeSlot]:
        """Free compatible slots, best first.

        Ordered by role match (exact before category), then chemistry delta
        (higher first), then distance from the drop point, then slot id.
        """
        if player_role is None:
            return []

        # Score links as if the mover had already left their current slot
        without_mover = unbind_player(formation, player_id)
        ranked = []
        for slot in compatible_free_slots(formation, player_role, exclude_slot_ids):
            match = role_match_for(slot, player_role)
            if match is RoleMatch.NONE:
                continue
            ranked.append(AlternativeSlot(
                slot_id=slot.id,
                role=slot.role,
                role_match=match,
                chemistry_delta=self.chemistry.chemistry_delta(
                    without_mover, player_id, slot.position
                ),
                distance=slot.position.distance_to(drop_position),
            ))

        ranked.sort(key=lambda alt: (
            alt.role_match.value,
            -alt.chemistry_delta,
            alt.distance,
            slot_sort_key(alt.slot_id),
        ))
        return ranked

    def build_context(
        self,
        formation: Formation,
        session: DragSession,
        player_roles: dict[str, str],
        conflict_id: Optional[str] = None,
    ) -> ConflictContext:
        """Describe the conflict for a session whose candidate is occupied."""
        candidate = session.candidate
        if candidate.slot_id is None or candidate.occupant_id is None:
            raise ValueError(f"Session {session.id} has no contested target")

        target = formation.get_slot(candidate.slot_id)
        drop_position = candidate.position or (target.position if target else session.pointer)
        mover_role = player_roles.get(session.player_id)
        occupant_role = player_roles.get(candidate.occupant_id)

        excluded = tuple(
            slot_id for slot_id in (candidate.slot_id, session.source_slot_id) if slot_id
        )
        alternatives = tuple(self.rank_alternatives(
            formation, session.player_id, mover_role, drop_position, excluded
        ))

        source = formation.get_slot(session.source_slot_id) if session.source_slot_id else None
        # Free mode can collide with a slot the mover may not take over
        takeover_allowed = target is None or is_structurally_allowed(mover_role, target.role)
        swap_allowed = takeover_allowed and (
            source is None or is_structurally_allowed(occupant_role, source.role)
        )
        if source is None:
            swap_text = f"Swap: {candidate.occupant_id} goes to the bench"
        else:
            swap_text = f"Swap: {candidate.occupant_id} moves to {source.id}"

        options = [
            ResolutionOption(
                kind=ResolutionKind.SWAP,
                description=swap_text,
                available=swap_allowed,
                recommended=True,
                target_slot_id=source.id if source else None,
            ),
            ResolutionOption(
                kind=ResolutionKind.REPLACE,
                description=f"Replace: {candidate.occupant_id} goes to the bench",
                available=takeover_allowed,
            ),
        ]
        if alternatives:
            best = alternatives[0]
            options.append(ResolutionOption(
                kind=ResolutionKind.FIND_ALTERNATIVE,
                description=f"Move {session.player_id} to {best.slot_id} instead",
                target_slot_id=best.slot_id,
            ))
        options.append(ResolutionOption(kind=ResolutionKind.CANCEL, description="Cancel the move"))

        context = ConflictContext(
            id=conflict_id or f"conflict_{uuid.uuid4().hex[:12]}",
            session_id=session.id,
            moving_player_id=session.player_id,
            occupant_player_id=candidate.occupant_id,
            candidate_slot_id=candidate.slot_id,
            source_slot_id=session.source_slot_id,
            drop_position=drop_position,
            alternatives=alternatives,
            options=tuple(options),
        )
        logger.info(
            f"Conflict {context.id}: {context.moving_player_id} onto "
            f"{context.candidate_slot_id} held by {context.occupant_player_id} "
            f"({len(alternatives)} alternatives)"
        )
        return context

    def apply_resolution(
        self,
        formation: Formation,
        context: ConflictContext,
        resolution: Resolution,
        player_roles: Optional[dict[str, str]] = None,
    ) -> Formation:
        """Perform the chosen outcome and return the new formation.

        Raises:
            InvalidRole: swap would put the occupant in a slot they cannot play
            NoAlternativeSlot: find_alternative with nothing to move to
        """
        roles = player_roles or {}
        mover = context.moving_player_id
        occupant = context.occupant_player_id
        target = context.candidate_slot_id

        if isinstance(resolution, Cancel):
            return formation

        if isinstance(resolution, Swap):
            if context.source_slot_id is None:
                benched = unbind_player(formation, occupant)
                return bind_player(benched, target, mover, roles.get(mover))
            source = formation.get_slot(context.source_slot_id)
            if source is not None and not is_structurally_allowed(roles.get(occupant), source.role):
                raise InvalidRole(occupant, source.id)
            if not is_structurally_allowed(roles.get(mover), formation.get_slot(target).role):
                raise InvalidRole(mover, target)
            return swap_slots(formation, context.source_slot_id, target)

        if isinstance(resolution, Replace):
            benched = unbind_player(formation, occupant)
            return bind_player(benched, target, mover, roles.get(mover))

        if isinstance(resolution, FindAlternative):
            choice = self._pick_alternative(context, resolution.slot_id)
            return bind_player(formation, choice.slot_id, mover, roles.get(mover))

        raise TypeError(f"Unknown resolution: {resolution!r}")

    def _pick_alternative(self, context: ConflictContext, slot_id: Optional[str]) -> AlternativeSlot:
        if not context.alternatives:
            raise NoAlternativeSlot(context.id)
        if slot_id is None:
            return context.best_alternative
        for alt in context.alternatives:
            if alt.slot_id == slot_id:
                return alt
        raise NoAlternativeSlot(context.id)
