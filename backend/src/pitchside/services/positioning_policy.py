"""Snap and free positioning policies.

A policy turns a raw pointer coordinate into a Candidate: the slot (and
coordinate) the dragged player would land on if released now, whether that
drop is valid, and whether another player already holds the target.
Candidate computation is a single O(slots) pass so it can run on every
pointer move.
"""

from dataclasses import dataclass
from typing import Optional

from pitchside.config import settings
from pitchside.models.formation import FIELD_MAX, FIELD_MIN, Formation, Position, Slot, slot_sort_key
from pitchside.models.session import Candidate, NO_CANDIDATE, PositioningMode
from pitchside.services.formation_service import find_nearest_free_slot
from pitchside.utils.roles import is_structurally_allowed


@dataclass(frozen=True)
class DragContext:
    """What a policy needs to know about the token being dragged."""

    player_id: str
    player_role: Optional[str]
    source_slot_id: Optional[str]


def _nearest(slots: list[Slot], pointer: Position) -> Optional[Slot]:
    if not slots:
        return None
    return min(slots, key=lambda s: (s.position.distance_to(pointer), slot_sort_key(s.id)))


def is_out_of_bounds(pointer: Position, tolerance: Optional[float] = None) -> bool:
    """True once the pointer has left the field by more than the tolerance."""
    margin = settings.out_of_bounds_tolerance if tolerance is None else tolerance
    return not pointer.is_within(FIELD_MIN - margin, FIELD_MAX + margin)


class SnapPolicy:
    """Candidate is the nearest slot within the snap radius, or nothing."""

    mode = PositioningMode.SNAP

    def __init__(self, snap_radius: Optional[float] = None):
        self.snap_radius = settings.snap_radius if snap_radius is None else snap_radius

    def candidate(self, formation: Formation, pointer: Position, ctx: DragContext) -> Candidate:
        in_range = [
            slot for slot in formation.slots
            if slot.position.distance_to(pointer) <= self.snap_radius
        ]
        slot = _nearest(in_range, pointer)
        if slot is None:
            return NO_CANDIDATE

        if not is_structurally_allowed(ctx.player_role, slot.role):
            return Candidate(slot_id=slot.id, position=slot.position, is_valid=False)

        occupant = slot.player_id if slot.player_id != ctx.player_id else None
        return Candidate(
            slot_id=slot.id,
            position=slot.position,
            is_valid=True,
            occupant_id=occupant,
        )


class FreePolicy:
    """Candidate is the clamped pointer; landing on a teammate flags a conflict.

    A player already on the field keeps their slot and carries it to the new
    coordinate. A benched player needs a compatible free slot to carry.
    """

    mode = PositioningMode.FREE

    def __init__(self, collision_radius: Optional[float] = None):
        self.collision_radius = (
            settings.collision_radius if collision_radius is None else collision_radius
        )

    def colliding_slot(
        self, formation: Formation, position: Position, ctx: DragContext
    ) -> Optional[Slot]:
        """Closest other bound slot strictly inside the collision radius."""
        colliding = [
            slot for slot in formation.slots
            if slot.player_id is not None
            and slot.player_id != ctx.player_id
            and slot.position.distance_to(position) < self.collision_radius
        ]
        return _nearest(colliding, position)

    def candidate(self, formation: Formation, pointer: Position, ctx: DragContext) -> Candidate:
        position = pointer.clamped()

        # Any collision goes to the resolver, even one the mover cannot take over
        hit = self.colliding_slot(formation, position, ctx)
        if hit is not None:
            return Candidate(
                slot_id=hit.id,
                position=position,
                is_valid=True,
                occupant_id=hit.player_id,
            )

        if ctx.source_slot_id is not None:
            return Candidate(slot_id=ctx.source_slot_id, position=position, is_valid=True)

        if ctx.player_role is None:
            return Candidate(slot_id=None, position=position, is_valid=False)
        carrier = find_nearest_free_slot(formation, ctx.player_role, position)
        if carrier is None:
            return Candidate(slot_id=None, position=position, is_valid=False)
        return Candidate(slot_id=carrier.id, position=position, is_valid=True)


PositioningPolicy = SnapPolicy | FreePolicy


def policy_for(
    mode: PositioningMode,
    snap_radius: Optional[float] = None,
    collision_radius: Optional[float] = None,
) -> PositioningPolicy:
    """Build the policy for a positioning mode."""
    if PositioningMode(mode) is PositioningMode.SNAP:
        return SnapPolicy(snap_radius)
    return FreePolicy(collision_radius)
