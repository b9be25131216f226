"""Formation/slot operations.

All functions are pure: they take a Formation and return a new one, never
mutating their input. Each operation preserves the core invariant that a
player id is bound to at most one slot.
"""

from dataclasses import replace
from typing import Iterable, Optional

from pitchside.errors import InvalidRole, SlotNotFound, SlotOccupied
from pitchside.models.formation import Formation, Position, Slot, slot_sort_key
from pitchside.utils.roles import (
    RoleMatch,
    is_structurally_allowed,
    match_role,
    role_category,
)


def _require_slot(formation: Formation, slot_id: str) -> Slot:
    slot = formation.get_slot(slot_id)
    if slot is None:
        raise SlotNotFound(slot_id)
    return slot


def check_role(slot: Slot, player_id: str, role: Optional[str]) -> None:
    """Raise InvalidRole if a player with ``role`` cannot stand in ``slot``.

    A None role skips the check (caller does not know the player's role).
    """
    if role is not None and not is_structurally_allowed(role, slot.role):
        raise InvalidRole(player_id, slot.id)


def bind_player(
    formation: Formation,
    slot_id: str,
    player_id: str,
    role: Optional[str] = None,
) -> Formation:
    """Bind a player to a slot.

    If the player is bound elsewhere, that slot is cleared in the same step.

    Raises:
        SlotNotFound: unknown slot id
        SlotOccupied: the slot holds a different player
        InvalidRole: ``role`` is structurally incompatible with the slot
    """
    target = _require_slot(formation, slot_id)
    if target.player_id is not None and target.player_id != player_id:
        raise SlotOccupied(slot_id, target.player_id)
    check_role(target, player_id, role)

    updated = {slot_id: replace(target, player_id=player_id)}
    previous = formation.slot_for_player(player_id)
    if previous is not None and previous.id != slot_id:
        updated[previous.id] = replace(previous, player_id=None)
    return formation.with_slots(updated)


def unbind_slot(formation: Formation, slot_id: str) -> Formation:
    """Clear a slot's binding; no-op if already empty."""
    slot = _require_slot(formation, slot_id)
    if slot.player_id is None:
        return formation
    return formation.with_slot(replace(slot, player_id=None))


def unbind_player(formation: Formation, player_id: str) -> Formation:
    """Send a player to the bench; no-op if not bound."""
    slot = formation.slot_for_player(player_id)
    if slot is None:
        return formation
    return formation.with_slot(replace(slot, player_id=None))


def swap_slots(formation: Formation, slot_a_id: str, slot_b_id: str) -> Formation:
    """Exchange the players bound to two slots (either may be empty)."""
    slot_a = _require_slot(formation, slot_a_id)
    slot_b = _require_slot(formation, slot_b_id)
    if slot_a_id == slot_b_id:
        return formation
    return formation.with_slots({
        slot_a_id: replace(slot_a, player_id=slot_b.player_id),
        slot_b_id: replace(slot_b, player_id=slot_a.player_id),
    })


def move_slot(formation: Formation, slot_id: str, position: Position) -> Formation:
    """Relocate a slot (free placement); its binding is unchanged."""
    slot = _require_slot(formation, slot_id)
    return formation.with_slot(replace(slot, position=position.clamped()))


def is_compatible(slot: Slot, role: str) -> bool:
    """Slot shares the broad category of ``role`` and structurally allows it."""
    if not is_structurally_allowed(role, slot.role):
        return False
    category = role_category(role)
    return category is not None and category == slot.category


def compatible_free_slots(
    formation: Formation,
    role: str,
    exclude_slot_ids: Iterable[str] = (),
) -> list[Slot]:
    excluded = set(exclude_slot_ids)
    return [
        slot
        for slot in formation.free_slots
        if slot.id not in excluded and is_compatible(slot, role)
    ]


def find_nearest_free_slot(
    formation: Formation,
    role: str,
    position: Position,
    exclude_slot_ids: Iterable[str] = (),
) -> Optional[Slot]:
    """Closest unoccupied slot compatible with ``role``.

    Ties on distance go to the lower slot id. Returns None when no compatible
    free slot exists.
    """
    candidates = compatible_free_slots(formation, role, exclude_slot_ids)
    if not candidates:
        return None
    return min(
        candidates,
        key=lambda slot: (slot.position.distance_to(position), slot_sort_key(slot.id)),
    )


def role_match_for(slot: Slot, role: Optional[str]) -> RoleMatch:
    return match_role(role, slot.role, slot.preferred_roles)


def has_duplicate_bindings(formation: Formation) -> bool:
    """True if any player id is bound to more than one slot."""
    bound = formation.bound_player_ids
    return len(bound) != len(set(bound))
