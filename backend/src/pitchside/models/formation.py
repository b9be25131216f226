"""Formation and slot models.

Formations are immutable values: every operation in
``pitchside.services.formation_service`` returns a new Formation, so a
caller holding the pre-drag formation always has an untouched snapshot.
"""

import math
import re
import time
from dataclasses import dataclass, field, replace
from typing import Optional

from pitchside.utils.roles import category_order, role_category

FIELD_MIN = 0.0
FIELD_MAX = 100.0

_DIGITS = re.compile(r"(\d+)")


def slot_sort_key(slot_id: str) -> tuple:
    """Natural ordering for slot ids so that "s2" sorts before "s10"."""
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _DIGITS.split(slot_id)
        if part
    )


@dataclass(frozen=True)
class Position:
    """A normalized field coordinate, both axes in percent of the field."""

    x: float
    y: float

    def distance_to(self, other: "Position") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def clamped(self, low: float = FIELD_MIN, high: float = FIELD_MAX) -> "Position":
        return Position(x=min(high, max(low, self.x)), y=min(high, max(low, self.y)))

    def is_within(self, low: float = FIELD_MIN, high: float = FIELD_MAX) -> bool:
        return low <= self.x <= high and low <= self.y <= high

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Slot:
    """A named position within a formation that may hold one player."""

    id: str
    role: str  # Fine role ("cb") or bare category ("DF")
    position: Position
    player_id: Optional[str] = None
    preferred_roles: tuple[str, ...] = ()

    @property
    def category(self) -> Optional[str]:
        return role_category(self.role)

    @property
    def is_free(self) -> bool:
        return self.player_id is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "category": self.category,
            "position": self.position.to_dict(),
            "player_id": self.player_id,
            "preferred_roles": list(self.preferred_roles),
        }


@dataclass(frozen=True)
class Formation:
    """A named, ordered collection of slots."""

    id: str
    name: str
    slots: tuple[Slot, ...]
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    def get_slot(self, slot_id: str) -> Optional[Slot]:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None

    def slot_for_player(self, player_id: str) -> Optional[Slot]:
        """The slot a player is bound to, or None if benched."""
        for slot in self.slots:
            if slot.player_id == player_id:
                return slot
        return None

    @property
    def bindings(self) -> dict[str, Optional[str]]:
        """slot_id -> bound player id (None when empty)."""
        return {slot.id: slot.player_id for slot in self.slots}

    @property
    def bound_player_ids(self) -> list[str]:
        return [slot.player_id for slot in self.slots if slot.player_id is not None]

    @property
    def free_slots(self) -> list[Slot]:
        return [slot for slot in self.slots if slot.is_free]

    @property
    def missing_categories(self) -> list[str]:
        """Required categories without a bound player.

        Every category a formation has slots for is required; a goalkeeper is
        required even when the layout forgot to include a GK slot.
        """
        required = {slot.category for slot in self.slots if slot.category}
        required.add("GK")
        filled = {slot.category for slot in self.slots if slot.player_id is not None}
        return sorted(required - filled, key=category_order)

    @property
    def is_complete(self) -> bool:
        """Advisory only; incomplete formations are still valid."""
        return not self.missing_categories

    def with_slot(self, updated: Slot) -> "Formation":
        """Return a copy with one slot replaced (matched by id)."""
        return replace(
            self,
            slots=tuple(updated if slot.id == updated.id else slot for slot in self.slots),
        )

    def with_slots(self, updated: dict[str, Slot]) -> "Formation":
        """Return a copy with several slots replaced in one step."""
        return replace(
            self,
            slots=tuple(updated.get(slot.id, slot) for slot in self.slots),
        )

    def touched(self, now: Optional[float] = None) -> "Formation":
        return replace(self, updated_at=now if now is not None else time.time())

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return {
            "id": self.id,
            "name": self.name,
            "slots": [slot.to_dict() for slot in self.slots],
            "is_complete": self.is_complete,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
