"""Conflict resolution models and release results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from pitchside.models.chemistry import FormationChemistry
from pitchside.models.formation import Formation, Position
from pitchside.utils.roles import RoleMatch


class ResolutionKind(str, Enum):
    SWAP = "swap"
    REPLACE = "replace"
    FIND_ALTERNATIVE = "find_alternative"
    CANCEL = "cancel"


# The four outcomes, as a tagged union


@dataclass(frozen=True)
class Swap:
    """Occupant and moving player exchange slots."""

    kind = ResolutionKind.SWAP


@dataclass(frozen=True)
class Replace:
    """Moving player takes the slot; occupant goes to the bench."""

    kind = ResolutionKind.REPLACE


@dataclass(frozen=True)
class FindAlternative:
    """Occupant stays; moving player takes a free slot.

    ``slot_id`` picks one of the offered alternatives; None takes the best ranked.
    """

    slot_id: Optional[str] = None
    kind = ResolutionKind.FIND_ALTERNATIVE


@dataclass(frozen=True)
class Cancel:
    """No mutation."""

    kind = ResolutionKind.CANCEL


Resolution = Union[Swap, Replace, FindAlternative, Cancel]


def resolution_from_kind(kind: str, slot_id: Optional[str] = None) -> Resolution:
    """Build a resolution from its wire name ("swap", "replace", ...)."""
    resolved = ResolutionKind(kind)
    if resolved is ResolutionKind.SWAP:
        return Swap()
    if resolved is ResolutionKind.REPLACE:
        return Replace()
    if resolved is ResolutionKind.FIND_ALTERNATIVE:
        return FindAlternative(slot_id=slot_id)
    return Cancel()


@dataclass(frozen=True)
class AlternativeSlot:
    """A free slot the moving player could take instead."""

    slot_id: str
    role: str
    role_match: RoleMatch
    chemistry_delta: float
    distance: float

    def to_dict(self) -> dict:
        return {
            "slot_id": self.slot_id,
            "role": self.role,
            "role_match": self.role_match.name.lower(),
            "chemistry_delta": self.chemistry_delta,
            "distance": round(self.distance, 2),
        }


@dataclass(frozen=True)
class ResolutionOption:
    """One entry of the conflict menu shown to the caller."""

    kind: ResolutionKind
    description: str
    available: bool = True
    recommended: bool = False
    target_slot_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "description": self.description,
            "available": self.available,
            "recommended": self.recommended,
            "target_slot_id": self.target_slot_id,
        }


@dataclass(frozen=True)
class ConflictContext:
    """Everything the caller needs to pick a resolution."""

    id: str
    session_id: str
    moving_player_id: str
    occupant_player_id: str
    candidate_slot_id: str
    source_slot_id: Optional[str]
    drop_position: Optional[Position]
    alternatives: tuple[AlternativeSlot, ...] = ()
    options: tuple[ResolutionOption, ...] = ()

    @property
    def best_alternative(self) -> Optional[AlternativeSlot]:
        return self.alternatives[0] if self.alternatives else None

    def option(self, kind: ResolutionKind) -> Optional[ResolutionOption]:
        for option in self.options:
            if option.kind is kind:
                return option
        return None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return {
            "conflict_id": self.id,
            "session_id": self.session_id,
            "moving_player_id": self.moving_player_id,
            "occupant_player_id": self.occupant_player_id,
            "candidate_slot_id": self.candidate_slot_id,
            "source_slot_id": self.source_slot_id,
            "drop_position": self.drop_position.to_dict() if self.drop_position else None,
            "alternatives": [alt.to_dict() for alt in self.alternatives],
            "options": [opt.to_dict() for opt in self.options],
        }


# Results of releasing a drag or resolving a conflict


@dataclass(frozen=True)
class Committed:
    formation: Formation
    chemistry: Optional[FormationChemistry] = None
    resolution: Optional[ResolutionKind] = None

    def to_dict(self) -> dict:
        return {
            "status": "committed",
            "formation": self.formation.to_dict(),
            "chemistry": self.chemistry.to_dict() if self.chemistry else None,
            "resolution": self.resolution.value if self.resolution else None,
        }


@dataclass(frozen=True)
class ConflictRaised:
    conflict: ConflictContext

    def to_dict(self) -> dict:
        return {"status": "conflict", "conflict": self.conflict.to_dict()}


@dataclass(frozen=True)
class Cancelled:
    reason: str = "cancelled"
    formation: Optional[Formation] = field(default=None, compare=False)

    @property
    def cancelled(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {
            "status": "cancelled",
            "cancelled": True,
            "reason": self.reason,
            "formation": self.formation.to_dict() if self.formation else None,
        }


ReleaseResult = Union[Committed, ConflictRaised, Cancelled]
