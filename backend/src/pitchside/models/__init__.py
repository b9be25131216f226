"""Data models for the tactics board positioning engine."""

from pitchside.models.chemistry import (
    ChemistryEdge,
    ChemistryInputs,
    FormationChemistry,
    MentoringGroup,
    RelationshipType,
    pair_key,
)
from pitchside.models.conflict import (
    AlternativeSlot,
    Cancel,
    Cancelled,
    Committed,
    ConflictContext,
    ConflictRaised,
    FindAlternative,
    ReleaseResult,
    Replace,
    Resolution,
    ResolutionKind,
    ResolutionOption,
    Swap,
    resolution_from_kind,
)
from pitchside.models.formation import Formation, Position, Slot, slot_sort_key
from pitchside.models.player import Form, Morale, Player, PlayerAttributes
from pitchside.models.session import (
    Abort,
    Candidate,
    ConflictDecided,
    DragEvent,
    DragPhase,
    DragSession,
    DragUpdate,
    PickupGesture,
    PointerMove,
    PointerUp,
    PositioningMode,
)

__all__ = [
    "ChemistryEdge",
    "ChemistryInputs",
    "FormationChemistry",
    "MentoringGroup",
    "RelationshipType",
    "pair_key",
    "AlternativeSlot",
    "Cancel",
    "Cancelled",
    "Committed",
    "ConflictContext",
    "ConflictRaised",
    "FindAlternative",
    "ReleaseResult",
    "Replace",
    "Resolution",
    "ResolutionKind",
    "ResolutionOption",
    "Swap",
    "resolution_from_kind",
    "Formation",
    "Position",
    "Slot",
    "slot_sort_key",
    "Form",
    "Morale",
    "Player",
    "PlayerAttributes",
    "Abort",
    "Candidate",
    "ConflictDecided",
    "DragEvent",
    "DragPhase",
    "DragSession",
    "DragUpdate",
    "PickupGesture",
    "PointerMove",
    "PointerUp",
    "PositioningMode",
]
