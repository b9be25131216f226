"""Request bodies shared by the REST routes and the WebSocket handler."""

from typing import Literal, Optional

from fastapi import HTTPException
from pydantic import BaseModel, Field

from pitchside.errors import (
    InvalidRole,
    NoAlternativeSlot,
    PlayerNotFound,
    PositioningError,
    SessionBusy,
    SessionNotFound,
    SlotNotFound,
    SlotOccupied,
)
from pitchside.models.chemistry import ChemistryInputs, MentoringGroup, RelationshipType
from pitchside.models.formation import Formation, Position, Slot
from pitchside.models.player import Form, Morale, Player, PlayerAttributes

ERROR_STATUS = {
    SessionNotFound: 404,
    SlotNotFound: 404,
    PlayerNotFound: 404,
    SlotOccupied: 409,
    NoAlternativeSlot: 409,
    SessionBusy: 409,
    InvalidRole: 422,
}


def to_http_error(exc: PositioningError) -> HTTPException:
    """Map an engine error to an HTTPException."""
    status = ERROR_STATUS.get(type(exc), 400)
    return HTTPException(status_code=status, detail=str(exc))


class PointPayload(BaseModel):
    x: float
    y: float

    def to_position(self) -> Position:
        return Position(x=self.x, y=self.y)


class AttributesPayload(BaseModel):
    speed: int = Field(ge=1, le=99)
    passing: int = Field(ge=1, le=99)
    tackling: int = Field(ge=1, le=99)
    shooting: int = Field(ge=1, le=99)
    dribbling: int = Field(ge=1, le=99)
    positioning: int = Field(ge=1, le=99)
    stamina: int = Field(ge=1, le=99)


class PlayerPayload(BaseModel):
    id: str
    name: str
    role: str
    attributes: AttributesPayload
    team: str = "home"
    available: bool = True
    morale: Morale = Morale.OKAY
    form: Form = Form.AVERAGE
    traits: list[str] = Field(default_factory=list)

    def to_player(self) -> Player:
        return Player(
            id=self.id,
            name=self.name,
            role=self.role,
            attributes=PlayerAttributes(**self.attributes.model_dump()),
            team=self.team,
            available=self.available,
            morale=self.morale,
            form=self.form,
            traits=tuple(self.traits),
        )


class SlotPayload(BaseModel):
    id: str
    role: str
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)
    player_id: Optional[str] = None
    preferred_roles: list[str] = Field(default_factory=list)

    def to_slot(self) -> Slot:
        return Slot(
            id=self.id,
            role=self.role,
            position=Position(x=self.x, y=self.y),
            player_id=self.player_id,
            preferred_roles=tuple(self.preferred_roles),
        )


class FormationPayload(BaseModel):
    id: str
    name: str
    slots: list[SlotPayload]

    def to_formation(self) -> Formation:
        return Formation(id=self.id, name=self.name, slots=tuple(s.to_slot() for s in self.slots))


class RelationshipPayload(BaseModel):
    player_a: str
    player_b: str
    type: RelationshipType


class MentoringGroupPayload(BaseModel):
    mentor_id: str
    mentee_ids: list[str]


class FamiliarityPayload(BaseModel):
    player_a: str
    player_b: str
    shared_time: float = Field(ge=0)


class ChemistryPayload(BaseModel):
    relationships: list[RelationshipPayload] = Field(default_factory=list)
    mentoring_groups: list[MentoringGroupPayload] = Field(default_factory=list)
    familiarity: list[FamiliarityPayload] = Field(default_factory=list)

    def to_inputs(self) -> ChemistryInputs:
        return ChemistryInputs.build(
            relationships=[(r.player_a, r.player_b, r.type) for r in self.relationships],
            mentoring_groups=[
                MentoringGroup(mentor_id=g.mentor_id, mentee_ids=tuple(g.mentee_ids))
                for g in self.mentoring_groups
            ],
            familiarity=[(f.player_a, f.player_b, f.shared_time) for f in self.familiarity],
        )


class CreateBoardRequest(BaseModel):
    """Either ``template_id`` or an explicit ``formation`` must be given."""

    template_id: Optional[str] = None
    formation: Optional[FormationPayload] = None
    roster: list[PlayerPayload]
    chemistry: ChemistryPayload = Field(default_factory=ChemistryPayload)
    auto_assign: bool = False
    team: Optional[str] = None


class StartDragRequest(BaseModel):
    player_id: str
    x: float
    y: float
    mode: Literal["snap", "free"] = "snap"
    gesture: Literal["pointer", "long_press"] = "pointer"
    press_duration_ms: Optional[float] = None


class ResolveConflictRequest(BaseModel):
    outcome: Literal["swap", "replace", "find_alternative", "cancel"]
    slot_id: Optional[str] = None


class ComputeChemistryRequest(BaseModel):
    formation: FormationPayload
    chemistry: ChemistryPayload = Field(default_factory=ChemistryPayload)
