"""Chemistry inputs and derived scores."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


class RelationshipType(str, Enum):
    FRIENDSHIP = "friendship"
    RIVALRY = "rivalry"
    NONE = "none"


def pair_key(player_a: str, player_b: str) -> tuple[str, str]:
    """Unordered pair key: the same for (a, b) and (b, a)."""
    return (player_a, player_b) if player_a <= player_b else (player_b, player_a)


@dataclass(frozen=True)
class MentoringGroup:
    """An active mentor with the players they mentor."""

    mentor_id: str
    mentee_ids: tuple[str, ...]

    def pairs_with(self, player_a: str, player_b: str) -> bool:
        """True if one of the two mentors the other in this group."""
        if player_a == self.mentor_id:
            return player_b in self.mentee_ids
        if player_b == self.mentor_id:
            return player_a in self.mentee_ids
        return False


@dataclass(frozen=True)
class ChemistryInputs:
    """Read-only records owned by the management layer.

    ``relationships`` and ``familiarity`` are keyed by ``pair_key``.
    Familiarity is accumulated shared on-field time in caller-defined units.
    """

    relationships: Mapping[tuple[str, str], RelationshipType] = field(
        default_factory=lambda: MappingProxyType({})
    )
    mentoring_groups: tuple[MentoringGroup, ...] = ()
    familiarity: Mapping[tuple[str, str], float] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def build(
        cls,
        relationships: Optional[Iterable[tuple[str, str, RelationshipType | str]]] = None,
        mentoring_groups: Optional[Iterable[MentoringGroup]] = None,
        familiarity: Optional[Iterable[tuple[str, str, float]]] = None,
    ) -> "ChemistryInputs":
        """Build inputs from flat (a, b, value) records.

        Relationship records are symmetric. When both directions of a pair
        are given and disagree, rivalry wins over friendship. Repeated
        familiarity records for a pair are summed.
        """
        rel: dict[tuple[str, str], RelationshipType] = {}
        for player_a, player_b, kind in relationships or ():
            key = pair_key(player_a, player_b)
            kind = RelationshipType(kind)
            existing = rel.get(key)
            if existing is RelationshipType.RIVALRY:
                continue
            if existing is None or kind is RelationshipType.RIVALRY or existing is RelationshipType.NONE:
                rel[key] = kind

        fam: dict[tuple[str, str], float] = {}
        for player_a, player_b, units in familiarity or ():
            key = pair_key(player_a, player_b)
            fam[key] = fam.get(key, 0.0) + float(units)

        return cls(
            relationships=MappingProxyType(rel),
            mentoring_groups=tuple(mentoring_groups or ()),
            familiarity=MappingProxyType(fam),
        )

    @classmethod
    def from_nested(
        cls,
        relationships: Optional[Mapping[str, Mapping[str, str]]] = None,
        mentoring_groups: Optional[Iterable[MentoringGroup]] = None,
        familiarity: Optional[Mapping[str, Mapping[str, float]]] = None,
    ) -> "ChemistryInputs":
        """Build inputs from ``{a: {b: value}}`` tables.

        Familiarity tables usually store both directions of a pair with the
        same value, so for each pair the larger of the two directions is kept
        rather than summing them.
        """
        rel_records = [
            (a, b, kind)
            for a, partners in (relationships or {}).items()
            for b, kind in partners.items()
        ]
        fam: dict[tuple[str, str], float] = {}
        for a, partners in (familiarity or {}).items():
            for b, units in partners.items():
                key = pair_key(a, b)
                fam[key] = max(fam.get(key, 0.0), float(units))
        return cls.build(
            relationships=rel_records,
            mentoring_groups=mentoring_groups,
            familiarity=[(a, b, units) for (a, b), units in fam.items()],
        )

    def relationship(self, player_a: str, player_b: str) -> RelationshipType:
        return self.relationships.get(pair_key(player_a, player_b), RelationshipType.NONE)

    def shared_time(self, player_a: str, player_b: str) -> float:
        return self.familiarity.get(pair_key(player_a, player_b), 0.0)

    def is_mentor_pair(self, player_a: str, player_b: str) -> bool:
        return any(group.pairs_with(player_a, player_b) for group in self.mentoring_groups)


@dataclass(frozen=True)
class ChemistryEdge:
    """Score between an unordered pair, valid for one formation snapshot."""

    player_a: str
    player_b: str
    score: int  # 0-100
    familiarity: float  # 0-60 component
    relationship: RelationshipType
    is_mentor_pair: bool

    def to_dict(self) -> dict:
        return {
            "players": [self.player_a, self.player_b],
            "score": self.score,
            "familiarity": round(self.familiarity, 2),
            "relationship": self.relationship.value,
            "is_mentor_pair": self.is_mentor_pair,
        }


@dataclass(frozen=True)
class FormationChemistry:
    """All pair scores of a formation plus their average."""

    formation_id: str
    pair_scores: tuple[ChemistryEdge, ...]
    formation_average: float

    @property
    def pair_count(self) -> int:
        return len(self.pair_scores)

    def score_for(self, player_a: str, player_b: str) -> Optional[int]:
        key = pair_key(player_a, player_b)
        for edge in self.pair_scores:
            if (edge.player_a, edge.player_b) == key:
                return edge.score
        return None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return {
            "formation_id": self.formation_id,
            "formation_average": self.formation_average,
            "pair_count": self.pair_count,
            "pair_scores": [edge.to_dict() for edge in self.pair_scores],
        }
