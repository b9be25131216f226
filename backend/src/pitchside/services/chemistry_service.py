"""Pairwise chemistry scoring from familiarity, relationships and mentoring."""
import math
from itertools import combinations
from typing import Optional

from pitchside.config import settings
from pitchside.models.chemistry import (
    ChemistryEdge,
    ChemistryInputs,
    FormationChemistry,
    RelationshipType,
    pair_key,
)
from pitchside.models.formation import Formation, Position

FAMILIARITY_CEILING = 60.0
RELATIONSHIP_MODIFIERS = {
    RelationshipType.FRIENDSHIP: 20,
    RelationshipType.RIVALRY: -20,
    RelationshipType.NONE: 0,
}
MENTORING_BONUS = 15
SCORE_MIN = 0
SCORE_MAX = 100


def base_familiarity(shared_time: float, rate: Optional[float] = None) -> float:
    """Saturating familiarity curve, 0-60.

    Early shared time counts for more than later time; negative input is
    treated as no shared time.
    """
    k = settings.familiarity_rate if rate is None else rate
    t = max(0.0, shared_time)
    return FAMILIARITY_CEILING * (1.0 - math.exp(-k * t))


def relationship_modifier(relationship: RelationshipType) -> int:
    return RELATIONSHIP_MODIFIERS[RelationshipType(relationship)]


def mentoring_modifier(is_mentor_pair: bool) -> int:
    return MENTORING_BONUS if is_mentor_pair else 0


def pair_chemistry(
    shared_time: float,
    relationship: RelationshipType = RelationshipType.NONE,
    is_mentor_pair: bool = False,
    rate: Optional[float] = None,
) -> int:
    """Integer 0-100 chemistry for one pair."""
    raw = (
        base_familiarity(shared_time, rate)
        + relationship_modifier(relationship)
        + mentoring_modifier(is_mentor_pair)
    )
    return max(SCORE_MIN, min(SCORE_MAX, round(raw)))


class ChemistryService:
    """Scores player pairs and whole formations.

    Stateless apart from the read-only inputs handed to the constructor, so
    one instance can be shared across threads.
    """

    def __init__(self, inputs: Optional[ChemistryInputs] = None, rate: Optional[float] = None):
        self.inputs = inputs or ChemistryInputs()
        self.rate = settings.familiarity_rate if rate is None else rate

    def get_edge(self, player_a: str, player_b: str) -> ChemistryEdge:
        """Full breakdown for one pair; symmetric in its arguments."""
        first, second = pair_key(player_a, player_b)
        shared_time = self.inputs.shared_time(first, second)
        relationship = self.inputs.relationship(first, second)
        mentor = self.inputs.is_mentor_pair(first, second)
        return ChemistryEdge(
            player_a=first,
            player_b=second,
            score=pair_chemistry(shared_time, relationship, mentor, self.rate),
            familiarity=base_familiarity(shared_time, self.rate),
            relationship=relationship,
            is_mentor_pair=mentor,
        )

    def get_chemistry_score(self, player_a: str, player_b: str) -> int:
        """Get chemistry between two players (0-100)."""
        return self.get_edge(player_a, player_b).score

    def calculate_formation_chemistry(self, formation: Formation) -> FormationChemistry:
        """Score every pair of bound players and average them.

        Average is 0.0 when fewer than two players are bound.
        """
        player_ids = sorted(formation.bound_player_ids)
        edges = tuple(self.get_edge(a, b) for a, b in combinations(player_ids, 2))
        average = sum(edge.score for edge in edges) / len(edges) if edges else 0.0
        return FormationChemistry(
            formation_id=formation.id,
            pair_scores=edges,
            formation_average=round(average, 2),
        )

    def linked_chemistry(
        self,
        formation: Formation,
        player_id: str,
        position: Position,
        link_radius: Optional[float] = None,
    ) -> Optional[float]:
        """Mean chemistry between a player and bound players near a position.

        Returns None if no other bound player is within the link radius.
        """
        radius = settings.link_radius if link_radius is None else link_radius
        scores = [
            self.get_chemistry_score(player_id, slot.player_id)
            for slot in formation.slots
            if slot.player_id is not None
            and slot.player_id != player_id
            and slot.position.distance_to(position) <= radius
        ]
        if not scores:
            return None
        return sum(scores) / len(scores)

    def chemistry_delta(
        self,
        formation: Formation,
        player_id: str,
        position: Position,
        link_radius: Optional[float] = None,
    ) -> float:
        """How much better a player's local links are than the formation average."""
        linked = self.linked_chemistry(formation, player_id, position, link_radius)
        if linked is None:
            return 0.0
        baseline = self.calculate_formation_chemistry(formation).formation_average
        return round(linked - baseline, 2)


def compute_chemistry(
    formation: Formation,
    relationships=None,
    mentoring_groups=None,
    familiarity_table=None,
    rate: Optional[float] = None,
) -> FormationChemistry:
    """One-shot formation chemistry from flat records.

    Args:
        formation: Formation whose bound players are scored
        relationships: Iterable of (player_a, player_b, RelationshipType)
        mentoring_groups: Iterable of MentoringGroup
        familiarity_table: Iterable of (player_a, player_b, shared_time)
        rate: Familiarity curve rate; defaults to settings.familiarity_rate

    Returns:
        FormationChemistry with every pair score and the formation average
    """
    inputs = ChemistryInputs.build(
        relationships=relationships,
        mentoring_groups=mentoring_groups,
        familiarity=familiarity_table,
    )
    return ChemistryService(inputs, rate=rate).calculate_formation_chemistry(formation)
