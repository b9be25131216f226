"""Shared fixtures: a fully bound 4-4-2, its roster and chemistry records."""
import pytest

from pitchside.config import Settings
from pitchside.models.chemistry import ChemistryInputs, MentoringGroup, RelationshipType
from pitchside.models.formation import Formation, Position, Slot
from pitchside.models.player import Player, PlayerAttributes
from pitchside.services.tactics_board import TacticsBoard

# slot id -> (role, x, y); slot sN is bound to player pN
LAYOUT_442 = {
    "s1": ("gk", 50, 6),
    "s2": ("fb", 15, 25),
    "s3": ("cb", 38, 22),
    "s4": ("cb", 62, 22),
    "s5": ("fb", 85, 25),
    "s6": ("wm", 15, 50),
    "s7": ("cm", 38, 48),
    "s8": ("cm", 62, 48),
    "s9": ("wm", 85, 50),
    "s10": ("cf", 38, 78),
    "s11": ("cf", 62, 78),
}

# Bench: backup keeper, spare midfielder, spare striker
BENCH = {"p12": "gk", "p13": "cm", "p14": "cf"}


def make_player(player_id: str, role: str, **overrides) -> Player:
    """Player with flat 60 attributes unless overridden."""
    attributes = overrides.pop("attributes", None) or PlayerAttributes(
        speed=60, passing=60, tackling=60, shooting=60,
        dribbling=60, positioning=60, stamina=60,
    )
    return Player(
        id=player_id,
        name=f"Player {player_id[1:]}",
        role=role,
        attributes=attributes,
        **overrides,
    )


def make_formation(bound: bool = True, formation_id: str = "f442") -> Formation:
    return Formation(
        id=formation_id,
        name="4-4-2",
        slots=tuple(
            Slot(
                id=slot_id,
                role=role,
                position=Position(x=x, y=y),
                player_id=f"p{slot_id[1:]}" if bound else None,
            )
            for slot_id, (role, x, y) in LAYOUT_442.items()
        ),
    )


@pytest.fixture
def settings():
    return Settings(
        snap_radius=8.0,
        collision_radius=5.0,
        out_of_bounds_tolerance=5.0,
        link_radius=30.0,
        long_press_ms=500,
        familiarity_rate=0.1,
        board_ttl_seconds=10,
        board_cleanup_interval_seconds=0,
    )


@pytest.fixture
def formation():
    return make_formation()


@pytest.fixture
def empty_formation():
    return make_formation(bound=False)


@pytest.fixture
def roster():
    starters = [make_player(f"p{slot_id[1:]}", role) for slot_id, (role, _, _) in LAYOUT_442.items()]
    bench = [make_player(pid, role) for pid, role in BENCH.items()]
    return starters + bench


@pytest.fixture
def player_roles(roster):
    return {p.id: p.role for p in roster}


@pytest.fixture
def chemistry_inputs():
    """p7/p8 friends with 10 units together, p10/p11 rivals, p3 mentors p4."""
    return ChemistryInputs.build(
        relationships=[
            ("p7", "p8", RelationshipType.FRIENDSHIP),
            ("p10", "p11", RelationshipType.RIVALRY),
        ],
        mentoring_groups=[MentoringGroup(mentor_id="p3", mentee_ids=("p4",))],
        familiarity=[("p7", "p8", 10.0)],
    )


@pytest.fixture
def board(formation, roster, chemistry_inputs, settings):
    return TacticsBoard(formation, roster, chemistry_inputs, board_id="test", settings=settings)
