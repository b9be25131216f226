"""Player models."""

from dataclasses import asdict, dataclass, field
from enum import Enum

ATTRIBUTE_MIN = 1
ATTRIBUTE_MAX = 99


class Morale(str, Enum):
    """Player morale level."""

    EXCELLENT = "excellent"
    GOOD = "good"
    OKAY = "okay"
    POOR = "poor"
    TERRIBLE = "terrible"


class Form(str, Enum):
    """Recent on-pitch form."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    TERRIBLE = "terrible"


@dataclass(frozen=True)
class PlayerAttributes:
    """Fixed attribute set, each value in 1-99."""

    speed: int
    passing: int
    tackling: int
    shooting: int
    dribbling: int
    positioning: int
    stamina: int

    def __post_init__(self):
        for name, value in asdict(self).items():
            if not ATTRIBUTE_MIN <= value <= ATTRIBUTE_MAX:
                raise ValueError(
                    f"Attribute {name}={value} outside {ATTRIBUTE_MIN}-{ATTRIBUTE_MAX}"
                )

    @property
    def overall(self) -> float:
        """Unweighted mean of all attributes."""
        values = list(asdict(self).values())
        return sum(values) / len(values)


@dataclass(frozen=True)
class Player:
    """A rostered player as supplied by the caller."""

    id: str
    name: str
    role: str  # Fine-grained role id: gk, cb, dlp, iw, ...
    attributes: PlayerAttributes
    team: str = "home"
    available: bool = True
    morale: Morale = Morale.OKAY
    form: Form = Form.AVERAGE
    traits: tuple[str, ...] = ()
    # Prior attribute snapshots, oldest first
    attribute_history: tuple[PlayerAttributes, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "team": self.team,
            "available": self.available,
            "morale": self.morale.value,
            "form": self.form.value,
            "traits": list(self.traits),
            "attributes": asdict(self.attributes),
            "overall": round(self.attributes.overall, 1),
        }
