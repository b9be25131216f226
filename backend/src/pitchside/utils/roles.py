"""Centralized role normalization and compatibility.

All role handling in the codebase should go through this module. Player
roles are fine-grained lowercase ids (cb, dlp, iw, ...); every role belongs to
one of four broad categories: GK, DF, MF, FW. Slots may be labelled with
either a fine role or a bare category.
"""

from enum import Enum
from typing import Optional

# Broad categories, in back-to-front display order
CATEGORIES = ("GK", "DF", "MF", "FW")

# Canonical fine-grained roles and the category each belongs to
ROLE_CATEGORIES: dict[str, str] = {
    "gk": "GK",  # goalkeeper
    "sk": "GK",  # sweeper keeper
    "cb": "DF",  # centre back
    "bpd": "DF",  # ball-playing defender
    "ncb": "DF",  # no-nonsense centre back
    "fb": "DF",  # full back
    "wb": "DF",  # wing back
    "dm": "MF",  # defensive midfielder
    "dlp": "MF",  # deep-lying playmaker
    "cm": "MF",  # central midfielder
    "b2b": "MF",  # box-to-box
    "ap": "MF",  # advanced playmaker
    "wm": "MF",  # wide midfielder
    "w": "FW",  # winger
    "iw": "FW",  # inside forward
    "p": "FW",  # poacher
    "tf": "FW",  # target forward
    "cf": "FW",  # complete forward
}

CANONICAL_ROLES = frozenset(ROLE_CATEGORIES)

# Mapping from common labels to canonical roles (lowercase keys)
ROLE_ALIASES: dict[str, str] = {
    # Goalkeepers
    "goalkeeper": "gk",
    "keeper": "gk",
    "sweeper keeper": "sk",

    # Defenders
    "centre back": "cb",
    "center back": "cb",
    "lcb": "cb",
    "rcb": "cb",
    "ball playing defender": "bpd",
    "full back": "fb",
    "fullback": "fb",
    "lb": "fb",
    "rb": "fb",
    "wing back": "wb",
    "lwb": "wb",
    "rwb": "wb",

    # Midfielders
    "cdm": "dm",
    "defensive midfielder": "dm",
    "deep lying playmaker": "dlp",
    "central midfielder": "cm",
    "lcm": "cm",
    "rcm": "cm",
    "box to box": "b2b",
    "cam": "ap",
    "attacking midfielder": "ap",
    "advanced playmaker": "ap",
    "lm": "wm",
    "rm": "wm",
    "wide midfielder": "wm",

    # Forwards
    "winger": "w",
    "lw": "w",
    "rw": "w",
    "inside forward": "iw",
    "poacher": "p",
    "target man": "tf",
    "target forward": "tf",
    "st": "cf",
    "striker": "cf",
    "centre forward": "cf",
    "center forward": "cf",
}

CATEGORY_ALIASES: dict[str, str] = {
    "gk": "GK",
    "goalkeeper": "GK",
    "df": "DF",
    "def": "DF",
    "defender": "DF",
    "mf": "MF",
    "mid": "MF",
    "midfielder": "MF",
    "fw": "FW",
    "fwd": "FW",
    "forward": "FW",
    "attacker": "FW",
}


class RoleMatch(int, Enum):
    """How well a player's role fits a slot, best first."""

    EXACT = 0
    CATEGORY = 1
    NONE = 2


def normalize_role(role: Optional[str]) -> Optional[str]:
    """Normalize a fine-grained role label to its canonical id.

    Examples:
        >>> normalize_role("CB")
        'cb'
        >>> normalize_role("Striker")
        'cf'
        >>> normalize_role("DF") is None
        True
    """
    if role is None:
        return None

    role_lower = role.strip().lower().replace("-", " ").replace("_", " ")
    if role_lower in CANONICAL_ROLES:
        return role_lower
    return ROLE_ALIASES.get(role_lower)


def role_category(role: Optional[str]) -> Optional[str]:
    """Resolve any role or category label to its broad category.

    Returns None when the label is not recognised.
    """
    if role is None:
        return None

    canonical = normalize_role(role)
    if canonical is not None:
        return ROLE_CATEGORIES[canonical]

    label = role.strip()
    if label.upper() in CATEGORIES:
        return label.upper()
    return CATEGORY_ALIASES.get(label.lower())


def is_valid_role(role: Optional[str]) -> bool:
    """Check if a label resolves to a role or category."""
    return role_category(role) is not None


def match_role(
    player_role: Optional[str],
    slot_role: str,
    preferred_roles: tuple[str, ...] = (),
) -> RoleMatch:
    """Grade how a player's role fits a slot.

    EXACT when the canonical roles agree (or the player's role is one of the
    slot's preferred roles), CATEGORY when only the broad category agrees.
    """
    player_canonical = normalize_role(player_role)
    if player_canonical is not None:
        if player_canonical == normalize_role(slot_role):
            return RoleMatch.EXACT
        if player_canonical in {normalize_role(r) for r in preferred_roles}:
            return RoleMatch.EXACT

    player_category = role_category(player_role)
    if player_category is not None and player_category == role_category(slot_role):
        return RoleMatch.CATEGORY
    return RoleMatch.NONE


def is_structurally_allowed(player_role: Optional[str], slot_role: str) -> bool:
    """Goalkeeper slots only take goalkeepers; outfield slots take anyone."""
    if role_category(slot_role) != "GK":
        return True
    return role_category(player_role) == "GK"


def category_order(category: Optional[str]) -> int:
    """Sort key placing categories back to front, unknown last."""
    try:
        return CATEGORIES.index(category) if category else 99
    except ValueError:
        return 99
