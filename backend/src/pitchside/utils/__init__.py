"""Utility modules for pitchside."""

from pitchside.utils.roles import (
    CANONICAL_ROLES,
    CATEGORIES,
    ROLE_ALIASES,
    ROLE_CATEGORIES,
    RoleMatch,
    category_order,
    is_structurally_allowed,
    is_valid_role,
    match_role,
    normalize_role,
    role_category,
)

__all__ = [
    "CANONICAL_ROLES",
    "CATEGORIES",
    "ROLE_ALIASES",
    "ROLE_CATEGORIES",
    "RoleMatch",
    "category_order",
    "is_structurally_allowed",
    "is_valid_role",
    "match_role",
    "normalize_role",
    "role_category",
]
