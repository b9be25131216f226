"""Business logic services."""

from pitchside.services.board_manager import BoardManager
from pitchside.services.chemistry_service import ChemistryService, compute_chemistry
from pitchside.services.conflict_resolver import ConflictResolver
from pitchside.services.tactics_board import TacticsBoard

__all__ = [
    "BoardManager",
    "ChemistryService",
    "compute_chemistry",
    "ConflictResolver",
    "TacticsBoard",
]
