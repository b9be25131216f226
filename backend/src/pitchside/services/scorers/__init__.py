"""Scoring components for slot suitability."""
from pitchside.services.scorers.slot_fit_scorer import SlotFitScorer

__all__ = [
    "SlotFitScorer",
]
