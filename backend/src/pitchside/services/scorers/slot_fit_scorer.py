"""How well a player suits a formation slot."""
from pitchside.models.formation import Slot
from pitchside.models.player import Form, Morale, Player
from pitchside.utils.roles import RoleMatch, match_role, role_category


class SlotFitScorer:
    """Scores player/slot suitability from role fit, attributes, form and morale.

    Scores are unbounded above (an exact-role, in-form star lands around
    150) and only meaningful relative to each other.
    """

    EXACT_ROLE_SCORE = 100

    # slot category -> player category -> score
    CATEGORY_SCORES = {
        "GK": {"GK": 80},
        "DF": {"DF": 70, "MF": 30},
        "MF": {"MF": 70, "DF": 40, "FW": 40},
        "FW": {"FW": 70, "MF": 30},
    }

    ATTRIBUTE_WEIGHTS = {
        "GK": {"positioning": 1.0},
        "DF": {"tackling": 0.4, "positioning": 0.3, "speed": 0.2},
        "MF": {"passing": 0.4, "stamina": 0.2, "positioning": 0.2, "dribbling": 0.2},
        "FW": {"shooting": 0.4, "speed": 0.3, "dribbling": 0.3},
    }
    ATTRIBUTE_SCALE = 0.5

    UNAVAILABLE_MULTIPLIER = 0.3
    FORM_MULTIPLIERS = {
        Form.EXCELLENT: 1.15,
        Form.GOOD: 1.05,
        Form.POOR: 0.85,
        Form.TERRIBLE: 0.7,
    }
    MORALE_MULTIPLIERS = {
        Morale.EXCELLENT: 1.1,
        Morale.GOOD: 1.02,
        Morale.POOR: 0.9,
        Morale.TERRIBLE: 0.8,
    }

    def role_score(self, player: Player, slot: Slot) -> int:
        if match_role(player.role, slot.role, slot.preferred_roles) is RoleMatch.EXACT:
            return self.EXACT_ROLE_SCORE
        slot_category = slot.category
        player_category = role_category(player.role)
        return self.CATEGORY_SCORES.get(slot_category, {}).get(player_category, 0)

    def attribute_score(self, player: Player, slot: Slot) -> float:
        weights = self.ATTRIBUTE_WEIGHTS.get(slot.category, {})
        total = sum(getattr(player.attributes, name) * w for name, w in weights.items())
        return total * self.ATTRIBUTE_SCALE

    def score(self, player: Player, slot: Slot) -> int:
        """Get suitability of a player for a slot (higher is better)."""
        score = self.role_score(player, slot) + self.attribute_score(player, slot)
        if not player.available:
            score *= self.UNAVAILABLE_MULTIPLIER
        score *= self.FORM_MULTIPLIERS.get(player.form, 1.0)
        score *= self.MORALE_MULTIPLIERS.get(player.morale, 1.0)
        return round(score)

    @staticmethod
    def fitness_band(score: int) -> str:
        if score >= 90:
            return "excellent"
        if score >= 70:
            return "good"
        if score >= 50:
            return "average"
        return "poor"
