"""Formation evaluation with per-slot fitness and line strengths."""
from typing import Optional

from pitchside.models.formation import Formation
from pitchside.models.player import Player
from pitchside.services.chemistry_service import ChemistryService
from pitchside.services.scorers.slot_fit_scorer import SlotFitScorer

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}


class FormationAnalysisService:
    """Evaluates how well the current bindings suit the formation."""

    def __init__(
        self,
        scorer: Optional[SlotFitScorer] = None,
        chemistry: Optional[ChemistryService] = None,
    ):
        self.scorer = scorer or SlotFitScorer()
        self.chemistry = chemistry or ChemistryService()

    def analyze(self, formation: Formation, roster: list[Player]) -> dict:
        """Analyze a formation against the roster."""
        players = {p.id: p for p in roster}
        position_scores = []
        issues = []
        line_totals = {"GK": 0, "DF": 0, "MF": 0, "FW": 0}
        line_counts = {"GK": 0, "DF": 0, "MF": 0, "FW": 0}

        for slot in formation.slots:
            category = slot.category
            if category in line_counts:
                line_counts[category] += 1

            player = players.get(slot.player_id) if slot.player_id else None
            if player is None:
                issues.append({
                    "slot_id": slot.id,
                    "issue": f"No player assigned to {slot.role} position",
                    "suggestion": "Assign a suitable player to this position",
                    "priority": "high",
                })
                continue

            score = self.scorer.score(player, slot)
            if category in line_totals:
                line_totals[category] += score
            position_scores.append({
                "slot_id": slot.id,
                "role": slot.role,
                "player_id": player.id,
                "player_name": player.name,
                "score": score,
                "fitness": self.scorer.fitness_band(score),
            })

            if score < 60:
                priority = "high" if score < 40 else "medium" if score < 50 else "low"
                issues.append({
                    "slot_id": slot.id,
                    "issue": f"{player.name} is not well-suited for {slot.role} position",
                    "suggestion": f"Consider moving to a position that matches their {player.role} role",
                    "priority": priority,
                    "score": score,
                })
            if not player.available:
                issues.append({
                    "slot_id": slot.id,
                    "issue": f"{player.name} is unavailable",
                    "suggestion": "Find a replacement player for this position",
                    "priority": "high",
                })

        issues.sort(key=lambda i: -PRIORITY_ORDER[i["priority"]])

        total = sum(p["score"] for p in position_scores)
        filled = len(position_scores)
        chemistry = self.chemistry.calculate_formation_chemistry(formation)

        def line_average(category: str) -> float:
            return round(line_totals[category] / max(1, line_counts[category]), 1)

        return {
            "formation_id": formation.id,
            "total_score": total,
            "average_score": round(total / filled) if filled else 0,
            "position_scores": position_scores,
            "issues": issues,
            "metrics": {
                "defensive_strength": line_average("DF"),
                "midfield_control": line_average("MF"),
                "attacking_threat": line_average("FW"),
                "overall_balance": round(total / max(1, filled), 1),
                "chemistry_rating": chemistry.formation_average,
            },
            "is_complete": formation.is_complete,
            "missing_categories": formation.missing_categories,
        }
