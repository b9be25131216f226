"""Automatic roster-to-formation assignment.

Available players are placed with an optimal (Hungarian) assignment that
maximizes total slot fit; any slots still empty are then filled greedily
from unavailable players.
"""
import logging
import time
from dataclasses import replace
from typing import Optional

import numpy as np

from pitchside.models.formation import Formation
from pitchside.models.player import Player
from pitchside.services.scorers.slot_fit_scorer import SlotFitScorer
from pitchside.utils.roles import is_structurally_allowed

logger = logging.getLogger(__name__)

# Forbidden pairings get this cost so the solver only uses them when forced
FORBIDDEN_COST = 1e9
SLOW_ASSIGNMENT_SECONDS = 0.05


def hungarian(cost: np.ndarray) -> list[int]:
    """Minimum-cost assignment for an n x m cost matrix with n <= m.

    Returns ``assign`` where ``assign[row]`` is the column chosen for ``row``.
    O(n^2 m) shortest augmenting path with row/column potentials.
    """
    n, m = cost.shape
    if n == 0:
        return []
    if n > m:
        raise ValueError("hungarian() needs at least as many columns as rows")

    u = np.zeros(n + 1)
    v = np.zeros(m + 1)
    owner = np.zeros(m + 1, dtype=int)  # column -> 1-based row, 0 = free
    way = np.zeros(m + 1, dtype=int)

    for row in range(1, n + 1):
        owner[0] = row
        col0 = 0
        min_reduced = np.full(m + 1, np.inf)
        used = np.zeros(m + 1, dtype=bool)
        while True:
            used[col0] = True
            r0 = owner[col0]
            free_cols = np.flatnonzero(~used[1:]) + 1
            reduced = cost[r0 - 1, free_cols - 1] - u[r0] - v[free_cols]
            improved = reduced < min_reduced[free_cols]
            min_reduced[free_cols[improved]] = reduced[improved]
            way[free_cols[improved]] = col0
            best = free_cols[np.argmin(min_reduced[free_cols])]
            delta = min_reduced[best]

            u[owner[used]] += delta
            v[used] -= delta
            min_reduced[~used] -= delta

            col0 = best
            if owner[col0] == 0:
                break
        while col0:
            prev = way[col0]
            owner[col0] = owner[prev]
            col0 = prev

    assign = [-1] * n
    for col in range(1, m + 1):
        if owner[col]:
            assign[owner[col] - 1] = col - 1
    return assign


class AutoAssignmentService:
    """Fills a formation from a roster using slot fit scores."""

    def __init__(self, scorer: Optional[SlotFitScorer] = None):
        self.scorer = scorer or SlotFitScorer()

    def _score_matrix(self, players: list[Player], formation: Formation) -> np.ndarray:
        return np.array(
            [[self.scorer.score(p, s) for s in formation.slots] for p in players],
            dtype=float,
        ).reshape(len(players), len(formation.slots))

    def _optimal_pairs(self, players: list[Player], formation: Formation) -> list[tuple[int, int]]:
        """(player index, slot index) pairs maximizing total fit."""
        if not players or not formation.slots:
            return []

        scores = self._score_matrix(players, formation)
        allowed = np.array(
            [[is_structurally_allowed(p.role, s.role) for s in formation.slots] for p in players],
            dtype=bool,
        ).reshape(scores.shape)
        cost = np.where(allowed, scores.max() - scores, FORBIDDEN_COST)

        # Solver wants rows <= columns; solve the transpose for large squads
        if cost.shape[0] <= cost.shape[1]:
            pairs = list(enumerate(hungarian(cost)))
        else:
            pairs = [(row, col) for col, row in enumerate(hungarian(cost.T))]
        return [(p, s) for p, s in pairs if s >= 0 and allowed[p, s]]

    def assign(
        self,
        formation: Formation,
        roster: list[Player],
        team: Optional[str] = None,
    ) -> Formation:
        """Return a copy of ``formation`` with every binding recomputed."""
        start = time.perf_counter()
        players = [p for p in roster if team is None or p.team == team]
        available = [p for p in players if p.available]
        unavailable = [p for p in players if not p.available]

        bindings: dict[str, Optional[str]] = {slot.id: None for slot in formation.slots}
        for p_idx, s_idx in self._optimal_pairs(available, formation):
            bindings[formation.slots[s_idx].id] = available[p_idx].id

        # Greedy fill of what is left with unavailable players
        remaining = list(unavailable)
        for slot in formation.slots:
            if bindings[slot.id] is not None or not remaining:
                continue
            eligible = [p for p in remaining if is_structurally_allowed(p.role, slot.role)]
            if not eligible:
                continue
            best = max(eligible, key=lambda p: self.scorer.score(p, slot))
            bindings[slot.id] = best.id
            remaining.remove(best)

        assigned = replace(
            formation,
            slots=tuple(replace(slot, player_id=bindings[slot.id]) for slot in formation.slots),
        )

        elapsed = time.perf_counter() - start
        if elapsed > SLOW_ASSIGNMENT_SECONDS:
            logger.warning(
                f"Slow formation assignment: {elapsed * 1000:.1f}ms for {len(players)} players"
            )
        return assigned
