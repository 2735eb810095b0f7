"""
MaxN - MiniMax generalized to any number of roles.

Each node is valued with one number per role. The active role picks the
successor that maximizes its own entry, keeping the first one found on
ties. Nothing is assumed about the sum of the values, so non-zero-sum
games are handled too. For two roles with opposed values it gives the
same values as MiniMax.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..engine_core.action_generator import actions_for, possible_haps
from ..engine_core.randomness import RandomSource
from ..engine_core.state import Result
from .evaluator import Heuristic, QuiescenceEvaluator, zero_heuristic
from .heuristic_player import HeuristicPlayer

if TYPE_CHECKING:
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)


class MaxNPlayer(HeuristicPlayer):

    def __init__(
        self,
        horizon: int = 3,
        heuristic: Heuristic = zero_heuristic,
        name: str | None = None,
        random: RandomSource | None = None,
    ):
        super().__init__(heuristic=heuristic, name=name, random=random)
        self.quiescence = QuiescenceEvaluator(horizon=horizon, heuristic=heuristic)

    @property
    def horizon(self) -> int:
        return self.quiescence.horizon

    def can_play(self, state: GameState) -> bool:
        return not state.is_simultaneous

    def state_evaluation(self, state: GameState, role: str) -> float:
        return self.maxn(state, 1)[role]

    def maxn(self, state: GameState, depth: int) -> Result:
        """Values of the state for every role."""
        values = self.quiescence.evaluate_all(state, depth)
        if values is not None:
            return values
        active = state.active_role
        best: Result | None = None
        for action in actions_for(state, active):
            child_values = self._expected_values(state, {active: action}, depth)
            if best is None or child_values[active] > best[active]:
                best = child_values
        return best

    def _expected_values(self, state: GameState, actions: dict, depth: int) -> Result:
        """Probability-weighted values of the successors over chance outcomes."""
        totals = {role: 0.0 for role in state.roles}
        for haps, probability in possible_haps(state):
            child_values = self.maxn(state.transition(actions, haps), depth + 1)
            for role in totals:
                totals[role] += probability * child_values[role]
        return totals
