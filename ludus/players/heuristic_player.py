"""
Heuristic Player - One-ply lookahead over an evaluation function.

For each of the role's actions the player evaluates every successor state
and picks the action with the best value:
1. Combine the action with every combination of the other active roles'
   actions (simultaneous games)
2. Weight the successors of each combination by chance outcome
3. Average over the combinations
4. Choose uniformly among the actions within EPSILON of the best

Search players reuse this loop and only change how successor states are
evaluated (state_evaluation).
"""

from __future__ import annotations
import logging
from typing import Any, Iterable, TYPE_CHECKING

from ..engine_core.action_generator import expected_value, possible_actions
from ..engine_core.randomness import RandomSource
from .evaluator import Heuristic, zero_heuristic
from .policy import Player

if TYPE_CHECKING:
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

EPSILON = 1e-15


class HeuristicPlayer(Player):
    """
    Chooses the action whose successors score best.

    Usage:
        player = HeuristicPlayer(heuristic=TicTacToe.default_heuristic)
        action = player.select_action(state, "Xs")
    """

    def __init__(
        self,
        heuristic: Heuristic = zero_heuristic,
        name: str | None = None,
        random: RandomSource | None = None,
    ):
        super().__init__(name=name, random=random)
        self.heuristic = heuristic

    def state_evaluation(self, state: GameState, role: str) -> float:
        """Value of a successor state for the role."""
        result = state.result()
        if result is not None:
            return result[role]
        return self.heuristic(state, role)

    def action_evaluation(self, state: GameState, role: str, action: Any) -> float:
        """Average value of the successors reached when the role plays action."""
        total = 0.0
        combinations = 0
        for actions in possible_actions(state, {role: [action]}):
            total += expected_value(
                state, lambda successor: self.state_evaluation(successor, role), actions,
            )
            combinations += 1
        return total / combinations

    def evaluated_actions(self, state: GameState, role: str) -> list[tuple[Any, float]]:
        return [
            (action, self.action_evaluation(state, role, action))
            for action in self.actions_for(state, role)
        ]

    @staticmethod
    def best_actions(evaluated: Iterable[tuple[Any, float]]) -> list[Any]:
        """All actions whose value is within EPSILON of the maximum."""
        best: list[Any] = []
        best_value = float("-inf")
        for action, value in evaluated:
            if value > best_value + EPSILON:
                best = [action]
                best_value = value
            elif abs(value - best_value) <= EPSILON:
                best.append(action)
        return best

    def select_action(self, state: GameState, role: str) -> Any:
        evaluated = self.evaluated_actions(state, role)
        best = self.best_actions(evaluated)
        if not best:
            raise ValueError(f"No evaluated actions for role {role!r}")
        action = self.random.choice(best)
        logger.debug("%s chose %r for %s among %r", self.name, action, role, evaluated)
        return action
