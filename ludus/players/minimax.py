"""
MiniMax and AlphaBeta - Depth-bounded adversarial search.

Both assume two roles taking turns with opposed interests: the searching
role maximizes its own value and the opponent is assumed to minimize it.
Games that are not zero-sum are not handled correctly by this
assumption; use MaxNPlayer for those.

Contingent states are evaluated by expectation over their chance outcomes
(expectiminimax). Simultaneous games are not supported.

The search is recursive and synchronous. Contract errors raised by the
game (NoLegalActions, InvalidAction) propagate unchanged.
"""

from __future__ import annotations
import logging
import math
from typing import TYPE_CHECKING

from ..engine_core.action_generator import actions_for, expected_value
from ..engine_core.randomness import RandomSource
from .evaluator import Heuristic, QuiescenceEvaluator, zero_heuristic
from .heuristic_player import HeuristicPlayer

if TYPE_CHECKING:
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

DEFAULT_HORIZON = 4


class MiniMaxPlayer(HeuristicPlayer):
    """
    Plain MiniMax.

    The root's successors are evaluated at depth 1, so horizon counts the
    plies below the decision, the decision included.
    """

    def __init__(
        self,
        horizon: int = DEFAULT_HORIZON,
        heuristic: Heuristic = zero_heuristic,
        name: str | None = None,
        random: RandomSource | None = None,
    ):
        super().__init__(heuristic=heuristic, name=name, random=random)
        self.quiescence = QuiescenceEvaluator(horizon=horizon, heuristic=heuristic)
        self.nodes = 0

    @property
    def horizon(self) -> int:
        return self.quiescence.horizon

    def can_play(self, state: GameState) -> bool:
        return not state.is_simultaneous

    def state_evaluation(self, state: GameState, role: str) -> float:
        return self.minimax(state, role, 1)

    def minimax(self, state: GameState, role: str, depth: int) -> float:
        self.nodes += 1
        value = self.quiescence.evaluate(state, role, depth)
        if value is not None:
            return value
        active = state.active_role
        values = [
            expected_value(
                state,
                lambda successor: self.minimax(successor, role, depth + 1),
                {active: action},
            )
            for action in actions_for(state, active)
        ]
        return max(values) if active == role else min(values)

    def select_action(self, state, role):
        self.nodes = 0
        action = super().select_action(state, role)
        logger.debug("%s searched %d nodes (horizon %d)", self.name, self.nodes, self.horizon)
        return action


class AlphaBetaPlayer(MiniMaxPlayer):
    """
    MiniMax with alpha-beta pruning.

    alpha is the best value the searching role can guarantee and beta the
    best the opponent can; a branch is cut as soon as beta <= alpha. Each
    chance outcome is searched with a full window, so values equal plain
    MiniMax.
    """

    def state_evaluation(self, state: GameState, role: str) -> float:
        return self.alphabeta(state, role, 1)

    def minimax(self, state: GameState, role: str, depth: int) -> float:
        return self.alphabeta(state, role, depth)

    def alphabeta(
        self,
        state: GameState,
        role: str,
        depth: int,
        alpha: float = -math.inf,
        beta: float = math.inf,
    ) -> float:
        self.nodes += 1
        value = self.quiescence.evaluate(state, role, depth)
        if value is not None:
            return value
        active = state.active_role
        maximizing = active == role
        for action in actions_for(state, active):
            if state.is_contingent:
                child_value = expected_value(
                    state,
                    lambda successor: self.alphabeta(successor, role, depth + 1),
                    {active: action},
                )
            else:
                child_value = self.alphabeta(
                    state.transition({active: action}), role, depth + 1, alpha, beta,
                )
            if maximizing:
                alpha = max(alpha, child_value)
            else:
                beta = min(beta, child_value)
            if beta <= alpha:
                break
        return alpha if maximizing else beta
