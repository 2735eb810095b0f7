"""
Heuristic Evaluation - Scores game states before they are finished.

Shared capabilities of the search and sampling players:
- Heuristics: (state, role) -> number, pure and finite
- QuiescenceEvaluator: decides when a search stops recursing
- Simulator: playouts for the sampling players
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, TYPE_CHECKING

from ..engine_core.action_generator import random_transition, sample_haps
from ..engine_core.state import Result

if TYPE_CHECKING:
    from ..engine_core.randomness import RandomSource
    from ..engine_core.state import GameState
    from .policy import Player


Heuristic = Callable[["GameState", str], float]


def zero_heuristic(state: GameState, role: str) -> float:
    """Every unfinished state is as good as a draw."""
    return 0.0


def composite_heuristic(*components: tuple[Heuristic, float]) -> Heuristic:
    """
    Weighted sum of heuristics.

    Weights must be in [0, 1]; if they add up to 1 and every component stays
    within [-1, 1], so does the result.
    """
    for _, weight in components:
        if not 0 <= weight <= 1:
            raise ValueError(f"Heuristic weight {weight!r} is not in [0, 1]")

    def heuristic(state: GameState, role: str) -> float:
        return sum(weight * h(state, role) for h, weight in components)

    return heuristic


def clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


@dataclass
class QuiescenceEvaluator:
    """
    Stops a search at terminal states and at the horizon.

    evaluate() returns the role's result if the state is finished, the
    heuristic value if depth reached the horizon, or None if the search
    must keep recursing.
    """
    horizon: int = 4
    heuristic: Heuristic = zero_heuristic

    def __post_init__(self):
        if self.horizon < 0:
            raise ValueError(f"Horizon must not be negative, got {self.horizon}")

    def evaluate(self, state: GameState, role: str, depth: int) -> float | None:
        result = state.result()
        if result is not None:
            return result[role]
        if depth >= self.horizon:
            return self.heuristic(state, role)
        return None

    def evaluate_all(self, state: GameState, depth: int) -> Result | None:
        """Like evaluate(), but for every role at once."""
        result = state.result()
        if result is not None:
            return dict(result)
        if depth >= self.horizon:
            return {role: self.heuristic(state, role) for role in state.roles}
        return None


@dataclass
class SimulationResult:
    """Outcome of one random playout."""
    state: GameState
    plies: int
    values: Result
    finished: bool

    def normalized(self) -> Result:
        """
        Values mapped into [-1, 1].

        Finished playouts use the game's result bounds; heuristic values are
        clamped.
        """
        if self.finished:
            return self.state.normalized_result(self.values)
        return {role: clamp(value) for role, value in self.values.items()}


@dataclass
class Simulator:
    """
    Plays transitions until the game ends or the quiescence horizon
    (counted in plies) is reached.

    Without an agent every active role moves uniformly at random. With one,
    the agent's select_action() picks each active role's move; chance
    variables are sampled either way.
    """
    random: RandomSource
    quiescence: QuiescenceEvaluator = field(default_factory=lambda: QuiescenceEvaluator(horizon=500))
    agent: Player | None = None

    def next_state(self, state: GameState) -> GameState:
        if self.agent is None:
            edge = random_transition(self.random, state)
            return state.transition(edge.actions, edge.haps)
        actions = {role: self.agent.select_action(state, role) for role in state.active_roles()}
        return state.transition(actions, sample_haps(self.random, state))

    def simulate(self, state: GameState) -> SimulationResult:
        plies = 0
        while True:
            values = self.quiescence.evaluate_all(state, plies)
            if values is not None:
                return SimulationResult(
                    state=state, plies=plies, values=values, finished=state.is_terminal,
                )
            state = self.next_state(state)
            plies += 1
