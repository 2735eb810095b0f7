"""
Monte Carlo Players - Decide by sampling random playouts.

MonteCarloPlayer (flat): every round plays out each transition of each
candidate action once and picks the action with the best average.

UCTPlayer: grows a game tree one node per iteration:
1. Selection: descend through fully expanded nodes by UCB1
2. Expansion: pop one pending transition (shuffled once per node)
3. Simulation: random playout from the new node
4. Backpropagation: add visits and rewards up to the root

Both stop after simulation_count iterations or time_cap milliseconds,
whichever comes first. Either limit may be None, but not both. Playouts
longer than horizon plies are valued by the heuristic.

Playouts move uniformly at random unless an agent is given: a Player
picks every move of the playouts, and a plain heuristic function is
wrapped in a HeuristicPlayer first.
"""

from __future__ import annotations
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from ..engine_core.action_generator import possible_transitions
from ..engine_core.game_tree import GameTree
from ..engine_core.randomness import RandomSource
from ..engine_core.state import Result
from ..engine_core.transition import freeze_mapping
from .evaluator import Heuristic, QuiescenceEvaluator, Simulator, zero_heuristic
from .heuristic_player import HeuristicPlayer
from .policy import Player

if TYPE_CHECKING:
    from ..engine_core.state import GameState

logger = logging.getLogger(__name__)

DEFAULT_SIMULATION_COUNT = 30
DEFAULT_TIME_CAP = 1000  # milliseconds
DEFAULT_HORIZON = 500
EXPLORATION_CONSTANT = math.sqrt(2)


class _Budget:
    """Iteration and wall-clock limits of one decision."""

    def __init__(self, simulation_count: int | None, time_cap: float | None):
        self.simulation_count = simulation_count
        self.deadline = None if time_cap is None else time.perf_counter() + time_cap / 1000.0
        self.used = 0

    def __iter__(self):
        while self.simulation_count is None or self.used < self.simulation_count:
            if self.deadline is not None and time.perf_counter() >= self.deadline:
                return
            yield self.used
            self.used += 1


class MonteCarloPlayer(HeuristicPlayer):
    """
    Flat Monte Carlo.

    Action values are probability-weighted averages of the playout values
    (normalized into [-1, 1]) over the other roles' actions and the chance
    outcomes.
    """

    def __init__(
        self,
        simulation_count: int | None = DEFAULT_SIMULATION_COUNT,
        time_cap: float | None = DEFAULT_TIME_CAP,
        horizon: int = DEFAULT_HORIZON,
        heuristic: Heuristic = zero_heuristic,
        agent: Player | Heuristic | None = None,
        name: str | None = None,
        random: RandomSource | None = None,
    ):
        super().__init__(heuristic=heuristic, name=name, random=random)
        if simulation_count is None and time_cap is None:
            raise ValueError("Either simulation_count or time_cap must be given")
        if simulation_count is not None and simulation_count < 1:
            raise ValueError(f"simulation_count must be positive, got {simulation_count}")
        if agent is not None and not isinstance(agent, Player):
            agent = HeuristicPlayer(heuristic=agent, random=self.random)
        self.simulation_count = simulation_count
        self.time_cap = time_cap
        self.simulator = Simulator(
            random=self.random,
            quiescence=QuiescenceEvaluator(horizon=horizon, heuristic=heuristic),
            agent=agent,
        )

    @property
    def agent(self) -> Player | None:
        return self.simulator.agent

    @property
    def horizon(self) -> int:
        return self.simulator.quiescence.horizon

    def evaluated_actions(self, state: GameState, role: str) -> list[tuple[Any, float]]:
        options = list(self.actions_for(state, role))
        transitions = {
            i: list(possible_transitions(state, {role: [action]}))
            for i, action in enumerate(options)
        }
        sums = [0.0] * len(options)
        weights = [0.0] * len(options)
        budget = _Budget(self.simulation_count, self.time_cap)
        for _ in budget:
            for i in range(len(options)):
                for edge in transitions[i]:
                    successor = state.transition(edge.actions, edge.haps)
                    value = self.simulator.simulate(successor).normalized()[role]
                    sums[i] += edge.probability * value
                    weights[i] += edge.probability
        logger.debug("%s ran %d rounds for %s", self.name, budget.used, role)
        return [
            (action, sums[i] / weights[i] if weights[i] > 0 else 0.0)
            for i, action in enumerate(options)
        ]


@dataclass
class UCTNode:
    """Statistics attached to a GameTree node by UCTPlayer."""
    pending: list = field(default_factory=list)
    visits: int = 0
    rewards: dict[str, float] = field(default_factory=dict)


class UCTPlayer(MonteCarloPlayer):
    """
    Monte Carlo Tree Search with UCB1 selection.

    Rewards are kept per role, normalized into [-1, 1]. During selection
    every node's children are scored with the deciding role's rewards, at
    opponent nodes too. At chance nodes the actions are scored on the
    summed statistics of their outcomes and the outcome is then drawn by
    probability.
    """

    def __init__(
        self,
        simulation_count: int | None = DEFAULT_SIMULATION_COUNT,
        time_cap: float | None = DEFAULT_TIME_CAP,
        horizon: int = DEFAULT_HORIZON,
        heuristic: Heuristic = zero_heuristic,
        exploration_constant: float = EXPLORATION_CONSTANT,
        agent: Player | Heuristic | None = None,
        name: str | None = None,
        random: RandomSource | None = None,
    ):
        super().__init__(
            simulation_count=simulation_count,
            time_cap=time_cap,
            horizon=horizon,
            heuristic=heuristic,
            agent=agent,
            name=name,
            random=random,
        )
        self.exploration_constant = exploration_constant

    def _attach(self, node: GameTree) -> GameTree:
        node.data = UCTNode(pending=self.random.shuffle(node.transitions()))
        return node

    def ucb(self, rewards: float, visits: int, total_visits: int) -> float:
        """Mean reward mapped into [0, 1] plus the exploration bonus."""
        mean = (rewards + visits) / (2 * visits)
        return mean + self.exploration_constant * math.sqrt(math.log(total_visits) / visits)

    def select_child(self, node: GameTree, role: str) -> GameTree:
        """UCB1 choice among node's children, scored with role's rewards."""
        groups: dict[tuple, list[GameTree]] = {}
        for child in node.children.values():
            groups.setdefault(freeze_mapping(child.edge.actions), []).append(child)

        best: list[list[GameTree]] = []
        best_score = -math.inf
        for group in groups.values():
            visits = sum(child.data.visits for child in group)
            rewards = sum(child.data.rewards.get(role, 0.0) for child in group)
            score = self.ucb(rewards, visits, node.data.visits)
            if score > best_score:
                best, best_score = [group], score
            elif score == best_score:
                best.append(group)
        group = self.random.choice(best)
        if len(group) == 1:
            return group[0]
        return self.random.weighted_choice((child, child.edge.probability) for child in group)

    def backpropagate(self, node: GameTree | None, values: Result) -> None:
        while node is not None:
            stats = node.data
            stats.visits += 1
            for role, value in values.items():
                stats.rewards[role] = stats.rewards.get(role, 0.0) + value
            node = node.parent

    def search(self, state: GameState, role: str) -> GameTree:
        """Build the search tree rooted at state."""
        root = self._attach(GameTree(state))
        budget = _Budget(self.simulation_count, self.time_cap)
        for _ in budget:
            node = root
            while not node.data.pending and node.children:
                node = self.select_child(node, role)
            if node.data.pending:
                node = self._attach(node.child(node.data.pending.pop()))
            simulation = self.simulator.simulate(node.state)
            self.backpropagate(node, simulation.normalized())
        logger.debug(
            "%s ran %d iterations for %s, tree size %d", self.name, budget.used, role, root.size(),
        )
        return root

    def evaluated_actions(self, state: GameState, role: str) -> list[tuple[Any, float]]:
        root = self.search(state, role)
        visits: dict[Any, int] = {}
        rewards: dict[Any, float] = {}
        for child in root.children.values():
            action = child.edge.action(role)
            visits[action] = visits.get(action, 0) + child.data.visits
            rewards[action] = rewards.get(action, 0.0) + child.data.rewards.get(role, 0.0)
        return [
            (action, rewards[action] / visits[action] if visits.get(action) else -math.inf)
            for action in self.actions_for(state, role)
        ]

    def select_action(self, state: GameState, role: str) -> Any:
        evaluated = self.evaluated_actions(state, role)
        best = self.best_actions(evaluated)
        if not best:
            # Nothing was visited (e.g. zero time cap)
            best = [action for action, _ in evaluated]
        action = self.random.choice(best)
        logger.debug("%s chose %r for %s among %r", self.name, action, role, evaluated)
        return action
