"""
Player Policy - Interface for automated decision-making.

A Player takes a game state and one of its active roles and returns the
action that role will take. Players must never mutate the state.

decision() is asynchronous so a match can wait on slow or external
players; computational players implement the synchronous
select_action() and inherit the default decision().
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from itertools import count
from typing import Any, Sequence, TYPE_CHECKING

from ..engine_core.action_generator import actions_for
from ..engine_core.randomness import RandomSource

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..driver.match import Match

_PLAYER_COUNT = count()


class Player(ABC):
    """
    Abstract base class for players.

    Implementations can range from simple baselines to complex search
    algorithms. Every player owns its RandomSource.
    """

    def __init__(self, name: str | None = None, random: RandomSource | None = None):
        self.name = name or f"{self.__class__.__name__}{next(_PLAYER_COUNT)}"
        self.random = random if random is not None else RandomSource()

    @abstractmethod
    def select_action(self, state: GameState, role: str) -> Any:
        """
        Select an action for the role.

        Args:
            state: Current game state (not finished, role active)
            role: The role this player is playing

        Returns:
            One of state.actions(role)
        """

    async def decision(self, state: GameState, role: str) -> Any:
        """The action to take, possibly after waiting on something else."""
        return self.select_action(state, role)

    def can_play(self, state: GameState) -> bool:
        """Whether this player supports the given game."""
        return True

    def participate(self, match: Match, role: str) -> Player:
        """
        Called when the player joins a match.

        Returns the player to use for that match. Stateless players return
        themselves; stateful ones return a fresh copy.
        """
        return self

    def actions_for(self, state: GameState, role: str) -> Sequence[Any]:
        return actions_for(state, role)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class RandomPlayer(Player):
    """
    Random player - selects actions uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def select_action(self, state: GameState, role: str) -> Any:
        return self.random.choice(self.actions_for(state, role))


class FirstLegalPlayer(Player):
    """
    First-legal player - always selects the first legal action.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_action(self, state: GameState, role: str) -> Any:
        return self.actions_for(state, role)[0]


class TracePlayer(Player):
    """
    Replays a fixed sequence of actions, then delegates to a fallback.

    Each participation starts the trace over, so the same TracePlayer can be
    used in many matches.
    """

    def __init__(
        self,
        trace: Sequence[Any],
        fallback: Player | None = None,
        name: str | None = None,
        random: RandomSource | None = None,
    ):
        super().__init__(name=name, random=random)
        self.trace = list(trace)
        self.fallback = fallback
        self.index = 0

    def select_action(self, state: GameState, role: str) -> Any:
        if self.index < len(self.trace):
            action = self.trace[self.index]
            self.index += 1
            return action
        if self.fallback is not None:
            return self.fallback.select_action(state, role)
        raise ValueError(f"No action left in trace for role {role!r}")

    async def decision(self, state: GameState, role: str) -> Any:
        if self.index >= len(self.trace) and self.fallback is not None:
            return await self.fallback.decision(state, role)
        return self.select_action(state, role)

    def participate(self, match: Match, role: str) -> TracePlayer:
        return TracePlayer(
            self.trace,
            fallback=self.fallback.participate(match, role) if self.fallback else None,
            name=self.name,
            random=self.random,
        )
