"""
Pig - Dice game, the reference contingent game.

The active role either rolls a die, adding the value to its turn total
(a 1 loses the turn total and passes the turn), or holds, adding the turn
total to its score and passing the turn. The first role to reach the goal
wins; the result is the score difference.

Every non-terminal state has the die as chance variable, so transitions
always carry a hap. Holding ignores it.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import ClassVar, Mapping

from ..engine_core.aleatory import DICE, Aleatory
from ..engine_core.state import GameState, Result
from ..engine_core.transition import Transition

DEFAULT_GOAL = 100


@dataclass(frozen=True)
class Pig(GameState):
    roles: ClassVar[tuple[str, ...]] = ("One", "Two")

    goal: int = DEFAULT_GOAL
    current: str = "One"
    scores: tuple[int, int] = (0, 0)
    rolls: tuple[int, ...] = ()

    def __post_init__(self):
        if self.goal < 1:
            raise ValueError(f"Goal must be positive, got {self.goal}")

    def score(self, role: str) -> int:
        return self.scores[self.roles.index(role)]

    @property
    def turn_total(self) -> int:
        return sum(self.rolls)

    def result(self) -> Result | None:
        one, two = self.scores
        if one >= self.goal or two >= self.goal:
            return {"One": float(one - two), "Two": float(two - one)}
        return None

    def active_roles(self) -> tuple[str, ...]:
        return () if self.is_terminal else (self.current,)

    def actions(self, role: str):
        if role not in self.active_roles():
            return None
        if self.score(role) + self.turn_total < self.goal:
            return ("roll", "hold")
        return ("hold",)

    def chance_variables(self) -> Mapping[str, Aleatory] | None:
        if self.is_terminal:
            return None
        return {"die": DICE["D6"]}

    def apply(self, move: Transition) -> Pig:
        role = self.current
        opponent = self.opponent(role)
        if move.action(role) == "hold":
            scores = list(self.scores)
            scores[self.roles.index(role)] += self.turn_total
            return replace(self, current=opponent, scores=tuple(scores), rolls=())
        value = move.hap("die")
        if value > 1:
            return replace(self, rolls=self.rolls + (value,))
        return replace(self, current=opponent, rolls=())

    @property
    def is_deterministic(self) -> bool:
        return False

    @property
    def result_bounds(self) -> tuple[float, float]:
        # A winner can overshoot the goal by at most 5 points.
        top = float(self.goal + 5)
        return (-top, top)
