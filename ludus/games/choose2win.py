"""
Choose2Win - Trivial game where the active role can simply choose to win.

Each turn the active role picks one of:
- win: the active role wins
- lose: the opponent wins
- pass: nothing happens, the turn goes to the opponent

When the turn limit is reached without a winner the game is a draw.
Used to check that every search player takes an immediate win.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import ClassVar

from ..engine_core.state import GameState, Result
from ..engine_core.transition import Transition

ACTIONS = ("win", "lose", "pass")

DEFAULT_TURNS = 10


@dataclass(frozen=True)
class Choose2Win(GameState):
    roles: ClassVar[tuple[str, ...]] = ("This", "That")

    turns: int = DEFAULT_TURNS
    current: str = "This"
    winner: str | None = None

    def active_roles(self) -> tuple[str, ...]:
        if self.winner is None and self.turns > 0:
            return (self.current,)
        return ()

    def actions(self, role: str):
        if role in self.active_roles():
            return ACTIONS
        return None

    def result(self) -> Result | None:
        if self.winner is not None:
            return self.victory(self.winner)
        if self.turns < 1:
            return self.tied()
        return None

    def apply(self, move: Transition) -> Choose2Win:
        role = self.current
        opponent = self.opponent(role)
        action = move.action(role)
        winner = self.winner
        if action == "win":
            winner = role
        elif action == "lose":
            winner = opponent
        return replace(self, turns=self.turns - 1, current=opponent, winner=winner)

    def __repr__(self) -> str:
        return f"Choose2Win(turns={self.turns}, current={self.current!r}, winner={self.winner!r})"
