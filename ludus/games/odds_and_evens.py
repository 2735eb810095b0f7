"""
Odds and Evens - Simultaneous game for two roles.

Both roles show 1 or 2 fingers at the same time. Evens scores a point if
the sum is even, Odds otherwise. After the last turn the result is the
point difference.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import ClassVar

from ..engine_core.state import GameState, Result
from ..engine_core.transition import Transition


@dataclass(frozen=True)
class OddsAndEvens(GameState):
    roles: ClassVar[tuple[str, ...]] = ("Evens", "Odds")

    turns: int = 1
    played: int = 0
    evens_points: int = 0
    odds_points: int = 0

    def active_roles(self) -> tuple[str, ...]:
        return self.roles if self.played < self.turns else ()

    def actions(self, role: str):
        if role in self.active_roles():
            return (1, 2)
        return None

    def result(self) -> Result | None:
        if self.played < self.turns:
            return None
        difference = self.evens_points - self.odds_points
        return {"Evens": float(difference), "Odds": float(-difference)}

    def apply(self, move: Transition) -> OddsAndEvens:
        even = (move.action("Evens") + move.action("Odds")) % 2 == 0
        return replace(
            self,
            played=self.played + 1,
            evens_points=self.evens_points + (1 if even else 0),
            odds_points=self.odds_points + (0 if even else 1),
        )

    @property
    def is_simultaneous(self) -> bool:
        return True

    @property
    def result_bounds(self) -> tuple[float, float]:
        return (-float(self.turns), float(self.turns))
