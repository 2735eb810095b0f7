"""
Predefined - Game whose outcome is fixed in advance.

Every match lasts `height` plies, each offering `width` actions (the
integers 1..width) to the active role, and always ends with the given
result. Useful to test drivers and statistics without game logic.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Mapping

from ..engine_core.state import GameState, Result
from ..engine_core.transition import Transition

DEFAULT_HEIGHT = 5
DEFAULT_WIDTH = 5


def _default_result() -> dict[str, float]:
    return {"First": 0.0, "Second": 0.0}


@dataclass(frozen=True)
class Predefined(GameState):
    final_result: Mapping[str, float] = field(default_factory=_default_result)
    height: int = DEFAULT_HEIGHT
    width: int = DEFAULT_WIDTH
    current: str | None = None

    def __post_init__(self):
        if self.height < 0 or self.width < 1:
            raise ValueError(f"Invalid dimensions height={self.height}, width={self.width}")
        if self.current is None:
            object.__setattr__(self, "current", next(iter(self.final_result)))
        elif self.current not in self.final_result:
            raise ValueError(f"Unknown role {self.current!r}")

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(self.final_result.keys())

    def active_roles(self) -> tuple[str, ...]:
        return (self.current,) if self.height > 0 else ()

    def actions(self, role: str):
        if role in self.active_roles():
            return tuple(range(1, self.width + 1))
        return None

    def result(self) -> Result | None:
        if self.height > 0:
            return None
        return dict(self.final_result)

    def apply(self, move: Transition) -> Predefined:
        roles = self.roles
        following = roles[(roles.index(self.current) + 1) % len(roles)]
        return replace(self, height=self.height - 1, current=following)

    @property
    def is_zero_sum(self) -> bool:
        return abs(sum(self.final_result.values())) < 1e-9

    @property
    def result_bounds(self) -> tuple[float, float]:
        values = list(self.final_result.values())
        low, high = min(values + [-1.0]), max(values + [1.0])
        return (low, high)
