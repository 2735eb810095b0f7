"""
Transitions - What moves a game state to the next one.

A transition is one of two variants:
1. Deterministic: one action per active role
2. Contingent: actions (possibly none) plus one hap per chance variable

GameState.transition() validates the request and builds the right
variant; concrete games receive it in GameState.apply() and branch on
its type.

TransitionEdge is the enumerated form used by game trees: the same
actions and haps, plus the probability of the chance outcome.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping


def freeze_mapping(mapping: Mapping[str, Any] | None) -> tuple[tuple[str, Any], ...]:
    if not mapping:
        return ()
    return tuple(mapping.items())


@dataclass(frozen=True)
class Transition:
    """Base of the transition variants. Use the factories below."""
    actions: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_contingent(self) -> bool:
        return False

    def action(self, role: str) -> Any:
        """The action chosen by the given role, or None."""
        return self.actions.get(role)

    @classmethod
    def deterministic(cls, actions: Mapping[str, Any]) -> Deterministic:
        """Factory for a transition that only involves player actions."""
        return Deterministic(actions=dict(actions))

    @classmethod
    def contingent(
        cls,
        actions: Mapping[str, Any] | None,
        haps: Mapping[str, Any],
    ) -> Contingent:
        """Factory for a transition that also depends on chance outcomes."""
        return Contingent(actions=dict(actions or {}), haps=dict(haps))


@dataclass(frozen=True)
class Deterministic(Transition):
    """Transition driven only by the active roles' actions."""


@dataclass(frozen=True)
class Contingent(Transition):
    """Transition that depends on haps (chance outcomes) as well as actions."""
    haps: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_contingent(self) -> bool:
        return True

    def hap(self, name: str) -> Any:
        return self.haps[name]


@dataclass(frozen=True)
class TransitionEdge:
    """
    One enumerated branch out of a game state.

    Only chance outcomes contribute to the probability; every action
    combination has weight 1.
    """
    actions: Mapping[str, Any] | None
    haps: Mapping[str, Any] | None = None
    probability: float = 1.0

    @property
    def key(self) -> tuple[tuple[tuple[str, Any], ...], tuple[tuple[str, Any], ...]]:
        """Hashable identity of the edge, used to index tree children."""
        return (freeze_mapping(self.actions), freeze_mapping(self.haps))

    def action(self, role: str) -> Any:
        return (self.actions or {}).get(role)
