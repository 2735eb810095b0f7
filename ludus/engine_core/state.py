"""
Game State - The contract every concrete game implements.

Design principles:
- Immutable by convention: transition() always returns a new state
- Game-agnostic: search and drivers only use this interface
- Exactly one of: terminal (result present, no active roles) or
  non-terminal (at least one active role, each with at least one action)

A state is contingent when chance_variables() returns aleatories; its
transition then needs one hap (realized value) per chance variable, in
addition to the active roles' actions.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, TYPE_CHECKING

from .errors import InvalidAction, MissingHap, NoLegalActions, UnexpectedHap
from .transition import Contingent, Deterministic, Transition

if TYPE_CHECKING:
    from .aleatory import Aleatory


Result = dict[str, float]


class GameState(ABC):
    """
    Abstract game state.

    Subclasses implement roles, active_roles(), actions(), result() and
    apply(). Contingent games also implement chance_variables().
    """

    # Roles are fixed per game; their order is the iteration order used
    # when enumerating transitions.
    roles: Sequence[str] = ()

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @abstractmethod
    def active_roles(self) -> tuple[str, ...]:
        """Roles that must supply an action this turn. Empty if terminal."""

    @abstractmethod
    def actions(self, role: str) -> Sequence[Any] | None:
        """Legal actions for an active role; None for inactive roles."""

    def chance_variables(self) -> Mapping[str, Aleatory] | None:
        """Aleatories this state's transition depends on. None if deterministic."""
        return None

    @abstractmethod
    def result(self) -> Result | None:
        """Score per role if the game is finished, else None."""

    @abstractmethod
    def apply(self, move: Transition) -> GameState:
        """Build the successor state for an already validated transition."""

    # ------------------------------------------------------------------
    # Transition
    # ------------------------------------------------------------------

    def transition(
        self,
        actions: Mapping[str, Any] | None,
        haps: Mapping[str, Any] | None = None,
    ) -> GameState:
        """
        Produce the successor state.

        Raises:
            InvalidAction: finished game, unknown/inactive role, or an
                action outside the role's legal set
            MissingHap: a contingent state without all of its haps
            UnexpectedHap: haps for a deterministic state, or unknown or
                impossible hap values
        """
        return self.apply(self.validate_transition(actions, haps))

    def validate_transition(
        self,
        actions: Mapping[str, Any] | None,
        haps: Mapping[str, Any] | None = None,
    ) -> Transition:
        """Check a transition request and build its tagged variant."""
        if self.is_terminal:
            raise InvalidAction(f"Game is finished, no actions allowed at {self!r}")
        actions = dict(actions or {})
        active = self.active_roles()
        for role in actions:
            if role not in active:
                raise InvalidAction(
                    f"Role {role!r} is not active at {self!r}", role=role, action=actions[role],
                )
        for role in active:
            if role not in actions:
                raise InvalidAction(f"Missing action for active role {role!r}", role=role)
            legal = self.actions(role) or ()
            if actions[role] not in legal:
                raise InvalidAction(
                    f"Invalid action {actions[role]!r} for role {role!r} "
                    f"(legal: {list(legal)!r})",
                    role=role,
                    action=actions[role],
                )

        chance = self.chance_variables()
        if not chance:
            if haps:
                raise UnexpectedHap(f"Haps are not required at {self!r}", haps=dict(haps))
            return Deterministic(actions=actions)

        haps = dict(haps or {})
        missing = [name for name in chance if name not in haps]
        if missing:
            raise MissingHap(missing)
        unknown = [name for name in haps if name not in chance]
        if unknown:
            raise UnexpectedHap(f"Unknown chance variables: {', '.join(unknown)}", haps=haps)
        for name, value in haps.items():
            if chance[name].probability(value) <= 0:
                raise UnexpectedHap(f"Impossible value {value!r} for {name!r}", haps=haps)
        return Contingent(actions=actions, haps=haps)

    # ------------------------------------------------------------------
    # Derived information
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    def is_terminal(self) -> bool:
        return self.result() is not None

    @property
    def is_contingent(self) -> bool:
        return bool(self.chance_variables())

    @property
    def active_role(self) -> str:
        """The only active role. Raises ValueError if there isn't exactly one."""
        active = self.active_roles()
        if len(active) != 1:
            raise ValueError(f"Expected one active role, found {len(active)} at {self!r}")
        return active[0]

    def is_active(self, *roles: str) -> bool:
        active = self.active_roles()
        return all(role in active for role in roles)

    def opponents(self, *roles: str) -> list[str]:
        """All roles other than the given ones (the active roles by default)."""
        excluded = set(roles or self.active_roles())
        return [role for role in self.roles if role not in excluded]

    def opponent(self, role: str | None = None) -> str:
        """The other role of a two-role game."""
        if len(self.roles) != 2:
            raise ValueError("Can only get the opponent in a game of 2 roles")
        role = role if role is not None else self.active_role
        index = list(self.roles).index(role)
        return self.roles[(index + 1) % 2]

    # Games can override these flags so players can check compatibility.

    @property
    def is_zero_sum(self) -> bool:
        return True

    @property
    def is_deterministic(self) -> bool:
        return True

    @property
    def is_simultaneous(self) -> bool:
        return False

    def view(self, role: str) -> GameState:
        """The state as seen by the given role. Full information by default."""
        return self

    def check_invariants(self) -> None:
        """Raise NoLegalActions if a non-terminal state leaves an active role without actions."""
        if self.is_terminal:
            if self.active_roles():
                raise ValueError(f"Terminal state {self!r} has active roles")
            return
        active = self.active_roles()
        if not active:
            raise ValueError(f"Non-terminal state {self!r} has no active roles")
        for role in active:
            if not self.actions(role):
                raise NoLegalActions(role, self)

    # ------------------------------------------------------------------
    # Result helpers
    # ------------------------------------------------------------------

    @property
    def result_bounds(self) -> tuple[float, float]:
        """Minimum defeat and maximum victory."""
        return (-1.0, 1.0)

    def normalized_result(self, result: Mapping[str, float] | None = None) -> Result | None:
        """The result rescaled so the bounds map to [-1, 1]."""
        result = result if result is not None else self.result()
        if result is None:
            return None
        low, high = self.result_bounds
        return {
            role: (float(value) - low) / (high - low) * 2 - 1
            for role, value in result.items()
        }

    def zerosum_result(self, score: float, *roles: str) -> Result:
        """Split score among the given roles and -score among the rest."""
        winners = set(roles or self.active_roles())
        share = score / max(len(winners), 1)
        others = -score / max(len(self.roles) - len(winners), 1)
        return {role: (share if role in winners else others) for role in self.roles}

    def victory(self, roles: str | Sequence[str], score: float = 1.0) -> Result:
        if isinstance(roles, str):
            roles = [roles]
        return self.zerosum_result(score, *roles)

    def defeat(self, roles: str | Sequence[str], score: float = -1.0) -> Result:
        if isinstance(roles, str):
            roles = [roles]
        return self.zerosum_result(score, *roles)

    def tied(self, score: float = 0.0) -> Result:
        return {role: score for role in self.roles}
