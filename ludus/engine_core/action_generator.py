"""
Action Generator - Enumerates the transitions available from a game state.

The generator is used by:
1. Game trees to expand nodes
2. Search players to iterate over joint actions and chance outcomes
3. Simulations to pick random transitions

Ordering is deterministic: active roles in role order, each role's actions
in the order the game lists them, then chance variables in key order and
each variable's values in distribution order. Seeded replays depend on it.
"""

from __future__ import annotations
from itertools import product
from typing import Any, Callable, Iterator, Mapping, Sequence, TYPE_CHECKING

from .errors import NoLegalActions
from .transition import TransitionEdge

if TYPE_CHECKING:
    from .randomness import RandomSource
    from .state import GameState


def actions_for(state: GameState, role: str) -> Sequence[Any]:
    """Legal actions of the role, raising NoLegalActions if there are none."""
    actions = state.actions(role)
    if not actions:
        raise NoLegalActions(role, state)
    return actions


def possible_actions(
    state: GameState,
    override: Mapping[str, Sequence[Any]] | None = None,
) -> Iterator[dict[str, Any]]:
    """
    Every combination of one action per active role.

    The override replaces the action list of some roles, e.g. to fix the
    action of the role being evaluated.
    """
    override = override or {}
    roles = list(state.active_roles())
    choices = [
        override[role] if role in override else actions_for(state, role)
        for role in roles
    ]
    for combination in product(*choices):
        yield dict(zip(roles, combination))


def possible_haps(state: GameState) -> Iterator[tuple[dict[str, Any] | None, float]]:
    """Every combination of chance outcomes with its joint probability."""
    chance = state.chance_variables()
    if not chance:
        yield None, 1.0
        return
    names = list(chance.keys())
    distributions = [chance[name].distribution() for name in names]
    for combination in product(*distributions):
        probability = 1.0
        haps = {}
        for name, (value, value_probability) in zip(names, combination):
            haps[name] = value
            probability *= value_probability
        yield haps, probability


def possible_transitions(
    state: GameState,
    override: Mapping[str, Sequence[Any]] | None = None,
) -> Iterator[TransitionEdge]:
    """Cartesian product of the joint actions and the chance outcomes."""
    if state.is_terminal:
        return
    hap_options = list(possible_haps(state))
    for actions in possible_actions(state, override):
        for haps, probability in hap_options:
            yield TransitionEdge(actions=actions, haps=haps, probability=probability)


def random_transition(random: RandomSource, state: GameState) -> TransitionEdge:
    """
    One transition chosen at random.

    Actions are uniform per active role (in role order); each chance
    variable is sampled from its distribution (in key order).
    """
    actions = {
        role: random.choice(actions_for(state, role))
        for role in state.active_roles()
    }
    chance = state.chance_variables()
    if not chance:
        return TransitionEdge(actions=actions, haps=None, probability=1.0)
    haps = {}
    probability = 1.0
    for name, aleatory in chance.items():
        value = aleatory.sample(random)
        haps[name] = value
        probability *= aleatory.probability(value)
    return TransitionEdge(actions=actions, haps=haps, probability=probability)


def sample_haps(random: RandomSource, state: GameState) -> dict[str, Any] | None:
    """One sampled value per chance variable (in key order), or None if deterministic."""
    chance = state.chance_variables()
    if not chance:
        return None
    return {name: aleatory.sample(random) for name, aleatory in chance.items()}


def expected_value(
    state: GameState,
    evaluate: Callable[[GameState], float],
    actions: Mapping[str, Any] | None = None,
) -> float:
    """
    Probability-weighted evaluation of the successors for fixed actions.

    For deterministic states this is just evaluate(next state).
    """
    total = 0.0
    for haps, probability in possible_haps(state):
        total += probability * evaluate(state.transition(actions, haps))
    return total
