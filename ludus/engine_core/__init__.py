"""
Engine Core - Game state contract, chance, transitions and game trees.

The engine core is the layer every player and driver builds on:
1. GameState defines roles, actions, chance variables and results
2. Aleatory models chance variables
3. The action generator enumerates transitions
4. GameTree caches states reached through those transitions
"""

from .errors import (
    LudusError,
    InvalidAction,
    MissingHap,
    UnexpectedHap,
    NoLegalActions,
    InvalidDistribution,
    MatchAborted,
)
from .randomness import RandomSource
from .aleatory import Aleatory, uniform_aleatory, range_aleatory, weighted_aleatory, DICE
from .transition import Transition, Deterministic, Contingent, TransitionEdge
from .state import GameState, Result
from .action_generator import (
    actions_for,
    possible_actions,
    possible_haps,
    possible_transitions,
    random_transition,
    sample_haps,
    expected_value,
)
from .game_tree import GameTree

__all__ = [
    "LudusError",
    "InvalidAction",
    "MissingHap",
    "UnexpectedHap",
    "NoLegalActions",
    "InvalidDistribution",
    "MatchAborted",
    "RandomSource",
    "Aleatory",
    "uniform_aleatory",
    "range_aleatory",
    "weighted_aleatory",
    "DICE",
    "Transition",
    "Deterministic",
    "Contingent",
    "TransitionEdge",
    "GameState",
    "Result",
    "actions_for",
    "possible_actions",
    "possible_haps",
    "possible_transitions",
    "random_transition",
    "sample_haps",
    "expected_value",
    "GameTree",
]
