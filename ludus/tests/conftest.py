"""
Pytest fixtures for Ludus tests.
"""

import pytest
from typing import Any

from ..engine_core.randomness import RandomSource
from ..engine_core.state import GameState
from ..games import Choose2Win, TicTacToe, OddsAndEvens, Pig


def play_moves(state: GameState, *moves: Any) -> GameState:
    """Apply one action per ply for the single active role."""
    for move in moves:
        state = state.transition({state.active_role: move})
    return state


@pytest.fixture
def rng() -> RandomSource:
    """Seeded random source."""
    return RandomSource(seed=42)


@pytest.fixture
def choose2win() -> Choose2Win:
    return Choose2Win()


@pytest.fixture
def tictactoe() -> TicTacToe:
    return TicTacToe()


@pytest.fixture
def odds_and_evens() -> OddsAndEvens:
    return OddsAndEvens(turns=3)


@pytest.fixture
def small_pig() -> Pig:
    """Pig with a goal small enough for exhaustive search."""
    return Pig(goal=6)
