"""
Player Configuration - Named search settings and a player factory.

Settings adjust:
- Search depth (horizon) for the value-based players
- Playout budget (simulation_count, time_cap) for the sampling players
- Exploration for UCT

The CLI and the API build their players through build_player().
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, TYPE_CHECKING

from ..engine_core.randomness import RandomSource
from .evaluator import Heuristic, zero_heuristic
from .heuristic_player import HeuristicPlayer
from .maxn import MaxNPlayer
from .minimax import AlphaBetaPlayer, MiniMaxPlayer
from .montecarlo import EXPLORATION_CONSTANT, MonteCarloPlayer, UCTPlayer
from .policy import FirstLegalPlayer, Player, RandomPlayer

if TYPE_CHECKING:
    from ..engine_core.state import GameState


@dataclass(frozen=True)
class SearchSettings:
    """
    Tunable parameters shared by every configurable player.

    time_cap is in milliseconds. The sampling players stop at whichever of
    simulation_count and time_cap runs out first; one of them may be None.
    """
    name: str
    description: str = ""

    horizon: int = 4
    simulation_count: int | None = 30
    time_cap: float | None = 1000
    playout_horizon: int = 500
    exploration_constant: float = EXPLORATION_CONSTANT

    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if self.horizon < 1:
            raise ValueError(f"horizon must be at least 1, got {self.horizon}")
        if self.simulation_count is None and self.time_cap is None:
            raise ValueError("Either simulation_count or time_cap must be given")
        if self.simulation_count is not None and self.simulation_count < 1:
            raise ValueError(f"simulation_count must be positive, got {self.simulation_count}")
        if self.time_cap is not None and self.time_cap < 0:
            raise ValueError(f"time_cap must not be negative, got {self.time_cap}")


# ============================================================================
# Predefined Settings
# ============================================================================

QUICK = SearchSettings(
    name="quick",
    description="Shallow search and few playouts, for tests and demos",
    horizon=2,
    simulation_count=10,
    time_cap=200,
    playout_horizon=100,
)


DEFAULT = SearchSettings(
    name="default",
    description="Balanced depth and playout budget",
)


THOROUGH = SearchSettings(
    name="thorough",
    description="Deeper search and many playouts, for tournaments",
    horizon=6,
    simulation_count=500,
    time_cap=5000,
)


PRESETS: dict[str, SearchSettings] = {
    "quick": QUICK,
    "default": DEFAULT,
    "thorough": THOROUGH,
}


PLAYER_TYPES: dict[str, type[Player]] = {
    "random": RandomPlayer,
    "first": FirstLegalPlayer,
    "heuristic": HeuristicPlayer,
    "minimax": MiniMaxPlayer,
    "alphabeta": AlphaBetaPlayer,
    "maxn": MaxNPlayer,
    "montecarlo": MonteCarloPlayer,
    "uct": UCTPlayer,
}


def get_settings(preset: str | SearchSettings = "default", **overrides: Any) -> SearchSettings:
    """Look up a preset by name and apply overrides (None values are ignored)."""
    if isinstance(preset, SearchSettings):
        settings = preset
    else:
        try:
            settings = PRESETS[preset]
        except KeyError:
            raise ValueError(f"Unknown preset {preset!r} (available: {', '.join(PRESETS)})") from None
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return replace(settings, **overrides) if overrides else settings


def default_heuristic(game: GameState | None) -> Heuristic:
    """The game's own default heuristic, or the zero heuristic."""
    if game is None:
        return zero_heuristic
    return getattr(type(game), "default_heuristic", zero_heuristic)


def build_player(
    kind: str,
    random: RandomSource | None = None,
    preset: str | SearchSettings = "default",
    game: GameState | None = None,
    heuristic: Heuristic | None = None,
    name: str | None = None,
    **overrides: Any,
) -> Player:
    """
    Create a player by type name.

    Args:
        kind: One of PLAYER_TYPES
        random: Random source for the player (a fresh one if None)
        preset: Name of a preset or a SearchSettings instance
        game: Used to pick the game's default heuristic
        heuristic: Explicit heuristic, overriding the game's
        name: Player name (defaults to the type name)
        overrides: SearchSettings fields to change

    Raises:
        ValueError: Unknown kind or preset, invalid settings
    """
    try:
        cls = PLAYER_TYPES[kind.lower()]
    except KeyError:
        raise ValueError(f"Unknown player type {kind!r} (available: {', '.join(PLAYER_TYPES)})") from None
    settings = get_settings(preset, **overrides)
    heuristic = heuristic or default_heuristic(game)
    name = name or kind.lower()

    if cls in (RandomPlayer, FirstLegalPlayer):
        return cls(name=name, random=random)
    if cls is HeuristicPlayer:
        return cls(heuristic=heuristic, name=name, random=random)
    if cls in (MiniMaxPlayer, AlphaBetaPlayer, MaxNPlayer):
        return cls(horizon=settings.horizon, heuristic=heuristic, name=name, random=random)
    if cls is MonteCarloPlayer:
        return cls(
            simulation_count=settings.simulation_count,
            time_cap=settings.time_cap,
            horizon=settings.playout_horizon,
            heuristic=heuristic,
            name=name,
            random=random,
        )
    return UCTPlayer(
        simulation_count=settings.simulation_count,
        time_cap=settings.time_cap,
        horizon=settings.playout_horizon,
        heuristic=heuristic,
        exploration_constant=settings.exploration_constant,
        name=name,
        random=random,
    )
