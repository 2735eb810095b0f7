"""
Players module - Automated decision-making.

Provides:
- Player: Interface used by matches
- RandomPlayer, FirstLegalPlayer, TracePlayer: baselines and test helpers
- HeuristicPlayer: One-ply lookahead
- MiniMaxPlayer, AlphaBetaPlayer, MaxNPlayer: Depth-bounded search
- MonteCarloPlayer, UCTPlayer: Sampling search
- SearchSettings, PRESETS, build_player: Configuration
"""

from .policy import Player, RandomPlayer, FirstLegalPlayer, TracePlayer
from .evaluator import (
    Heuristic,
    zero_heuristic,
    composite_heuristic,
    QuiescenceEvaluator,
    Simulator,
    SimulationResult,
)
from .heuristic_player import HeuristicPlayer
from .minimax import MiniMaxPlayer, AlphaBetaPlayer
from .maxn import MaxNPlayer
from .montecarlo import MonteCarloPlayer, UCTPlayer
from .config import SearchSettings, PRESETS, PLAYER_TYPES, build_player, get_settings

__all__ = [
    "Player",
    "RandomPlayer",
    "FirstLegalPlayer",
    "TracePlayer",
    "Heuristic",
    "zero_heuristic",
    "composite_heuristic",
    "QuiescenceEvaluator",
    "Simulator",
    "SimulationResult",
    "HeuristicPlayer",
    "MiniMaxPlayer",
    "AlphaBetaPlayer",
    "MaxNPlayer",
    "MonteCarloPlayer",
    "UCTPlayer",
    "SearchSettings",
    "PRESETS",
    "PLAYER_TYPES",
    "build_player",
    "get_settings",
]
