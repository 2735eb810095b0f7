"""
Driver module - Plays matches and tournaments.

Provides:
- Match: One playthrough, feeding player decisions into the game
- Tournament: RoundRobin, Measurement and Elimination schedules
- Statistics: Aggregates of results, lengths and widths
"""

from .match import Match, MatchEntry, MatchState
from .statistics import Statistics, StatEntry
from .tournament import Tournament, RoundRobin, Measurement, Elimination, MatchFailure

__all__ = [
    "Match",
    "MatchEntry",
    "MatchState",
    "Statistics",
    "StatEntry",
    "Tournament",
    "RoundRobin",
    "Measurement",
    "Elimination",
    "MatchFailure",
]
