"""
Ludus - Turn-Based Game Search Engine

A generic engine for simulating turn-based games and building automated
players for them. The engine provides:
- An abstract game state contract (roles, actions, chance variables)
- Game trees over (action, chance outcome) transitions
- Search players (MiniMax, AlphaBeta, MaxN)
- Sampling players (flat Monte Carlo, UCT)
- Match and tournament drivers with statistics
"""

__version__ = "0.1.0"
