"""
Games module - Reference game implementations.

These games exercise every feature of the engine:
- Choose2Win: trivial decisions, draws by turn limit
- Predefined: fixed outcome, for drivers and statistics
- ConnectionGame / TicTacToe: classic deterministic board games
- OddsAndEvens: simultaneous moves
- Pig: chance (dice)

GAMES maps the names used by the CLI and the API to factories of
initial states.
"""

from typing import Any, Callable

from ..engine_core.state import GameState
from .choose2win import Choose2Win
from .predefined import Predefined
from .connection import ConnectionGame, TicTacToe
from .odds_and_evens import OddsAndEvens
from .pig import Pig

GAMES: dict[str, Callable[..., GameState]] = {
    "choose2win": Choose2Win,
    "predefined": Predefined,
    "connection": ConnectionGame,
    "tictactoe": TicTacToe,
    "oddsandevens": OddsAndEvens,
    "pig": Pig,
}


def create_game(name: str, **options: Any) -> GameState:
    """Build the initial state of a registered game."""
    try:
        factory = GAMES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown game {name!r} (available: {', '.join(sorted(GAMES))})") from None
    return factory(**options)


__all__ = [
    "Choose2Win",
    "Predefined",
    "ConnectionGame",
    "TicTacToe",
    "OddsAndEvens",
    "Pig",
    "GAMES",
    "create_game",
]
