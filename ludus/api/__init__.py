"""
API Module - HTTP interface to the engine.

Clients:
1. List games and player types
2. Play single matches between configured players
3. Run tournaments and read back their statistics

Nothing is persisted: every request builds its own games and players.
"""

from .schemas import (
    # Requests
    MatchRequest,
    TournamentRequest,
    PlayerConfig,
    # Responses
    MatchResponse,
    TournamentResponse,
    GameListResponse,
    PlayerListResponse,
    ErrorResponse,
    HealthResponse,
    # Enums
    ErrorCode,
    TournamentKind,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "MatchRequest",
    "TournamentRequest",
    "PlayerConfig",
    # Responses
    "MatchResponse",
    "TournamentResponse",
    "GameListResponse",
    "PlayerListResponse",
    "ErrorResponse",
    "HealthResponse",
    # Enums
    "ErrorCode",
    "TournamentKind",
    # Service
    "APIService",
    "create_app",
]
