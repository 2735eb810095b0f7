"""
Pydantic Schemas for API - Request/response models for OpenAPI.

Error Codes:
- UNKNOWN_GAME: Game name not registered
- UNKNOWN_PLAYER: Player type or preset not registered
- INVALID_CONFIGURATION: Wrong number of players, bad game options, etc.
- CONTRACT_VIOLATION: A game or player broke the engine contract
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Anything else
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class TournamentKind(str, Enum):
    """Tournament schedules."""
    ROUND_ROBIN = "round_robin"
    MEASUREMENT = "measurement"
    ELIMINATION = "elimination"


class ErrorCode(str, Enum):
    """Structured error codes."""
    UNKNOWN_GAME = "UNKNOWN_GAME"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    CONTRACT_VIOLATION = "CONTRACT_VIOLATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class PlayerConfig(BaseModel):
    """How to build one player."""
    kind: str = Field(..., description="Player type, e.g. random, minimax, uct")
    name: Optional[str] = None
    preset: str = Field("default", description="quick, default or thorough")
    horizon: Optional[int] = Field(None, ge=1)
    simulation_count: Optional[int] = Field(None, ge=1)
    time_cap: Optional[float] = Field(None, ge=0, description="Milliseconds")


class GameInfo(BaseModel):
    """A registered game."""
    name: str
    title: str
    roles: list[str]
    simultaneous: bool = False
    deterministic: bool = True


class PlayerTypeInfo(BaseModel):
    """A registered player type."""
    kind: str
    description: str


class PresetInfo(BaseModel):
    name: str
    description: str
    horizon: int
    simulation_count: Optional[int] = None
    time_cap: Optional[float] = None


class PlyInfo(BaseModel):
    """One transition of a match."""
    ply: int
    actions: dict[str, Any] = Field(default_factory=dict)
    haps: Optional[dict[str, Any]] = None


class StatRow(BaseModel):
    """One statistics entry. NaN values are reported as null."""
    keys: dict[str, Any]
    count: int
    sum: float
    mean: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    variance: Optional[float] = None


class FailureInfo(BaseModel):
    match_id: str
    players: dict[str, str]
    error_type: str
    message: str


# =============================================================================
# Requests
# =============================================================================

class MatchRequest(BaseModel):
    """Request to play one match."""
    game: str = Field(..., description="Registered game name")
    game_options: dict[str, Any] = Field(default_factory=dict)
    players: list[PlayerConfig] = Field(..., min_length=1, description="One per role, in role order")
    seed: Optional[int] = None


class TournamentRequest(BaseModel):
    """Request to run a tournament."""
    game: str
    game_options: dict[str, Any] = Field(default_factory=dict)
    kind: TournamentKind = TournamentKind.ROUND_ROBIN
    players: list[PlayerConfig] = Field(..., min_length=1)
    opponents: list[PlayerConfig] = Field(
        default_factory=list, description="Only used by measurement tournaments"
    )
    match_count: int = Field(1, ge=1)
    seed: Optional[int] = None


# =============================================================================
# Responses
# =============================================================================

class MatchResponse(BaseModel):
    """Outcome of a match."""
    match_id: str
    game: str
    status: str
    players: dict[str, str] = Field(..., description="Role to player name")
    result: Optional[dict[str, float]] = None
    length: int
    plies: list[PlyInfo] = Field(default_factory=list)
    api_version: str = "v1"


class TournamentResponse(BaseModel):
    """Outcome of a tournament."""
    game: str
    kind: TournamentKind
    matches_played: int
    truncated: bool = Field(False, description="True if the match cap stopped the tournament")
    statistics: list[StatRow] = Field(default_factory=list)
    failures: list[FailureInfo] = Field(default_factory=list)
    champion: Optional[str] = None
    api_version: str = "v1"


class GameListResponse(BaseModel):
    games: list[GameInfo]
    count: int


class PlayerListResponse(BaseModel):
    players: list[PlayerTypeInfo]
    presets: list[PresetInfo]


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
