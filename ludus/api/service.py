"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests into games, players and drivers
2. Plays matches and tournaments
3. Formats results as response models

This layer is framework-agnostic (usable from FastAPI, the CLI or tests).
Failures are returned as ErrorResponse instead of raised.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import logging
import math

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
    # Shared
    GameInfo,
    PlayerTypeInfo,
    PresetInfo,
    PlyInfo,
    StatRow,
    FailureInfo,
    # Enums
    ErrorCode,
    TournamentKind,
)
from ..driver import Elimination, Match, Measurement, RoundRobin, Statistics
from ..engine_core.errors import LudusError
from ..engine_core.randomness import RandomSource
from ..engine_core.state import GameState
from ..games import GAMES, create_game
from ..players import PLAYER_TYPES, PRESETS, Player, build_player

logger = logging.getLogger(__name__)


def _first_line(text: str | None) -> str:
    return (text or "").strip().splitlines()[0] if text and text.strip() else ""


def _finite(value: float) -> float | None:
    return None if math.isnan(value) else value


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        response = await service.play_match(MatchRequest(
            game="tictactoe",
            players=[PlayerConfig(kind="random"), PlayerConfig(kind="alphabeta")],
        ))
    """
    # Maximum matches played by one tournament request
    max_matches: int = 1000

    def list_games(self) -> GameListResponse:
        games = []
        for name, factory in GAMES.items():
            initial = factory()
            games.append(GameInfo(
                name=name,
                title=initial.name,
                roles=list(initial.roles),
                simultaneous=initial.is_simultaneous,
                deterministic=initial.is_deterministic,
            ))
        return GameListResponse(games=games, count=len(games))

    def list_players(self) -> PlayerListResponse:
        return PlayerListResponse(
            players=[
                PlayerTypeInfo(kind=kind, description=_first_line(cls.__doc__))
                for kind, cls in PLAYER_TYPES.items()
            ],
            presets=[
                PresetInfo(
                    name=settings.name,
                    description=settings.description,
                    horizon=settings.horizon,
                    simulation_count=settings.simulation_count,
                    time_cap=settings.time_cap,
                )
                for settings in PRESETS.values()
            ],
        )

    async def play_match(self, request: MatchRequest) -> MatchResponse | ErrorResponse:
        """Play one match to the end and report every ply."""
        random = RandomSource(request.seed)
        game = self._create_game(request.game, request.game_options)
        if isinstance(game, ErrorResponse):
            return game
        players = self._build_players(request.players, game, random)
        if isinstance(players, ErrorResponse):
            return players
        try:
            match = Match(game, players, random=random.spawn())
        except ValueError as exc:
            return ErrorResponse(error=str(exc), error_code=ErrorCode.INVALID_CONFIGURATION)

        try:
            await match.run()
        except LudusError as exc:
            logger.warning("Match %s failed: %s", match.match_id, exc)
            return ErrorResponse(
                error=str(exc),
                error_code=ErrorCode.CONTRACT_VIOLATION,
                details={"match_id": match.match_id, "ply": match.ply},
            )
        return self._match_to_response(match)

    async def run_tournament(self, request: TournamentRequest) -> TournamentResponse | ErrorResponse:
        """Run a tournament, capped at max_matches matches."""
        random = RandomSource(request.seed)
        game = self._create_game(request.game, request.game_options)
        if isinstance(game, ErrorResponse):
            return game
        players = self._build_players(request.players, game, random)
        if isinstance(players, ErrorResponse):
            return players

        try:
            if request.kind == TournamentKind.MEASUREMENT:
                opponents = self._build_players(request.opponents, game, random, prefix="opponent-")
                if isinstance(opponents, ErrorResponse):
                    return opponents
                tournament = Measurement(
                    game, players, opponents, match_count=request.match_count, random=random.spawn(),
                )
            elif request.kind == TournamentKind.ELIMINATION:
                tournament = Elimination(
                    game, players, match_count=request.match_count, random=random.spawn(),
                )
            else:
                tournament = RoundRobin(
                    game, players, match_count=request.match_count, random=random.spawn(),
                )
        except ValueError as exc:
            return ErrorResponse(error=str(exc), error_code=ErrorCode.INVALID_CONFIGURATION)

        try:
            statistics = await tournament.run(matches=self.max_matches)
        except ValueError as exc:
            # Raised while scheduling, e.g. a player that cannot play the game
            return ErrorResponse(error=str(exc), error_code=ErrorCode.INVALID_CONFIGURATION)

        champion = getattr(tournament, "champion", None)
        return TournamentResponse(
            game=request.game,
            kind=request.kind,
            matches_played=tournament.played,
            truncated=tournament.truncated,
            statistics=self._statistics_rows(statistics),
            failures=[
                FailureInfo(
                    match_id=f.match_id,
                    players=f.players,
                    error_type=f.error_type,
                    message=f.message,
                )
                for f in tournament.failures
            ],
            champion=champion.name if champion else None,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _create_game(self, name: str, options: dict[str, Any]) -> GameState | ErrorResponse:
        if name.lower() not in GAMES:
            return ErrorResponse(
                error=f"Unknown game {name!r}",
                error_code=ErrorCode.UNKNOWN_GAME,
                details={"available": sorted(GAMES)},
            )
        try:
            return create_game(name, **options)
        except (TypeError, ValueError) as exc:
            return ErrorResponse(
                error=f"Invalid options for {name}: {exc}",
                error_code=ErrorCode.INVALID_CONFIGURATION,
            )

    def _build_players(
        self,
        configs: list[PlayerConfig],
        game: GameState,
        random: RandomSource,
        prefix: str = "",
    ) -> list[Player] | ErrorResponse:
        players = []
        for i, config in enumerate(configs):
            try:
                players.append(build_player(
                    config.kind,
                    random=random.spawn(),
                    preset=config.preset,
                    game=game,
                    name=config.name or f"{prefix}{config.kind}{i}",
                    horizon=config.horizon,
                    simulation_count=config.simulation_count,
                    time_cap=config.time_cap,
                ))
            except ValueError as exc:
                return ErrorResponse(
                    error=str(exc),
                    error_code=ErrorCode.UNKNOWN_PLAYER,
                    details={"index": i, "kind": config.kind},
                )
        return players

    def _match_to_response(self, match: Match) -> MatchResponse:
        plies = [
            PlyInfo(ply=i, actions=entry.actions or {}, haps=entry.haps)
            for i, entry in enumerate(match.history)
            if entry.actions is not None
        ]
        return MatchResponse(
            match_id=match.match_id,
            game=match.game.name,
            status=match.state.value,
            players={role: player.name for role, player in match.players.items()},
            result=match.result(),
            length=match.ply,
            plies=plies,
        )

    def _statistics_rows(self, statistics: Statistics) -> list[StatRow]:
        return [
            StatRow(
                keys=entry.keys,
                count=entry.count,
                sum=entry.sum,
                mean=_finite(entry.mean),
                min=_finite(entry.min),
                max=_finite(entry.max),
                variance=_finite(entry.variance),
            )
            for entry in statistics.entries()
        ]
