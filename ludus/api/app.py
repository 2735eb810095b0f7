"""
FastAPI Application - REST API over the engine.

Endpoints:
    GET    /api/v1/health        Service health
    GET    /api/v1/games         Registered games
    GET    /api/v1/players       Player types and presets
    POST   /api/v1/matches       Play one match
    POST   /api/v1/tournaments   Run a tournament

Matches and tournaments run in a worker thread, so searches never block
the event loop. All responses are JSON with explicit Pydantic schemas.
Errors use ErrorResponse with a structured error code.
"""

from typing import Union
import asyncio
import os

from .. import __version__

# Environment configuration
LUDUS_ENV = os.getenv("LUDUS_ENV", "development")
LUDUS_MAX_MATCHES = int(os.getenv("LUDUS_MAX_MATCHES", "1000"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request
        from fastapi.concurrency import run_in_threadpool
        from fastapi.exceptions import RequestValidationError
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .service import APIService
    from .schemas import (
        # Request models
        MatchRequest,
        TournamentRequest,
        # Response models
        MatchResponse,
        TournamentResponse,
        GameListResponse,
        PlayerListResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )
    from ..engine_core.errors import LudusError

    app = FastAPI(
        title="Ludus Engine API",
        description="""
Turn-based game search engine: play matches and tournaments between
search and sampling players.

## Error Codes

| Code | Description |
|------|-------------|
| `UNKNOWN_GAME` | Game name not registered |
| `UNKNOWN_PLAYER` | Player type or preset not registered |
| `INVALID_CONFIGURATION` | Wrong player count, bad game options |
| `CONTRACT_VIOLATION` | A game or player broke the engine contract |
| `VALIDATION_ERROR` | Request body failed validation |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(max_matches=LUDUS_MAX_MATCHES)

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.UNKNOWN_GAME: 404,
        ErrorCode.UNKNOWN_PLAYER: 400,
        ErrorCode.INVALID_CONFIGURATION: 400,
        ErrorCode.CONTRACT_VIOLATION: 400,
        ErrorCode.VALIDATION_ERROR: 422,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def run_blocking(method, request):
        """Run a service coroutine on its own event loop; called in a worker thread."""
        return asyncio.run(method(request))

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(ErrorResponse(
            error="Invalid request",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"errors": [
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()
            ]},
        ))

    @app.exception_handler(LudusError)
    async def engine_error_handler(request: Request, exc: LudusError):
        return make_error_response(ErrorResponse(
            error=str(exc), error_code=ErrorCode.CONTRACT_VIOLATION,
        ))

    # =========================================================================
    # Catalog Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Catalog"],
        summary="List registered games",
    )
    async def list_games() -> GameListResponse:
        return api_service.list_games()

    @app.get(
        "/api/v1/players",
        response_model=PlayerListResponse,
        tags=["Catalog"],
        summary="List player types and presets",
    )
    async def list_players() -> PlayerListResponse:
        return api_service.list_players()

    # =========================================================================
    # Play Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid players or contract violation"},
            404: {"model": ErrorResponse, "description": "Unknown game"},
        },
        tags=["Play"],
        summary="Play one match",
    )
    async def play_match(request: MatchRequest) -> Union[MatchResponse, JSONResponse]:
        """
        Play one match between the configured players (one per role, in
        role order). Returns the result and every ply's actions and haps.
        """
        response = await run_in_threadpool(run_blocking, api_service.play_match, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/tournaments",
        response_model=TournamentResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Invalid players or schedule"},
            404: {"model": ErrorResponse, "description": "Unknown game"},
        },
        tags=["Play"],
        summary="Run a tournament",
    )
    async def run_tournament(request: TournamentRequest) -> Union[TournamentResponse, JSONResponse]:
        """
        Run a round-robin, measurement or elimination tournament. Failed
        matches are reported in `failures` and do not stop the tournament.
        """
        response = await run_in_threadpool(run_blocking, api_service.run_tournament, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # System Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["System"],
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="ludus-engine",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        return {
            "service": "Ludus Engine API",
            "version": __version__,
            "environment": LUDUS_ENV,
            "docs": "/api/docs",
        }

    return app


# For running directly: uvicorn ludus.api.app:app
app = create_app()
