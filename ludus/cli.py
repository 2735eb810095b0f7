"""
Ludus CLI - Command-line interface for the engine.

Usage:
    ludus games                                   List registered games
    ludus play <game> --players a b               Play one match
    ludus tournament <game> --players a b c       Run a round-robin tournament

Player names are types from ludus.players.PLAYER_TYPES (random, first,
heuristic, minimax, alphabeta, maxn, montecarlo, uct).
"""

import argparse
import logging
import os
import sys

from .engine_core.errors import LudusError
from .engine_core.randomness import RandomSource


def configure_logging(verbose: int = 0) -> None:
    """-v for INFO, -vv for DEBUG; LUDUS_LOG_LEVEL otherwise (WARNING by default)."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, os.getenv("LUDUS_LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ludus - Turn-Based Game Search Engine",
        prog="ludus",
    )
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging (-vv for debug)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("games", help="List registered games")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play one match")
    play_parser.add_argument("game", help="Game name (see 'ludus games')")
    play_parser.add_argument("--players", nargs="+", required=True, help="One player type per role")
    play_parser.add_argument("--preset", default="default", help="quick, default or thorough")
    play_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    play_parser.add_argument("--quiet", "-q", action="store_true", help="Only print the result")

    # Tournament command
    tournament_parser = subparsers.add_parser("tournament", help="Run a round-robin tournament")
    tournament_parser.add_argument("game", help="Game name (see 'ludus games')")
    tournament_parser.add_argument("--players", nargs="+", required=True, help="Player types")
    tournament_parser.add_argument("--matches", type=int, default=1, help="Repetitions of each arrangement")
    tournament_parser.add_argument("--preset", default="quick", help="quick, default or thorough")
    tournament_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "games":
        cmd_games(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "tournament":
        cmd_tournament(args)
    else:
        parser.print_help()
        sys.exit(1)


def _setup(args):
    """Initial game state and players from the command line."""
    from .games import create_game
    from .players import build_player

    random = RandomSource(args.seed)
    try:
        game = create_game(args.game)
        players = [
            build_player(kind, random=random.spawn(), preset=args.preset, game=game, name=f"{kind}{i}")
            for i, kind in enumerate(args.players)
        ]
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)
    return random, game, players


def cmd_games(args):
    """List registered games."""
    from .games import GAMES

    for name, factory in GAMES.items():
        game = factory()
        flags = []
        if game.is_simultaneous:
            flags.append("simultaneous")
        if not game.is_deterministic:
            flags.append("chance")
        suffix = f" ({', '.join(flags)})" if flags else ""
        print(f"{name:<14} roles: {', '.join(game.roles)}{suffix}")


def cmd_play(args):
    """Play one match and print it."""
    from .driver import Match

    random, game, players = _setup(args)
    try:
        match = Match(game, players, random=random.spawn())
        match.play()
    except (LudusError, ValueError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    if not args.quiet:
        for ply, entry in enumerate(match.history):
            if entry.actions is None:
                continue
            haps = f" haps={entry.haps}" if entry.haps else ""
            print(f"{ply:>3}: {entry.actions}{haps}")
        print(str(match.current))
    print(f"Result: {match.result()}")


def cmd_tournament(args):
    """Run a round-robin tournament and print its statistics."""
    from .driver import RoundRobin

    random, game, players = _setup(args)
    try:
        tournament = RoundRobin(game, players, match_count=args.matches, random=random.spawn())
        statistics = tournament.play()
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(1)

    print(statistics.to_tsv(), end="")
    if tournament.failures:
        print(f"\n{len(tournament.failures)} match(es) failed:")
        for failure in tournament.failures:
            print(f"  - {failure.match_id}: {failure.error_type}: {failure.message}")


if __name__ == "__main__":
    main()
