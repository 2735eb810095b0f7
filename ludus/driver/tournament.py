"""
Tournaments - Schedule many matches and aggregate their statistics.

A tournament generates matches one at a time (matches() is consumed
lazily, so later matches can depend on earlier results), plays each one
to the end and accounts it:
- results: each role's result, per game, role and player
- victories / defeats / draws: one entry per match by sign of the result
- length: plies of the match
- width: legal actions available to the role at each of its turns
- aborted: matches that failed or were aborted

A failing match never stops the tournament; it is recorded in failures
and the next match is played.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from itertools import permutations
from typing import Any, Callable, Iterator, Sequence, TYPE_CHECKING

from ..engine_core.randomness import RandomSource
from .match import Match, MatchState
from .statistics import Statistics

if TYPE_CHECKING:
    from ..engine_core.state import GameState
    from ..players.policy import Player

logger = logging.getLogger(__name__)


@dataclass
class MatchFailure:
    """A match that did not finish."""
    match_id: str
    players: dict[str, str]
    error_type: str
    message: str


class Tournament:
    """
    Base class of all tournaments.

    Subclasses implement matches(). Hooks (on_begin, before_match,
    after_match, on_end) can be overridden or given as callables.
    """

    def __init__(
        self,
        game: GameState,
        players: Sequence[Player],
        random: RandomSource | None = None,
        statistics: Statistics | None = None,
        on_begin: Callable[[Tournament], None] | None = None,
        before_match: Callable[[Match, Tournament], None] | None = None,
        after_match: Callable[[Match, Tournament], None] | None = None,
        on_end: Callable[[Statistics, Tournament], None] | None = None,
    ):
        if not players:
            raise ValueError("A tournament needs at least one player")
        self.game = game
        self.players = list(players)
        self.random = random if random is not None else RandomSource()
        self.statistics = statistics if statistics is not None else Statistics()
        self.failures: list[MatchFailure] = []
        self.played = 0
        self.truncated = False
        self._hooks = {
            "begin": on_begin,
            "before_match": before_match,
            "after_match": after_match,
            "end": on_end,
        }

    def matches(self) -> Iterator[Match]:
        raise NotImplementedError(f"{self.__class__.__name__}.matches() is not defined")

    def new_match(self, participants: Sequence[Player]) -> Match:
        return Match(self.game, participants, random=self.random.spawn())

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_begin(self) -> None:
        logger.info("Tournament begins for game %s", self.game.name)
        if self._hooks["begin"]:
            self._hooks["begin"](self)

    def before_match(self, match: Match) -> None:
        logger.debug("Beginning match %s with %r", match.match_id, _player_names(match))
        if self._hooks["before_match"]:
            self._hooks["before_match"](match, self)

    def after_match(self, match: Match) -> None:
        logger.debug("Finishing match %s (%s)", match.match_id, match.state.value)
        if self._hooks["after_match"]:
            self._hooks["after_match"](match, self)

    def on_end(self) -> None:
        logger.info(
            "Tournament ends for game %s: %d matches, %d failed",
            self.game.name, self.played, len(self.failures),
        )
        if self._hooks["end"]:
            self._hooks["end"](self.statistics, self)

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def run(self, matches: int | None = None) -> Statistics:
        """
        Play the scheduled matches (at most `matches` of them, if given).

        Returns the accumulated statistics. truncated tells whether the
        limit left scheduled matches unplayed.
        """
        self.truncated = False
        self.on_begin()
        for match in self.matches():
            if matches is not None and self.played >= matches:
                self.truncated = True
                break
            self.before_match(match)
            try:
                await match.run()
            except Exception as exc:
                self.record_failure(match, exc)
            else:
                self.account(match)
            self.played += 1
            self.after_match(match)
        self.on_end()
        return self.statistics

    def play(self, matches: int | None = None) -> Statistics:
        """Synchronous version of run()."""
        return asyncio.run(self.run(matches))

    def account(self, match: Match) -> None:
        """Add a finished match to the statistics."""
        results = match.result()
        if results is None:
            raise ValueError(f"Match {match.match_id} has no result, has it finished?")
        game_name = self.game.name
        for role, player in match.players.items():
            keys = {"game": game_name, "role": role, "player": player.name}
            value = results[role]
            self.statistics.account({"key": "results", **keys}, value)
            outcome = "victories" if value > 0 else "defeats" if value < 0 else "draws"
            self.statistics.account({"key": outcome, **keys}, value)
            self.statistics.account({"key": "length", **keys}, match.ply)
            for entry in match.history:
                if entry.actions is None or role not in entry.actions:
                    continue
                width = len(entry.state.actions(role) or ())
                if width > 0:
                    self.statistics.account({"key": "width", **keys}, width)

    def record_failure(self, match: Match, error: Exception) -> None:
        failure = MatchFailure(
            match_id=match.match_id,
            players=_player_names(match),
            error_type=type(error).__name__,
            message=str(error),
        )
        self.failures.append(failure)
        if match.state not in (MatchState.ABORTED, MatchState.FAILED):
            match.state = MatchState.FAILED
        logger.warning("Match %s failed: %s: %s", match.match_id, failure.error_type, failure.message)
        for role, player in match.players.items():
            self.statistics.account(
                {"key": "aborted", "game": self.game.name, "role": role, "player": player.name}, 1,
            )


def _player_names(match: Match) -> dict[str, str]:
    return {role: player.name for role, player in match.players.items()}


class RoundRobin(Tournament):
    """
    Every ordered arrangement of distinct players over the game's roles,
    repeated match_count times.
    """

    def __init__(self, game: GameState, players: Sequence[Player], match_count: int | None = None, **kwargs: Any):
        super().__init__(game, players, **kwargs)
        role_count = len(game.roles)
        if len(self.players) < role_count:
            raise ValueError(f"{len(self.players)} players are not enough for {role_count} roles")
        self.match_count = match_count if match_count is not None else role_count

    def matches(self) -> Iterator[Match]:
        for _ in range(self.match_count):
            for participants in permutations(self.players, len(self.game.roles)):
                yield self.new_match(participants)


class Measurement(Tournament):
    """
    Measures players against a fixed set of opponents.

    Each measured player plays in every role position against every
    arrangement of opponents, match_count times.
    """

    def __init__(
        self,
        game: GameState,
        players: Sequence[Player],
        opponents: Sequence[Player],
        match_count: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(game, players, **kwargs)
        self.opponents = list(opponents)
        needed = len(game.roles) - 1
        if len(self.opponents) < needed:
            raise ValueError(f"{len(self.opponents)} are not enough opponents (need {needed})")
        self.match_count = match_count if match_count is not None else len(game.roles)

    def matches(self) -> Iterator[Match]:
        for _ in range(self.match_count):
            for match_opponents in permutations(self.opponents, len(self.game.roles) - 1):
                for position in range(len(match_opponents) + 1):
                    for player in self.players:
                        participants = list(match_opponents)
                        participants.insert(position, player)
                        yield self.new_match(participants)


class Elimination(Tournament):
    """
    Single-elimination contest.

    Players are shuffled and grouped into brackets of as many players as
    the game has roles (the last group is completed by repeating players).
    Each bracket plays match_count matches rotating the roles; the player
    with the highest summed result advances. The game needs at least two
    roles so every round shrinks the field. The contest ends when fewer
    players remain than the game needs.
    """

    def __init__(self, game: GameState, players: Sequence[Player], match_count: int = 1, **kwargs: Any):
        super().__init__(game, players, **kwargs)
        if len(game.roles) < 2:
            raise ValueError(f"Elimination needs a game with at least two roles, {game.name} has {len(game.roles)}")
        if match_count < 1:
            raise ValueError(f"match_count must be positive, got {match_count}")
        self.match_count = match_count
        self.champion: Player | None = None
        self._roster = {player.name: player for player in self.players}
        if len(self._roster) != len(self.players):
            raise ValueError("Elimination players must have distinct names")

    def bracket(self, players: Sequence[Player]) -> list[list[Match]]:
        role_count = len(self.game.roles)
        if len(players) < role_count:
            return []
        playoffs = []
        for start in range(0, len(players), role_count):
            participants = [players[i % len(players)] for i in range(start, start + role_count)]
            playoff = []
            for _ in range(self.match_count):
                participants.insert(0, participants.pop())
                playoff.append(self.new_match(list(participants)))
            playoffs.append(playoff)
        return playoffs

    def playoff_winner(self, playoff: Sequence[Match]) -> Player:
        """The player with the greatest summed result in the playoff."""
        totals: dict[str, float] = {}
        for match in playoff:
            result = match.result() if match.state == MatchState.FINISHED else None
            for role, player in match.players.items():
                totals.setdefault(player.name, 0.0)
                if result is not None:
                    totals[player.name] += result[role]
        winner = max(totals, key=lambda name: totals[name])
        return self._roster[winner]

    def matches(self) -> Iterator[Match]:
        players = self.random.shuffle(self.players)
        while True:
            brackets = self.bracket(players)
            if not brackets:
                break
            for playoff in brackets:
                yield from playoff
            players = [self.playoff_winner(playoff) for playoff in brackets]
            if len(players) == 1:
                self.champion = players[0]
                logger.info("Elimination champion: %s", self.champion.name)
                break
