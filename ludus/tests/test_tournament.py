"""
Tests for tournaments.

Tests:
- RoundRobin, Measurement and Elimination schedules
- Statistics accounted per game, role and player
- Failed matches are recorded without stopping the tournament
- Event hooks
"""

import pytest

from ..driver import Elimination, Measurement, RoundRobin
from ..engine_core.randomness import RandomSource
from ..games import Choose2Win, Predefined
from ..players import FirstLegalPlayer, RandomPlayer, TracePlayer


def _players(*names):
    return [FirstLegalPlayer(name=name) for name in names]


class TestRoundRobin:
    """Tests for round-robin tournaments."""

    def test_every_arrangement_is_played(self):
        seen = []
        tournament = RoundRobin(
            Choose2Win(),
            _players("a", "b"),
            match_count=2,
            random=RandomSource(1),
            before_match=lambda match, t: seen.append(
                tuple(player.name for player in match.players.values())
            ),
        )
        tournament.play()
        assert tournament.played == 4
        assert seen == [("a", "b"), ("b", "a"), ("a", "b"), ("b", "a")]

    def test_default_match_count_is_role_count(self):
        tournament = RoundRobin(Choose2Win(), _players("a", "b", "c"), random=RandomSource(1))
        tournament.play()
        assert tournament.played == 2 * 6

    def test_statistics(self):
        tournament = RoundRobin(Choose2Win(), _players("a", "b"), match_count=2, random=RandomSource(1))
        statistics = tournament.play()
        # The first role always wins by choosing to
        victories = statistics.get("victories", player="a")
        assert victories.count == 2
        assert statistics.get("defeats", player="a").count == 2
        assert statistics.get("draws", player="a").count == 0
        assert statistics.get("results", player="a").mean == 0.0
        assert statistics.get("results", role="This").mean == 1.0
        assert statistics.get("length", game="Choose2Win").mean == 1.0
        width = statistics.get("width", player="b")
        assert (width.count, width.mean) == (2, 3.0)

    def test_draws(self):
        game = Predefined(final_result={"First": 0.0, "Second": 0.0}, height=2, width=2)
        statistics = RoundRobin(game, _players("a", "b"), match_count=1).play()
        assert statistics.get("draws").count == 4
        assert statistics.get("length").mean == 2.0

    def test_match_limit(self):
        tournament = RoundRobin(Choose2Win(), _players("a", "b"), match_count=5)
        tournament.play(matches=3)
        assert tournament.played == 3
        assert tournament.truncated

    def test_limit_matching_the_schedule_is_not_truncation(self):
        tournament = RoundRobin(Choose2Win(), _players("a", "b"), match_count=1)
        tournament.play(matches=2)
        assert tournament.played == 2
        assert not tournament.truncated

    def test_not_enough_players(self):
        with pytest.raises(ValueError):
            RoundRobin(Choose2Win(), _players("a"))

    def test_no_players(self):
        with pytest.raises(ValueError):
            RoundRobin(Choose2Win(), [])


class TestFailures:
    """Tests for matches that fail during a tournament."""

    def test_failures_are_recorded_and_play_continues(self):
        cheater = TracePlayer(["cheat"], name="cheater")
        honest = FirstLegalPlayer(name="honest")
        tournament = RoundRobin(Choose2Win(), [cheater, honest], match_count=1)
        statistics = tournament.play()

        assert tournament.played == 2
        assert len(tournament.failures) == 1
        failure = tournament.failures[0]
        assert failure.error_type == "InvalidAction"
        assert failure.players == {"This": "cheater", "That": "honest"}
        assert statistics.get("aborted").count == 2
        assert statistics.get("results", player="honest").count == 1


class TestMeasurement:
    """Tests for measuring players against fixed opponents."""

    def test_schedule(self):
        seen = []
        tournament = Measurement(
            Choose2Win(),
            _players("a"),
            opponents=_players("b", "c"),
            match_count=1,
            before_match=lambda match, t: seen.append(
                tuple(player.name for player in match.players.values())
            ),
        )
        tournament.play()
        assert seen == [("a", "b"), ("b", "a"), ("a", "c"), ("c", "a")]

    def test_not_enough_opponents(self):
        with pytest.raises(ValueError):
            Measurement(Choose2Win(), _players("a"), opponents=[])


class TestElimination:
    """Tests for single-elimination contests."""

    def test_champion(self):
        tournament = Elimination(
            Choose2Win(), _players("a", "b", "c", "d"), random=RandomSource(7),
        )
        tournament.play()
        assert tournament.played == 3
        assert tournament.champion is not None
        assert tournament.champion.name in {"a", "b", "c", "d"}

    def test_odd_player_count(self):
        players = [RandomPlayer(name=name, random=RandomSource(i)) for i, name in enumerate("abc")]
        tournament = Elimination(Choose2Win(), players, match_count=2, random=RandomSource(3))
        tournament.play()
        # Two brackets of two matches, then a final of two matches
        assert tournament.played == 6
        assert tournament.champion is not None

    def test_names_must_be_distinct(self):
        with pytest.raises(ValueError, match="distinct"):
            Elimination(Choose2Win(), _players("a", "a"))

    def test_match_count_must_be_positive(self):
        with pytest.raises(ValueError):
            Elimination(Choose2Win(), _players("a", "b"), match_count=0)

    def test_single_role_games_are_rejected(self):
        solo = Predefined(final_result={"Solo": 1.0}, height=1, width=1)
        with pytest.raises(ValueError, match="two roles"):
            Elimination(solo, _players("a", "b"))


class TestHooks:
    """Tests for tournament events."""

    def test_hooks_are_called(self):
        events = []
        tournament = RoundRobin(
            Choose2Win(),
            _players("a", "b"),
            match_count=1,
            on_begin=lambda t: events.append("begin"),
            before_match=lambda m, t: events.append("before"),
            after_match=lambda m, t: events.append("after"),
            on_end=lambda stats, t: events.append("end"),
        )
        tournament.play()
        assert events == ["begin", "before", "after", "before", "after", "end"]
