"""
Tests for the players.

Tests:
- Baseline and trace players
- Heuristics, quiescence and playouts
- HeuristicPlayer, MiniMax, AlphaBeta and MaxN values and choices
- Monte Carlo and UCT sampling
- Settings presets and the player factory
"""

import asyncio
import math

import pytest

from ..engine_core.game_tree import GameTree
from ..engine_core.randomness import RandomSource
from ..games import Pig, Predefined, TicTacToe
from ..players import (
    AlphaBetaPlayer,
    FirstLegalPlayer,
    HeuristicPlayer,
    MaxNPlayer,
    MiniMaxPlayer,
    MonteCarloPlayer,
    PLAYER_TYPES,
    PRESETS,
    QuiescenceEvaluator,
    RandomPlayer,
    SearchSettings,
    Simulator,
    TracePlayer,
    UCTPlayer,
    build_player,
    composite_heuristic,
    get_settings,
    zero_heuristic,
)
from ..players.evaluator import SimulationResult, clamp
from ..players.montecarlo import UCTNode
from .conftest import play_moves


def _search_players():
    return [
        HeuristicPlayer(random=RandomSource(1)),
        MiniMaxPlayer(horizon=2, random=RandomSource(1)),
        AlphaBetaPlayer(horizon=2, random=RandomSource(1)),
        MaxNPlayer(horizon=2, random=RandomSource(1)),
        MonteCarloPlayer(simulation_count=20, time_cap=None, random=RandomSource(1)),
        UCTPlayer(simulation_count=200, time_cap=None, random=RandomSource(1)),
    ]


class TestBaselinePlayers:
    """Tests for the simple players."""

    def test_random_player_is_legal(self, tictactoe, rng):
        player = RandomPlayer(random=rng)
        for _ in range(20):
            assert player.select_action(tictactoe, "Xs") in tictactoe.actions("Xs")

    def test_first_legal_player(self, choose2win):
        assert FirstLegalPlayer().select_action(choose2win, "This") == "win"

    def test_decision_delegates_to_select_action(self, choose2win):
        action = asyncio.run(FirstLegalPlayer().decision(choose2win, "This"))
        assert action == "win"

    def test_default_names_are_unique(self):
        assert RandomPlayer().name != RandomPlayer().name
        assert RandomPlayer(name="bob").name == "bob"

    def test_trace_then_fallback(self, choose2win):
        player = TracePlayer(["pass"], fallback=FirstLegalPlayer())
        assert player.select_action(choose2win, "This") == "pass"
        assert player.select_action(choose2win, "This") == "win"

    def test_exhausted_trace(self, choose2win):
        player = TracePlayer([])
        with pytest.raises(ValueError):
            player.select_action(choose2win, "This")

    def test_participation_restarts_trace(self, choose2win):
        player = TracePlayer(["pass", "lose"])
        player.select_action(choose2win, "This")
        fresh = player.participate(None, "This")
        assert fresh is not player
        assert fresh.select_action(choose2win, "This") == "pass"


class TestEvaluation:
    """Tests for heuristics, quiescence and simulation."""

    def test_composite_heuristic(self, tictactoe):
        half = composite_heuristic((lambda s, r: 1.0, 0.5), (zero_heuristic, 0.5))
        assert half(tictactoe, "Xs") == 0.5

    def test_composite_weights_must_be_fractions(self):
        with pytest.raises(ValueError):
            composite_heuristic((zero_heuristic, 1.5))

    def test_clamp(self):
        assert clamp(3.0) == 1.0
        assert clamp(-3.0) == -1.0
        assert clamp(0.25) == 0.25

    def test_quiescence(self, choose2win):
        quiescence = QuiescenceEvaluator(horizon=2, heuristic=lambda s, r: 0.5)
        assert quiescence.evaluate(choose2win, "This", 1) is None
        assert quiescence.evaluate(choose2win, "This", 2) == 0.5
        finished = play_moves(choose2win, "win")
        assert quiescence.evaluate(finished, "That", 0) == -1.0
        assert quiescence.evaluate_all(choose2win, 2) == {"This": 0.5, "That": 0.5}

    def test_negative_horizon(self):
        with pytest.raises(ValueError):
            QuiescenceEvaluator(horizon=-1)

    def test_simulation_reaches_the_end(self, tictactoe, rng):
        result = Simulator(random=rng).simulate(tictactoe)
        assert result.finished
        assert result.state.is_terminal
        assert 5 <= result.plies <= 9
        assert result.values == result.state.result()

    def test_simulation_with_agent(self, choose2win, rng):
        result = Simulator(random=rng, agent=FirstLegalPlayer()).simulate(choose2win)
        assert result.plies == 1
        assert result.values == {"This": 1.0, "That": -1.0}

    def test_agent_simulation_samples_chance(self, small_pig, rng):
        simulator = Simulator(
            random=rng, quiescence=QuiescenceEvaluator(horizon=3), agent=FirstLegalPlayer(),
        )
        result = simulator.simulate(small_pig)
        assert result.plies <= 3

    def test_simulation_stops_at_horizon(self, tictactoe, rng):
        simulator = Simulator(random=rng, quiescence=QuiescenceEvaluator(horizon=2))
        result = simulator.simulate(tictactoe)
        assert not result.finished
        assert result.plies == 2
        assert result.values == {"Xs": 0.0, "Os": 0.0}

    def test_normalized_values(self, small_pig):
        finished = SimulationResult(
            state=small_pig, plies=3, values={"One": 11.0, "Two": -11.0}, finished=True,
        )
        assert finished.normalized() == {"One": 1.0, "Two": -1.0}
        unfinished = SimulationResult(
            state=small_pig, plies=3, values={"One": 2.0, "Two": -0.5}, finished=False,
        )
        assert unfinished.normalized() == {"One": 1.0, "Two": -0.5}


class TestImmediateWin:
    """Every deciding player takes an available win."""

    @pytest.mark.parametrize("index", range(6))
    def test_choose_to_win(self, choose2win, index):
        player = _search_players()[index]
        assert player.select_action(choose2win, "This") == "win"

    @pytest.mark.parametrize("index", range(6))
    def test_second_role_wins_too(self, choose2win, index):
        state = play_moves(choose2win, "pass")
        player = _search_players()[index]
        assert player.select_action(state, "That") == "win"


class TestHeuristicPlayer:
    """Tests for one-ply lookahead."""

    def test_prefers_center(self, tictactoe, rng):
        player = HeuristicPlayer(heuristic=TicTacToe.default_heuristic, random=rng)
        assert player.select_action(tictactoe, "Xs") == 4

    def test_simultaneous_actions_are_averaged(self, odds_and_evens, rng):
        player = HeuristicPlayer(random=rng)
        evaluated = dict(player.evaluated_actions(odds_and_evens, "Evens"))
        assert evaluated == {1: 0.0, 2: 0.0}

    def test_best_actions_keeps_ties(self):
        best = HeuristicPlayer.best_actions([("a", 0.5), ("b", 1.0), ("c", 1.0), ("d", -1.0)])
        assert best == ["b", "c"]

    def test_chance_outcomes_are_weighted(self):
        # A one loses the turn total, anything else adds to it.
        state = Pig(goal=2)
        player = HeuristicPlayer(heuristic=lambda s, r: s.turn_total / 10)
        evaluated = dict(player.evaluated_actions(state, "One"))
        assert evaluated["roll"] == pytest.approx((2 + 3 + 4 + 5 + 6) / 60)
        assert evaluated["hold"] == 0.0


class TestMiniMax:
    """Tests for MiniMax and AlphaBeta."""

    def test_takes_the_win(self):
        state = TicTacToe(board="00.11....", current=0)
        player = MiniMaxPlayer(horizon=2, random=RandomSource(3))
        assert player.select_action(state, "Xs") == 2

    def test_blocks_the_opponent(self):
        state = TicTacToe(board="0..11...0", current=0)
        for player in (MiniMaxPlayer(horizon=2), AlphaBetaPlayer(horizon=2)):
            assert player.select_action(state, "Xs") == 5

    def test_perfect_play_is_a_draw(self):
        player = AlphaBetaPlayer(horizon=9)
        assert player.state_evaluation(TicTacToe().transition({"Xs": 4}), "Xs") == 0.0

    def test_alphabeta_values_equal_minimax(self, tictactoe):
        heuristic = TicTacToe.default_heuristic
        minimax = MiniMaxPlayer(horizon=3, heuristic=heuristic)
        alphabeta = AlphaBetaPlayer(horizon=3, heuristic=heuristic)
        for action in tictactoe.actions("Xs"):
            a = minimax.action_evaluation(tictactoe, "Xs", action)
            b = alphabeta.action_evaluation(tictactoe, "Xs", action)
            assert a == pytest.approx(b)

    def test_alphabeta_prunes(self, tictactoe):
        heuristic = TicTacToe.default_heuristic
        minimax = MiniMaxPlayer(horizon=3, heuristic=heuristic, random=RandomSource(5))
        alphabeta = AlphaBetaPlayer(horizon=3, heuristic=heuristic, random=RandomSource(5))
        minimax.select_action(tictactoe, "Xs")
        alphabeta.select_action(tictactoe, "Xs")
        assert 0 < alphabeta.nodes < minimax.nodes

    def test_alphabeta_values_equal_minimax_with_chance(self, small_pig):
        heuristic = lambda s, r: (s.score(r) - s.score(s.opponent(r))) / 11
        minimax = MiniMaxPlayer(horizon=3, heuristic=heuristic)
        alphabeta = AlphaBetaPlayer(horizon=3, heuristic=heuristic)
        state = small_pig.transition({"One": "roll"}, {"die": 3})
        for action in state.actions("One"):
            a = minimax.action_evaluation(state, "One", action)
            b = alphabeta.action_evaluation(state, "One", action)
            assert a == pytest.approx(b)

    def test_simultaneous_games_are_not_supported(self, odds_and_evens):
        assert not MiniMaxPlayer().can_play(odds_and_evens)
        assert not MaxNPlayer().can_play(odds_and_evens)
        assert HeuristicPlayer().can_play(odds_and_evens)


class TestMaxN:
    """Tests for MaxN."""

    def test_maxn_equals_minimax_on_zero_sum_game(self, tictactoe):
        heuristic = TicTacToe.default_heuristic
        minimax = MiniMaxPlayer(horizon=3, heuristic=heuristic)
        maxn = MaxNPlayer(horizon=3, heuristic=heuristic)
        state = play_moves(tictactoe, 4)
        for action in state.actions("Os"):
            a = minimax.action_evaluation(state, "Os", action)
            b = maxn.action_evaluation(state, "Os", action)
            assert a == pytest.approx(b)

    def test_values_for_every_role(self):
        state = Predefined(final_result={"A": 1.0, "B": 2.0, "C": 3.0}, height=3, width=2)
        values = MaxNPlayer(horizon=5).maxn(state, 0)
        assert values == {"A": 1.0, "B": 2.0, "C": 3.0}

    def test_expected_values_over_chance(self):
        state = Pig(goal=2)
        maxn = MaxNPlayer(horizon=1, heuristic=lambda s, r: s.turn_total / 10)
        values = maxn._expected_values(state, {"One": "roll"}, 0)
        assert values["One"] == pytest.approx((2 + 3 + 4 + 5 + 6) / 60)


class TestSampling:
    """Tests for Monte Carlo and UCT."""

    def test_monte_carlo_values_are_normalized(self, tictactoe):
        player = MonteCarloPlayer(simulation_count=5, time_cap=None, random=RandomSource(2))
        for action, value in player.evaluated_actions(tictactoe, "Xs"):
            assert -1.0 <= value <= 1.0

    def test_monte_carlo_handles_chance(self, small_pig):
        player = MonteCarloPlayer(simulation_count=3, time_cap=None, random=RandomSource(2))
        assert player.select_action(small_pig, "One") in ("roll", "hold")

    def test_monte_carlo_handles_simultaneous_moves(self, odds_and_evens):
        player = MonteCarloPlayer(simulation_count=3, time_cap=None, random=RandomSource(2))
        assert player.select_action(odds_and_evens, "Odds") in (1, 2)

    def test_uct_tree_statistics(self, choose2win):
        player = UCTPlayer(simulation_count=50, time_cap=None, random=RandomSource(4))
        root = player.search(choose2win, "This")
        assert root.data.visits == 50
        assert sum(child.data.visits for child in root.children.values()) == 50
        assert len(root.children) == 3

    def test_uct_zero_time_cap_still_decides(self, choose2win):
        player = UCTPlayer(simulation_count=50, time_cap=0, random=RandomSource(4))
        assert player.select_action(choose2win, "This") in ("win", "lose", "pass")

    def test_uct_unvisited_actions_rank_last(self, choose2win):
        player = UCTPlayer(simulation_count=1, time_cap=None, random=RandomSource(4))
        values = [value for _, value in player.evaluated_actions(choose2win, "This")]
        assert sorted(values)[:2] == [-math.inf, -math.inf]

    def test_uct_handles_chance(self, small_pig):
        player = UCTPlayer(simulation_count=40, time_cap=None, random=RandomSource(6))
        root = player.search(small_pig, "One")
        assert root.data.visits == 40
        assert player.select_action(small_pig, "One") in ("roll", "hold")

    def test_ucb_rewards_exploration(self):
        player = UCTPlayer()
        assert player.ucb(1.0, 1, 10) > player.ucb(10.0, 10, 10)

    def test_simulation_count_must_be_positive(self):
        with pytest.raises(ValueError):
            MonteCarloPlayer(simulation_count=0)

    def test_uct_scores_opponent_nodes_for_the_deciding_role(self, choose2win):
        player = UCTPlayer(random=RandomSource(5))
        node = player._attach(GameTree(play_moves(choose2win, "pass")))
        node.expand()
        node.data.pending = []
        node.data.visits = 30
        this_rewards = {"win": -10.0, "lose": 10.0, "pass": 0.0}
        for child in node.children.values():
            reward = this_rewards[child.edge.action("That")]
            child.data = UCTNode(visits=10, rewards={"This": reward, "That": -reward})

        assert node.state.active_roles() == ("That",)
        assert player.select_child(node, "This").edge.action("That") == "lose"
        assert player.select_child(node, "That").edge.action("That") == "win"

    def test_more_simulations_do_not_lower_the_chosen_value(self):
        state = TicTacToe(board="00.11....", current=0)
        chosen_values = []
        for count in (10, 50, 200):
            player = UCTPlayer(simulation_count=count, time_cap=None, random=RandomSource(8))
            chosen_values.append(max(value for _, value in player.evaluated_actions(state, "Xs")))
        assert chosen_values == sorted(chosen_values)
        assert chosen_values[-1] == 1.0

        player = UCTPlayer(simulation_count=200, time_cap=None, random=RandomSource(8))
        assert player.select_action(state, "Xs") == 2

    def test_time_cap_alone_bounds_the_search(self, choose2win):
        player = UCTPlayer(simulation_count=None, time_cap=20, random=RandomSource(3))
        root = player.search(choose2win, "This")
        assert root.data.visits > 0
        assert player.select_action(choose2win, "This") in ("win", "lose", "pass")

        flat = MonteCarloPlayer(simulation_count=None, time_cap=20, random=RandomSource(3))
        assert flat.select_action(choose2win, "This") in ("win", "lose", "pass")

    def test_some_budget_is_required(self):
        with pytest.raises(ValueError):
            MonteCarloPlayer(simulation_count=None, time_cap=None)
        with pytest.raises(ValueError):
            UCTPlayer(simulation_count=None, time_cap=None)

    def test_agent_plays_the_playouts(self, choose2win):
        state = play_moves(choose2win, "pass")
        player = MonteCarloPlayer(
            simulation_count=3, time_cap=None, agent=FirstLegalPlayer(), random=RandomSource(2),
        )
        # After That passes, the agent makes This choose "win"
        assert player.evaluated_actions(state, "That") == [
            ("win", 1.0), ("lose", -1.0), ("pass", -1.0),
        ]

    def test_heuristic_agent_is_wrapped(self):
        def prefer_this(state, role):
            return 1.0 if role == "This" else -1.0

        player = UCTPlayer(agent=prefer_this, random=RandomSource(2))
        assert isinstance(player.agent, HeuristicPlayer)
        assert player.agent.heuristic is prefer_this
        assert player.agent.random is player.random

        agent = FirstLegalPlayer()
        assert MonteCarloPlayer(agent=agent).agent is agent
        assert MonteCarloPlayer().agent is None


class TestConfiguration:
    """Tests for presets and the player factory."""

    def test_presets(self):
        assert set(PRESETS) == {"quick", "default", "thorough"}
        assert PRESETS["quick"].horizon < PRESETS["thorough"].horizon

    def test_overrides(self):
        settings = get_settings("quick", horizon=3, simulation_count=None)
        assert settings.horizon == 3
        assert settings.simulation_count == PRESETS["quick"].simulation_count

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            get_settings("insane")

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            SearchSettings(name="bad", horizon=0)
        with pytest.raises(ValueError):
            SearchSettings(name="bad", time_cap=-1)
        with pytest.raises(ValueError):
            SearchSettings(name="bad", simulation_count=None, time_cap=None)

    def test_time_only_settings(self):
        timed = SearchSettings(name="timed", simulation_count=None, time_cap=50)
        player = build_player("uct", preset=timed)
        assert player.simulation_count is None
        assert player.time_cap == 50

    @pytest.mark.parametrize("kind", sorted(PLAYER_TYPES))
    def test_build_every_type(self, kind):
        player = build_player(kind, random=RandomSource(0), preset="quick")
        assert isinstance(player, PLAYER_TYPES[kind])
        assert player.name == kind

    def test_settings_reach_players(self):
        player = build_player("uct", preset="quick", exploration_constant=0.5)
        assert player.simulation_count == PRESETS["quick"].simulation_count
        assert player.exploration_constant == 0.5
        assert build_player("alphabeta", preset="thorough").horizon == 6

    def test_game_default_heuristic(self, tictactoe, choose2win):
        assert build_player("minimax", game=tictactoe).heuristic is TicTacToe.default_heuristic
        assert build_player("minimax", game=choose2win).heuristic is zero_heuristic

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown player type"):
            build_player("oracle")
