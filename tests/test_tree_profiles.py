"""
Unit tests for mixed strategy profiles over tree games.

Tests verify:
1. Tree payoffs weight outcomes by chance and strategy probabilities
2. Tree and table payoff engines agree on the same strategic form
3. Behavior profiles convert to equivalent mixed profiles
4. Payoff edits are seen, structural edits invalidate the profile
"""

from fractions import Fraction

import numpy as np
import pytest

from stratspace.data import from_nfg_string
from stratspace.exceptions import InvalidatedReference, UndefinedOperation
from stratspace.games import TableGame, TreeGame, centipede, kuhn_poker
from stratspace.profiles import (
    MixedBehaviorProfile, MixedStrategyProfile, TreeMixedStrategyProfileRep,
)


def chance_game() -> TreeGame:
    """
    Chance picks left (1/3) or right (2/3); P1 then moves without knowing
    the other branch. Strategy payoffs: 11 -> 1, 12 -> 5, 21 -> 0, 22 -> 4.
    """
    game = TreeGame(title="Chance", players=["P1"])
    game.append_chance(game.root, ["1/3", "2/3"], labels=["left", "right"])
    left, right = game.root.children
    game.append_move(left, 1, ["x", "y"])
    game.append_move(right, 1, ["u", "v"])
    for node, payoff in zip(left.children + right.children, [3, 0, 0, 6]):
        game.set_outcome(node, game.new_outcome([payoff]))
    return game


def two_stage_game() -> TreeGame:
    game = TreeGame(title="Two stage", players=["P1", "P2"])
    game.append_move(game.root, 1, ["L", "R"])
    left, right = game.root.children
    game.append_move(left, 2, ["a", "b"])
    a, b = left.children
    game.set_outcome(a, game.new_outcome([1, 2]))
    game.set_outcome(b, game.new_outcome([0, 0]))
    game.set_outcome(right, game.new_outcome([2, 1]))
    return game


class TestTreePayoffs:
    """Tests for the tree payoff engine."""

    def test_uses_tree_rep(self):
        profile = chance_game().mixed_strategy_profile()
        assert isinstance(profile._rep, TreeMixedStrategyProfileRep)

    def test_chance_weighted_strategy_values(self):
        game = chance_game()
        profile = game.mixed_strategy_profile("rational")
        values = {s.label: profile.strategy_value(s) for s in game.player(1).strategies}
        assert values == {"11": 1, "12": 5, "21": 0, "22": 4}
        assert profile.payoff(1) == Fraction(5, 2)
        assert profile.player_regret(1) == Fraction(5, 2)

    def test_pure_payoffs_match_strategy_values(self):
        game = chance_game()
        pure = {p.strategies[0].label: p.payoff(1) for p in game.contingencies()}
        assert pure == {"11": 1, "12": 5, "21": 0, "22": 4}

    def test_interior_outcomes_accumulate(self):
        game = TreeGame(players=["P1", "P2"])
        game.append_move(game.root, 1, ["L", "R"])
        game.set_outcome(game.root, game.new_outcome([1, -1]))
        left, right = game.root.children
        game.set_outcome(left, game.new_outcome([2, 0]))
        game.set_outcome(right, game.new_outcome([0, 3]))

        profile = game.mixed_strategy_profile("rational")
        assert profile.strategy_value(game.player(1).strategy(1)) == 3
        assert profile.strategy_value(game.player(1).strategy(2)) == 1
        assert profile.payoff(1) == 2
        assert profile.payoff(2) == Fraction(1, 2)

    def test_unreached_moves(self):
        """Strategies that end the game early ignore the other player's plan."""
        game = two_stage_game()
        profile = game.mixed_strategy_profile("rational")
        left, right = game.player(1).strategies
        a, b = game.player(2).strategies
        assert profile.strategy_value(right) == 2
        assert profile.strategy_value(left) == Fraction(1, 2)
        assert profile.payoff(2) == Fraction(1, 2) * 1 + Fraction(1, 4) * 2
        assert profile.payoff_deriv(2, a) == Fraction(3, 2)
        assert profile.payoff_deriv2(1, left, a) == 1
        assert profile.payoff_deriv2(2, right, b) == 1
        assert profile.payoff_deriv2(1, left, right) == 0

    def test_centipede_equilibrium(self):
        game = centipede(4)
        profile = game.mixed_strategy_profile("rational")
        for player in game.players:
            for strategy in player.strategies:
                profile[strategy] = 1 if strategy.label == "1*" else 0
        assert profile.payoff(1) == 4
        assert profile.payoff(2) == 1
        assert profile.max_regret() == 0
        assert profile.liap_value() == 0

    def test_centipede_centroid_has_regret(self):
        game = centipede(4)
        profile = game.mixed_strategy_profile()
        assert profile.max_regret() > 0
        assert profile.liap_value() > 0


class TestAgreement:
    """Tree and table engines on the same strategic form."""

    @pytest.fixture(scope="class")
    def kuhn_pair(self):
        tree = kuhn_poker()
        table = from_nfg_string(tree.to_nfg_string())
        return tree, table

    def test_same_strategies(self, kuhn_pair):
        tree, table = kuhn_pair
        assert isinstance(table, TableGame)
        for tree_player, table_player in zip(tree.players, table.players):
            assert [s.label for s in tree_player.strategies] == \
                [s.label for s in table_player.strategies]

    def test_exact_centroid_agrees(self, kuhn_pair):
        tree, table = kuhn_pair
        exact = tree.mixed_strategy_profile("rational")
        assert exact.payoff(1) + exact.payoff(2) == 0
        assert exact.payoff(1) == table.mixed_strategy_profile("rational").payoff(1)

    def test_random_profiles_agree(self, kuhn_pair):
        tree, table = kuhn_pair
        rng = np.random.default_rng(7)
        for _ in range(3):
            tree_profile = tree.mixed_strategy_profile()
            table_profile = table.mixed_strategy_profile()
            for tree_player, table_player in zip(tree.players, table.players):
                probs = rng.dirichlet(np.ones(tree_player.num_strategies))
                for s, t, p in zip(tree_player.strategies, table_player.strategies, probs):
                    tree_profile[s] = p
                    table_profile[t] = p

            for number in (1, 2):
                assert tree_profile.payoff(number) == pytest.approx(table_profile.payoff(number))
                assert tree_profile.player_regret(number) == \
                    pytest.approx(table_profile.player_regret(number))
            assert tree_profile.liap_value() == pytest.approx(table_profile.liap_value())


class TestBehaviorProfiles:
    """Tests for behavior profiles and their mixed equivalents."""

    def test_centroid(self):
        game = chance_game()
        behavior = MixedBehaviorProfile(game, "rational")
        x, y = game.player(1).infoset(1).actions
        assert behavior[x] == Fraction(1, 2)
        np.testing.assert_array_equal(behavior.infoset_probs(game.player(1).infoset(2)),
                                      [Fraction(1, 2), Fraction(1, 2)])

    def test_to_mixed_strategy(self):
        game = chance_game()
        behavior = MixedBehaviorProfile(game, "rational")
        x, y = game.player(1).infoset(1).actions
        behavior[x], behavior[y] = Fraction(1, 4), Fraction(3, 4)

        mixed = MixedStrategyProfile.from_behavior(behavior)
        probs = {s.label: mixed[s] for s in game.player(1).strategies}
        assert probs == {"11": Fraction(1, 8), "12": Fraction(1, 8),
                         "21": Fraction(3, 8), "22": Fraction(3, 8)}
        assert mixed.payoff(1) == Fraction(9, 4)

    def test_kuhn_centroid_sums_to_one(self):
        game = kuhn_poker()
        mixed = MixedBehaviorProfile(game, "rational").to_mixed_strategy()
        for player in game.players:
            assert sum(mixed[player]) == 1
        assert mixed.payoff(1) + mixed.payoff(2) == 0

    def test_unreached_infosets_do_not_count(self):
        game = two_stage_game()
        behavior = MixedBehaviorProfile(game, "rational")
        left_action, right_action = game.player(1).infoset(1).actions
        behavior[left_action], behavior[right_action] = 0, 1
        mixed = behavior.to_mixed_strategy()
        assert mixed[game.player(1).strategy(2)] == 1
        assert mixed.payoff(1) == 2

    def test_unknown_action(self):
        game = chance_game()
        behavior = MixedBehaviorProfile(game)
        chance_action = game.root.infoset.action(1)
        with pytest.raises(KeyError):
            _ = behavior[chance_action]
        with pytest.raises(KeyError):
            behavior[chance_action] = 0.5

    def test_table_game_refused(self):
        with pytest.raises(UndefinedOperation):
            MixedBehaviorProfile(TableGame([2, 2]))


class TestTreeEdits:
    """Profiles follow edits to the tree."""

    def test_outcome_edit_is_seen(self):
        game = chance_game()
        profile = game.mixed_strategy_profile("rational")
        assert profile.payoff(1) == Fraction(5, 2)
        game.outcomes[0][1] = 9
        # Outcome x now pays 9: strategy values 3, 7, 0, 4
        assert profile.payoff(1) == Fraction(7, 2)

    def test_chance_probability_edit_is_seen(self):
        game = chance_game()
        profile = game.mixed_strategy_profile("rational")
        strategies = game.player(1).strategies
        assert profile.payoff(1) == Fraction(5, 2)
        game.set_chance_probs(game.root.infoset, ["2/3", "1/3"])
        assert profile.payoff(1) == 2
        assert profile.strategy_value(strategies[1]) == 4
        assert all(s.is_valid for s in strategies)

    def test_structural_edit_invalidates(self):
        game = two_stage_game()
        profile = game.mixed_strategy_profile()
        profile.payoff(1)
        game.append_move(game.root.children[1], 1, ["x", "y"])
        with pytest.raises(InvalidatedReference):
            profile.payoff(1)
        with pytest.raises(InvalidatedReference):
            _ = profile[game.player(2).strategy(1)]
