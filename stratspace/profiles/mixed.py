"""
Mixed strategy profiles.

A MixedStrategyProfile owns one payoff engine (its rep) and caches the
expected payoff of every player and the value of every supported
strategy. The caches are stamped with the game version they were computed
at; every accessor compares the stamp with the live version first and
starts over on a mismatch, so values computed before an edit to the game
are never returned after it.
"""

import logging
from typing import Dict, Union

from .rep import MixedStrategyProfileRep
from .table_rep import TableMixedStrategyProfileRep
from .tree_rep import TreeMixedStrategyProfileRep
from ..config import resolve_numeric
from ..games.base import GamePlayer, GameStrategy

logger = logging.getLogger(__name__)


class MixedStrategyProfile:
    """Probability distribution over each player's supported strategies."""

    def __init__(self, rep: MixedStrategyProfileRep):
        self._rep = rep
        self._cache_version = rep.game_version
        self._profile_payoffs: Dict[GamePlayer, object] = {}
        self._strategy_payoffs: Dict[GamePlayer, Dict[GameStrategy, object]] = {}

    @classmethod
    def from_support(cls, support, numeric=None) -> 'MixedStrategyProfile':
        """Centroid profile over a support; the rep follows the game's representation."""
        numeric = resolve_numeric(numeric)
        if support.game.is_tree:
            return cls(TreeMixedStrategyProfileRep(support, numeric))
        return cls(TableMixedStrategyProfileRep(support, numeric))

    @classmethod
    def from_behavior(cls, behavior) -> 'MixedStrategyProfile':
        """Mixed profile equivalent to a behavior profile of a tree game."""
        return behavior.to_mixed_strategy()

    @property
    def game(self):
        return self._rep.game

    @property
    def support(self):
        return self._rep.support

    @property
    def numeric(self) -> type:
        return self._rep.numeric

    def __len__(self) -> int:
        return self._rep.support.mixed_profile_length

    # ------------------------------------------------------------------
    # Cache discipline

    def _check_version(self) -> None:
        version = self.game.version
        if version != self._cache_version:
            self._rep.support.check_valid()
            self._invalidate_cache()
            self._cache_version = version

    def _invalidate_cache(self) -> None:
        if self._profile_payoffs:
            logger.debug("Discarding cached payoffs of %r", self)
        self._profile_payoffs.clear()
        self._strategy_payoffs.clear()

    def _compute_payoffs(self) -> None:
        if self._profile_payoffs:
            return
        for player in self.support.players:
            self._profile_payoffs[player] = self._rep.payoff(player)
            self._strategy_payoffs[player] = {
                strategy: self._rep.strategy_value(strategy)
                for strategy in self.support.strategies(player)
            }

    # ------------------------------------------------------------------
    # Probabilities

    def __getitem__(self, key: Union[GameStrategy, GamePlayer]):
        """Probability of a strategy, or a player's vector over supported strategies."""
        self._check_version()
        if isinstance(key, GamePlayer):
            return self._rep.player_probs(self.game.resolve_player(key))
        return self._rep[key]

    def __setitem__(self, strategy: GameStrategy, value) -> None:
        self._check_version()
        self._rep[strategy] = value
        self._invalidate_cache()

    def set_centroid(self) -> None:
        self._check_version()
        self._rep.set_centroid()
        self._invalidate_cache()

    def normalize(self) -> 'MixedStrategyProfile':
        """New profile with each player's probabilities summing to one."""
        self._check_version()
        return MixedStrategyProfile(self._rep.normalize())

    def to_full_support(self) -> 'MixedStrategyProfile':
        """Same profile over every strategy of the game; excluded strategies get zero."""
        self._check_version()
        full = self.game.mixed_strategy_profile(self.numeric)
        for strategy in self.game.strategies:
            full[strategy] = self._rep[strategy]
        return full

    def copy(self) -> 'MixedStrategyProfile':
        return MixedStrategyProfile(self._rep.copy())

    def __copy__(self) -> 'MixedStrategyProfile':
        return self.copy()

    def __deepcopy__(self, memo) -> 'MixedStrategyProfile':
        return self.copy()

    # ------------------------------------------------------------------
    # Payoffs and regret

    def payoff(self, player: Union[GamePlayer, int]):
        """Expected payoff to a player."""
        self._check_version()
        self._compute_payoffs()
        return self._profile_payoffs[self.game.resolve_player(player)]

    def strategy_value(self, strategy: GameStrategy):
        """Payoff to a strategy's owner from playing it against the profile."""
        self._check_version()
        if strategy in self.support:
            self._compute_payoffs()
            return self._strategy_payoffs[strategy.player][strategy]
        return self._rep.strategy_value(strategy)

    def payoff_deriv(self, player: Union[GamePlayer, int], strategy: GameStrategy):
        self._check_version()
        return self._rep.payoff_deriv(self.game.resolve_player(player), strategy)

    def payoff_deriv2(self, player: Union[GamePlayer, int], strategy1: GameStrategy,
                      strategy2: GameStrategy):
        self._check_version()
        return self._rep.payoff_deriv2(self.game.resolve_player(player), strategy1, strategy2)

    def strategy_regret(self, strategy: GameStrategy):
        """Gain from switching from a strategy to the best supported alternative."""
        self._check_version()
        self._compute_payoffs()
        values = self._strategy_payoffs[strategy.player]
        own = self.strategy_value(strategy)
        best = max([own] + [v for s, v in values.items() if s is not strategy])
        return best - own

    def player_regret(self, player: Union[GamePlayer, int]):
        """Best supported pure-strategy payoff minus the expected payoff."""
        self._check_version()
        self._compute_payoffs()
        player = self.game.resolve_player(player)
        return max(self._strategy_payoffs[player].values()) - self._profile_payoffs[player]

    def max_regret(self):
        """Largest player regret; zero exactly at a Nash equilibrium of the support."""
        self._check_version()
        regret = self.numeric(0)
        for player in self.support.players:
            regret = max(regret, self.player_regret(player))
        return regret

    def liap_value(self):
        """
        Lyapunov function of the profile.

        Sum over players and their supported strategies of the squared
        positive part of (strategy value - expected payoff). Nonnegative,
        and zero exactly when every supported strategy is a best response.
        """
        self._check_version()
        self._compute_payoffs()
        liap = self.numeric(0)
        for player, values in self._strategy_payoffs.items():
            payoff = self._profile_payoffs[player]
            for value in values.values():
                regret = value - payoff
                if regret > 0:
                    liap += regret * regret
        return liap

    def __repr__(self) -> str:
        probs = ", ".join(str(p) for p in self._rep._probs)
        return f"MixedStrategyProfile([{probs}])"
