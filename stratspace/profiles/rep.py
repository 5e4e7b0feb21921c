"""
Mixed strategy profile representations.

This module defines the payoff engine behind MixedStrategyProfile. The
probabilities live in one vector indexed densely by a support profile;
subclasses compute payoffs from the game's own representation:
- TreeMixedStrategyProfileRep: recursion over the game tree
- TableMixedStrategyProfileRep: contraction of the payoff table
"""

import copy
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from ..games.base import GamePlayer, GameStrategy


class MixedStrategyProfileRep(ABC):
    """
    Abstract base class for mixed strategy profile payoff engines.

    Regret, centroid and normalization are shared; subclasses implement
    the payoff and its derivatives.
    """

    def __init__(self, support, numeric: type = float):
        """
        Initialize at the centroid of a support.

        Args:
            support: StrategySupportProfile the probabilities range over
            numeric: Scalar type (float or Fraction)
        """
        self.support = support
        self.numeric = numeric
        self.game_version = support.game.version
        self._checked_version = self.game_version
        self._probs = self._zeros(support.mixed_profile_length)
        self.set_centroid()

    @property
    def game(self):
        return self.support.game

    def _zeros(self, length: int) -> np.ndarray:
        if self.numeric is float:
            return np.zeros(length, dtype=np.float64)
        return np.array([self.numeric(0)] * length, dtype=object)

    def _ones(self, length: int) -> np.ndarray:
        if self.numeric is float:
            return np.ones(length, dtype=np.float64)
        return np.array([self.numeric(1)] * length, dtype=object)

    def _as_numeric(self, values: np.ndarray) -> np.ndarray:
        """Convert an object array of stored payoffs to the scalar type."""
        if self.numeric is float:
            return values.astype(np.float64)
        return np.frompyfunc(self.numeric, 1, 1)(values)

    def _check_support(self) -> None:
        """Refuse to compute with strategies that left the game."""
        version = self.game.version
        if version != self._checked_version:
            self.support.check_valid()
            self._checked_version = version

    def _index(self, strategy: GameStrategy) -> Optional[int]:
        strategy._check_valid()
        return self.support.index(strategy)

    def __getitem__(self, strategy: GameStrategy):
        index = self._index(strategy)
        if index is None:
            return self.numeric(0)
        return self.numeric(self._probs[index])

    def __setitem__(self, strategy: GameStrategy, value) -> None:
        index = self._index(strategy)
        if index is None:
            raise ValueError(f"{strategy!r} is not in the support of this profile")
        self._probs[index] = self.numeric(value)

    def player_probs(self, player: GamePlayer) -> np.ndarray:
        """Probabilities of the player's supported strategies."""
        return self._probs[self.support.span(player)].copy()

    def copy(self) -> 'MixedStrategyProfileRep':
        """Copy sharing the game and support but not the probabilities."""
        rep = copy.copy(self)
        rep._probs = self._probs.copy()
        return rep

    def set_centroid(self) -> None:
        """Spread each player's probability evenly over their supported strategies."""
        for player in self.support.players:
            span = self.support.span(player)
            self._probs[span] = self.numeric(1) / (span.stop - span.start)

    def normalize(self) -> 'MixedStrategyProfileRep':
        """
        Copy with each player's probabilities scaled to sum to one.

        A player whose probabilities sum to exactly zero is left as is.
        """
        norm = self.copy()
        for player in self.support.players:
            span = self.support.span(player)
            total = self._probs[span].sum()
            if total == 0:
                continue
            norm._probs[span] = self._probs[span] / total
        return norm

    @abstractmethod
    def payoff(self, player: GamePlayer):
        """Expected payoff to a player."""
        ...

    @abstractmethod
    def payoff_deriv(self, player: GamePlayer, strategy: GameStrategy):
        """
        Derivative of a player's payoff with respect to one strategy's probability.

        Equals the player's expected payoff when the strategy's owner plays
        it with certainty and everybody else keeps their mixture.
        """
        ...

    @abstractmethod
    def payoff_deriv2(self, player: GamePlayer, strategy1: GameStrategy,
                      strategy2: GameStrategy):
        """
        Mixed second derivative of a player's payoff.

        Zero when both strategies belong to the same player.
        """
        ...

    def strategy_value(self, strategy: GameStrategy):
        """Payoff to a strategy's owner from playing it against the profile."""
        return self.payoff_deriv(strategy.player, strategy)

    def strategy_regret(self, strategy: GameStrategy):
        """Gain from switching to the best supported alternative of its player."""
        player = strategy.player
        payoff = self.payoff_deriv(player, strategy)
        best = payoff
        for other in self.support.strategies(player):
            if other is not strategy:
                best = max(best, self.payoff_deriv(player, other))
        return best - payoff

    def player_regret(self, player: GamePlayer):
        """Best supported pure-strategy payoff minus the expected payoff."""
        best = max(self.strategy_value(s) for s in self.support.strategies(player))
        return best - self.payoff(player)

    def max_regret(self):
        """Largest player regret; zero exactly at a Nash equilibrium of the support."""
        regret = self.numeric(0)
        for player in self.support.players:
            regret = max(regret, self.player_regret(player))
        return regret
