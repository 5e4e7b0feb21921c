"""Payoffs of mixed profiles over a table game, by contracting the payoff array."""

from typing import Dict

import numpy as np

from .rep import MixedStrategyProfileRep
from ..games.base import GamePlayer, GameStrategy


class TableMixedStrategyProfileRep(MixedStrategyProfileRep):
    """
    Table-lookup payoff engine.

    The expected payoff is the payoff array, restricted to the supported
    strategies, contracted with each player's probability vector in turn.
    A player held to one pure strategy contributes a single slice with
    weight one instead.
    """

    def _contract(self, player: GamePlayer, fixed: Dict[GamePlayer, GameStrategy]):
        self._check_support()
        index, vectors = [], []
        for other in self.game.players:
            if other in fixed:
                index.append([fixed[other]._offset])
                vectors.append(self._ones(1))
            else:
                index.append([s._offset for s in self.support.strategies(other)])
                vectors.append(self._probs[self.support.span(other)])

        values = self._as_numeric(self.game._payoffs[player.number - 1][np.ix_(*index)])
        for vector in reversed(vectors):
            values = values.dot(vector)
        return self.numeric(values)

    def payoff(self, player: GamePlayer):
        return self._contract(player, {})

    def payoff_deriv(self, player: GamePlayer, strategy: GameStrategy):
        strategy._check_valid()
        return self._contract(player, {strategy._player: strategy})

    def payoff_deriv2(self, player: GamePlayer, strategy1: GameStrategy,
                      strategy2: GameStrategy):
        strategy1._check_valid()
        strategy2._check_valid()
        if strategy1._player is strategy2._player:
            return self.numeric(0)
        return self._contract(player, {strategy1._player: strategy1,
                                       strategy2._player: strategy2})
