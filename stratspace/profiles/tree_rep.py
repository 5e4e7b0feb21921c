"""Payoffs of mixed profiles over a tree game, by recursion over the tree."""

from typing import Dict, Tuple

from .rep import MixedStrategyProfileRep
from ..games.base import GamePlayer, GameStrategy

# Per player: supported strategies still consistent with the path, with their probabilities
Candidates = Dict[GamePlayer, Tuple[Tuple[GameStrategy, object], ...]]


class TreeMixedStrategyProfileRep(MixedStrategyProfileRep):
    """
    Tree-recursive payoff engine.

    Walking down from the root, each player's candidates shrink to the
    strategies whose behavior agrees with the actions taken so far. The
    probability of reaching a node is the product of the chance
    probabilities on the path and of each player's remaining candidate
    mass, which equals the product of that player's behavior
    probabilities along the path. Outcome payoffs are weighted by it.
    """

    def _candidates(self, fixed: Dict[GamePlayer, GameStrategy]) -> Candidates:
        self._check_support()
        candidates = {}
        for player in self.game.players:
            if player in fixed:
                candidates[player] = ((fixed[player], self.numeric(1)),)
            else:
                probs = self._probs[self.support.span(player)]
                candidates[player] = tuple(zip(self.support.strategies(player), probs))
        return candidates

    def _expected(self, node, player: GamePlayer, candidates: Candidates, chance_prob):
        value = self.numeric(0)
        if node._outcome is not None:
            weight = chance_prob
            for consistent in candidates.values():
                weight *= sum((prob for _, prob in consistent), self.numeric(0))
            value += weight * self.numeric(node._outcome[player])
        if not node._children:
            return value

        infoset = node._infoset
        if infoset.is_chance:
            for action, child in zip(infoset._actions, node._children):
                value += self._expected(child, player, candidates,
                                        chance_prob * self.numeric(action._probability))
            return value

        owner = infoset._player
        position = infoset._number - 1
        for action, child in zip(infoset._actions, node._children):
            consistent = tuple(entry for entry in candidates[owner]
                               if entry[0]._behavior[position] == action._number)
            if consistent:
                value += self._expected(child, player, {**candidates, owner: consistent},
                                        chance_prob)
        return value

    def _payoff(self, player: GamePlayer, fixed: Dict[GamePlayer, GameStrategy]):
        return self._expected(self.game.root, player, self._candidates(fixed), self.numeric(1))

    def payoff(self, player: GamePlayer):
        return self._payoff(player, {})

    def payoff_deriv(self, player: GamePlayer, strategy: GameStrategy):
        strategy._check_valid()
        return self._payoff(player, {strategy._player: strategy})

    def payoff_deriv2(self, player: GamePlayer, strategy1: GameStrategy,
                      strategy2: GameStrategy):
        strategy1._check_valid()
        strategy2._check_valid()
        if strategy1._player is strategy2._player:
            return self.numeric(0)
        return self._payoff(player, {strategy1._player: strategy1,
                                     strategy2._player: strategy2})
