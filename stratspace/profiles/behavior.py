"""Behavior strategy profiles of tree games."""

from typing import Dict

import numpy as np

from ..config import resolve_numeric
from ..exceptions import UndefinedOperation
from ..games.tree import TreeAction, TreeInfoset


class MixedBehaviorProfile:
    """
    Independent action probabilities at each personal information set.

    Initialised to the centroid: every action of an information set
    equally likely.
    """

    def __init__(self, game, numeric=None):
        if not game.is_tree:
            raise UndefinedOperation("Behavior profiles are defined only for tree games")
        self._game = game
        self.numeric = resolve_numeric(numeric)
        self._probs: Dict[TreeAction, object] = {}
        self.set_centroid()

    @property
    def game(self):
        return self._game

    def set_centroid(self) -> None:
        for player in self._game.players:
            for infoset in player.infosets:
                center = self.numeric(1) / infoset.num_actions
                for action in infoset.actions:
                    self._probs[action] = center

    def __getitem__(self, action: TreeAction):
        if action not in self._probs:
            raise KeyError(f"{action!r} is not a personal action of this profile's game")
        return self._probs[action]

    def __setitem__(self, action: TreeAction, value) -> None:
        if action not in self._probs:
            raise KeyError(f"{action!r} is not a personal action of this profile's game")
        self._probs[action] = self.numeric(value)

    def infoset_probs(self, infoset: TreeInfoset) -> np.ndarray:
        return np.array([self[action] for action in infoset.actions])

    def to_mixed_strategy(self):
        """
        Equivalent mixed strategy profile over the reduced normal form.

        Each strategy gets the product of the probabilities of the actions
        it prescribes; information sets it does not reach contribute 1.
        """
        profile = self._game.mixed_strategy_profile(self.numeric)
        for player in self._game.players:
            infosets = player.infosets
            for strategy in player.strategies:
                prob = self.numeric(1)
                for infoset, choice in zip(infosets, strategy.behavior):
                    if choice > 0:
                        prob *= self[infoset.action(choice)]
                profile[strategy] = prob
        return profile
