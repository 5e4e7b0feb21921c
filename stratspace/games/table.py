"""
Strategic-form (table) game representation.

Payoffs live in one dense numpy object array of shape
[num_players, n_1, ..., n_k], where n_i is player i's strategy count.
Each strategy knows the offset of its slice along its player's axis.

Adding or deleting a strategy changes the shape, so the array is rebuilt:
surviving entries are copied to their new positions, new strategies get
zero payoffs.
"""

import logging
from fractions import Fraction
from typing import List, Optional, Sequence, Union

import numpy as np

from .base import Game, GamePlayer, GameStrategy, Number, to_number
from ..exceptions import UndefinedOperation

logger = logging.getLogger(__name__)


class TableGame(Game):
    """Game represented by its payoff table."""

    def __init__(self, dimensions: Sequence[int], title: str = ""):
        """
        Create a table game with all payoffs zero.

        Args:
            dimensions: Number of strategies of each player
            title: Game title
        """
        super().__init__(title)
        if len(dimensions) == 0:
            raise ValueError("A table game needs at least one player")

        for number, count in enumerate(dimensions, start=1):
            if count < 1:
                raise ValueError(f"Player {number} needs at least one strategy, got {count}")
            player = GamePlayer(self, number)
            for st in range(1, count + 1):
                strategy = GameStrategy(player, st, label=str(st))
                strategy._offset = st - 1
                player._strategies.append(strategy)
            self._players.append(player)

        self._payoffs = np.full((len(dimensions), *dimensions), Fraction(0), dtype=object)

    @classmethod
    def from_arrays(cls, *payoffs, title: str = "",
                    player_labels: Optional[Sequence[str]] = None) -> 'TableGame':
        """
        Build a game from one payoff array per player.

        Each array has one axis per player; entry [i, j, ...] is that
        player's payoff when player 1 plays strategy i+1, player 2 plays
        strategy j+1, and so on.
        """
        arrays = [np.asarray(p, dtype=object) for p in payoffs]
        if not arrays:
            raise ValueError("Need at least one payoff array")
        shape = arrays[0].shape
        if len(arrays) != len(shape):
            raise ValueError(
                f"Got {len(arrays)} payoff arrays with {len(shape)} axes; "
                "need one array per player, each with one axis per player"
            )
        for array in arrays:
            if array.shape != shape:
                raise ValueError(f"Payoff array shapes differ: {array.shape} vs {shape}")

        game = cls(shape, title=title)
        for pl, array in enumerate(arrays):
            for index in np.ndindex(*shape):
                game._payoffs[(pl,) + index] = to_number(array[index])

        if player_labels is not None:
            if len(player_labels) != len(arrays):
                raise ValueError(f"Expected {len(arrays)} player labels, got {len(player_labels)}")
            for player, label in zip(game._players, player_labels):
                player.label = label
        return game

    @property
    def is_tree(self) -> bool:
        return False

    @property
    def shape(self) -> tuple:
        """Strategy counts per player."""
        return self._payoffs.shape[1:]

    # ------------------------------------------------------------------
    # Strategy-set mutation

    def new_strategy(self, player: Union[GamePlayer, int],
                     label: Optional[str] = None) -> GameStrategy:
        """
        Append a strategy to a player; its payoffs start at zero.

        Returns:
            The new strategy, numbered after the player's existing ones
        """
        player = self.resolve_player(player)
        strategy = GameStrategy(player, len(player._strategies) + 1)
        strategy._label = label if label is not None else str(strategy._number)
        player._strategies.append(strategy)
        self._rebuild_table()
        self._increment_version()
        return strategy

    def delete_strategy(self, strategy: GameStrategy) -> None:
        """
        Remove a strategy, renumber the rest and invalidate it.

        Raises:
            UndefinedOperation: if it is its player's only strategy
        """
        strategy._check_valid()
        player = strategy._player
        if player.game is not self:
            raise ValueError(f"{strategy!r} belongs to a different game")
        if len(player._strategies) == 1:
            raise UndefinedOperation(
                f"Cannot delete the last strategy of player {player.number}"
            )

        player._strategies.remove(strategy)
        for number, remaining in enumerate(player._strategies, start=1):
            remaining._number = number
        strategy._invalidate()
        self._rebuild_table()
        self._increment_version()

    def _rebuild_table(self) -> None:
        """Reshape the payoff array to the current strategy sets."""
        shape = (self.num_players,) + tuple(len(p._strategies) for p in self._players)
        table = np.full(shape, Fraction(0), dtype=object)

        old_index: List[List[int]] = []
        new_index: List[List[int]] = []
        for player in self._players:
            kept = [(s._offset, i) for i, s in enumerate(player._strategies) if s._offset >= 0]
            old_index.append([old for old, _ in kept])
            new_index.append([new for _, new in kept])

        all_players = list(range(self.num_players))
        table[np.ix_(all_players, *new_index)] = self._payoffs[np.ix_(all_players, *old_index)]

        for player in self._players:
            for offset, strategy in enumerate(player._strategies):
                strategy._offset = offset
        self._payoffs = table
        logger.debug("Rebuilt payoff table of '%s' with shape %s", self.title, shape[1:])

    # ------------------------------------------------------------------
    # Payoffs

    def _offsets(self, profile: Sequence[Union[GameStrategy, int]]) -> tuple:
        """Table offsets of a pure profile given as strategies or 1-based numbers."""
        if len(profile) != self.num_players:
            raise ValueError(f"Expected {self.num_players} strategies, got {len(profile)}")
        offsets = []
        for player, entry in zip(self._players, profile):
            if isinstance(entry, GameStrategy):
                entry._check_valid()
                if entry._player is not player:
                    raise ValueError(f"{entry!r} does not belong to player {player.number}")
                offsets.append(entry._offset)
            else:
                offsets.append(player.strategy(entry)._offset)
        return tuple(offsets)

    def get_payoff(self, profile: Sequence[Union[GameStrategy, int]],
                   player: Union[GamePlayer, int]) -> Number:
        player = self.resolve_player(player)
        return self._payoffs[(player.number - 1,) + self._offsets(profile)]

    def set_payoff(self, profile: Sequence[Union[GameStrategy, int]],
                   player: Union[GamePlayer, int], value) -> None:
        player = self.resolve_player(player)
        self._payoffs[(player.number - 1,) + self._offsets(profile)] = to_number(value)
        self._increment_version()

    def _pure_payoff(self, strategies: Sequence[GameStrategy], player: GamePlayer) -> Number:
        return self._payoffs[(player.number - 1,) + tuple(s._offset for s in strategies)]

    def __repr__(self) -> str:
        return f"TableGame(title={self.title!r}, shape={self.shape})"
