"""Abstract base classes for game representations."""

import logging
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Iterable, Iterator, List, Optional, Sequence, TextIO, Tuple, Union

import numpy as np

from ..exceptions import InvalidatedReference, UndefinedOperation

logger = logging.getLogger(__name__)

Number = Union[int, float, Fraction]


def to_number(value) -> Number:
    """
    Normalize a payoff or probability for storage.

    Integers, rationals and numeric strings are kept exact as Fractions;
    floats stay floats.
    """
    if isinstance(value, bool):
        raise TypeError(f"Unsupported number: {value!r}")
    if isinstance(value, (Fraction, float)):
        return value
    if isinstance(value, (int, np.integer)):
        return Fraction(int(value))
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, str):
        return Fraction(value.strip())
    raise TypeError(f"Unsupported number: {value!r}")


class GameStrategy:
    """
    Normal-form strategy owned by one player.

    Tree strategies carry a behavior vector: for each of the player's
    information sets (in order), the number of the chosen action, or 0 if
    the strategy never reaches that information set.

    A strategy removed from its game (deleted, or discarded by a rebuild)
    is invalidated; every later access raises InvalidatedReference.
    """

    def __init__(self, player: 'GamePlayer', number: int, label: str = "",
                 behavior: Sequence[int] = ()):
        self._player = player
        self._number = number
        self._label = label
        self._behavior = tuple(behavior)
        self._offset = -1  # slice in a table game's payoff array, -1 until placed
        self._valid = True

    @property
    def is_valid(self) -> bool:
        if self._valid:
            # A pending tree rebuild discards this strategy
            self._player._game.build_computed_values()
        return self._valid

    def _invalidate(self) -> None:
        self._valid = False

    def _check_valid(self) -> None:
        if not self.is_valid:
            raise InvalidatedReference(
                f"Strategy '{self._label}' has been removed from its game"
            )

    @property
    def player(self) -> 'GamePlayer':
        self._check_valid()
        return self._player

    @property
    def game(self) -> 'Game':
        return self.player.game

    @property
    def number(self) -> int:
        self._check_valid()
        return self._number

    @property
    def label(self) -> str:
        self._check_valid()
        return self._label

    @label.setter
    def label(self, value: str) -> None:
        self._check_valid()
        self._label = value

    @property
    def behavior(self) -> Tuple[int, ...]:
        self._check_valid()
        return self._behavior

    def delete(self) -> None:
        """Remove this strategy from its (table) game."""
        self._check_valid()
        self._player.game.delete_strategy(self)

    def __repr__(self) -> str:
        if not self._valid:
            return f"<GameStrategy '{self._label}' (invalidated)>"
        return f"<GameStrategy [{self._player.number}:{self._number}] '{self._label}'>"


class GamePlayer:
    """
    Player of a game.

    Players are numbered from 1; tree games also have a chance player
    numbered 0 that is not listed among the game's players.
    """

    def __init__(self, game: 'Game', number: int, label: str = ""):
        self._game = game
        self._number = number
        self.label = label
        self._strategies: List[GameStrategy] = []
        self._infosets: list = []  # tree games only

    @property
    def game(self) -> 'Game':
        return self._game

    @property
    def number(self) -> int:
        return self._number

    @property
    def is_chance(self) -> bool:
        return self._number == 0

    @property
    def strategies(self) -> List[GameStrategy]:
        """Strategies in number order; rebuilt first if the game changed."""
        self._game.build_computed_values()
        return list(self._strategies)

    @property
    def num_strategies(self) -> int:
        self._game.build_computed_values()
        return len(self._strategies)

    def strategy(self, number: int) -> GameStrategy:
        """Get strategy by 1-based number."""
        strategies = self.strategies
        if not 1 <= number <= len(strategies):
            raise IndexError(f"Player {self._number} has no strategy {number}")
        return strategies[number - 1]

    @property
    def infosets(self) -> list:
        return list(self._infosets)

    @property
    def num_infosets(self) -> int:
        return len(self._infosets)

    def infoset(self, number: int):
        """Get information set by 1-based number."""
        if not 1 <= number <= len(self._infosets):
            raise IndexError(f"Player {self._number} has no information set {number}")
        return self._infosets[number - 1]

    @property
    def num_sequences(self) -> int:
        """
        Number of sequences in the sequence form.

        One empty sequence plus one per action at each of the player's
        information sets.
        """
        if not self._game.is_tree:
            raise UndefinedOperation("Sequences are defined only for tree games")
        return 1 + sum(infoset.num_actions for infoset in self._infosets)

    def new_strategy(self, label: Optional[str] = None) -> GameStrategy:
        return self._game.new_strategy(self, label)

    def __repr__(self) -> str:
        return f"<GamePlayer [{self._number}] '{self.label}'>"


class Game(ABC):
    """
    Abstract base class for game representations.

    A game owns its players and their strategies, and a version counter
    bumped exactly once by every structural or payoff change. Profiles
    compare their recorded version to the live one before serving cached
    values.
    """

    def __init__(self, title: str = ""):
        self.title = title
        self.comment = ""
        self._version = 0
        self._players: List[GamePlayer] = []

    @property
    def version(self) -> int:
        return self._version

    def _increment_version(self) -> None:
        self._version += 1
        logger.debug("Game '%s' now at version %d", self.title, self._version)

    @property
    @abstractmethod
    def is_tree(self) -> bool:
        """True for the extensive-form (tree) representation."""
        ...

    @property
    def players(self) -> List[GamePlayer]:
        return list(self._players)

    @property
    def num_players(self) -> int:
        return len(self._players)

    def player(self, number: int) -> GamePlayer:
        """Get player by 1-based number."""
        if not 1 <= number <= len(self._players):
            raise IndexError(f"Game has no player {number}")
        return self._players[number - 1]

    def resolve_player(self, player: Union[GamePlayer, int]) -> GamePlayer:
        """Accept a player of this game or its number."""
        if isinstance(player, GamePlayer):
            if player.game is not self:
                raise ValueError(f"{player!r} belongs to a different game")
            return player
        return self.player(player)

    @property
    def strategies(self) -> List[GameStrategy]:
        """All strategies, players in number order."""
        return [strategy for player in self._players for strategy in player.strategies]

    @property
    def mixed_profile_length(self) -> int:
        return sum(player.num_strategies for player in self._players)

    def build_computed_values(self) -> None:
        """Bring derived data (strategy sets) up to date with the game."""

    def new_strategy(self, player: Union[GamePlayer, int],
                     label: Optional[str] = None) -> GameStrategy:
        raise UndefinedOperation("Strategies can be added only to table games")

    def delete_strategy(self, strategy: GameStrategy) -> None:
        raise UndefinedOperation("Strategies can be deleted only from table games")

    def rebuild_strategies(self) -> None:
        raise UndefinedOperation("Reduced strategies can be built only for tree games")

    @abstractmethod
    def _pure_payoff(self, strategies: Sequence[GameStrategy], player: GamePlayer) -> Number:
        """
        Payoff to a player when each player plays one pure strategy.

        Args:
            strategies: One strategy per player, in player order
            player: Player whose payoff to return

        Returns:
            Payoff (chance-expected for tree games)
        """
        ...

    def support_profile(self, strategies: Optional[Iterable[GameStrategy]] = None):
        """Support retaining the given strategies, or all of them."""
        from ..profiles.support import StrategySupportProfile
        return StrategySupportProfile(self, strategies)

    def mixed_strategy_profile(self, numeric=None, support=None):
        """
        Create a mixed strategy profile, initialised to the centroid.

        Args:
            numeric: Scalar type or its name ("float", "rational")
            support: Support to restrict the profile to (default: full)
        """
        from ..profiles.mixed import MixedStrategyProfile
        if support is None:
            support = self.support_profile()
        return MixedStrategyProfile.from_support(support, numeric)

    def contingencies(self, support=None) -> Iterator:
        """Iterate over pure strategy profiles, player 1 varying fastest."""
        from ..profiles.pure import strategy_contingencies
        if support is None:
            support = self.support_profile()
        return strategy_contingencies(support)

    def write_nfg(self, stream: TextIO, show_progress: bool = False) -> None:
        """Write the game's strategic form to a .nfg savefile."""
        from ..data.nfg import write_nfg
        write_nfg(self, stream, show_progress=show_progress)

    def to_nfg_string(self) -> str:
        from ..data.nfg import to_nfg_string
        return to_nfg_string(self)
