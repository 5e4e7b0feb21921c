"""Strategy support profiles: per-player subsets of the strategy space."""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..exceptions import InvalidatedReference
from ..games.base import Game, GamePlayer, GameStrategy


class StrategySupportProfile:
    """
    Immutable selection of strategies, at least one per player.

    Retained strategies keep the game's order and get dense indices,
    players in number order, so each player's strategies occupy one
    contiguous span of a profile vector.
    """

    def __init__(self, game: Game, strategies: Optional[Iterable[GameStrategy]] = None):
        """
        Args:
            game: Game whose strategies to select from
            strategies: Strategies to retain (default: all)
        """
        self._game = game
        retained = None
        if strategies is not None:
            retained = set(strategies)
            for strategy in retained:
                strategy._check_valid()
                if strategy.game is not game:
                    raise ValueError(f"{strategy!r} belongs to a different game")

        self._strategies: Dict[GamePlayer, Tuple[GameStrategy, ...]] = {}
        self._spans: Dict[GamePlayer, slice] = {}
        self._index: Dict[GameStrategy, int] = {}
        start = 0
        for player in game.players:
            kept = tuple(s for s in player.strategies if retained is None or s in retained)
            if not kept:
                raise ValueError(f"Support must retain at least one strategy of player {player.number}")
            self._strategies[player] = kept
            self._spans[player] = slice(start, start + len(kept))
            for offset, strategy in enumerate(kept):
                self._index[strategy] = start + offset
            start += len(kept)
        self._length = start

    @property
    def game(self) -> Game:
        return self._game

    @property
    def players(self) -> List[GamePlayer]:
        return list(self._strategies.keys())

    @property
    def mixed_profile_length(self) -> int:
        return self._length

    def strategies(self, player: GamePlayer) -> Tuple[GameStrategy, ...]:
        """Retained strategies of a player, in game order."""
        return self._strategies[self._game.resolve_player(player)]

    def span(self, player: GamePlayer) -> slice:
        """Slice of a profile vector holding the player's retained strategies."""
        return self._spans[self._game.resolve_player(player)]

    def index(self, strategy: GameStrategy) -> Optional[int]:
        """Dense index of a strategy, or None if it is excluded."""
        return self._index.get(strategy)

    def __contains__(self, strategy: GameStrategy) -> bool:
        return strategy in self._index

    def __iter__(self) -> Iterator[GameStrategy]:
        for strategies in self._strategies.values():
            yield from strategies

    def __len__(self) -> int:
        return self._length

    def check_valid(self) -> None:
        """Raise InvalidatedReference if a retained strategy left the game."""
        for strategy in self._index:
            if not strategy.is_valid:
                raise InvalidatedReference(
                    f"Support references {strategy!r}, which has been removed from the game"
                )

    def remove(self, strategy: GameStrategy) -> 'StrategySupportProfile':
        """New support without the given strategy."""
        if strategy not in self._index:
            raise ValueError(f"{strategy!r} is not in the support")
        return StrategySupportProfile(self._game, (s for s in self if s is not strategy))

    def __repr__(self) -> str:
        counts = [len(s) for s in self._strategies.values()]
        return f"StrategySupportProfile({counts})"
