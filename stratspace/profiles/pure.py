"""Pure strategy profiles and contingency enumeration."""

from itertools import product
from typing import Iterator, List, Sequence, Union

from ..games.base import GamePlayer, GameStrategy, Number


class PureStrategyProfile:
    """One strategy for each player."""

    def __init__(self, game, strategies: Sequence[GameStrategy]):
        if len(strategies) != game.num_players:
            raise ValueError(f"Expected {game.num_players} strategies, got {len(strategies)}")
        self._game = game
        self._strategies: List[GameStrategy] = list(strategies)

    @property
    def game(self):
        return self._game

    @property
    def strategies(self) -> tuple:
        return tuple(self._strategies)

    def __getitem__(self, player: Union[GamePlayer, int]) -> GameStrategy:
        return self._strategies[self._game.resolve_player(player).number - 1]

    def set_strategy(self, strategy: GameStrategy) -> None:
        """Replace the entry of the strategy's player."""
        self._strategies[strategy.player.number - 1] = strategy

    def payoff(self, player: Union[GamePlayer, int]) -> Number:
        for strategy in self._strategies:
            strategy._check_valid()
        return self._game._pure_payoff(self._strategies, self._game.resolve_player(player))

    def __repr__(self) -> str:
        return f"PureStrategyProfile({[s.label for s in self._strategies]})"


def strategy_contingencies(support) -> Iterator[PureStrategyProfile]:
    """
    Enumerate every pure profile of a support.

    Strategies follow their order within the support; player 1's strategy
    varies fastest, then player 2's, and so on, matching the payoff order
    of .nfg files.
    """
    game = support.game
    choices = [support.strategies(player) for player in reversed(game.players)]
    for combo in product(*choices):
        yield PureStrategyProfile(game, combo[::-1])
