"""
Strategy spaces of games and evaluation of mixed strategy profiles.

Builds the reduced normal form of extensive-form games and evaluates
mixed strategy profiles over table and tree games: expected payoffs,
regret and the Lyapunov function used by equilibrium solvers.
"""

from .exceptions import GameError, UndefinedOperation, InvalidatedReference, NFGParseError
from .games import Game, GamePlayer, GameStrategy, TableGame, TreeGame
from .profiles import (
    StrategySupportProfile, PureStrategyProfile, MixedStrategyProfile, MixedBehaviorProfile,
)
from .data import write_nfg, read_nfg, to_nfg_string, from_nfg_string

__version__ = "0.1.0"

__all__ = [
    "GameError", "UndefinedOperation", "InvalidatedReference", "NFGParseError",
    "Game", "GamePlayer", "GameStrategy", "TableGame", "TreeGame",
    "StrategySupportProfile", "PureStrategyProfile", "MixedStrategyProfile", "MixedBehaviorProfile",
    "write_nfg", "read_nfg", "to_nfg_string", "from_nfg_string",
]
