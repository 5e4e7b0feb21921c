"""Game representations: strategic-form tables and extensive-form trees."""

from .base import Game, GamePlayer, GameStrategy, to_number
from .table import TableGame
from .tree import TreeGame, TreeNode, TreeInfoset, TreeAction, GameOutcome
from .reduced import reduced_behaviors, behavior_label
from .catalog import (
    prisoners_dilemma, matching_pennies, kuhn_poker, centipede, GAME_CATALOG, create_game,
)

__all__ = [
    "Game", "GamePlayer", "GameStrategy", "to_number",
    "TableGame",
    "TreeGame", "TreeNode", "TreeInfoset", "TreeAction", "GameOutcome",
    "reduced_behaviors", "behavior_label",
    "prisoners_dilemma", "matching_pennies", "kuhn_poker", "centipede",
    "GAME_CATALOG", "create_game",
]
