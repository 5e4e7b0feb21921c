"""Strategy supports and mixed strategy profiles."""

from .support import StrategySupportProfile
from .pure import PureStrategyProfile, strategy_contingencies
from .rep import MixedStrategyProfileRep
from .table_rep import TableMixedStrategyProfileRep
from .tree_rep import TreeMixedStrategyProfileRep
from .mixed import MixedStrategyProfile
from .behavior import MixedBehaviorProfile

__all__ = [
    "StrategySupportProfile",
    "PureStrategyProfile", "strategy_contingencies",
    "MixedStrategyProfileRep", "TableMixedStrategyProfileRep", "TreeMixedStrategyProfileRep",
    "MixedStrategyProfile", "MixedBehaviorProfile",
]
