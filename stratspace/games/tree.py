"""
Extensive-form (tree) game representation.

The tree is built top-down: every node starts terminal, and a move turns
it into a decision (or chance) node whose children correspond to the
actions of its information set. Outcomes attach to nodes; the payoff of a
play is the sum of the outcomes along it.

Strategies are not stored with the tree: each player's reduced normal form
strategy set is rebuilt from the tree the first time strategies are asked
for after a structural change.
"""

import logging
from fractions import Fraction
from typing import Dict, Iterator, List, Optional, Sequence, Union

from .base import Game, GamePlayer, GameStrategy, Number, to_number
from .reduced import behavior_label, reduced_behaviors

logger = logging.getLogger(__name__)


class TreeAction:
    """Action at an information set; chance actions carry a probability."""

    def __init__(self, infoset: 'TreeInfoset', number: int, label: str = "",
                 probability: Optional[Number] = None):
        self._infoset = infoset
        self._number = number
        self.label = label
        self._probability = probability

    @property
    def infoset(self) -> 'TreeInfoset':
        return self._infoset

    @property
    def number(self) -> int:
        return self._number

    @property
    def probability(self) -> Optional[Number]:
        return self._probability

    def __repr__(self) -> str:
        return f"<TreeAction [{self._infoset.number}:{self._number}] '{self.label}'>"


class TreeInfoset:
    """Information set: decision points one player cannot tell apart."""

    def __init__(self, player: GamePlayer, number: int, labels: Sequence[str],
                 probabilities: Optional[Sequence[Number]] = None):
        self._player = player
        self._number = number
        self.label = ""
        self._members: List['TreeNode'] = []
        if probabilities is None:
            probabilities = [None] * len(labels)
        self._actions = [
            TreeAction(self, number, label, prob)
            for number, (label, prob) in enumerate(zip(labels, probabilities), start=1)
        ]

    @property
    def player(self) -> GamePlayer:
        return self._player

    @property
    def is_chance(self) -> bool:
        return self._player.is_chance

    @property
    def number(self) -> int:
        return self._number

    @property
    def actions(self) -> List[TreeAction]:
        return list(self._actions)

    @property
    def num_actions(self) -> int:
        return len(self._actions)

    def action(self, number: int) -> TreeAction:
        """Get action by 1-based number."""
        if not 1 <= number <= len(self._actions):
            raise IndexError(f"Information set has no action {number}")
        return self._actions[number - 1]

    @property
    def members(self) -> List['TreeNode']:
        return list(self._members)

    def __repr__(self) -> str:
        return f"<TreeInfoset [{self._player.number}:{self._number}]>"


class GameOutcome:
    """Payoff vector attached to tree nodes."""

    def __init__(self, game: 'TreeGame', number: int, label: str = ""):
        self._game = game
        self._number = number
        self.label = label
        self._payoffs: Dict[GamePlayer, Number] = {}

    @property
    def number(self) -> int:
        return self._number

    def __getitem__(self, player: Union[GamePlayer, int]) -> Number:
        return self._payoffs.get(self._game.resolve_player(player), Fraction(0))

    def __setitem__(self, player: Union[GamePlayer, int], value) -> None:
        self._payoffs[self._game.resolve_player(player)] = to_number(value)
        self._game._increment_version()

    def __repr__(self) -> str:
        return f"<GameOutcome [{self._number}] '{self.label}'>"


class TreeNode:
    """Node of a game tree; terminal until a move is appended to it."""

    def __init__(self, game: 'TreeGame', parent: Optional['TreeNode'] = None):
        self._game = game
        self._parent = parent
        self._children: List['TreeNode'] = []
        self._infoset: Optional[TreeInfoset] = None
        self._outcome: Optional[GameOutcome] = None
        self.label = ""

    @property
    def game(self) -> 'TreeGame':
        return self._game

    @property
    def parent(self) -> Optional['TreeNode']:
        return self._parent

    @property
    def children(self) -> List['TreeNode']:
        return list(self._children)

    @property
    def infoset(self) -> Optional[TreeInfoset]:
        return self._infoset

    @property
    def player(self) -> Optional[GamePlayer]:
        return self._infoset.player if self._infoset is not None else None

    @property
    def outcome(self) -> Optional[GameOutcome]:
        return self._outcome

    @property
    def is_terminal(self) -> bool:
        return not self._children

    @property
    def next_sibling(self) -> Optional['TreeNode']:
        if self._parent is None:
            return None
        siblings = self._parent._children
        index = siblings.index(self)
        return siblings[index + 1] if index + 1 < len(siblings) else None

    @property
    def prior_action(self) -> Optional[TreeAction]:
        """Action leading from the parent to this node."""
        if self._parent is None:
            return None
        return self._parent._infoset._actions[self._parent._children.index(self)]

    def __repr__(self) -> str:
        return f"<TreeNode '{self.label}' terminal={self.is_terminal}>"


class TreeGame(Game):
    """Game represented by its extensive-form tree."""

    def __init__(self, title: str = "", players: Sequence[str] = ()):
        super().__init__(title)
        self._chance = GamePlayer(self, 0, "Chance")
        self._root = TreeNode(self)
        self._outcomes: List[GameOutcome] = []
        self._computed_valid = False
        for label in players:
            self.new_player(label)

    @property
    def is_tree(self) -> bool:
        return True

    @property
    def root(self) -> TreeNode:
        return self._root

    @property
    def chance(self) -> GamePlayer:
        return self._chance

    @property
    def outcomes(self) -> List[GameOutcome]:
        return list(self._outcomes)

    def nodes(self) -> Iterator[TreeNode]:
        """All nodes in depth-first preorder."""
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def resolve_player(self, player: Union[GamePlayer, int]) -> GamePlayer:
        if isinstance(player, GamePlayer) and player is self._chance:
            return player
        return super().resolve_player(player)

    def _structure_changed(self) -> None:
        self._computed_valid = False
        self._increment_version()

    # ------------------------------------------------------------------
    # Building the tree

    def new_player(self, label: str = "") -> GamePlayer:
        player = GamePlayer(self, len(self._players) + 1, label)
        self._players.append(player)
        self._structure_changed()
        return player

    def append_move(self, node: TreeNode, player: Union[GamePlayer, int],
                    actions: Union[int, Sequence[str]]) -> TreeInfoset:
        """
        Make a terminal node a decision node in a new information set.

        Args:
            node: Terminal node to extend
            player: Player who moves
            actions: Number of actions, or their labels

        Returns:
            The new information set
        """
        player = self.resolve_player(player)
        if player.is_chance:
            raise ValueError("Use append_chance for chance moves")
        labels = [str(i) for i in range(1, actions + 1)] if isinstance(actions, int) else list(actions)
        if not labels:
            raise ValueError("A move needs at least one action")
        self._check_extendable(node)

        infoset = TreeInfoset(player, len(player._infosets) + 1, labels)
        player._infosets.append(infoset)
        self._attach(node, infoset)
        return infoset

    def append_move_to_infoset(self, node: TreeNode, infoset: TreeInfoset) -> None:
        """Make a terminal node another member of an existing information set."""
        if infoset._player.game is not self:
            raise ValueError(f"{infoset!r} belongs to a different game")
        self._check_extendable(node)
        self._attach(node, infoset)

    def append_chance(self, node: TreeNode, probabilities: Sequence,
                      labels: Optional[Sequence[str]] = None) -> TreeInfoset:
        """Make a terminal node a chance node with the given action probabilities."""
        probabilities = [to_number(p) for p in probabilities]
        if not probabilities:
            raise ValueError("A chance move needs at least one action")
        if any(p < 0 for p in probabilities):
            raise ValueError(f"Chance probabilities must be nonnegative: {probabilities}")
        if labels is None:
            labels = [str(i) for i in range(1, len(probabilities) + 1)]
        elif len(labels) != len(probabilities):
            raise ValueError(f"Got {len(labels)} labels for {len(probabilities)} chance actions")
        self._check_extendable(node)

        infoset = TreeInfoset(self._chance, len(self._chance._infosets) + 1, labels, probabilities)
        self._chance._infosets.append(infoset)
        self._attach(node, infoset)
        return infoset

    def set_chance_probs(self, infoset: TreeInfoset, probabilities: Sequence) -> None:
        if not infoset.is_chance:
            raise ValueError(f"{infoset!r} is not a chance information set")
        probabilities = [to_number(p) for p in probabilities]
        if len(probabilities) != infoset.num_actions:
            raise ValueError(f"Expected {infoset.num_actions} probabilities, got {len(probabilities)}")
        if any(p < 0 for p in probabilities):
            raise ValueError(f"Chance probabilities must be nonnegative: {probabilities}")
        for action, prob in zip(infoset._actions, probabilities):
            action._probability = prob
        self._increment_version()

    def new_outcome(self, payoffs: Optional[Sequence] = None, label: str = "") -> GameOutcome:
        """Create an outcome; payoffs are given in player order."""
        outcome = GameOutcome(self, len(self._outcomes) + 1, label)
        if payoffs is not None:
            if len(payoffs) != self.num_players:
                raise ValueError(f"Expected {self.num_players} payoffs, got {len(payoffs)}")
            for player, value in zip(self._players, payoffs):
                outcome._payoffs[player] = to_number(value)
        self._outcomes.append(outcome)
        self._increment_version()
        return outcome

    def set_outcome(self, node: TreeNode, outcome: Optional[GameOutcome]) -> None:
        if outcome is not None and outcome._game is not self:
            raise ValueError(f"{outcome!r} belongs to a different game")
        node._outcome = outcome
        self._increment_version()

    def _check_extendable(self, node: TreeNode) -> None:
        if node._game is not self:
            raise ValueError(f"{node!r} belongs to a different game")
        if node._children:
            raise ValueError(f"{node!r} already has a move")

    def _attach(self, node: TreeNode, infoset: TreeInfoset) -> None:
        node._infoset = infoset
        infoset._members.append(node)
        node._children = [TreeNode(self, node) for _ in infoset._actions]
        self._structure_changed()

    # ------------------------------------------------------------------
    # Strategies

    def build_computed_values(self) -> None:
        if not self._computed_valid:
            self._build_strategies()

    def rebuild_strategies(self) -> None:
        """
        Replace every player's strategy set by its reduced normal form.

        All previously issued strategies are invalidated, and the version
        is bumped so that profiles over them stop serving cached values.
        """
        self._build_strategies()
        self._increment_version()

    def _build_strategies(self) -> None:
        # Lazy path: the structural change that got here already bumped the version
        for player in self._players:
            for strategy in player._strategies:
                strategy._invalidate()
            player._strategies = [
                GameStrategy(player, number, label=behavior_label(behavior), behavior=behavior)
                for number, behavior in enumerate(reduced_behaviors(self._root, player), start=1)
            ]
            logger.debug("Player %d of '%s' has %d reduced strategies",
                         player.number, self.title, len(player._strategies))
        self._computed_valid = True

    def _pure_payoff(self, strategies: Sequence[GameStrategy], player: GamePlayer) -> Number:
        behaviors = {s._player: s._behavior for s in strategies}
        return self._play(self._root, behaviors, player)

    def _play(self, node: TreeNode, behaviors: Dict, player: GamePlayer) -> Number:
        value = Fraction(0)
        if node._outcome is not None:
            value += node._outcome._payoffs.get(player, 0)
        if not node._children:
            return value

        infoset = node._infoset
        if infoset.is_chance:
            for action, child in zip(infoset._actions, node._children):
                value += action._probability * self._play(child, behaviors, player)
            return value
        choice = behaviors[infoset._player][infoset._number - 1]
        if choice == 0:
            raise ValueError(f"Strategy reaches {infoset!r} without choosing an action there")
        return value + self._play(node._children[choice - 1], behaviors, player)

    def __repr__(self) -> str:
        return f"TreeGame(title={self.title!r}, players={self.num_players})"
