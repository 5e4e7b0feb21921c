"""
Small reference games used by the tests and the experiment scripts.

Kuhn Poker is a simplified poker game:
- 3 cards: Jack (J), Queen (Q), King (K)
- 2 players, 1 card each
- Ante: 1 chip each
- Actions: Pass (check) or Bet (1 chip)
- Higher card wins at showdown

Its reduced normal form has 27 strategies for player 1 (per card: bet, or
pass and then fold/call) and 64 for player 2 (2 actions at each of 6
information sets, all of them reachable).
"""

from fractions import Fraction
from itertools import permutations
from typing import Callable, Dict, Tuple

from .base import Game
from .table import TableGame
from .tree import TreeGame, TreeNode


# Card constants
JACK = 0
QUEEN = 1
KING = 2
CARD_NAMES = ['J', 'Q', 'K']

# Action constants
PASS = 0   # Pass or Check
BET = 1    # Bet or Call
ACTION_NAMES = ['pass', 'bet']


def prisoners_dilemma() -> TableGame:
    game = TableGame.from_arrays(
        [[3, 0], [5, 1]],
        [[3, 5], [0, 1]],
        title="Prisoner's dilemma",
        player_labels=["Row", "Column"],
    )
    for player in game.players:
        for strategy, label in zip(player.strategies, ["Cooperate", "Defect"]):
            strategy.label = label
    return game


def matching_pennies() -> TableGame:
    game = TableGame.from_arrays(
        [[1, -1], [-1, 1]],
        [[-1, 1], [1, -1]],
        title="Matching pennies",
        player_labels=["Matcher", "Mismatcher"],
    )
    for player in game.players:
        for strategy, label in zip(player.strategies, ["Heads", "Tails"]):
            strategy.label = label
    return game


def kuhn_poker(ante: int = 1) -> TreeGame:
    """Kuhn Poker as an explicit tree: a chance deal, then the betting."""
    game = TreeGame(title="Kuhn poker", players=["Player 1", "Player 2"])
    deals = list(permutations([JACK, QUEEN, KING], 2))
    game.append_chance(
        game.root,
        [Fraction(1, len(deals))] * len(deals),
        labels=[CARD_NAMES[a] + CARD_NAMES[b] for a, b in deals],
    )

    infosets: Dict[Tuple[int, int, Tuple[str, ...]], object] = {}
    for node, cards in zip(game.root.children, deals):
        _kuhn_betting(game, node, cards, (), infosets, ante)
    return game


def _kuhn_betting(game: TreeGame, node: TreeNode, cards: Tuple[int, int],
                  history: Tuple[str, ...], infosets: Dict, ante: int) -> None:
    """
    Grow the betting tree below a node.

    - P1: Pass or Bet
    - If P1 Pass: P2 Pass (showdown) or Bet
    - If P1 Bet: P2 Fold (P1 wins) or Call (showdown)
    - If P1 Pass, P2 Bet: P1 Fold (P2 wins) or Call (showdown)
    """
    if history in (('p', 'p'), ('p', 'b', 'p'), ('p', 'b', 'b'), ('b', 'p'), ('b', 'b')):
        payoffs = _kuhn_payoffs(cards, history, ante)
        game.set_outcome(node, game.new_outcome(payoffs, label="".join(history)))
        return

    # P1 acts on even-length histories
    player = len(history) % 2
    key = (player, cards[player], history)
    if key in infosets:
        game.append_move_to_infoset(node, infosets[key])
    else:
        infoset = game.append_move(node, game.player(player + 1), ACTION_NAMES)
        infoset.label = CARD_NAMES[cards[player]] + "".join(history)
        infosets[key] = infoset

    for action, child in zip((PASS, BET), node.children):
        _kuhn_betting(game, child, cards, history + ('p' if action == PASS else 'b',),
                      infosets, ante)


def _kuhn_payoffs(cards: Tuple[int, int], history: Tuple[str, ...], ante: int) -> Tuple[int, int]:
    """Payoffs relative to the start of the hand (antes already paid)."""
    if history == ('b', 'p'):
        # P1 bet, P2 folded
        return ante, -ante
    if history == ('p', 'b', 'p'):
        # P1 check, P2 bet, P1 fold
        return -ante, ante

    stake = ante if history == ('p', 'p') else ante + 1
    if cards[0] > cards[1]:
        return stake, -stake
    return -stake, stake


def centipede(rounds: int = 4) -> TreeGame:
    """
    Centipede game: players alternately take the pot or pass it on.

    Taking at round k (from 0) pays the taker 2**(k+2) and the other
    player 2**k; if every round passes, both get 2**rounds.
    """
    if rounds < 1:
        raise ValueError(f"Centipede needs at least one round, got {rounds}")
    game = TreeGame(title=f"Centipede ({rounds} rounds)", players=["Player 1", "Player 2"])
    node = game.root
    for k in range(rounds):
        mover = k % 2
        game.append_move(node, game.player(mover + 1), ["take", "pass"])
        take, node = node.children
        payoffs = [2 ** k, 2 ** k]
        payoffs[mover] = 2 ** (k + 2)
        game.set_outcome(take, game.new_outcome(payoffs, label=f"take {k + 1}"))
    game.set_outcome(node, game.new_outcome([2 ** rounds, 2 ** rounds], label="pass all"))
    return game


GAME_CATALOG: Dict[str, Callable[[], Game]] = {
    "prisoners_dilemma": prisoners_dilemma,
    "matching_pennies": matching_pennies,
    "kuhn": kuhn_poker,
    "centipede": centipede,
}


def create_game(name: str) -> Game:
    """Create a catalog game by name."""
    if name not in GAME_CATALOG:
        raise ValueError(f"Unknown game: {name}. Available: {list(GAME_CATALOG.keys())}")
    return GAME_CATALOG[name]()
