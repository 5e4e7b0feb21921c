"""
Reduced normal form strategy enumeration.

A pure strategy of the reduced normal form specifies an action only at the
information sets the strategy itself does not rule out. For one player P,
the enumeration walks the tree once:

- At P's own information sets, each action opens a separate strategy; an
  information set met again on the same pass reuses the recorded action.
- At other players' (and chance) nodes, P's plan has to cover every child,
  but the children do not multiply P's strategies: they are explored one
  after the other, continuing the same partial strategy. A stack of
  (node, child index) frames records which sibling subtrees are still
  pending; reaching a terminal resumes the innermost pending sibling.

Both the visitation map and the frame stack are passed by value, so the
tree is never modified and enumerations for different players are
independent.

Assumes the tree has no absentmindedness: a play reaches each information
set at most once.
"""

from typing import Dict, Iterator, Sequence, Tuple

Frames = Tuple[Tuple[object, int], ...]


def reduced_behaviors(root, player) -> Iterator[Tuple[int, ...]]:
    """
    Enumerate the reduced strategies of a player.

    Args:
        root: Root node of the game tree
        player: Player whose strategies to enumerate

    Yields:
        Behavior vectors, one entry per information set of the player:
        the chosen action number, or 0 where the strategy never gets there
    """
    infosets = player.infosets
    for choices in _descend(root, player, (), {}):
        yield tuple(choices.get(infoset, 0) for infoset in infosets)


def _descend(node, player, frames: Frames, choices: Dict) -> Iterator[Dict]:
    children = node._children
    if children:
        infoset = node._infoset
        if infoset._player is player:
            chosen = choices.get(infoset)
            if chosen is None:
                for number, child in enumerate(children, start=1):
                    yield from _descend(child, player, frames, {**choices, infoset: number})
            else:
                yield from _descend(children[chosen - 1], player, frames, choices)
        else:
            yield from _descend(children[0], player, frames + ((node, 0),), choices)
        return

    while frames:
        parent, index = frames[-1]
        frames = frames[:-1]
        if index + 1 < len(parent._children):
            yield from _descend(parent._children[index + 1], player,
                                frames + ((parent, index + 1),), choices)
            return
    yield choices


def behavior_label(behavior: Sequence[int]) -> str:
    """Default strategy label: action numbers, '*' where the strategy does not care."""
    if not behavior:
        return "*"
    return "".join(str(choice) if choice > 0 else "*" for choice in behavior)
