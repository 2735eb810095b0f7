"""
Game Tree - Lazy tree of game states.

Nodes hold a state and are connected by TransitionEdges (actions, haps,
probability). Children are created on demand and cached, so expanding a
node twice never duplicates children nor resamples chance branches.

Trees are built by search and sampling players for a single decision and
dropped afterwards.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator, TYPE_CHECKING

from .action_generator import possible_transitions
from .transition import TransitionEdge

if TYPE_CHECKING:
    from .state import GameState


EdgeKey = tuple


@dataclass(eq=False)
class GameTree:
    """
    A node of a game tree.

    Usage:
        root = GameTree(state)
        for child in root.expand():
            print(child.edge.actions, child.edge.probability, child.state)
    """
    state: GameState
    parent: GameTree | None = None
    edge: TransitionEdge | None = None  # None for the root

    # Algorithm-specific annotations (e.g. UCT statistics)
    data: Any = None

    children: dict[EdgeKey, GameTree] = field(default_factory=dict)
    _transitions: list[TransitionEdge] | None = field(default=None, repr=False)
    _expanded: bool = field(default=False, repr=False)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def is_expanded(self) -> bool:
        return self._expanded

    @property
    def depth(self) -> int:
        depth = 0
        node = self
        while node.parent is not None:
            depth += 1
            node = node.parent
        return depth

    def transitions(self) -> list[TransitionEdge]:
        """All transitions out of this node's state (computed once)."""
        if self._transitions is None:
            self._transitions = list(possible_transitions(self.state))
        return self._transitions

    def child(self, edge: TransitionEdge) -> GameTree:
        """Get or create the child reached through the given transition."""
        key = edge.key
        node = self.children.get(key)
        if node is None:
            next_state = self.state.transition(edge.actions, edge.haps)
            node = GameTree(state=next_state, parent=self, edge=edge)
            self.children[key] = node
        return node

    def expand(self) -> list[GameTree]:
        """Create every child of this node. Idempotent."""
        if not self._expanded:
            for edge in self.transitions():
                self.child(edge)
            self._expanded = True
        return list(self.children.values())

    def path(self) -> list[TransitionEdge]:
        """Edges from the root down to this node."""
        edges = []
        node = self
        while node.edge is not None:
            edges.append(node.edge)
            node = node.parent
        edges.reverse()
        return edges

    def walk(self) -> Iterator[GameTree]:
        """Depth-first iteration over the already created nodes."""
        yield self
        for child in self.children.values():
            yield from child.walk()

    def size(self) -> int:
        return sum(1 for _ in self.walk())
