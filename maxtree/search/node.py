"""Maximum tree node.

Each node stores the best utility known for itself or any descendant,
so picking the next action is a scan over the children:

  - A leaf stores its own (discounted) utility as max
  - A node is terminal when no child reaches its max
  - A node's own utility is overridden when a child scores higher

Children are (action, node) pairs kept in the order the domain listed
the actions. That order is also the tie-break: the first child that
reaches the parent's max is the optimal one.
"""

from typing import Any, Hashable, List, Optional, Tuple


class Node:
    """A node in the maximum tree.

    ``max`` is None until the node is evaluated for the first time by a
    search driver. An unevaluated node has no optimal child.
    """

    __slots__ = ['max', 'data', 'children']

    def __init__(
        self,
        data: Any,
        max: Optional[float] = None,
        children: Optional[List[Tuple[Hashable, 'Node']]] = None,
    ):
        """
        Args:
            data: Opaque per-application payload (state, or enough to undo
                  the transition that produced this node).
            max: Best utility of this node or any descendant.
                 None means not evaluated yet.
            children: (action, child) pairs. Replaced on every expansion.
        """
        self.max = max
        self.data = data
        self.children: List[Tuple[Hashable, 'Node']] = children if children is not None else []

    @classmethod
    def root(cls, data: Any) -> 'Node':
        """Create an unevaluated root with no children."""
        return cls(data)

    @property
    def evaluated(self) -> bool:
        return self.max is not None

    def child(self, index: int) -> 'Node':
        """Return the child node at ``index``."""
        return self.children[index][1]

    def check_unique_actions(self) -> bool:
        """True if no two children share an action.

        Trusted drivers never produce duplicates, so this only reports
        whether a collision exists, not which one.
        """
        seen = set()
        for action, _ in self.children:
            if action in seen:
                return False
            seen.add(action)
        return True

    def optimal(self) -> Optional[int]:
        """Index of the first child whose max is >= this node's max.

        Returns None when no child qualifies, i.e. the node is terminal.
        """
        if self.max is None:
            return None
        for i, (_, child) in enumerate(self.children):
            if child.max is not None and child.max >= self.max:
                return i
        return None

    def terminal(self) -> bool:
        """True if no child has equal or greater utility."""
        return self.optimal() is None

    def optimal_path(self) -> List[int]:
        """Child indices from this node down to a terminal node."""
        path = []
        node = self
        while True:
            i = node.optimal()
            if i is None:
                return path
            path.append(i)
            node = node.children[i][1]

    def optimal_actions(self) -> List[Hashable]:
        """Actions along the optimal path."""
        actions = []
        node = self
        for i in self.optimal_path():
            action, node = node.children[i]
            actions.append(action)
        return actions

    def optimal_leaf(self) -> 'Node':
        """Node reached by following the optimal path."""
        node = self
        for i in self.optimal_path():
            node = node.children[i][1]
        return node

    def count(self) -> int:
        """Number of nodes below this one."""
        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            total += len(node.children)
            stack.extend(child for _, child in node.children)
        return total

    def depth(self) -> int:
        """Height of the subtree below this node (0 for a leaf)."""
        if not self.children:
            return 0
        return 1 + max(child.depth() for _, child in self.children)

    def __repr__(self):
        value = 'unevaluated' if self.max is None else f'{self.max:.4g}'
        return (
            f"Node(max={value}, "
            f"data={self.data!r}, "
            f"children={len(self.children)})"
        )
