"""Search drivers that build a maximum tree over a pluggable domain.

The driver never copies the context. Every transition is applied to the
one shared context with ``Domain.execute`` and rolled back with
``Domain.undo`` before a sibling is tried, so after any search call the
context is observably identical to what it was before the call.

Usage:
    search = MaxTreeSearch(domain, SearchSettings(max_depth=4, eps_depth=1e-5))
    root = Node.root(start)
    search.exhaustive_search(root, 0, ctx)
    path = root.optimal_path()

    # Or one real step at a time:
    search.greedy_search(root, 0, ctx)
    while (i := search.commit_step(root, ctx)) is not None:
        root = root.child(i)
"""

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence

from .node import Node

logger = logging.getLogger(__name__)


class ActionFailed(Exception):
    """Raised by ``Domain.execute`` when an action cannot be applied.

    The driver drops the action from the tree and carries on with the
    remaining actions.
    """


class Domain(ABC):
    """State/action model searched by ``MaxTreeSearch``.

    ``data`` is the node payload, ``ctx`` the shared mutable environment.
    """

    @abstractmethod
    def actions(self, data: Any, ctx: Any) -> Sequence[Hashable]:
        """Return the actions available from this state. May be empty."""

    @abstractmethod
    def execute(self, data: Any, action: Hashable, ctx: Any) -> Any:
        """Apply ``action`` to ``ctx`` in place and return the new payload.

        The payload must hold whatever ``undo`` needs to roll back.
        Raise ``ActionFailed`` if the action is illegal here.
        """

    @abstractmethod
    def undo(self, data: Any, ctx: Any) -> None:
        """Restore ``ctx`` to its state before the ``execute`` that returned ``data``."""

    @abstractmethod
    def utility(self, data: Any, ctx: Any) -> float:
        """Instantaneous score of a state. Must not accumulate rewards."""


class FunctionDomain(Domain):
    """Domain assembled from four plain functions."""

    def __init__(
        self,
        actions: Callable[[Any, Any], Sequence[Hashable]],
        execute: Callable[[Any, Hashable, Any], Any],
        undo: Callable[[Any, Any], None],
        utility: Callable[[Any, Any], float],
    ):
        self._actions = actions
        self._execute = execute
        self._undo = undo
        self._utility = utility

    def actions(self, data, ctx):
        return self._actions(data, ctx)

    def execute(self, data, action, ctx):
        return self._execute(data, action, ctx)

    def undo(self, data, ctx):
        self._undo(data, ctx)

    def utility(self, data, ctx):
        return self._utility(data, ctx)


@dataclass(frozen=True)
class SearchSettings:
    """Search bounds and options. Read-only once built."""
    # Hard ceiling on recursion depth. Nodes at this depth are expanded
    # one level (leaf children) but not descended into.
    max_depth: int

    # Utility discount per depth step. A tiny positive value (e.g. 1e-6)
    # makes the search prefer shorter action sequences, a negative one longer
    # sequences. 0.0 disables it.
    eps_depth: float = 0.0

    # Count live tree nodes. Required for max_mib to have any effect.
    analysis: bool = False

    # Greedy search keeps only the chosen child at each step, so memory
    # stays bounded to one active path.
    greedy_elimination: bool = True

    # Soft memory ceiling in MiB. Only checked after each breadth
    # expansion, so peak usage can overshoot before the search stops.
    max_mib: Optional[float] = None

    # Per-node byte estimate used by the memory conversions.
    # None = measure an empty node with sys.getsizeof.
    node_bytes: Optional[int] = None

    def __post_init__(self):
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.max_mib is not None and self.max_mib <= 0:
            raise ValueError(f"max_mib must be positive, got {self.max_mib}")
        if self.node_bytes is not None and self.node_bytes <= 0:
            raise ValueError(f"node_bytes must be positive, got {self.node_bytes}")


@dataclass
class SearchAnalysis:
    """Live node counter with memory estimates.

    The estimates only cover the fixed node overhead, not heap content
    owned by payloads or actions.
    """
    node_count: int = 0

    def reset(self):
        self.node_count = 0

    def gib(self, node_size: int) -> float:
        """Estimated node memory in GiB."""
        return self.node_count * node_size / 1073741824.0

    def mib(self, node_size: int) -> float:
        """Estimated node memory in MiB."""
        return self.node_count * node_size / 1048576.0

    def kib(self, node_size: int) -> float:
        """Estimated node memory in KiB."""
        return self.node_count * node_size / 1024.0


def _measure_node_size() -> int:
    node = Node.root(None)
    pair = (None, node)
    return sys.getsizeof(node) + sys.getsizeof(node.children) + sys.getsizeof(pair)


class MaxTreeSearch:
    """Builds maximum trees for a domain.

    The settings are fixed for the lifetime of the driver; the analysis
    counter keeps growing across calls until ``analysis.reset()``.
    """

    STRATEGIES = ('full', 'greedy')

    def __init__(
        self,
        domain: Domain,
        settings: SearchSettings,
        analysis: Optional[SearchAnalysis] = None,
    ):
        self.domain = domain
        self.settings = settings
        self.analysis = analysis if analysis is not None else SearchAnalysis()
        self._node_size = settings.node_bytes or _measure_node_size()

    def node_size(self) -> int:
        """Estimated size of one tree node in bytes."""
        return self._node_size

    def utility_with_discount(self, data: Any, depth: int, ctx: Any) -> float:
        """Domain utility minus the depth discount."""
        utility = self.domain.utility(data, ctx)
        return utility - self.settings.eps_depth * depth

    def memory_usage(self) -> Dict[str, Any]:
        """Snapshot of the node counter and its memory estimates."""
        size = self.node_size()
        return {
            'nodes': self.analysis.node_count,
            'kib': self.analysis.kib(size),
            'mib': self.analysis.mib(size),
            'gib': self.analysis.gib(size),
        }

    def memory_exceeded(self) -> bool:
        """True if the estimated memory reached the ceiling.

        Always False without analysis or without a ceiling.
        """
        if not self.settings.analysis or self.settings.max_mib is None:
            return False
        return self.analysis.mib(self.node_size()) >= self.settings.max_mib

    def breadth_expand(self, node: Node, depth: int, ctx: Any):
        """Replace ``node.children`` with one leaf per applicable action.

        Each action is executed, scored at ``depth + 1`` and undone before
        the next one, so ``ctx`` is unchanged on return. Rejected actions
        are left out of the tree.
        """
        node.children = []
        for action in self.domain.actions(node.data, ctx):
            try:
                data = self.domain.execute(node.data, action, ctx)
            except ActionFailed:
                continue
            try:
                utility = self.utility_with_discount(data, depth + 1, ctx)
            finally:
                self.domain.undo(data, ctx)
            if node.max is not None and utility > node.max:
                node.max = utility

            node.children.append((action, Node(data, max=utility)))
            if self.settings.analysis:
                self.analysis.node_count += 1

    def _evaluate(self, node: Node, depth: int, ctx: Any):
        # Nodes are scored once, the first time a driver reaches them.
        if node.max is None:
            node.max = self.utility_with_discount(node.data, depth, ctx)

    def _stop(self, depth: int) -> bool:
        if depth >= self.settings.max_depth:
            return True
        if self.memory_exceeded():
            logger.debug(
                "Memory limit reached at depth %d (%.3f MiB, %d nodes)",
                depth, self.analysis.mib(self.node_size()), self.analysis.node_count,
            )
            return True
        return False

    def _descend(self, node: Node, index: int, depth: int, ctx: Any, recurse):
        """Re-apply a child's action, search below it, then roll back."""
        action, child = node.children[index]
        try:
            self.domain.execute(node.data, action, ctx)
        except ActionFailed:
            return
        try:
            recurse(child, depth + 1, ctx)
        finally:
            self.domain.undo(child.data, ctx)

        # Children changed, so the maximum may have too.
        if child.max > node.max:
            node.max = child.max

    def exhaustive_search(self, node: Node, depth: int, ctx: Any):
        """Build the complete maximum tree below ``node`` up to the depth bound.

        On return ``node.max`` is the best discounted utility reachable
        within ``settings.max_depth`` (unless the memory ceiling stopped
        the search early, which leaves a valid partial tree).
        """
        self._evaluate(node, depth, ctx)
        self.breadth_expand(node, depth, ctx)

        if self._stop(depth):
            return

        for i in range(len(node.children)):
            self._descend(node, i, depth, ctx, self.exhaustive_search)

    def greedy_search(self, node: Node, depth: int, ctx: Any):
        """Follow only the best child at each level.

        Finds a local maximum. It is the global one only when the utility
        landscape is well-behaved (roughly convex) along the chosen branch.
        With ``greedy_elimination`` the other children are dropped, so only
        one path is kept in memory.
        """
        self._evaluate(node, depth, ctx)
        self.breadth_expand(node, depth, ctx)

        if self._stop(depth):
            return

        i = node.optimal()
        if i is None:
            return

        if self.settings.greedy_elimination:
            dropped = len(node.children) - 1
            if self.settings.analysis:
                self.analysis.node_count -= dropped
            node.children[0], node.children[i] = node.children[i], node.children[0]
            del node.children[1:]
            i = 0
            if dropped:
                logger.debug("Greedy elimination dropped %d children at depth %d", dropped, depth)

        self._descend(node, i, depth, ctx, self.greedy_search)

    def search(self, root: Node, ctx: Any, strategy: str = 'full', depth: int = 0):
        """Run a search strategy by name ('full' or 'greedy')."""
        if strategy not in self.STRATEGIES:
            raise ValueError(f"Unknown strategy: {strategy}. Available: {list(self.STRATEGIES)}")
        logger.debug("Running %s search from depth %d (max_depth=%d)",
                     strategy, depth, self.settings.max_depth)
        if strategy == 'full':
            self.exhaustive_search(root, depth, ctx)
        else:
            self.greedy_search(root, depth, ctx)

    def commit_step(self, node: Node, ctx: Any) -> Optional[int]:
        """Apply the optimal action to ``ctx`` for real (no undo).

        Returns the chosen child index, or None if the node is terminal or
        the domain rejects the action. On None, ``ctx`` is untouched.
        """
        i = node.optimal()
        if i is None:
            return None
        try:
            self.domain.execute(node.data, node.children[i][0], ctx)
        except ActionFailed:
            return None
        return i

    def commit_path(
        self,
        root: Node,
        ctx: Any,
        callback: Optional[Callable[[int, Node, int], None]] = None,
    ) -> List[int]:
        """Commit steps along the optimal path until a terminal node.

        Args:
            root: Searched tree to follow.
            ctx: Live context, advanced one transition per step.
            callback: Optional ``callback(step, node, index)`` called after
                      each committed step with the node the step left from.

        Returns:
            The committed child indices.
        """
        committed = []
        node = root
        step = 0
        while True:
            i = self.commit_step(node, ctx)
            if i is None:
                return committed
            committed.append(i)
            if callback is not None:
                callback(step, node, i)
            node = node.child(i)
            step += 1
