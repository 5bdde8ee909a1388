"""Maximum tree search.

A maximum tree stores, at every node, the best utility reachable from
that node or any descendant. Once built, the best course of action is
read off by following the first child that reaches its parent's max.

  - MaxTreeSearch.exhaustive_search: complete tree, global maximum
  - MaxTreeSearch.greedy_search: one branch per level, local maximum
  - MaxTreeSearch.breadth_expand: one leaf per action, used by both

Both drivers assume a deterministic, perfect-information context whose
transitions can be undone exactly.
"""

from .node import Node
from .driver import (
    ActionFailed, Domain, FunctionDomain,
    MaxTreeSearch, SearchAnalysis, SearchSettings,
)
