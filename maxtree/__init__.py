"""maxtree: utility maximization over a maximum tree.

Commonly used objects are re-exported here:

    from maxtree import MaxTreeSearch, Node, SearchSettings
"""

from .search import (
    ActionFailed, Domain, FunctionDomain,
    MaxTreeSearch, Node, SearchAnalysis, SearchSettings,
)

__all__ = [
    "ActionFailed",
    "Domain",
    "FunctionDomain",
    "MaxTreeSearch",
    "Node",
    "SearchAnalysis",
    "SearchSettings",
]
